#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Finds, loads, and instantiates cmdlets by name.

## Overview

The `CommandManager` is used by `azcmd.cli` to turn the cmdlet name typed by
the user into an instance of the cmdlet. Library users that import cmdlets
directly have no need for it.

A cmdlet is a Python module containing a class called `CLICommand`, which must
be a subclass of `azcmd.runner.Command` (usually `azcmd.runner.Cmdlet`). The
name of the module is the name of the cmdlet. For example, given
`~/cmdlets/get_stale_vms.py` that defines a `CLICommand`:

    $ azcmd --cmd-path ~/cmdlets --subscription prod get_stale_vms

Cmdlets are found by a `CommandLoader`. `DirectoryLoader` searches a directory
on the filesystem, `ModuleLoader` searches a Python package, and `ChainLoader`
searches several loaders in order. `CommandManager.from_paths` builds the
appropriate loaders from a list of directories and package names:

    cm = CommandManager.from_paths("azcmd.cmdlets.compute", "~/cmdlets")
    cmdlet = cm.instantiate_command("get_vm", ["--status"], cfg)

If a cmdlet cannot be found in any of the paths, `CommandNotFoundError` is
raised with the reason each path was rejected.
"""

import argparse
import ast
import contextlib
import importlib
import logging
import os
import pkgutil
import sys

from azcmd.argparse import RawAndDefaultsFormatter
from azcmd.runner import Command

LOG = logging.getLogger(__name__)


class CommandManager:
    """Loads and instantiates cmdlets found by `loader`, a `CommandLoader`."""

    def __init__(self, loader):
        self._loader = loader

    @classmethod
    def from_paths(cls, *paths):
        """Creates a `CommandManager` that searches `paths` for cmdlets.

        A path containing a slash or backslash, a path starting with `~`, and
        the bare `.` are treated as directories. Anything else is treated as
        the name of a Python package. Earlier paths take priority.
        """
        loaders = []
        for p in paths:
            if ("/" in p) or ("\\" in p) or p == "." or p.startswith("~"):
                loaders.append(DirectoryLoader(os.path.expanduser(p)))
            else:
                loaders.append(ModuleLoader(p))

        return cls(ChainLoader(*loaders))

    def commands(self):
        """Returns a dict of cmdlet names to classes, sorted by name."""
        return dict(sorted(self._loader.load_all().items()))

    def instantiate_command(self, command_name, argv, cfg):
        """Returns an instance of the cmdlet called `command_name`.

        `argv` is the list of arguments that followed the cmdlet name on the
        command line. `cfg` is a callable with the interface of
        `azcmd.config.Config.get` scoped to the cmdlet's section of the user
        configuration. Both are passed to the `from_cli` factory of the
        cmdlet, which may terminate the program if the arguments are invalid.

        Raises `CommandNotFoundError` if the cmdlet cannot be found.
        """
        cmd_class = self._loader.load(command_name)

        if not issubclass(cmd_class, Command):
            raise TypeError(
                f"'{command_name}' must be a subclass of azcmd.runner.Command"
            )

        # The docstring of the cmdlet's module is its help text.
        parser = argparse.ArgumentParser(
            command_name,
            formatter_class=RawAndDefaultsFormatter,
            epilog=sys.modules[cmd_class.__module__].__doc__,
        )
        return cmd_class.from_cli(parser, argv, cfg)


class CommandLoader:
    """Abstract base class of the loaders that find cmdlets in a source."""

    def load(self, command_name):
        """Returns the `CLICommand` class of the cmdlet called `command_name`.

        Raises `CommandNotFoundError` if it cannot be found.
        """
        raise NotImplementedError

    def load_all(self):
        """Returns a dict of the names and classes of all cmdlets found."""
        raise NotImplementedError


class ChainLoader(CommandLoader):
    """Searches several `CommandLoader` instances in priority order."""

    def __init__(self, *loaders):
        self.loaders = loaders

    def load(self, command_name):
        path_errors = {}
        for loader in self.loaders:
            try:
                return loader.load(command_name)
            except CommandNotFoundError as e:
                path_errors.update(e.path_errors)

        raise CommandNotFoundError(command_name, path_errors)

    def load_all(self):
        classes = {}
        # Later updates win, so apply the highest priority loader last.
        for loader in reversed(self.loaders):
            classes.update(loader.load_all())
        return classes


class DirectoryLoader(CommandLoader):
    """Loads cmdlets from the Python files in `directory_path`.

    Files are inspected without being imported, and only those that define a
    `CLICommand` class at the top level are imported.
    """

    def __init__(self, directory_path):
        self.path = directory_path
        if directory_path not in sys.path:
            sys.path.append(directory_path)

    def load(self, command_name):
        fullpath = os.path.join(self.path, command_name) + ".py"
        LOG.info("loading cmdlet at '%s'", fullpath)
        try:
            if not self._defines_cli_command(fullpath):
                raise ValueError("CLICommand class not found")

            module = importlib.import_module(command_name)
            return module.CLICommand

        except Exception as e:
            LOG.info("invalid cmdlet at '%s': %s", fullpath, e)
            raise CommandNotFoundError(command_name, {fullpath: e}) from e

    def load_all(self):
        classes = {}
        LOG.info("scanning directory '%s' for cmdlets", self.path)
        for fn in os.listdir(self.path):
            if fn.startswith("__") or not fn.endswith(".py"):
                continue

            name = fn[: -len(".py")]
            with contextlib.suppress(CommandNotFoundError):
                classes[name] = self.load(name)

        return classes

    @staticmethod
    def _defines_cli_command(filename):
        with open(filename, encoding="utf-8") as f:
            node = ast.parse(f.read(), filename)
        return any(
            n.name == "CLICommand" for n in node.body if isinstance(n, ast.ClassDef)
        )


class ModuleLoader(CommandLoader):
    """Loads cmdlets from the modules of the Python package `module_name`."""

    def __init__(self, module_name):
        self.module_name = module_name

    def load(self, command_name):
        path = f"{self.module_name}.{command_name}"
        LOG.info("loading cmdlet at '%s'", path)
        try:
            module = importlib.import_module(path)
            return module.CLICommand

        except Exception as e:
            raise CommandNotFoundError(command_name, {self.module_name: e}) from e

    def load_all(self):
        classes = {}
        base = importlib.import_module(self.module_name)

        for m in pkgutil.iter_modules(base.__path__):
            with contextlib.suppress(CommandNotFoundError):
                classes[m.name] = self.load(m.name)

        return classes


class CommandNotFoundError(Exception):
    """Raised if a cmdlet cannot be found.

    `command_name` is the name of the cmdlet and `path_errors` is a dict of
    each path searched to the exception raised when loading from it.
    """

    def __init__(self, command_name, path_errors):
        self.path_errors = path_errors
        self.command_name = command_name

        msg = f"'{command_name}' cmdlet not found:\n"
        for path, error in path_errors.items():
            msg += f"  {path} => {error}\n"
        super().__init__(msg)
