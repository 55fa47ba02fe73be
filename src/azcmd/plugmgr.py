#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Loads and instantiates azcmd plug-ins for the CLI.

## Overview

The azcmd CLI has two pluggable behaviors: **subscription loading** and
**credential loading**. Users pick a plug-in for each in their azcmd
configuration file with a plug-in specification block, which names a `Plugin`
subclass via a dotted Python path along with its options:

    Subscriptions:
      plugin: azcmd.plugins.subs.Azure
      options:
        name_regexp: '^sub-(?P<bu>[^-]+)-(?P<env>.+)'
        max_age: 3600

The `PluginManager` loads a `Plugin`, gives it the chance to register CLI flags
on the main parser, and later instantiates it. Parsing and instantiation are
separate steps, so all command line errors are reported before any plug-in
does expensive work such as authenticating or listing subscriptions:

    parser = argparse.ArgumentParser()
    args, unparsed_argv = parser.parse_known_args()

    pm = PluginManager(config, parser, args, unparsed_argv)
    pm.parse_args('Subscriptions', default='azcmd.plugins.subs.Identity')

    args = parser.parse_args(pm.remaining_argv, pm.args)
    loader = pm.instantiate('Subscriptions', must_be=SubscriptionLoader)

If `PluginManager.parse_args` was not called for a plug-in,
`PluginManager.instantiate` calls it first.
"""
import importlib
import logging
from contextlib import suppress
from functools import partial, reduce
from inspect import isclass

LOG = logging.getLogger(__name__)


class Plugin:
    """Abstract base class for a plug-in that can register flags on the main CLI.

    The `parser` argument is the main `argparse.ArgumentParser` of the CLI. A
    plug-in defines its flags in its constructor, preferably in its own
    argument group and with a prefix that will not collide with the main CLI
    flags or those of another plug-in:

        group = parser.add_argument_group('subscription loader options')
        group.add_argument('--loader-max-age', metavar='SECS', type=int,
                           default=cfg('max_age', type=Int, default=0))

    The `cfg` argument is a callable with the `azcmd.config.Config.get`
    interface. Keys passed to it are relative to the `options` block of the
    plug-in specification, so `cfg('max_age')` above reads
    `Subscriptions -> options -> max_age`. Using `cfg` for the default of a flag
    lets users set a value in the configuration file and override it on the
    command line.

    **Note:** A plug-in must not call `parse_args` or `parse_known_args` on the
    `parser`. The `PluginManager` owns argument processing.
    """

    def __init__(self, parser, cfg):
        self.parser = parser
        self.cfg = cfg

    def instantiate(self, args):
        """Returns the object built by the plug-in.

        Invoked by the `PluginManager` after the command line has been parsed.
        `args` is the `argparse.Namespace` containing the values of the flags
        registered in the constructor. It is acceptable to call
        `self.parser.error()` or raise an exception to abort the program.
        """
        raise NotImplementedError


class PluginManager:
    """Manages the loading and instantiation of azcmd plug-ins.

    `config` is the `azcmd.config.Config` containing the plug-in
    specifications. `parser` is the main CLI `argparse.ArgumentParser` given
    to plug-ins so they can define flags. `parsed_args` is the
    `argparse.Namespace` of the arguments parsed so far and `unparsed_argv` is
    the list of arguments not yet consumed, which may include flags destined
    for a plug-in.

    A plug-in specification has the following format, where `options` is
    optional:

        PLUGIN_NAME:
          plugin: PYTHON_MODULE.CLASSNAME
          options:
            ARG1: VAL1
    """

    def __init__(self, config, parser, parsed_args, unparsed_argv):
        self._config = config
        self._parser = parser
        self._plugins = {}

        self.args = parsed_args
        """The `argparse.Namespace` that parsed plug-in arguments are added to."""

        self.remaining_argv = unparsed_argv
        """The command line arguments not yet consumed by any plug-in."""

    def parse_args(self, *keys, default=None):
        """Load the plug-in at `keys` and parse its command line arguments.

        `keys` is the path to the plug-in specification in the configuration.
        If it does not exist, `default`, a dotted path to a `Plugin` subclass,
        is used instead:

            pm.parse_args('Credentials', default='azcmd.plugins.creds.Default')
        """
        path = self._config.get(*keys, "plugin") or default
        LOG.info("loading plug-in: %s", path)

        try:
            plugin_class = load_dotted_object(path)

        except ImportError as e:
            raise ValueError(f"Error in config: {'->'.join(keys)}->plugin: {e}") from e

        if not (isclass(plugin_class) and issubclass(plugin_class, Plugin)):
            raise TypeError(
                f"Error in config: {'->'.join(keys)}->plugin: '{path}' is not a {Plugin}"
            )

        cfg = partial(self._config.get, *keys, "options")

        plugin = plugin_class(self._parser, cfg)
        self.args, self.remaining_argv = self._parser.parse_known_args(
            self.remaining_argv, self.args
        )
        LOG.info("parsed args=%s remaining args=%s", self.args, self.remaining_argv)

        self._plugins[keys] = plugin

    def instantiate(self, *keys, default=None, must_be=None):
        """Returns the object built by the plug-in at `keys`.

        The value returned from `Plugin.instantiate` must be an instance of
        `must_be` when it is provided, otherwise a `TypeError` is raised:

            loader = pm.instantiate(
                'Subscriptions',
                must_be=SubscriptionLoader,
                default='azcmd.plugins.subs.Identity')
        """
        if keys not in self._plugins:
            self.parse_args(*keys, default=default)

        instance = self._plugins[keys].instantiate(self.args)

        if must_be and not isinstance(instance, must_be):
            raise TypeError(
                f"Error in config: {'->'.join(keys)}->plugin: plugin did not build a {must_be}"
            )

        return instance


def load_dotted_object(dotted_name):
    """Returns the Python object found at the `dotted_name`.

    `dotted_name` includes both the module and the object within it, such as
    `azcmd.plugins.subs.Azure`. Raises `ImportError` if it cannot be loaded.
    """

    def doit(mod_name, attributes=None):
        attributes = [] if attributes is None else attributes

        if not mod_name:
            raise ImportError(f"cannot import '{dotted_name}'")

        mod = None
        with suppress(ModuleNotFoundError):
            mod = importlib.import_module(mod_name)

        if not mod:
            mod_name, _, attr = mod_name.rpartition(".")
            attributes.append(attr)
            return doit(mod_name, attributes)

        attributes.reverse()
        obj = reduce(lambda a, p: getattr(a, p, {}), attributes, mod)
        if not obj:
            raise ImportError(
                f"module '{mod_name}' does not contain '{'.'.join(attributes)}'"
            )

        return obj

    return doit(dotted_name)
