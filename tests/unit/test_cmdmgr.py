#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import os
import textwrap

import pytest

from azcmd.cmdmgr import (
    ChainLoader,
    CommandLoader,
    CommandManager,
    CommandNotFoundError,
    DirectoryLoader,
    ModuleLoader,
)


def cfg(key, default=None, type=None, must_exist=False):  # pylint: disable=redefined-builtin,unused-argument
    return default


GOOD_CMDLET = """
    from azcmd.runner import Cmdlet

    class CLICommand(Cmdlet):
        \"\"\"Say hello.\"\"\"

        def cmdlet_execute(self, session, sub):
            return "hello"
"""

NOT_A_COMMAND = """
    class CLICommand:
        pass
"""

NO_CLASS = """
    def helper():
        return 1
"""


@pytest.fixture
def cmd_dir(tmp_path):
    """Returns a directory of cmdlet files with names unique to the test."""
    prefix = f"t{abs(hash(str(tmp_path)))}"

    def write(name, body):
        (tmp_path / f"{prefix}_{name}.py").write_text(textwrap.dedent(body))
        return f"{prefix}_{name}"

    names = {
        "good": write("hello", GOOD_CMDLET),
        "not_a_command": write("bogus", NOT_A_COMMAND),
        "no_class": write("helper", NO_CLASS),
        "syntax": write("broken", "class CLICommand(:\n"),
    }
    (tmp_path / "README.txt").write_text("not a cmdlet")
    return tmp_path, names


def test_from_paths_builds_loaders():
    cm = CommandManager.from_paths("azcmd.cmdlets.compute", "~/cmdlets", ".", "a/b")

    loaders = cm._loader.loaders  # pylint: disable=protected-access
    assert isinstance(loaders[0], ModuleLoader)
    assert loaders[0].module_name == "azcmd.cmdlets.compute"
    assert isinstance(loaders[1], DirectoryLoader)
    assert loaders[1].path == os.path.expanduser("~/cmdlets")
    assert [type(l) for l in loaders[2:]] == [DirectoryLoader, DirectoryLoader]


def test_module_loader_load():
    cmd = ModuleLoader("azcmd.cmdlets.compute").load("get_vm")
    assert cmd.__module__ == "azcmd.cmdlets.compute.get_vm"


def test_module_loader_not_found():
    with pytest.raises(CommandNotFoundError) as excinfo:
        ModuleLoader("azcmd.cmdlets.compute").load("get_bucket")

    assert excinfo.value.command_name == "get_bucket"
    assert "azcmd.cmdlets.compute" in excinfo.value.path_errors
    assert "'get_bucket' cmdlet not found" in str(excinfo.value)


def test_module_loader_load_all():
    names = set(ModuleLoader("azcmd.cmdlets.compute").load_all())
    assert names == {"get_vm", "start_vm", "stop_vm", "restart_vm", "remove_vm"}


def test_directory_loader(cmd_dir):
    path, names = cmd_dir
    loader = DirectoryLoader(str(path))

    assert loader.load(names["good"]).__doc__ == "Say hello."

    for bad in ("no_class", "syntax"):
        with pytest.raises(CommandNotFoundError):
            loader.load(names[bad])

    with pytest.raises(CommandNotFoundError):
        loader.load("does_not_exist")


def test_directory_loader_load_all(cmd_dir):
    path, names = cmd_dir
    found = DirectoryLoader(str(path)).load_all()
    assert set(found) == {names["good"], names["not_a_command"]}


class FakeLoader(CommandLoader):
    def __init__(self, name, classes):
        self.name = name
        self.classes = classes

    def load(self, command_name):
        try:
            return self.classes[command_name]
        except KeyError as e:
            raise CommandNotFoundError(command_name, {self.name: e}) from e

    def load_all(self):
        return dict(self.classes)


def test_chain_loader_priority():
    first = FakeLoader("first", {"get_vm": "first-get-vm"})
    second = FakeLoader("second", {"get_vm": "second-get-vm", "stop_vm": "stop"})
    chain = ChainLoader(first, second)

    assert chain.load("get_vm") == "first-get-vm"
    assert chain.load("stop_vm") == "stop"
    assert chain.load_all() == {"get_vm": "first-get-vm", "stop_vm": "stop"}


def test_chain_loader_collects_errors():
    chain = ChainLoader(FakeLoader("first", {}), FakeLoader("second", {}))

    with pytest.raises(CommandNotFoundError) as excinfo:
        chain.load("get_vm")
    assert set(excinfo.value.path_errors) == {"first", "second"}


def test_commands_sorted():
    cm = CommandManager(FakeLoader("x", {"stop_vm": 1, "get_vm": 2, "remove_vm": 3}))
    assert list(cm.commands()) == ["get_vm", "remove_vm", "stop_vm"]


def test_instantiate_command():
    cm = CommandManager.from_paths("azcmd.cmdlets.compute")

    cmd = cm.instantiate_command("get_vm", ["-g", "app-rg", "-o", "json"], cfg)

    assert cmd.resource_group == "app-rg"
    assert cmd.output == "json"


def test_instantiate_command_not_a_command(cmd_dir):
    path, names = cmd_dir
    cm = CommandManager.from_paths(str(path))

    with pytest.raises(TypeError, match="subclass of azcmd.runner.Command"):
        cm.instantiate_command(names["not_a_command"], [], cfg)


def test_instantiate_command_not_found():
    cm = CommandManager.from_paths("azcmd.cmdlets.compute")
    with pytest.raises(CommandNotFoundError):
        cm.instantiate_command("get_bucket", [], cfg)
