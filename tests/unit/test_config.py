#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import json

import pytest
import yaml

from azcmd import config

SUB_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture(scope="session")
def basic_config():
    return {
        "CLI": {
            "subscription": [SUB_ID, "sub-retail-prod"],
            "log_level": "INFO",
            "include": {"env": ["prod", "qa"]},
        },
        "Credentials": {
            "plugin": "azcmd.plugins.creds.ServicePrincipal",
            "options": {"tenant_id": SUB_ID, "client_id": "app-1"},
        },
        "Commands": {
            "get_vm": {"output": "yaml", "status": True, "limit": 10},
            "new_storage_account": {
                "location": "eastus2",
                "tags": {"owner": "team-a", "env": "dev"},
            },
            "new_sql_firewall_rule": {"start_ip": "10.0.0.1"},
            "Empty": None,
        },
    }


@pytest.fixture(scope="session")
def json_config(tmp_path_factory, basic_config):
    filename = tmp_path_factory.getbasetemp() / "azcmd.json"
    with filename.open("w") as f:
        json.dump(basic_config, f)
    return filename


@pytest.fixture(scope="session")
def yaml_config(tmp_path_factory, basic_config):
    filename = tmp_path_factory.getbasetemp() / "azcmd.yaml"
    with filename.open("w") as f:
        yaml.dump(basic_config, f)
    return filename


@pytest.mark.parametrize(
    "keys, default, type_, expected",
    [
        (["CLI", "log_level"], None, None, "INFO"),
        (["CLI", "log_level"], None, config.Choice("DEBUG", "INFO"), "INFO"),
        (["CLI", "subscription"], None, config.List(config.Str), [SUB_ID, "sub-retail-prod"]),
        (["CLI", "include"], None, config.Dict(config.Str, config.List(config.Any)), {"env": ["prod", "qa"]}),
        (["CLI", "missing"], "ERROR", config.Str, "ERROR"),
        (["CLI", "missing"], None, config.Str, None),
        (["Credentials", "options", "tenant_id"], None, config.UUID, SUB_ID),
        (["Commands", "get_vm", "status"], False, config.Bool, True),
        (["Commands", "get_vm", "limit"], None, config.Int, 10),
        (["Commands", "new_storage_account", "location"], None, config.Location, "eastus2"),
        (["Commands", "new_storage_account", "tags"], None, config.Dict(config.Str, config.Str), {"owner": "team-a", "env": "dev"}),
        (["Commands", "new_sql_firewall_rule", "start_ip"], None, config.IP, "10.0.0.1"),
        (["Commands", "remove_vm", "output"], "text", None, "text"),
    ],
)
def test_get_with_valid_types(yaml_config, keys, default, type_, expected):
    c = config.Config.from_file(yaml_config)
    assert c.get(*keys, default=default, type=type_) == expected


@pytest.mark.parametrize(
    "keys",
    [
        ["CLI", "missing"],
        ["Commands", "get_vm", "missing"],
        ["Missing", "section"],
    ],
)
def test_get_must_exist(yaml_config, keys):
    c = config.Config.from_file(yaml_config)
    with pytest.raises(ValueError):
        c.get(*keys, must_exist=True)


def test_get_through_non_dict(yaml_config):
    c = config.Config.from_file(yaml_config)
    with pytest.raises(ValueError, match="not a dictionary"):
        c.get("CLI", "log_level", "nested")


@pytest.mark.parametrize(
    "keys, type_",
    [
        (["CLI", "log_level"], config.Int),
        (["CLI", "log_level"], config.Choice("DEBUG", "ERROR")),
        (["CLI", "subscription"], config.List(config.UUID)),
        (["Commands", "get_vm", "status"], config.Str),
        (["Commands", "get_vm", "limit"], config.Bool),
        (["Commands", "new_storage_account", "tags"], config.Dict(config.Str, config.Int)),
    ],
)
def test_get_with_invalid_types(yaml_config, keys, type_):
    c = config.Config.from_file(yaml_config)
    with pytest.raises(TypeError):
        c.get(*keys, type=type_)


def test_from_file_with_json(json_config, basic_config):
    c = config.Config.from_file(json_config)
    assert c.get("Commands", "get_vm", "output") == "yaml"
    assert c.get("CLI") == basic_config["CLI"]


def test_from_file_with_yaml(yaml_config, basic_config):
    c = config.Config.from_file(yaml_config)
    assert c.get("Commands", "new_storage_account") == basic_config["Commands"]["new_storage_account"]


def test_from_file_missing(tmp_path):
    c = config.Config.from_file(tmp_path / "absent.yaml")
    assert c.get("CLI", "log_level", default="ERROR") == "ERROR"


def test_from_file_missing_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        config.Config.from_file(tmp_path / "absent.yaml", must_exist=True)


def test_from_file_with_unregistered_extension(tmp_path):
    filename = tmp_path / "azcmd.toml"
    filename.write_text("[CLI]\n")
    with pytest.raises(ValueError, match="Unregistered"):
        config.Config.from_file(filename)


def test_register_filetype(tmp_path):
    class KeyValueConfig(config.Config):
        def __init__(self, stream):
            pairs = (line.strip().split("=", 1) for line in stream if "=" in line)
            super().__init__({"CLI": dict(pairs)})

    config.Config.register_filetype(KeyValueConfig, ".kv")
    filename = tmp_path / "azcmd.kv"
    filename.write_text("log_level=DEBUG\n")

    c = config.Config.from_file(filename)
    assert c.get("CLI", "log_level") == "DEBUG"


def test_empty_yaml_file(tmp_path):
    filename = tmp_path / "empty.yaml"
    filename.write_text("")
    c = config.Config.from_file(filename)
    assert c.get("CLI", "log_level") is None


@pytest.mark.parametrize(
    "type_, test_input, expected",
    [
        (config.Str, "eastus", True),
        (config.Str, 1, False),
        (config.Int, 1, True),
        (config.Int, True, False),
        (config.Int, 1.0, False),
        (config.Bool, False, True),
        (config.Bool, 0, False),
        (config.Float, 0.5, True),
        (config.Float, 1, False),
        (config.Any, None, True),
    ],
)
def test_scalar_types(type_, test_input, expected):
    assert type_.type_check(test_input) == expected


@pytest.mark.parametrize(
    "test_input, expected",
    [
        ("json", True),
        ("yaml", True),
        ("xml", False),
        (1, False),
    ],
)
def test_choice_type(test_input, expected):
    assert config.Choice("text", "json", "yaml").type_check(test_input) == expected


def test_const_type_distinguishes_bool_and_int():
    assert config.Const(1).type_check(1)
    assert not config.Const(1).type_check(True)


@pytest.mark.parametrize(
    "test_input, expected",
    [
        (SUB_ID, True),
        ("AAAAAAAA-BBBB-CCCC-DDDD-EEEEEEEEEEEE", True),
        ("00000000-0000-0000-0000-00000000000", False),
        ("sub-retail-prod", False),
        (None, False),
    ],
)
def test_uuid_type(test_input, expected):
    assert config.UUID.type_check(test_input) == expected


@pytest.mark.parametrize(
    "test_input, expected",
    [
        ("eastus2", True),
        ("westeurope", True),
        ("East US 2", False),
        ("2eastus", False),
        ("", False),
    ],
)
def test_location_type(test_input, expected):
    assert config.Location.type_check(test_input) == expected


@pytest.mark.parametrize(
    "test_input, expected",
    [
        ("10.0.0.1", True),
        ("2001:db8::1", True),
        ("10.0.0.256", False),
        ("localhost", False),
        (167772161, False),
    ],
)
def test_ip_address_type(test_input, expected):
    assert config.IP.type_check(test_input) == expected


@pytest.mark.parametrize(
    "test_input, expected",
    [
        ("azcmd.plugins.subs.Azure", True),
        ("azcmd", True),
        ("azcmd..subs", False),
        (".azcmd", False),
    ],
)
def test_dotted_type(test_input, expected):
    assert config.Dotted.type_check(test_input) == expected


def test_file_type(json_config, tmp_path):
    assert config.File.type_check(str(json_config))
    assert not config.File.type_check(str(tmp_path / "absent.json"))
    assert not config.File.type_check(json_config)


@pytest.mark.parametrize(
    "type_, test_input, expected",
    [
        (config.List(config.Str), ["a", "b"], True),
        (config.List(config.Str), [], True),
        (config.List(config.Str), ["a", 1], False),
        (config.List(config.Str), "a", False),
        (config.Dict(config.Str, config.Int), {"a": 1}, True),
        (config.Dict(config.Str, config.Int), {"a": "1"}, False),
        (config.Dict(config.Str, config.Int), [("a", 1)], False),
        (config.Not(config.Str), 1, True),
        (config.Or(config.UUID, config.Int), 7, True),
        (config.Or(config.UUID, config.Int), "x", False),
        (config.And(config.Str, config.Not(config.Const(""))), "", False),
        (config.And(config.Str, config.Not(config.Const(""))), "x", True),
    ],
)
def test_compound_types(type_, test_input, expected):
    assert type_.type_check(test_input) == expected


def test_type_descriptions():
    assert str(config.List(config.Dict(config.Str, config.Int))) == (
        "list of dict with str keys and int values"
    )
    assert str(config.UUID) == "subscription/tenant GUID"
    assert str(config.Or(config.Str, config.Int)) == "(str or int)"
