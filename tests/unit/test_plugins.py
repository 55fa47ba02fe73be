#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import argparse

import pytest

from azcmd.config import Config
from azcmd.plugins.subs import Identity
from azcmd.plugmgr import PluginManager, load_dotted_object
from azcmd.session import SessionProvider
from azcmd.session.azure import ARM_SCOPE, CredsViaServicePrincipal
from azcmd.subload import IdentitySubscriptionLoader, SubscriptionLoader

TENANT = "72f988bf-86f1-41af-91ab-2d7cd011db47"
CLIENT = "3c2b7d9e-1f4a-4a8b-9c6d-5e0f1a2b3c4d"


def plugin_manager(config, argv):
    parser = argparse.ArgumentParser("azcmd", add_help=False)
    args, remaining = parser.parse_known_args(argv)
    return PluginManager(Config(config), parser, args, remaining)


def test_load_dotted_object():
    assert load_dotted_object("azcmd.plugins.subs.Identity") is Identity

    with pytest.raises(ImportError, match="does not contain"):
        load_dotted_object("azcmd.plugins.subs.Nope")

    with pytest.raises(ImportError):
        load_dotted_object("nosuchpackage.Plugin")


def test_default_plugin():
    pm = plugin_manager({}, ["get_vm"])

    loader = pm.instantiate(
        "Subscriptions",
        default="azcmd.plugins.subs.Identity",
        must_be=SubscriptionLoader,
    )

    assert isinstance(loader, IdentitySubscriptionLoader)
    assert pm.remaining_argv == ["get_vm"]


def test_plugin_not_a_plugin():
    pm = plugin_manager(
        {"Subscriptions": {"plugin": "azcmd.subload.IdentitySubscriptionLoader"}}, []
    )
    with pytest.raises(TypeError, match="Subscriptions->plugin"):
        pm.parse_args("Subscriptions")


def test_plugin_cannot_be_loaded():
    pm = plugin_manager({"Subscriptions": {"plugin": "nosuchpackage.Plugin"}}, [])
    with pytest.raises(ValueError, match="Error in config"):
        pm.parse_args("Subscriptions")


def test_plugin_builds_wrong_type():
    pm = plugin_manager({"Credentials": {"plugin": "azcmd.plugins.subs.Identity"}}, [])
    with pytest.raises(TypeError, match="did not build"):
        pm.instantiate("Credentials", must_be=SessionProvider)


def test_url_plugin_options(mocker):
    loader = mocker.patch("azcmd.plugins.subs.URLSubscriptionLoader")
    config = {
        "Subscriptions": {
            "plugin": "azcmd.plugins.subs.URL",
            "options": {
                "url": "https://cmdb.example.com/subscriptions.json",
                "path": ["data", "subscriptions"],
                "max_age": 3600,
            },
        }
    }
    pm = plugin_manager(config, ["--loader-format", "yaml", "get_vm", "-g", "app-rg"])

    pm.parse_args("Subscriptions")
    pm.instantiate("Subscriptions")

    assert pm.remaining_argv == ["get_vm", "-g", "app-rg"]
    args, kwargs = loader.call_args
    assert args == ("https://cmdb.example.com/subscriptions.json",)
    assert kwargs["fmt"] == "yaml"
    assert kwargs["path"] == ["data", "subscriptions"]
    assert kwargs["max_age"] == 3600
    assert kwargs["no_verify"] is False


def test_url_plugin_path_flag(mocker):
    loader = mocker.patch("azcmd.plugins.subs.URLSubscriptionLoader")
    pm = plugin_manager(
        {"Subscriptions": {"plugin": "azcmd.plugins.subs.URL"}},
        ["--loader-url", "file:///tmp/subs.json", "--loader-path", "a.b"],
    )

    pm.instantiate("Subscriptions")

    assert loader.call_args[1]["path"] == ["a", "b"]


def test_service_principal_requires_ids():
    pm = plugin_manager(
        {"Credentials": {"plugin": "azcmd.plugins.creds.ServicePrincipal"}}, []
    )
    with pytest.raises(SystemExit):
        pm.instantiate("Credentials")


def test_service_principal(mocker, monkeypatch):
    credential_class = mocker.patch("azcmd.session.azure.ClientSecretCredential")
    monkeypatch.setenv("AZURE_CLIENT_SECRET", "s3cret")
    pm = plugin_manager(
        {
            "Credentials": {
                "plugin": "azcmd.plugins.creds.ServicePrincipal",
                "options": {"tenant": TENANT},
            }
        },
        ["--sp-client-id", CLIENT],
    )

    provider = pm.instantiate("Credentials", must_be=SessionProvider)

    assert isinstance(provider, CredsViaServicePrincipal)
    credential_class.assert_called_once_with(
        TENANT, CLIENT, "s3cret", authority="login.microsoftonline.com"
    )
    credential = credential_class.return_value
    credential.get_token.assert_called_once_with(ARM_SCOPE)
    assert provider.session("00000000-0000-0000-0000-000000000000") is credential


def test_default_credentials(mocker):
    credential_class = mocker.patch("azcmd.session.azure.DefaultAzureCredential")
    pm = plugin_manager({}, ["--ad-authority", "login.microsoftonline.us"])

    provider = pm.instantiate(
        "Credentials", default="azcmd.plugins.creds.Default", must_be=SessionProvider
    )

    assert provider.session(None) is credential_class.return_value
    assert credential_class.call_args[1]["authority"] == "login.microsoftonline.us"
