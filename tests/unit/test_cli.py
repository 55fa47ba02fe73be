#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import io
import sys

import pytest

from azcmd import cli


class GetVM:
    """Display virtual machines.

    More details that are not shown.
    """


class StopVM:
    """Stop or deallocate a virtual machine."""


def test_config_filename(monkeypatch, tmp_path):
    monkeypatch.setenv("AZCMD_CONFIG", str(tmp_path / "azcmd.json"))
    assert cli.config_filename() == str(tmp_path / "azcmd.json")

    monkeypatch.delenv("AZCMD_CONFIG")
    assert str(cli.config_filename()).endswith(".azcmd.yaml")


def test_print_valid_commands():
    out = io.StringIO()
    cli._print_valid_commands(  # pylint: disable=protected-access
        {"stop_vm": StopVM, "get_vm": GetVM}, out=out
    )
    assert out.getvalue() == (
        "The following are the available cmdlets:\n\n"
        "get_vm   Display virtual machines.\n"
        "stop_vm  Stop or deallocate a virtual machine.\n\n"
    )


def test_print_valid_commands_none():
    out = io.StringIO()
    cli._print_valid_commands({}, out=out)  # pylint: disable=protected-access
    assert "No cmdlets found" in out.getvalue()


def test_print_metadata():
    attrs = {"env": ["prod", "dev", None], "state": ["Enabled"]}

    out = io.StringIO()
    cli._print_metadata(attrs, "env", out=out)  # pylint: disable=protected-access
    assert out.getvalue() == "Metadata values for 'env' attribute:\n\ndev\nprod\n"

    out = io.StringIO()
    cli._print_metadata(attrs, True, out=out)  # pylint: disable=protected-access
    assert out.getvalue() == "Valid metadata attributes:\n\nenv\nstate\n"


def test_main_reports_errors(monkeypatch, capsys):
    def fail():
        raise ValueError("Provided resource group does not exist: app-rg")

    monkeypatch.setattr(cli, "_cli", fail)
    monkeypatch.delenv("AZCMD_TRACE", raising=False)

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert capsys.readouterr().err == "Provided resource group does not exist: app-rg\n"


def test_ask_for_confirmation_declined(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("n\n"))

    with pytest.raises(SystemExit):
        cli._ask_for_confirmation(["sub-a", "sub-b"])  # pylint: disable=protected-access

    err = capsys.readouterr().err
    assert "2 subscriptions selected" in err
    assert "Exiting" in err
