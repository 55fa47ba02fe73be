#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import argparse
import pytest
from azure.core.exceptions import HttpResponseError

from azcmd.runner import (
    Cmdlet,
    Command,
    InvalidSubscriptionIDError,
    SubscriptionRunner,
    execute_function,
)
from azcmd.session import SessionProvider


class Subscription:
    def __init__(self, sub_id):
        self.id = sub_id

    def __str__(self):
        return self.id


def make_sub(sub_id):
    return Subscription(sub_id)


@pytest.fixture
def session_provider(mocker):
    provider = mocker.MagicMock(spec=SessionProvider)
    provider.session.side_effect = lambda sub_id: f"credential-{sub_id}"
    return provider


@pytest.fixture
def runner(session_provider):
    return SubscriptionRunner(session_provider)


def test_runner_requires_session_provider():
    with pytest.raises(TypeError):
        SubscriptionRunner(object())


def test_runner_requires_command(runner):
    with pytest.raises(TypeError):
        runner.run(object(), [])


def test_lifecycle_methods(mocker, runner):
    command = mocker.MagicMock(spec=Command)
    runner.run(command, [make_sub("a"), make_sub("b")])
    command.pre_hook.assert_called_once()
    assert command.execute.call_count == 2
    assert command.collect_results.call_count == 2
    command.post_hook.assert_called_once()


def test_lifecycle_methods_with_no_subs_to_process(mocker, runner):
    command = mocker.MagicMock(spec=Command)
    runner.run(command, [])
    command.pre_hook.assert_called()
    command.execute.assert_not_called()
    command.collect_results.assert_not_called()
    command.post_hook.assert_called()


def test_subs_processed_in_order_with_their_credentials(runner):
    calls = []

    def func(session, sub):
        calls.append((session, sub.id))
        return sub.id.upper()

    subs = [make_sub("a"), make_sub("b"), make_sub("c")]
    command = RecordingCommand(func)
    runner.run(command, subs)

    assert calls == [("credential-a", "a"), ("credential-b", "b"), ("credential-c", "c")]
    assert command.order == ["a", "b", "c"]


class RecordingCommand(Command):
    def __init__(self, func):
        self.func = func
        self.order = []

    def execute(self, session, sub):
        return self.func(session, sub)

    def collect_results(self, sub, get_result):
        self.order.append(sub.id)
        get_result()


def test_failure_in_one_sub_does_not_stop_others(session_provider):
    def func(_, sub):
        if sub.id == "b":
            raise ValueError("boom")
        return sub.id

    subs = [make_sub("a"), make_sub("b"), make_sub("c")]
    results, errors = execute_function(session_provider, subs, func)

    assert {s.id: r for s, r in results.items()} == {"a": "a", "c": "c"}
    assert [s.id for s in errors] == ["b"]
    assert isinstance(list(errors.values())[0], ValueError)


def test_session_provider_failure_is_reported_as_error(session_provider):
    session_provider.session.side_effect = RuntimeError("no credential")
    _, errors = execute_function(session_provider, [make_sub("a")], lambda s, a: 1)
    assert isinstance(list(errors.values())[0], RuntimeError)


@pytest.mark.parametrize("key", [lambda s: 42, lambda s: s.missing])
def test_invalid_key_function(session_provider, key):
    results, errors = execute_function(
        session_provider, [make_sub("a")], lambda s, a: 1, key=key
    )
    assert not results
    assert isinstance(list(errors.values())[0], InvalidSubscriptionIDError)


def test_run_returns_elapsed_seconds(mocker, runner):
    command = mocker.MagicMock(spec=Command)
    elapsed = runner.run(command, [make_sub("a")])
    assert elapsed >= 0


class EchoCmdlet(Cmdlet):
    columns = ["name"]

    def __init__(self, result, output="text"):
        super().__init__(output)
        self.result = result

    def cmdlet_execute(self, session, sub):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_cmdlet_renders_records(runner, capsys):
    cmdlet = EchoCmdlet([{"name": "rg1", "location": "eastus"}])
    runner.run(cmdlet, [make_sub("a")])

    out = capsys.readouterr().out
    assert out == "a:\nname\n====\nrg1\n\n"
    assert cmdlet.failed == 0


def test_cmdlet_reports_errors_on_stderr(runner, capsys):
    error = HttpResponseError(message="(AuthorizationFailed) Not allowed")
    cmdlet = EchoCmdlet(error)
    runner.run(cmdlet, [make_sub("a"), make_sub("b")])

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.count("error:") == 2
    assert captured.err.startswith("a: error: ")
    assert cmdlet.failed == 2


def test_cmdlet_from_cli_adds_output_flag():
    parser = argparse.ArgumentParser()
    cfg = lambda key, type=None, default=None: default  # noqa: E731
    cmdlet = Cmdlet.from_cli(parser, ["--output", "yaml"], cfg)
    assert cmdlet.output == "yaml"


def test_cmdlet_output_default_from_config():
    parser = argparse.ArgumentParser()
    cfg = lambda key, type=None, default=None: "json"  # noqa: E731
    cmdlet = Cmdlet.from_cli(parser, [], cfg)
    assert cmdlet.output == "json"


def test_cmdlet_rejects_unknown_output_format():
    parser = argparse.ArgumentParser()
    cfg = lambda key, type=None, default=None: default  # noqa: E731
    with pytest.raises(SystemExit):
        Cmdlet.from_cli(parser, ["-o", "xml"], cfg)
