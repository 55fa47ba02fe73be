#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Executes a `Command` across one or more subscriptions.

## Overview

This module defines the core classes `Command`, `Cmdlet`, and
`SubscriptionRunner`. A `Command` is a unit of work executed for each
subscription by the `SubscriptionRunner`, which provides it with a credential
obtained from an `azcmd.session.SessionProvider`. A `Cmdlet` is a `Command`
that returns display records, which are rendered by `azcmd.display` in the
output format chosen by the user. All of the cmdlets included in
`azcmd.cmdlets` are subclasses of `Cmdlet`.

*Note: When building a cmdlet for use via the `azcmd.cli` tool, the subclass
must be called `CLICommand` and must be in its own module, so the
`azcmd.cmdmgr` can find and load it.*

Subscriptions are processed sequentially on the calling thread in the order
given. There is no worker pool: each cmdlet is a short series of blocking SDK
calls and the output of one subscription is written before the next is
started.

## Basic Usage

The following executes the `azcmd.cmdlets.resources.get_resource_group` cmdlet
for two subscriptions using the default Azure credential chain:

    from azcmd.runner import SubscriptionRunner
    from azcmd.session.azure import CredsViaAzureDefault
    from azcmd.subload import IdentitySubscriptionLoader
    from azcmd.cmdlets.resources import get_resource_group

    subs = IdentitySubscriptionLoader().subscriptions([
        '00000000-0000-0000-0000-000000000000',
        '11111111-1111-1111-1111-111111111111',
    ])

    runner = SubscriptionRunner(CredsViaAzureDefault())
    runner.run(get_resource_group.CLICommand(output='json'), subs)

## User-Defined Cmdlets

A cmdlet implements `Cmdlet.cmdlet_execute`, which receives a credential and a
subscription object and returns `None`, a string, a record (a dict), or a list
of records. The `columns` class variable selects the columns used when a list
of records is printed as a text table. Arguments are defined by overriding
`Cmdlet.cmdlet_from_cli`:

    import argparse

    from azcmd.clients.compute import ComputeClient
    from azcmd.runner import Cmdlet


    class CLICommand(Cmdlet):
        \"\"\"Display VMs that are not running.\"\"\"

        columns = ["name", "resource_group", "power_state"]

        @classmethod
        def cmdlet_from_cli(cls, parser, argv, cfg):
            parser.add_argument("--resource-group", "-g")
            args = parser.parse_args(argv)
            return cls(**vars(args))

        def __init__(self, resource_group=None, output="text"):
            super().__init__(output)
            self.resource_group = resource_group

        def cmdlet_execute(self, session, sub):
            client = ComputeClient.from_session(session, sub.id)
            vms = client.list_vms(self.resource_group, status=True)
            return [vm for vm in vms if vm["power_state"] != "running"]
"""

import logging
import sys
import time

from azcmd.clients import describe_error
from azcmd.config import Choice
from azcmd.display import FORMATS, render
from azcmd.session import SessionProvider

LOG = logging.getLogger(__name__)


class Command:
    """Abstract base class that represents a command to execute on subscriptions.

    A command is executed for each subscription by the `SubscriptionRunner`.
    It is given a credential for the subscription and the subscription object
    that was passed to `SubscriptionRunner.run`, which carries any metadata
    attached by the subscription loader.
    """

    failed = 0
    """Number of subscriptions for which the command raised an exception."""

    @classmethod
    def from_cli(cls, parser, argv, cfg):  # pylint: disable=unused-argument
        """Factory to build the command from CLI args and user configuration.

        *This method is only required if the command is intended for use with
        the `azcmd.cli` command line.*

        The `azcmd.cmdmgr.CommandManager` calls this factory with an
        `argparse.ArgumentParser` for the command, the list of unparsed
        arguments that followed the command name, and `cfg`, a callable with
        the `azcmd.config.Config.get` interface scoped to the command's section
        of the user configuration:

            azcmd --subscription prod get_vm --resource-group app --status
                  ^^^^^^^^^^^^^^^^^^^ ^^^^^^ ^^^^^^^^^^^^^^^^^^^^^^^^^^^^^
                       main args      command         cmd args

        Given the following configuration, `cfg('status', type=Bool)` returns
        `True`. It is common to use such values as the defaults of flags:

            Commands:
              get_vm:
                status: true

        The default implementation parses `argv`, so that `--help` prints the
        module docstring, and returns an instance built without arguments.
        """
        parser.parse_args(argv)
        return cls()

    def pre_hook(self):
        """Invoked by `SubscriptionRunner.run` once before any processing starts."""

    def post_hook(self):
        """Invoked by `SubscriptionRunner.run` once after all processing has completed."""

    def execute(self, session, sub):
        """Invoked by `SubscriptionRunner.run` to process a subscription.

        `session` is the credential for the subscription and `sub` is the
        subscription object passed to `SubscriptionRunner.run`. The return
        value can be of any type and, by default, is printed to the console. Do
        not call `sys.exit` from this method. Raise an exception instead.
        """
        raise NotImplementedError

    def collect_results(self, sub, get_result):
        """Invoked by `SubscriptionRunner.run` after processing a subscription.

        `get_result` is a callable that returns the value returned by
        `Command.execute` or raises the exception it raised. The default
        implementation prints the value on standard output. If an exception was
        raised, it prints it on standard error, logs the stack trace at WARN
        level, and increments `Command.failed`.
        """
        try:
            print(get_result(), end="", flush=True)

        except Exception as e:  # pylint: disable=broad-except
            self.failed += 1
            LOG.warning("%s: error: %s", sub, e, exc_info=True)
            print(f"{sub}: error: {e}", flush=True, file=sys.stderr)


class Cmdlet(Command):
    """Abstract base class for commands that return display records.

    The `--output` and `-o` flags are added on behalf of every cmdlet with a
    default taken from the `output` key of the cmdlet's configuration section.
    The value returned by `Cmdlet.cmdlet_execute` is rendered with
    `azcmd.display.render` in the chosen format. Subclasses that override the
    constructor must pass `output` to this class's constructor.
    """

    columns = None
    """Keys of the records, in order, used as columns of a text table."""

    @classmethod
    def from_cli(cls, parser, argv, cfg):
        parser.add_argument(
            "--output",
            "-o",
            choices=FORMATS,
            default=cfg("output", type=Choice(*FORMATS), default="text"),
            help="output format",
        )
        return cls.cmdlet_from_cli(parser, argv, cfg)

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):  # pylint: disable=unused-argument
        """Factory to build a cmdlet from CLI args and user configuration.

        Refer to `Command.from_cli` for the arguments. The `--output` flag has
        already been added to `parser`, and its value, `output` in the parsed
        namespace, must be passed to the constructor. The default
        implementation passes every parsed argument as a keyword argument to
        the constructor. When overriding, do not invoke the superclass method.
        """
        args = parser.parse_args(argv)
        return cls(**vars(args))

    def __init__(self, output="text"):
        self.output = output

    def execute(self, session, sub):
        result = self.cmdlet_execute(session, sub)
        return render(sub, result, self.output, self.columns)

    def cmdlet_execute(self, session, sub):
        """Invoked by `Cmdlet.execute` to process a subscription.

        Returns `None`, a string message, a record, or a list of records. Azure
        SDK exceptions should be left to propagate; they are reported by
        `Cmdlet.collect_results` using `azcmd.clients.describe_error`.
        """
        raise NotImplementedError

    def collect_results(self, sub, get_result):
        try:
            print(get_result(), end="", flush=True)

        except Exception as e:  # pylint: disable=broad-except
            self.failed += 1
            LOG.warning("%s: error: %s", sub, e, exc_info=True)
            print(f"{sub}: error: {describe_error(e)}", flush=True, file=sys.stderr)


class CommandFunctionAdapter(Command):
    """Function adapter for a `Command`.

    Wraps `func`, which has the signature of `Command.execute` without `self`,
    and collects its results and exceptions keyed by subscription.
    """

    def __init__(self, func):
        super().__init__()
        self.func = func

        self.results = {}
        """Dict containing results keyed by subscription."""

        self.errors = {}
        """Dict containing exceptions keyed by subscription."""

    def execute(self, session, sub):
        return self.func(session, sub)

    def collect_results(self, sub, get_result):
        try:
            self.results[sub] = get_result()
        except Exception as e:  # pylint: disable=broad-except
            self.errors[sub] = e


def execute_function(session_provider, subs, func, key=lambda s: s.id):
    """Executes a function across one or more subscriptions.

    Returns a tuple of two dicts keyed by subscription: the values returned by
    `func` and the exceptions it raised. `key` returns the subscription ID of
    a subscription object.
    """
    command = CommandFunctionAdapter(func)
    SubscriptionRunner(session_provider).run(command, subs, key=key)
    return (command.results, command.errors)


class SubscriptionRunner:
    """Runs a `Command` across one or more subscriptions.

    For each subscription, the runner obtains a credential from
    `session_provider`, which must be an `azcmd.session.SessionProvider`, and
    invokes `Command.execute`. Exceptions are captured so that a failure in one
    subscription does not prevent the processing of the others.
    """

    def __init__(self, session_provider):
        if not isinstance(session_provider, SessionProvider):
            raise TypeError(
                f"'{session_provider}' must be a subclass of azcmd.session.SessionProvider"
            )

        self.session_provider = session_provider

    def run(self, cmd, subs, key=lambda s: s.id):
        """Execute a command on the specified subscriptions, one at a time.

        Returns the number of seconds it took to process the subscriptions.

        `Command.pre_hook` is invoked first. Then, for each subscription in
        order, `Command.execute` is invoked and its outcome is passed to
        `Command.collect_results` before the next subscription is started.
        Finally, `Command.post_hook` is invoked.

        `key` is a function that returns the subscription ID string of a
        subscription object. If it raises or does not return a string, an
        `InvalidSubscriptionIDError` is passed to `Command.collect_results` for
        that subscription.
        """
        if not isinstance(cmd, Command):
            raise TypeError(f"'{cmd}' must be a subclass of azcmd.runner.Command")

        key = _valid_key_fn(key)

        start = time.time()
        cmd.pre_hook()

        for sub in subs:
            try:
                session = self.session_provider.session(key(sub))
                get_result = _wrap_result(cmd.execute, session, sub)

            # Exceptions from execute are captured by _wrap_result. This block
            # handles failures to obtain the ID or a credential.
            except Exception as e:  # pylint: disable=broad-except
                get_result = _wrap_exception(e)

            cmd.collect_results(sub, get_result)

        cmd.post_hook()
        return time.time() - start


class InvalidSubscriptionIDError(Exception):
    """Raised if a subscription ID cannot be extracted from a subscription object."""


def _valid_key_fn(fn):
    """Wraps `fn` so that it raises `InvalidSubscriptionIDError` on bad results."""

    def new_key_fn(*args, **kwargs):
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            raise InvalidSubscriptionIDError(
                f"The key function threw an exception: {e}"
            ) from e
        if not isinstance(result, str):
            raise InvalidSubscriptionIDError(f"Subscription ID is not a string: {result}")
        return result

    return new_key_fn


def _wrap_result(fn, *args, **kwargs):
    """Returns a function that returns the result of `fn(*args, **kwargs)`.

    If `fn` raised an exception, the returned function re-raises it instead.
    """
    try:
        result = fn(*args, **kwargs)
        return lambda: result
    except Exception as e:  # pylint: disable=broad-except
        return _wrap_exception(e)


def _wrap_exception(exception):
    """Returns a function that when invoked will raise `exception`."""

    def fn():
        raise exception

    return fn
