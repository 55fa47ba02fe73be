#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""The main entry point for the azcmd CLI.

## Overview

The `azcmd` command line tool runs a single cmdlet against one or more Azure
subscriptions, one subscription after another. Its general form is:

    azcmd [options] CMDLET [cmdlet options]

The options before the cmdlet name select the subscriptions, configure logging,
and control the credentials used. The options after the cmdlet name belong to
the cmdlet. To list the cmdlets available, run `azcmd` without a cmdlet name. To
see the help of a cmdlet, pass `--help` after its name:

    $ azcmd get_vm --help

The output of each cmdlet is written to standard output, prefixed by the
subscription it belongs to. Errors are written to standard error and the exit
status is non-zero if the cmdlet failed in any subscription.

## Selecting Subscriptions

Subscriptions are selected with one or more `--subscription` flags:

    $ azcmd --subscription 00000000-0000-0000-0000-000000000000 get_resource_group

Subscription IDs can also be read from a file, one per line, with
`--subscription-file`. When the `azcmd.plugins.subs.Azure` loader is configured,
subscriptions can be given by name and selected by their metadata with the
`--include` and `--exclude` filters. Without any selection, all subscriptions
visible to the user are selected:

    $ azcmd --include state=Enabled --exclude env=prod get_vm --status

To list the metadata attributes that can be used in a filter, use `--metadata`.
To list the values of one attribute, pass its name:

    $ azcmd --metadata env

When more than one subscription has been selected, `azcmd` asks for
confirmation before running the cmdlet. Use `--force` to skip the prompt.

## Options

    --subscription ID      run the cmdlet on the specified subscription
    --subscription-file F  file containing subscription IDs (one per line)
    --metadata [ATTR]      summarize metadata that can be used in filters
    --include ATTR=VAL     include filter for subscriptions
    --exclude ATTR=VAL     exclude filter for subscriptions
    --force                do not prompt if more than one subscription is selected
    --log-level LEVEL      set the logging level (default: ERROR)
    --cmd-path PATH        directory or python package used to find cmdlets
    --version              show the version and exit

## Configuration

The CLI reads its defaults from `~/.azcmd.yaml`, or from the file named by the
`AZCMD_CONFIG` environment variable. Files ending in `.json` are parsed as JSON.
The file has four optional sections:

    CLI:
      subscription:
        - STRING
      include:
        STRING:
          - STRING
      exclude:
        STRING:
          - STRING
      log_level: ("DEBUG" | "INFO" | "WARN" | "ERROR")
      cmd_path:
        - STRING

    Subscriptions:
      plugin: azcmd.plugins.subs.Azure
      options:
        name_regexp: STRING
        str_template: STRING
        max_age: INTEGER

    Credentials:
      plugin: azcmd.plugins.creds.Default
      options:
        authority: STRING

    Commands:
      CMDLET_NAME:
        output: ("text" | "json" | "yaml")
        ARG: VALUE

The `Subscriptions` and `Credentials` sections select the plug-ins used to load
subscriptions and obtain credentials. See `azcmd.plugins.subs` and
`azcmd.plugins.creds` for their options. The `Commands` section provides
defaults for the flags of each cmdlet, keyed by the cmdlet name.

Set the `AZCMD_TRACE` environment variable to print a stack trace when an error
terminates the program.
"""

import argparse
import logging
import os
import sys
import traceback
from datetime import timedelta
from functools import partial
from pathlib import Path

from azcmd import __version__
from azcmd.argparse import (
    AppendAttributeValuePair,
    AppendWithoutDefault,
    RawAndDefaultsFormatter,
)
from azcmd.cmdmgr import CommandManager
from azcmd.config import Any, Choice, Config, Dict, File, List, Str
from azcmd.plugmgr import PluginManager
from azcmd.runner import SubscriptionRunner
from azcmd.session import SessionProvider
from azcmd.subload import SubscriptionLoader

LOG = logging.getLogger(__name__)

SHORT_DESCRIPTION = """
Executes a cmdlet across one or more Azure subscriptions.

Subscriptions can be specified by using one or more --subscription
flags. Alternatively, one or more filter flags (--include or --exclude)
can be used to select subscriptions based on metadata attributes. To
list the attributes available, use the --metadata flag.

The list of available cmdlets, and brief descriptions of each, can be
displayed by omitting the cmdlet. Each cmdlet has its own command line
arguments, which can be viewed by passing --help after the cmdlet.
    """.strip()

DEFAULT_CMD_PATH = [
    "azcmd.cmdlets.resources",
    "azcmd.cmdlets.storage",
    "azcmd.cmdlets.compute",
    "azcmd.cmdlets.automation",
    "azcmd.cmdlets.sql",
]

LOG_LEVELS = ["DEBUG", "INFO", "WARN", "ERROR"]


# setup.py establishes this as the entry point for the azcmd CLI.
def main():
    """The entry point of the `azcmd` CLI tool installed with this package.

    Exits with a `0` status code upon success. Upon error, prints the error
    message to standard error and exits with `1`. A stack trace is included if
    the `AZCMD_TRACE` environment variable is set.
    """
    try:
        _cli()

    except Exception as e:  # pylint: disable=broad-except
        if os.getenv("AZCMD_TRACE"):
            traceback.print_exc(file=sys.stderr)

        print(e, file=sys.stderr)
        sys.exit(1)


def config_filename():
    """Returns the path of the user configuration file."""
    return os.environ.get("AZCMD_CONFIG", Path.home() / ".azcmd.yaml")


def _cli():
    """Parses command line arguments and runs the selected cmdlet.

    Arguments are parsed in four stages, because the main CLI, the plug-ins,
    and the cmdlet each define their own:

        1. known args of the main CLI
        2. known args of the plug-ins
        3. remaining args to obtain the cmdlet name and its args
        4. the cmdlet's args, parsed by the cmdlet via the `CommandManager`

                 main and plug-in args         cmdlet       cmdlet args
            vvvvvvvvvvvvvvvvvvvvvvvvvvvvvvvvv vvvvvv vvvvvvvvvvvvvvvvvvvvvvv
      azcmd --subscription prod --sp-tenant T get_vm --resource-group app -o json

    Flags defined by a cmdlet with the same name as a main or plug-in flag are
    consumed by the earlier stages, which is why cmdlets use `--overwrite`
    rather than `--force`, and why plug-in flags are prefixed.
    """
    config = Config.from_file(config_filename())
    cfg = partial(config.get, "CLI", type=Str)

    # STAGE 1

    # The help flag is added in stage 3 so that it describes plug-in flags.
    parser = argparse.ArgumentParser(
        "azcmd",
        add_help=False,
        allow_abbrev=False,
        formatter_class=RawAndDefaultsFormatter,
        description=SHORT_DESCRIPTION,
    )

    sub_group = parser.add_argument_group("subscription selection options")
    sub_group.add_argument(
        "--subscription",
        metavar="ID",
        action=AppendWithoutDefault,
        default=cfg("subscription", type=List(Str), default=[]),
        dest="subscriptions",
        help="run cmdlet on specified list of subscriptions",
    )

    sub_group.add_argument(
        "--subscription-file",
        metavar="FILE",
        type=argparse.FileType("r"),
        default=cfg("subscription_file", type=File),
        help="filename containing subscriptions (one per line)",
    )

    sub_group.add_argument(
        "--metadata",
        metavar="ATTR",
        nargs="?",
        const=True,
        help="summarize metadata that can be used in filters",
    )

    sub_group.add_argument(
        "--include",
        metavar="ATTR=VAL",
        action=AppendAttributeValuePair,
        default=cfg("include", type=Dict(Str, List(Any)), default={}),
        help="include filter for subscriptions",
    )

    sub_group.add_argument(
        "--exclude",
        metavar="ATTR=VAL",
        action=AppendAttributeValuePair,
        default=cfg("exclude", type=Dict(Str, List(Any)), default={}),
        help="exclude filter for subscriptions",
    )

    parser.add_argument(
        "--force",
        action="store_true",
        help="do not prompt user if # of subscriptions is > 1",
    )

    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )

    parser.add_argument(
        "--log-level",
        default=cfg("log_level", type=Choice(*LOG_LEVELS), default="ERROR"),
        choices=LOG_LEVELS,
        help="set the logging level",
    )

    parser.add_argument(
        "--cmd-path",
        action=AppendWithoutDefault,
        metavar="PATH",
        default=cfg("cmd_path", type=List(Str), default=DEFAULT_CMD_PATH),
        help="directory or python package used to find cmdlets",
    )

    args, remaining_argv = parser.parse_known_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(name)s %(levelname)s [%(threadName)s] %(message)s",
    )

    # STAGE 2

    plugin_mgr = PluginManager(config, parser, args, remaining_argv)
    plugin_mgr.parse_args("Credentials", default="azcmd.plugins.creds.Default")
    plugin_mgr.parse_args("Subscriptions", default="azcmd.plugins.subs.Identity")

    # STAGE 3

    parser.add_argument("-h", "--help", action="help")
    parser.add_argument("command", nargs="?", help="cmdlet to execute")
    parser.add_argument(
        "arguments", nargs=argparse.REMAINDER, default=[], help="arguments for cmdlet"
    )
    args = parser.parse_args(plugin_mgr.remaining_argv, plugin_mgr.args)

    # Subscription loaders that query Azure need credentials, so the session
    # provider is built first and made available to the loader plug-in.
    session_provider = plugin_mgr.instantiate("Credentials", must_be=SessionProvider)
    args.session_provider = session_provider
    sub_loader = plugin_mgr.instantiate("Subscriptions", must_be=SubscriptionLoader)

    if args.metadata:
        _print_metadata(sub_loader.attributes(), args.metadata)
        sys.exit(0)

    if args.subscription_file:
        args.subscriptions.extend(
            s.strip()
            for s in args.subscription_file
            if not (s.isspace() or s.startswith("#"))
        )

    subs = sub_loader.subscriptions(args.subscriptions, args.include, args.exclude)
    if not subs:
        print("No subscriptions selected", file=sys.stderr)
        sys.exit(1)

    command_mgr = CommandManager.from_paths(*args.cmd_path)

    if not args.command:
        _print_subscriptions(subs)
        _print_valid_commands(command_mgr.commands())
        sys.exit(1)

    # STAGE 4

    try:
        command = command_mgr.instantiate_command(
            args.command, args.arguments, partial(config.get, "Commands", args.command)
        )

    # Include the valid cmdlets in the output before main() reports the error.
    except Exception:
        _print_valid_commands(command_mgr.commands(), out=sys.stderr)
        raise

    if len(subs) > 1 and not args.force:
        _ask_for_confirmation(subs)

    runner = SubscriptionRunner(session_provider)
    elapsed = runner.run(command, subs)

    pluralize = "s" if len(subs) != 1 else ""
    print(
        f"\nProcessed {len(subs)} subscription{pluralize} in {timedelta(seconds=elapsed)}",
        file=sys.stderr,
    )

    if command.failed:
        print(
            f"Failed in {command.failed} of {len(subs)} subscription{pluralize}",
            file=sys.stderr,
        )
        sys.exit(1)


def _print_metadata(attrs, name, out=sys.stdout):
    """Print the metadata attribute names, or the values of attribute `name`."""
    if name in attrs:
        print(f"Metadata values for '{name}' attribute:\n", file=out)
        print(
            "\n".join(sorted(str(x) for x in attrs[name] if x is not None)), file=out
        )
    elif attrs:
        print("Valid metadata attributes:\n", file=out)
        print("\n".join(sorted(attrs)), file=out)
    else:
        print("No metadata attributes available", file=out)


def _print_valid_commands(commands, out=sys.stdout):
    """Print a table of cmdlet names and the first line of their docstrings."""
    if not commands:
        print("No cmdlets found, did you specify the correct --cmd-path?", file=out)
        return

    print("The following are the available cmdlets:\n", file=out)
    max_cmd_len = max(len(name) for name in commands)
    for name in sorted(commands):
        docstring = (commands[name].__doc__ or "").strip().split("\n")[0]
        print(f"{name:{max_cmd_len}}  {docstring}", file=out)
    print(file=out)


def _print_subscriptions(subs, out=sys.stdout):
    count = len(subs)
    print(f'{count} subscription{"s" if count != 1 else ""} selected:\n', file=out)
    print(", ".join(str(s) for s in subs), file=out, end="\n\n")


def _ask_for_confirmation(subs):
    """Prompt user for confirmation and list subscriptions to be acted upon."""
    _print_subscriptions(subs, out=sys.stderr)
    print("Proceed (y/n)? ", flush=True, end="", file=sys.stderr)
    answer = input()
    if answer.lower() not in ["y", "yes"]:
        print("Exiting", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
