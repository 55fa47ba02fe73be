#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Contains the built-in cmdlets.

The cmdlets are grouped by area into the following packages, all of which are
included in the default command path of the `azcmd.cli` tool:

`azcmd.cmdlets.resources`
:  Resource groups, resources, template deployments, and locations.

`azcmd.cmdlets.storage`
:  Storage accounts and their access keys.

`azcmd.cmdlets.compute`
:  Virtual machines.

`azcmd.cmdlets.automation`
:  Automation accounts, runbooks, jobs, and schedules.

`azcmd.cmdlets.sql`
:  SQL servers, databases, firewall rules, and service objectives.

Each module in these packages is an individual `azcmd.runner.Cmdlet` whose name,
the last portion of the dotted module name, is used to invoke it. Cmdlet names
follow a `verb_noun` convention, where the verb is one of `get`, `new`, `set`,
`remove`, or an action such as `start` or `stop`.

This module contains argument helpers shared by the cmdlets, so the same
options have the same flags and configuration keys across all of them.
"""

import argparse
import json
import sys

from azcmd.argparse import KeyValuePair
from azcmd.config import Dict, Location, Str


def add_resource_group_arg(parser, cfg, required=True):
    """Adds `--resource-group` with a default from the `resource_group` key."""
    default = cfg("resource_group", type=Str)
    parser.add_argument(
        "--resource-group",
        "-g",
        metavar="NAME",
        default=default,
        required=required and default is None,
        help="name of the resource group",
    )


def add_name_arg(parser, what, required=True):
    """Adds `--name` to select the named `what`."""
    parser.add_argument(
        "--name", "-n", required=required, help=f"name of the {what}"
    )


def add_location_arg(parser, cfg, required=True):
    """Adds `--location` with a default from the `location` key."""
    default = cfg("location", type=Location)
    parser.add_argument(
        "--location",
        "-l",
        metavar="LOCATION",
        type=str.lower,
        default=default,
        required=required and default is None,
        help="Azure location such as eastus2",
    )


def add_tag_arg(parser, cfg=None):
    """Adds `--tag KEY=VALUE`, which can be repeated, as `tags`."""
    parser.add_argument(
        "--tag",
        metavar="KEY=VALUE",
        dest="tags",
        action=KeyValuePair,
        default=cfg("tags", type=Dict(Str, Str)) if cfg else None,
        help="tag to apply, can be specified multiple times",
    )


def json_value(value):
    """Argparse type that parses JSON from a string or from `@FILENAME`."""
    try:
        if value.startswith("@"):
            with open(value[1:]) as f:
                return json.load(f)
        return json.loads(value)
    except (OSError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e


def progress_printer(sub, out=sys.stderr):
    """Returns a callable that prints progress messages for subscription `sub`."""

    def progress(message):
        print(f"{sub}: {message}", file=out, flush=True)

    return progress
