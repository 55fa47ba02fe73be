#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the locations in which resource types are available.

## Overview

Lists every resource type of every resource provider with the locations in
which it can be created. Use `--resource-type` to limit the output:

    $ azcmd [options] get_location -t Microsoft.Web/sites -t Microsoft.Sql/servers

## Reference

### Synopsis

    $ azcmd [options] get_location [cmdlet options]

### Configuration

    Commands:
      get_location:
        resource_type:
          - STRING

### Cmdlet Options

`resource_type`, `--resource-type TYPE`
: Include only this fully qualified resource type. Can be specified multiple
times.
"""

from azcmd.argparse import AppendWithoutDefault
from azcmd.clients.resources import ResourcesClient
from azcmd.config import List, Str
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display locations of resource types."""

    columns = ["resource_type", "locations"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        parser.add_argument(
            "--resource-type",
            "-t",
            metavar="TYPE",
            dest="resource_types",
            action=AppendWithoutDefault,
            default=cfg("resource_type", type=List(Str), default=[]),
            help="include only this resource type",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_types=None, output="text"):
        super().__init__(output)
        self.resource_types = resource_types

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.get_locations(self.resource_types)
