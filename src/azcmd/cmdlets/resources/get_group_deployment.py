#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the template deployments of a resource group.

## Overview

Lists the deployments of a resource group. Use `--state` to include only
deployments in one or more provisioning states, such as `Running` or `Failed`.
When a single deployment is displayed, its parameters and outputs are shown as
tables.

    $ azcmd [options] get_group_deployment -g app-rg --state Failed

## Reference

### Synopsis

    $ azcmd [options] get_group_deployment [cmdlet options]

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: The resource group. Required unless configured.

`--name NAME`
: Display only the named deployment.

`--state STATE`
: Include only deployments in this provisioning state. Can be specified
multiple times.
"""

from azcmd.argparse import AppendWithoutDefault
from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display template deployments."""

    columns = ["name", "provisioning_state", "timestamp", "mode"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "deployment", required=False)
        parser.add_argument(
            "--state",
            metavar="STATE",
            dest="states",
            action=AppendWithoutDefault,
            default=[],
            help="include only deployments in this provisioning state",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, name=None, states=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.states = states

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        deployments = client.filter_deployments(
            self.resource_group, name=self.name, include_states=self.states
        )
        if self.name and len(deployments) == 1:
            return deployments[0]
        return deployments
