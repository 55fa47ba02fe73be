#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the resource groups in a subscription.

## Overview

Without arguments, get_resource_group lists every resource group in the
subscription. With `--name`, only that group is displayed, and the cmdlet
fails if it does not exist:

    $ azcmd --subscription 00000000-0000-0000-0000-000000000000 get_resource_group
    00000000-0000-0000-0000-000000000000:
    name      location  provisioning_state
    ====      ========  ==================
    app-prod  eastus2   Succeeded
    app-dev   eastus2   Succeeded

## Reference

### Synopsis

    $ azcmd [options] get_resource_group [cmdlet options]

### Cmdlet Options

`--name NAME`
: Display only the named resource group.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display resource groups."""

    columns = ["name", "location", "provisioning_state"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_name_arg(parser, "resource group", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, name=None, output="text"):
        super().__init__(output)
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.filter_resource_groups(self.name)
