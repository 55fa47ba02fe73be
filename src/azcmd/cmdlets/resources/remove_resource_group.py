#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a resource group and all of the resources in it.

The cmdlet waits until the deletion has completed, which can take several
minutes for groups with many resources. It fails if the group does not exist.

    $ azcmd [options] remove_resource_group --name NAME
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Delete a resource group."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_name_arg(parser, "resource group")
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, name, output="text"):
        super().__init__(output)
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        client.delete_resource_group(self.name)
        return f"removed resource group {self.name}"
