#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a resource of any type.

    $ azcmd [options] remove_resource -g RG -n NAME -t TYPE [--parent PATH]

See `new_resource` for the options that identify the resource.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.resources import add_resource_type_args
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Delete a resource."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "resource")
        add_resource_type_args(parser)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group,
        name,
        resource_type,
        parent=None,
        api_version=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.resource_type = resource_type
        self.parent = parent
        self.api_version = api_version

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        client.delete_resource(
            self.resource_group,
            self.name,
            self.resource_type,
            parent=self.parent,
            api_version=self.api_version,
        )
        return f"removed {self.resource_type} {self.name}"
