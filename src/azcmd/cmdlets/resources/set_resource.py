#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Update the properties or tags of a resource.

The properties given with `--properties` are merged into the existing
properties of the resource by Azure. When `--tag` is used, the tags given
replace all existing tags. See `new_resource` for the options that identify the
resource.

    $ azcmd [options] set_resource -g app-rg -n appplan \\
        -t Microsoft.Web/serverfarms --tag env=prod
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg, add_tag_arg, json_value
from azcmd.cmdlets.resources import add_resource_type_args
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Update a resource."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "resource")
        add_resource_type_args(parser)
        add_tag_arg(parser)
        parser.add_argument(
            "--properties",
            metavar="JSON",
            type=json_value,
            help="resource properties as JSON or @FILE",
        )

        args = parser.parse_args(argv)
        if args.properties is None and args.tags is None:
            parser.error("at least one of --properties or --tag is required")
        return cls(**vars(args))

    def __init__(
        self,
        resource_group,
        name,
        resource_type,
        properties=None,
        tags=None,
        parent=None,
        api_version=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.resource_type = resource_type
        self.properties = properties
        self.tags = tags
        self.parent = parent
        self.api_version = api_version

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.update_resource(
            self.resource_group,
            self.name,
            self.resource_type,
            properties=self.properties,
            tags=self.tags,
            parent=self.parent,
            api_version=self.api_version,
        )
