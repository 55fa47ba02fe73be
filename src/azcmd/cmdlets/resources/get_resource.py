#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display resources in a subscription or resource group.

## Overview

The get_resource cmdlet lists resources, optionally limited to a resource
group, a resource type, a tag, or a name. Type and tag filters are applied by
Azure, while names are matched without regard to case after all resources have
been retrieved:

    $ azcmd --subscription 00000000-0000-0000-0000-000000000000 \\
        get_resource -g app-prod -t Microsoft.Web/sites
    00000000-0000-0000-0000-000000000000:
    name        resource_group  resource_type        location
    ====        ==============  =============        ========
    app-prod-1  app-prod        Microsoft.Web/sites  eastus2

When a resource group, name, and type are all specified, the single resource
is retrieved including its properties. The newest stable API version of the
type is used unless `--api-version` is given.

## Reference

### Synopsis

    $ azcmd [options] get_resource [cmdlet options]

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: Limit the output to a resource group.

`--name NAME`
: Limit the output to resources with this name.

`--resource-type TYPE`
: Limit the output to a fully qualified resource type.

`--tag NAME[=VALUE]`
: Limit the output to resources with a tag, or a tag with a specific value.

`--parent PATH`, `--api-version VERSION`
: Used when retrieving a single resource. See `new_resource`.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.resources import add_resource_type_args
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display resources."""

    columns = ["name", "resource_group", "resource_type", "location"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg, required=False)
        add_name_arg(parser, "resource", required=False)
        add_resource_type_args(parser, required=False)
        parser.add_argument(
            "--tag",
            metavar="NAME[=VALUE]",
            help="include only resources with this tag",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group=None,
        name=None,
        resource_type=None,
        tag=None,
        parent=None,
        api_version=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.resource_type = resource_type
        self.tag = tag
        self.parent = parent
        self.api_version = api_version

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)

        if self.resource_group and self.name and self.resource_type:
            return client.get_resource(
                self.resource_group,
                self.name,
                self.resource_type,
                parent=self.parent,
                api_version=self.api_version,
            )

        return client.filter_resources(
            self.resource_group, self.name, self.resource_type, self.tag
        )
