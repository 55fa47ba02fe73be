#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a resource of any type in a resource group.

## Overview

The new_resource cmdlet creates a generic resource from its fully qualified
type and a JSON document of its properties. The properties can be given
inline or read from a file by prefixing the filename with `@`:

    $ azcmd [options] new_resource -g app-rg -n appplan \\
        -t Microsoft.Web/serverfarms -l eastus2 --properties '{"reserved": true}'

    $ azcmd [options] new_resource -g app-rg -n appdb \\
        -t Microsoft.Sql/servers/databases --parent servers/appsql \\
        -l eastus2 --properties @db.json

If the resource exists, the cmdlet fails unless `--overwrite` is given. Unless
`--api-version` is specified, the newest stable API version registered for the
type is used.

## Reference

### Synopsis

    $ azcmd [options] new_resource [cmdlet options]

### Cmdlet Options

`--resource-group NAME`, `--name NAME`, `--resource-type TYPE`
: Identify the resource to create. Required.

`--location LOCATION`
: The location of the resource. Required unless configured.

`--properties JSON`
: The properties of the resource as JSON, or `@FILE` to read them from a file.

`--tag KEY=VALUE`
: A tag to apply. Can be specified multiple times.

`--parent PATH`
: The path of the parent of a nested resource such as `servers/appsql`.

`--api-version VERSION`
: The API version to use.

`--overwrite`
: Replace the resource if it exists.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import (
    add_location_arg,
    add_name_arg,
    add_resource_group_arg,
    add_tag_arg,
    json_value,
)
from azcmd.cmdlets.resources import add_resource_type_args
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a resource."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "resource")
        add_resource_type_args(parser)
        add_location_arg(parser, cfg)
        add_tag_arg(parser)
        parser.add_argument(
            "--properties",
            metavar="JSON",
            type=json_value,
            default={},
            help="resource properties as JSON or @FILE",
        )
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="replace the resource if it exists",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group,
        name,
        resource_type,
        location,
        properties=None,
        tags=None,
        parent=None,
        api_version=None,
        overwrite=False,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.resource_type = resource_type
        self.location = location
        self.properties = properties
        self.tags = tags
        self.parent = parent
        self.api_version = api_version
        self.overwrite = overwrite

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.create_resource(
            self.resource_group,
            self.name,
            self.resource_type,
            self.location,
            properties=self.properties,
            tags=self.tags,
            parent=self.parent,
            api_version=self.api_version,
            overwrite=self.overwrite,
        )
