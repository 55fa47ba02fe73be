#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a resource group and optionally deploy a template into it.

## Overview

The new_resource_group cmdlet creates a resource group in a location. If the
group already exists, the cmdlet fails unless `--overwrite` is specified, in
which case the location and tags of the existing group are updated:

    $ azcmd --subscription 00000000-0000-0000-0000-000000000000 \\
        new_resource_group -n app-rg -l eastus2 --tag env=dev
    00000000-0000-0000-0000-000000000000:
    name               : app-rg
    location           : eastus2
    provisioning_state : Succeeded
    tags               : env=dev
    id                 : /subscriptions/00000000-.../resourceGroups/app-rg

When a template is specified, it is validated and deployed into the new
group. The status of each resource in the deployment is printed on standard
error as it changes. The output then includes the name of the deployment, the
resources in the group, and the outputs of the template.

## Reference

### Synopsis

    $ azcmd [options] new_resource_group [cmdlet options]

### Configuration

    Commands:
      new_resource_group:
        location: STRING
        tags:
          STRING: STRING
        parameters_file: STRING
        mode: ("Incremental" | "Complete")
        output: ("text" | "json" | "yaml")

### Cmdlet Options

`--name NAME`
: The name of the resource group. Required.

`location`, `--location LOCATION`
: The location of the resource group. Required unless configured.

`tags`, `--tag KEY=VALUE`
: A tag to apply to the group. Can be specified multiple times.

`--overwrite`
: Update the resource group if it already exists.

The template options are described in `azcmd.cmdlets.resources`.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_location_arg, add_name_arg, add_tag_arg, progress_printer
from azcmd.cmdlets.resources import add_deployment_args, pop_deployment_spec
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a resource group."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_name_arg(parser, "resource group")
        add_location_arg(parser, cfg)
        add_tag_arg(parser, cfg)
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="update the resource group if it exists",
        )
        add_deployment_args(parser, cfg)

        kwargs = vars(parser.parse_args(argv))
        kwargs["deployment"] = pop_deployment_spec(parser, kwargs, required=False)
        return cls(**kwargs)

    def __init__(
        self, name, location, tags=None, overwrite=False, deployment=None, output="text"
    ):
        super().__init__(output)
        self.name = name
        self.location = location
        self.tags = tags
        self.overwrite = overwrite
        self.deployment = deployment

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.create_resource_group(
            self.name,
            self.location,
            tags=self.tags,
            overwrite=self.overwrite,
            deployment=self.deployment,
            progress=progress_printer(sub),
        )
