#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Deploy an ARM template into an existing resource group.

## Overview

The new_group_deployment cmdlet validates a template and its parameters, and
if there are no validation errors, submits the deployment and waits for it to
finish. While waiting, the status of each resource in the deployment is printed
on standard error whenever it changes:

    $ azcmd --subscription 00000000-0000-0000-0000-000000000000 \\
        new_group_deployment -g app-rg --template-file webapp.json \\
        --parameter siteName=app-dev-1
    00000000-0000-0000-0000-000000000000: Resource Microsoft.Web/serverfarms 'app-dev-plan' provisioning status in location 'eastus2' is Succeeded
    00000000-0000-0000-0000-000000000000: Resource Microsoft.Web/sites 'app-dev-1' provisioning status in location 'eastus2' is Succeeded
    00000000-0000-0000-0000-000000000000:
    name               : webapp
    resource_group     : app-rg
    provisioning_state : Succeeded
    ...
    outputs            :
        Name             Type                       Value
        ===============  =========================  ==========
        hostName         String                     app-dev-1.azurewebsites.net

If validation fails, each error is reported as `Error N: Code=CODE;
Message=MESSAGE` and nothing is deployed.

## Reference

### Synopsis

    $ azcmd [options] new_group_deployment [cmdlet options]

### Configuration

    Commands:
      new_group_deployment:
        resource_group: STRING
        parameters_file: STRING
        mode: ("Incremental" | "Complete")

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: The resource group to deploy into. Required unless configured.

The template options are described in `azcmd.cmdlets.resources`.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_resource_group_arg, progress_printer
from azcmd.cmdlets.resources import add_deployment_args, pop_deployment_spec
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Deploy a template into a resource group."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_deployment_args(parser, cfg)

        kwargs = vars(parser.parse_args(argv))
        kwargs["deployment"] = pop_deployment_spec(parser, kwargs)
        return cls(**kwargs)

    def __init__(self, resource_group, deployment, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.deployment = deployment

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        return client.execute_deployment(
            self.resource_group, self.deployment, progress=progress_printer(sub)
        )
