#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Validate an ARM template and its parameters without deploying it.

## Overview

The test_template cmdlet asks Azure to validate a deployment into a resource
group. Nothing is deployed. If the template is valid, a message says so.
Otherwise, each validation error is displayed:

    $ azcmd [options] test_template -g app-rg --template-file webapp.json
    00000000-0000-0000-0000-000000000000:
    code                     message
    ====                     =======
    InvalidTemplate          Deployment template validation failed: ...

Template options are described in `azcmd.cmdlets.resources`.
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_resource_group_arg
from azcmd.cmdlets.resources import add_deployment_args, pop_deployment_spec
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Validate an ARM template."""

    columns = ["code", "message", "target"]

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
        errors = client.validate_template(self.resource_group, self.deployment)
        return errors or "template is valid"
