#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cancel a running template deployment.

Without `--name`, the resource group must have exactly one deployment that has
neither failed nor succeeded, and that deployment is canceled. Otherwise the
cmdlet fails and lists the candidates.

    $ azcmd [options] stop_group_deployment -g RG [--name NAME]
"""

from azcmd.clients.resources import ResourcesClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Cancel a template deployment."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "deployment", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, name=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = ResourcesClient.from_session(session, sub.id)
        deployment = client.cancel_deployment(self.resource_group, self.name)
        return f"canceled deployment {deployment['name']}"
