#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display automation accounts.

    $ azcmd [options] get_automation_account [-g RG]
"""

from azcmd.clients.automation import AutomationClient
from azcmd.cmdlets import add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display automation accounts."""

    columns = ["name", "resource_group", "location", "state", "sku"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg, required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group

    def cmdlet_execute(self, session, sub):
        client = AutomationClient.from_session(session, sub.id)
        return client.list_automation_accounts(self.resource_group)
