#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a runbook.

    $ azcmd [options] remove_runbook -g RG -a ACCOUNT -n NAME
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Delete a runbook."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook")

    def __init__(self, resource_group, account, name, output="text"):
        super().__init__(resource_group, account, output)
        self.name = name

    def automation_execute(self, client):
        client.delete_runbook(self.name)
        return f"removed runbook {self.name}"
