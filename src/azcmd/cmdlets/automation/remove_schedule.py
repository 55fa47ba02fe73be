#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a schedule.

Runbooks registered with the schedule are no longer started by it.

    $ azcmd [options] remove_schedule -g RG -a ACCOUNT -n NAME
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Delete a schedule."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "schedule")

    def __init__(self, resource_group, account, name, output="text"):
        super().__init__(resource_group, account, output)
        self.name = name

    def automation_execute(self, client):
        client.delete_schedule(self.name)
        return f"removed schedule {self.name}"
