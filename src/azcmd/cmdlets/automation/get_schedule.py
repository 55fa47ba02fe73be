#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the schedules of an automation account.

When a single schedule is displayed, daily schedules include `day_interval`
and hourly schedules include `hour_interval`.

    $ azcmd [options] get_schedule -g RG -a ACCOUNT [--name NAME]
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Display schedules."""

    columns = ["name", "frequency", "is_enabled", "start_time", "next_run"]

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "schedule", required=False)

    def __init__(self, resource_group, account, name=None, output="text"):
        super().__init__(resource_group, account, output)
        self.name = name

    def automation_execute(self, client):
        schedules = client.filter_schedules(self.name)
        return schedules[0] if self.name else schedules
