#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Stop a schedule from starting a runbook.

Removes every registration of the runbook with the schedule and displays the
registrations removed. Neither the runbook nor the schedule is deleted.

    $ azcmd [options] unregister_scheduled_runbook -n RUNBOOK --schedule SCHEDULE
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Unregister a runbook from a schedule."""

    columns = ["job_schedule_id", "runbook", "schedule"]

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook")
        parser.add_argument(
            "--schedule", metavar="NAME", required=True, help="name of the schedule"
        )

    def __init__(self, resource_group, account, name, schedule, output="text"):
        super().__init__(resource_group, account, output)
        self.name = name
        self.schedule = schedule

    def automation_execute(self, client):
        return client.unregister_scheduled_runbook(self.name, self.schedule)
