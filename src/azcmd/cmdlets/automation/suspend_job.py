#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Suspend an automation job.

Only jobs of PowerShell Workflow and graphical runbooks can be suspended.
A suspended job is resumed from its last checkpoint with `resume_job`.

    $ azcmd [options] suspend_job -g RG -a ACCOUNT --id ID
"""

from azcmd.cmdlets.automation import AutomationCmdlet, add_job_id_arg


class CLICommand(AutomationCmdlet):
    """Suspend a job."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_job_id_arg(parser)

    def __init__(self, resource_group, account, job_id, output="text"):
        super().__init__(resource_group, account, output)
        self.job_id = job_id

    def automation_execute(self, client):
        client.suspend_job(self.job_id)
        return f"suspended job {self.job_id}"
