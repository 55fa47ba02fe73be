#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Resume an automation job.

The job continues from its last checkpoint.

    $ azcmd [options] resume_job -g RG -a ACCOUNT --id ID
"""

from azcmd.cmdlets.automation import AutomationCmdlet, add_job_id_arg


class CLICommand(AutomationCmdlet):
    """Resume a job."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_job_id_arg(parser)

    def __init__(self, resource_group, account, job_id, output="text"):
        super().__init__(resource_group, account, output)
        self.job_id = job_id

    def automation_execute(self, client):
        client.resume_job(self.job_id)
        return f"resumed job {self.job_id}"
