#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the jobs of an automation account.

## Overview

Displays a single job when `--id` is specified. Otherwise, lists the jobs of
the account, optionally filtered by runbook, status, and time. The filters are
evaluated by Azure, so they can be used to find recent failures efficiently
in accounts with a long history:

    $ azcmd [options] get_job --runbook Restart-AppPool --status Failed \\
        --start-time 2020-03-01T00:00:00Z

## Reference

### Synopsis

    $ azcmd [options] get_job [cmdlet options]

### Cmdlet Options

`--id ID`
: Display only this job.

`--runbook NAME`
: Include only jobs of this runbook.

`--status STATUS`
: Include only jobs with this status.

`--start-time TIMESTAMP`
: Include only jobs that started at or after this ISO 8601 timestamp.

`--end-time TIMESTAMP`
: Include only jobs that ended at or before this ISO 8601 timestamp.
"""

from azcmd.argparse import iso_datetime
from azcmd.clients.automation import JOB_STATUSES
from azcmd.cmdlets.automation import AutomationCmdlet, add_job_id_arg


class CLICommand(AutomationCmdlet):
    """Display automation jobs."""

    columns = ["job_id", "runbook", "status", "start_time", "end_time"]

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_job_id_arg(parser, required=False)
        parser.add_argument("--runbook", metavar="NAME", help="name of the runbook")
        parser.add_argument("--status", choices=JOB_STATUSES, help="status of the job")
        parser.add_argument(
            "--start-time",
            metavar="TIMESTAMP",
            type=iso_datetime,
            help="jobs started at or after",
        )
        parser.add_argument(
            "--end-time",
            metavar="TIMESTAMP",
            type=iso_datetime,
            help="jobs ended at or before",
        )

    def __init__(
        self,
        resource_group,
        account,
        job_id=None,
        runbook=None,
        status=None,
        start_time=None,
        end_time=None,
        output="text",
    ):
        super().__init__(resource_group, account, output)
        self.job_id = job_id
        self.runbook = runbook
        self.status = status
        self.start_time = start_time
        self.end_time = end_time

    def automation_execute(self, client):
        if self.job_id:
            return client.get_job(self.job_id)
        return client.filter_jobs(
            runbook=self.runbook,
            status=self.status,
            start_time=self.start_time,
            end_time=self.end_time,
        )
