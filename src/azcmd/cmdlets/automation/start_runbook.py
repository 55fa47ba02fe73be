#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Start a job for a published runbook.

## Overview

The parameters are checked against those declared by the runbook before the
job is started. The cmdlet returns as soon as the job has been created. Use
`get_job` to follow its status and `get_job_output` to retrieve its output:

    $ azcmd [options] start_runbook -n Restart-AppPool --parameter Pool=web
    00000000-0000-0000-0000-000000000000:
    job_id     : 6f1e0b2a-...
    runbook    : Restart-AppPool
    status     : New
    ...

Values are passed to the runbook as strings. Use `NAME=int:VALUE` or
`NAME=bool:VALUE` to pass a number or a boolean instead.

## Reference

### Synopsis

    $ azcmd [options] start_runbook [cmdlet options]

### Cmdlet Options

`--name NAME`
: The runbook to start.

`--parameter NAME=VALUE`
: A runbook parameter. Can be specified multiple times.

`--run-on GROUP`
: The hybrid worker group to run the job on instead of Azure.
"""

from azcmd.argparse import KeyValuePair
from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet
from azcmd.config import Str


class CLICommand(AutomationCmdlet):
    """Start a runbook."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook")
        parser.add_argument(
            "--parameter",
            metavar="NAME=VALUE",
            dest="parameters",
            action=KeyValuePair,
            default={},
            help="runbook parameter, can be specified multiple times",
        )
        parser.add_argument(
            "--run-on",
            metavar="GROUP",
            default=cfg("run_on", type=Str),
            help="hybrid worker group",
        )

    def __init__(
        self, resource_group, account, name, parameters=None, run_on=None, output="text"
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.parameters = parameters
        self.run_on = run_on

    def automation_execute(self, client):
        return client.start_runbook(self.name, self.parameters, run_on=self.run_on)
