#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Register a runbook with a schedule so the schedule starts it.

## Overview

The runbook must be published. Its parameters are checked in the same way as
`start_runbook` checks them, and are passed to every job started by the
schedule:

    $ azcmd [options] register_scheduled_runbook -n Restart-AppPool \\
        --schedule nightly --parameter Pool=web

The same runbook can be registered with several schedules, and the same
schedule can start several runbooks.

## Reference

### Synopsis

    $ azcmd [options] register_scheduled_runbook [cmdlet options]

### Cmdlet Options

`--name NAME`
: The runbook.

`--schedule NAME`
: The schedule.

`--parameter NAME=VALUE`
: A runbook parameter. Can be specified multiple times.
"""

from azcmd.argparse import KeyValuePair
from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Register a runbook with a schedule."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook")
        parser.add_argument(
            "--schedule", metavar="NAME", required=True, help="name of the schedule"
        )
        parser.add_argument(
            "--parameter",
            metavar="NAME=VALUE",
            dest="parameters",
            action=KeyValuePair,
            default={},
            help="runbook parameter, can be specified multiple times",
        )

    def __init__(
        self, resource_group, account, name, schedule, parameters=None, output="text"
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.schedule = schedule
        self.parameters = parameters

    def automation_execute(self, client):
        return client.register_scheduled_runbook(
            self.name, self.schedule, self.parameters
        )
