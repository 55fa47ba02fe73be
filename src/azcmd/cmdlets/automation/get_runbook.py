#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the runbooks of an automation account.

## Overview

Lists the runbooks of the account, or displays a single runbook with the names
of its parameters when `--name` is specified. Runbook names are matched
ignoring case:

    $ azcmd [options] get_runbook -g ops-rg -a ops-automation
    00000000-0000-0000-0000-000000000000:
    name              runbook_type  state      last_modified_time
    ====              ============  =====      ==================
    Restart-AppPool   PowerShell    Published  2020-03-01 14:12:40+00:00

## Reference

### Synopsis

    $ azcmd [options] get_runbook [cmdlet options]

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: The resource group of the automation account.

`account`, `--account NAME`
: The automation account.

`--name NAME`
: Display only the named runbook.
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Display runbooks."""

    columns = ["name", "runbook_type", "state", "last_modified_time"]

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook", required=False)

    def __init__(self, resource_group, account, name=None, output="text"):
        super().__init__(resource_group, account, output)
        self.name = name

    def automation_execute(self, client):
        runbooks = client.filter_runbooks(self.name)
        return runbooks[0] if self.name else runbooks
