#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cmdlets for automation accounts, runbooks, jobs, and schedules.

## Overview

All of these cmdlets, except `get_automation_account`, act on a single
automation account that is identified by its resource group and name. Both can
be configured in the section of each cmdlet in the azcmd configuration file, so
they need not be repeated on the command line:

    Commands:
      start_runbook:
        resource_group: ops-rg
        account: ops-automation

## Runbook Parameters

`start_runbook` and `register_scheduled_runbook` accept runbook parameters as
`--parameter NAME=VALUE`. Parameter names are matched to those declared by the
runbook ignoring case. The cmdlet fails before anything is started if a
mandatory parameter is missing or a parameter is not declared by the runbook.
"""

import uuid

from azcmd.clients.automation import AutomationClient
from azcmd.cmdlets import add_resource_group_arg
from azcmd.config import Str
from azcmd.runner import Cmdlet


def add_automation_account_args(parser, cfg, required=True):
    """Adds `--resource-group` and `--account` to identify the account."""
    add_resource_group_arg(parser, cfg, required=required)
    default = cfg("account", type=Str)
    parser.add_argument(
        "--account",
        "-a",
        metavar="NAME",
        default=default,
        required=required and default is None,
        help="name of the automation account",
    )


def add_job_id_arg(parser, required=True):
    """Adds `--id` to select a job by its ID."""
    parser.add_argument(
        "--id",
        dest="job_id",
        metavar="ID",
        type=uuid.UUID,
        required=required,
        help="ID of the job",
    )


class AutomationCmdlet(Cmdlet):
    """Base class for cmdlets that act on an automation account.

    Subclasses define `add_automation_args` to add their arguments and
    `automation_execute` to act on the account with an `AutomationClient`.
    """

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_automation_account_args(parser, cfg)
        cls.add_automation_args(parser, cfg)
        return cls.from_args(parser, parser.parse_args(argv))

    @classmethod
    def add_automation_args(cls, parser, cfg):
        """Subclasses may override to add arguments to `parser`."""

    @classmethod
    def from_args(cls, parser, args):
        """Returns an instance from the parsed `args`.

        Subclasses may override to check or transform arguments, calling
        `parser.error` for invalid combinations.
        """
        return cls(**vars(args))

    def __init__(self, resource_group, account, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.account = account

    def cmdlet_execute(self, session, sub):
        client = AutomationClient.from_session(
            session, sub.id, self.resource_group, self.account
        )
        return self.automation_execute(client)

    def automation_execute(self, client):
        """Subclasses must override to act on the account with `client`."""
        raise NotImplementedError
