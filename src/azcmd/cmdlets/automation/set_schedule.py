#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Enable, disable, or change the description of a schedule.

Runbooks registered with a disabled schedule are not started until it is
enabled again.

    $ azcmd [options] set_schedule -n nightly --disable
"""

from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Update a schedule."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "schedule")
        enabled = parser.add_mutually_exclusive_group()
        enabled.add_argument(
            "--enable",
            dest="is_enabled",
            action="store_const",
            const=True,
            help="enable the schedule",
        )
        enabled.add_argument(
            "--disable",
            dest="is_enabled",
            action="store_const",
            const=False,
            help="disable the schedule",
        )
        parser.add_argument("--description", help="new description")

    @classmethod
    def from_args(cls, parser, args):
        if args.is_enabled is None and args.description is None:
            parser.error("specify --enable, --disable, or --description")
        return cls(**vars(args))

    def __init__(
        self, resource_group, account, name, is_enabled=None, description=None, output="text"
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.is_enabled = is_enabled
        self.description = description

    def automation_execute(self, client):
        return client.update_schedule(
            self.name, is_enabled=self.is_enabled, description=self.description
        )
