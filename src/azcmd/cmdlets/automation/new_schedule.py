#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a schedule in an automation account.

## Overview

A schedule runs once at its start time, or repeatedly every N days or every N
hours from its start time until it expires. Without `--day-interval` or
`--hour-interval`, the schedule runs once:

    $ azcmd [options] new_schedule -n nightly --start 2020-03-02T02:00:00Z \\
        --day-interval 1 --time-zone "America/New_York"

A schedule does nothing until a runbook is registered with it using
`register_scheduled_runbook`. Without `--expiry`, a schedule never expires.

## Reference

### Synopsis

    $ azcmd [options] new_schedule [cmdlet options]

### Cmdlet Options

`--start TIMESTAMP`
: The ISO 8601 time of the first run. Required.

`--expiry TIMESTAMP`
: The ISO 8601 time after which the schedule no longer runs.

`--day-interval N`, `--hour-interval N`
: Run every N days or every N hours. Mutually exclusive.

`--description TEXT`
: A description of the schedule.

`--time-zone ZONE`
: The time zone used to interpret the schedule, such as `Europe/London`.
"""

from azcmd.argparse import iso_datetime
from azcmd.cmdlets import add_name_arg
from azcmd.cmdlets.automation import AutomationCmdlet
from azcmd.config import Str


def positive_int(value):
    number = int(value)
    if number < 1:
        raise ValueError(value)
    return number


class CLICommand(AutomationCmdlet):
    """Create a schedule."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "schedule")
        parser.add_argument(
            "--start",
            dest="start_time",
            metavar="TIMESTAMP",
            type=iso_datetime,
            required=True,
            help="time of the first run",
        )
        parser.add_argument(
            "--expiry",
            dest="expiry_time",
            metavar="TIMESTAMP",
            type=iso_datetime,
            help="time after which the schedule expires",
        )
        interval = parser.add_mutually_exclusive_group()
        interval.add_argument(
            "--day-interval",
            metavar="N",
            type=positive_int,
            help="run every N days",
        )
        interval.add_argument(
            "--hour-interval",
            metavar="N",
            type=positive_int,
            help="run every N hours",
        )
        parser.add_argument("--description", help="description of the schedule")
        parser.add_argument(
            "--time-zone",
            metavar="ZONE",
            default=cfg("time_zone", type=Str),
            help="time zone of the schedule",
        )

    @classmethod
    def from_args(cls, parser, args):
        if args.expiry_time and args.expiry_time <= args.start_time:
            parser.error("--expiry must be after --start")

        kwargs = vars(args)
        day, hour = kwargs.pop("day_interval"), kwargs.pop("hour_interval")
        if day:
            kwargs.update(frequency="Day", interval=day)
        elif hour:
            kwargs.update(frequency="Hour", interval=hour)
        return cls(**kwargs)

    def __init__(
        self,
        resource_group,
        account,
        name,
        start_time,
        expiry_time=None,
        frequency="OneTime",
        interval=1,
        description=None,
        time_zone=None,
        output="text",
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.start_time = start_time
        self.expiry_time = expiry_time
        self.frequency = frequency
        self.interval = interval
        self.description = description
        self.time_zone = time_zone

    def automation_execute(self, client):
        return client.create_schedule(
            self.name,
            self.start_time,
            expiry_time=self.expiry_time,
            frequency=self.frequency,
            interval=self.interval,
            description=self.description,
            time_zone=self.time_zone,
        )
