#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the output of an automation job.

## Overview

By default, the text written by the job to its output stream is displayed.
Use `--stream` to display the individual records of the job streams instead,
which include warnings, errors, and, if enabled for the runbook, verbose and
progress records:

    $ azcmd [options] get_job_output --id 6f1e0b2a-... --stream Error

## Reference

### Synopsis

    $ azcmd [options] get_job_output [cmdlet options]

### Cmdlet Options

`--id ID`
: The job.

`--stream TYPE`
: Display the records of this stream type, or of all streams with `Any`.

`--since TIMESTAMP`
: With `--stream`, omit records written before this ISO 8601 timestamp.
"""

from azcmd.argparse import iso_datetime
from azcmd.clients.automation import STREAM_TYPES
from azcmd.cmdlets.automation import AutomationCmdlet, add_job_id_arg


class CLICommand(AutomationCmdlet):
    """Display the output of a job."""

    columns = ["time", "stream_type", "summary"]

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_job_id_arg(parser)
        parser.add_argument(
            "--stream",
            dest="stream_type",
            choices=STREAM_TYPES,
            help="display records of this stream type",
        )
        parser.add_argument(
            "--since",
            metavar="TIMESTAMP",
            type=iso_datetime,
            help="omit records written before",
        )

    @classmethod
    def from_args(cls, parser, args):
        if args.since and not args.stream_type:
            parser.error("--since requires --stream")
        return cls(**vars(args))

    def __init__(
        self,
        resource_group,
        account,
        job_id,
        stream_type=None,
        since=None,
        output="text",
    ):
        super().__init__(resource_group, account, output)
        self.job_id = job_id
        self.stream_type = stream_type
        self.since = since

    def automation_execute(self, client):
        if self.stream_type:
            return client.get_job_streams(
                self.job_id, stream_type=self.stream_type, since=self.since
            )
        return client.get_job_output(self.job_id)
