#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Update the properties or the draft of a runbook.

## Overview

Changes the description, tags, or logging options of a runbook, and with
`--file`, replaces the draft of the runbook with the contents of a file. A
replaced draft must be published before it is used by new jobs.

    $ azcmd [options] set_runbook -n Restart-AppPool --log-verbose true

## Reference

### Synopsis

    $ azcmd [options] set_runbook [cmdlet options]

### Cmdlet Options

`--description TEXT`
: The new description.

`--tag KEY=VALUE`
: A tag. The tags specified replace all existing tags.

`--log-verbose BOOL`, `--log-progress BOOL`
: Whether verbose or progress records are written by jobs.

`--file FILE`
: The script to upload as the new draft.
"""

from pathlib import Path

from azcmd.argparse import from_str_to
from azcmd.cmdlets import add_name_arg, add_tag_arg
from azcmd.cmdlets.automation import AutomationCmdlet


class CLICommand(AutomationCmdlet):
    """Update a runbook."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook")
        parser.add_argument("--description", help="new description")
        add_tag_arg(parser)
        parser.add_argument(
            "--log-verbose",
            metavar="BOOL",
            type=from_str_to("bool"),
            help="write verbose records",
        )
        parser.add_argument(
            "--log-progress",
            metavar="BOOL",
            type=from_str_to("bool"),
            help="write progress records",
        )
        parser.add_argument("--file", metavar="FILE", help="script to upload")

    @classmethod
    def from_args(cls, parser, args):
        kwargs = vars(args)
        filename = kwargs.pop("file")

        properties = ("description", "tags", "log_verbose", "log_progress")
        if filename is None and all(kwargs[p] is None for p in properties):
            parser.error("nothing to update")

        content = None
        if filename:
            try:
                content = Path(filename).read_text(encoding="utf-8")
            except OSError as e:
                parser.error(f"cannot read {filename}: {e}")
        return cls(content=content, **kwargs)

    def __init__(
        self,
        resource_group,
        account,
        name,
        description=None,
        tags=None,
        log_verbose=None,
        log_progress=None,
        content=None,
        output="text",
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.description = description
        self.tags = tags
        self.log_verbose = log_verbose
        self.log_progress = log_progress
        self.content = content

    def automation_execute(self, client):
        if self.content is not None:
            client.set_runbook_content(self.name, self.content)

        return client.update_runbook(
            self.name,
            description=self.description,
            tags=self.tags,
            log_verbose=self.log_verbose,
            log_progress=self.log_progress,
        )
