#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a runbook in an automation account.

## Overview

Creates a runbook and, if `--file` is specified, uploads the contents of the
file as its draft. The name of the runbook defaults to the name of the file
without its extension. The new runbook must be published with
`publish_runbook` before it can be started:

    $ azcmd [options] new_runbook -g ops-rg -a ops-automation \\
        --file Restart-AppPool.ps1 --description "Recycle an IIS pool"
    $ azcmd [options] publish_runbook -g ops-rg -a ops-automation -n Restart-AppPool

## Reference

### Synopsis

    $ azcmd [options] new_runbook [cmdlet options]

### Configuration

    Commands:
      new_runbook:
        resource_group: STRING
        account: STRING
        type: STRING
        tags:
          KEY: VALUE

### Cmdlet Options

`--name NAME`
: The name of the runbook. Required unless `--file` is specified.

`--file FILE`
: The script to upload as the draft of the runbook.

`--type TYPE`
: The runbook type. The default is `PowerShell`.

`--description TEXT`
: A description of the runbook.

`--tag KEY=VALUE`
: A tag to apply to the runbook. Can be specified multiple times.
"""

from pathlib import Path

from azcmd.clients.automation import RUNBOOK_TYPES
from azcmd.cmdlets import add_name_arg, add_tag_arg
from azcmd.cmdlets.automation import AutomationCmdlet
from azcmd.config import Choice


class CLICommand(AutomationCmdlet):
    """Create a runbook."""

    @classmethod
    def add_automation_args(cls, parser, cfg):
        add_name_arg(parser, "runbook", required=False)
        parser.add_argument(
            "--file",
            metavar="FILE",
            help="script to upload as the draft",
        )
        parser.add_argument(
            "--type",
            dest="runbook_type",
            choices=RUNBOOK_TYPES,
            default=cfg("type", type=Choice(*RUNBOOK_TYPES), default="PowerShell"),
            help="type of runbook",
        )
        parser.add_argument("--description", help="description of the runbook")
        add_tag_arg(parser, cfg)

    @classmethod
    def from_args(cls, parser, args):
        if not args.name:
            if not args.file:
                parser.error("specify --name or --file")
            args.name = Path(args.file).stem

        content = None
        if args.file:
            try:
                content = Path(args.file).read_text(encoding="utf-8")
            except OSError as e:
                parser.error(f"cannot read {args.file}: {e}")

        kwargs = vars(args)
        del kwargs["file"]
        return cls(content=content, **kwargs)

    def __init__(
        self,
        resource_group,
        account,
        name,
        runbook_type="PowerShell",
        description=None,
        tags=None,
        content=None,
        output="text",
    ):
        super().__init__(resource_group, account, output)
        self.name = name
        self.runbook_type = runbook_type
        self.description = description
        self.tags = tags
        self.content = content

    def automation_execute(self, client):
        return client.create_runbook(
            self.name,
            runbook_type=self.runbook_type,
            description=self.description,
            tags=self.tags,
            content=self.content,
        )
