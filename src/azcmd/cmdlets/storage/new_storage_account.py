#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a storage account.

## Overview

Checks that the name is available and then creates the account, waiting until
it has been provisioned:

    $ azcmd [options] new_storage_account -g app-rg -n appdata01 -l eastus2 \\
        --sku Standard_GRS --tag owner=team-a

If the name is taken or invalid, the reason reported by Azure is displayed and
the account is not created.

## Reference

### Synopsis

    $ azcmd [options] new_storage_account [cmdlet options]

### Configuration

    Commands:
      new_storage_account:
        resource_group: STRING
        location: STRING
        sku: STRING
        kind: STRING
        tags:
          KEY: VALUE

### Cmdlet Options

`--sku SKU`
: The replication SKU. The default is `Standard_LRS`.

`--kind KIND`
: The account kind. The default is `StorageV2`.
"""

from azcmd.clients.storage import StorageClient
from azcmd.cmdlets import (
    add_location_arg,
    add_name_arg,
    add_resource_group_arg,
    add_tag_arg,
)
from azcmd.cmdlets.storage import KINDS, SKUS
from azcmd.config import Choice
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a storage account."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "storage account")
        add_location_arg(parser, cfg)
        parser.add_argument(
            "--sku",
            choices=SKUS,
            default=cfg("sku", type=Choice(*SKUS), default="Standard_LRS"),
            help="replication SKU",
        )
        parser.add_argument(
            "--kind",
            choices=KINDS,
            default=cfg("kind", type=Choice(*KINDS), default="StorageV2"),
            help="kind of account",
        )
        add_tag_arg(parser, cfg)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group,
        name,
        location,
        sku="Standard_LRS",
        kind="StorageV2",
        tags=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.location = location
        self.sku = sku
        self.kind = kind
        self.tags = tags

    def cmdlet_execute(self, session, sub):
        client = StorageClient.from_session(session, sub.id)
        return client.create_storage_account(
            self.resource_group,
            self.name,
            self.location,
            sku=self.sku,
            kind=self.kind,
            tags=self.tags,
        )
