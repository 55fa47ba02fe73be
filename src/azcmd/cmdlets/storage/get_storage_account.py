#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display storage accounts.

## Overview

Lists the storage accounts in each subscription, or only those in a resource
group when `--resource-group` is specified:

    $ azcmd --subscription-file subs.txt get_storage_account -g app-rg
    00000000-0000-0000-0000-000000000000:
    name          resource_group  location  kind       sku
    ====          ==============  ========  ====       ===
    appdata01     app-rg          eastus2   StorageV2  Standard_LRS

## Reference

### Synopsis

    $ azcmd [options] get_storage_account [cmdlet options]

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: Include only accounts in this resource group.

`--name NAME`
: Display only the named account.
"""

from azcmd.clients.storage import StorageClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display storage accounts."""

    columns = ["name", "resource_group", "location", "kind", "sku"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg, required=False)
        add_name_arg(parser, "storage account", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group=None, name=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = StorageClient.from_session(session, sub.id)
        accounts = client.filter_storage_accounts(self.resource_group, self.name)
        if self.resource_group and self.name:
            return accounts[0]
        return accounts
