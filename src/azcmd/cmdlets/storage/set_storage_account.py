#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Change the SKU or the tags of a storage account.

The tags specified with `--tag` replace all of the existing tags.

    $ azcmd [options] set_storage_account -g RG -n NAME [--sku SKU] [--tag K=V ...]
"""

from azcmd.clients.storage import StorageClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg, add_tag_arg
from azcmd.cmdlets.storage import SKUS
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Update a storage account."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "storage account")
        parser.add_argument("--sku", choices=SKUS, help="new replication SKU")
        add_tag_arg(parser)

        args = parser.parse_args(argv)
        if not args.sku and args.tags is None:
            parser.error("specify --sku or --tag")
        return cls(**vars(args))

    def __init__(self, resource_group, name, sku=None, tags=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.sku = sku
        self.tags = tags

    def cmdlet_execute(self, session, sub):
        client = StorageClient.from_session(session, sub.id)
        return client.update_storage_account(
            self.resource_group, self.name, sku=self.sku, tags=self.tags
        )
