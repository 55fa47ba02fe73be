#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a storage account and all of the data in it.

    $ azcmd [options] remove_storage_account -g RG -n NAME
"""

from azcmd.clients.storage import StorageClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Delete a storage account."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "storage account")
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, name, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = StorageClient.from_session(session, sub.id)
        client.delete_storage_account(self.resource_group, self.name)
        return f"removed storage account {self.name}"
