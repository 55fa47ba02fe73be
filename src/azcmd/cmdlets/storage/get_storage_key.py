#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the access keys of a storage account.

Keys are secrets. Take care where the output of this cmdlet is written.

    $ azcmd [options] get_storage_key -g RG -n NAME
"""

from azcmd.clients.storage import StorageClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display storage account keys."""

    columns = ["account", "key_name", "value", "permissions"]

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
        return client.get_storage_keys(self.resource_group, self.name)
