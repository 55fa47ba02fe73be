#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Regenerate one of the two access keys of a storage account.

Applications using the old value of the key lose access immediately. Rotate
keys by moving applications to the other key before regenerating this one.

    $ azcmd [options] new_storage_key -g RG -n NAME --key-name key1
"""

from azcmd.clients.storage import KEY_NAMES, StorageClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Regenerate a storage account key."""

    columns = ["account", "key_name", "value", "permissions"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "storage account")
        parser.add_argument(
            "--key-name",
            choices=KEY_NAMES,
            required=True,
            help="key to regenerate",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, name, key_name, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.key_name = key_name

    def cmdlet_execute(self, session, sub):
        client = StorageClient.from_session(session, sub.id)
        return client.regenerate_key(self.resource_group, self.name, self.key_name)
