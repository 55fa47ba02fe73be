#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display Azure SQL servers.

    $ azcmd [options] get_sql_server [-g RG] [--name NAME]
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display SQL servers."""

    columns = ["name", "resource_group", "location", "version", "state"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg, required=False)
        add_name_arg(parser, "SQL server", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group=None, name=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        servers = client.filter_servers(self.resource_group, self.name)
        if self.resource_group and self.name:
            return servers[0]
        return servers
