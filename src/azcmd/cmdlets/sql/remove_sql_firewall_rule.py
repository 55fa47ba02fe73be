#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a firewall rule from an Azure SQL server.

    $ azcmd [options] remove_sql_firewall_rule -g RG -s SERVER -n NAME
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Delete a SQL firewall rule."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "firewall rule")
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, server, name, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        client.delete_firewall_rule(self.resource_group, self.server, self.name)
        return f"removed firewall rule {self.name} from {self.server}"
