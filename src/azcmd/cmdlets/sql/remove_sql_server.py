#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete an Azure SQL server and all of its databases.

    $ azcmd [options] remove_sql_server -g RG -n NAME
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Delete a SQL server."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "SQL server")
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, name, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        client.delete_server(self.resource_group, self.name)
        return f"removed SQL server {self.name}"
