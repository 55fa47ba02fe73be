#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the continuous copies of an Azure SQL database.

Each copy is reported with its partner, the role of the database in the copy
relationship, the replication state, and the percentage of the initial seeding
that is complete:

    $ azcmd [options] get_sql_database_copy -g data-rg -s app-sql-01 -n orders

Use `--partner-server` and `--partner-database` to display a single copy.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display SQL database copies."""

    columns = [
        "partner_server",
        "partner_database",
        "role",
        "replication_state",
        "percent_complete",
    ]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        parser.add_argument(
            "--partner-server", metavar="NAME", help="server of the copy"
        )
        parser.add_argument(
            "--partner-database", metavar="NAME", help="name of the copy"
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group,
        server,
        name,
        partner_server=None,
        partner_database=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.partner_server = partner_server
        self.partner_database = partner_database

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.filter_database_copies(
            self.resource_group,
            self.server,
            self.name,
            partner_server=self.partner_server,
            partner_database=self.partner_database,
        )
