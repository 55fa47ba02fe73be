#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Stop the continuous copy of an Azure SQL database.

    $ azcmd [options] stop_sql_database_copy -g RG -s SERVER -n NAME \\
        --partner-server PARTNER

The copy on the partner server is kept as an independent database.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Stop a continuous SQL database copy."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        parser.add_argument(
            "--partner-server",
            metavar="NAME",
            required=True,
            help="server of the copy",
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
        partner_server,
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
        stopped = client.stop_database_copy(
            self.resource_group,
            self.server,
            self.name,
            self.partner_server,
            partner_database=self.partner_database,
        )
        partners = ", ".join(
            f"{c['partner_server']}/{c['partner_database']}" for c in stopped
        )
        return f"stopped copy of {self.name} to {partners}"
