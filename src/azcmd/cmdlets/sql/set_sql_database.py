#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Change the performance tier or maximum size of a SQL database.

Scaling a database may take several minutes. The cmdlet waits until it has
completed.

    $ azcmd [options] set_sql_database -s SERVER -n NAME --service-objective S2
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_database_sku_args, add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Update a SQL database."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        add_database_sku_args(parser)

        args = parser.parse_args(argv)
        if not (args.edition or args.service_objective or args.max_size_gb):
            parser.error("specify --edition, --service-objective, or --max-size-gb")
        return cls(**vars(args))

    def __init__(
        self,
        resource_group,
        server,
        name,
        edition=None,
        service_objective=None,
        max_size_gb=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.edition = edition
        self.service_objective = service_objective
        self.max_size_gb = max_size_gb

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.update_database(
            self.resource_group,
            self.server,
            self.name,
            edition=self.edition,
            service_objective=self.service_objective,
            max_size_gb=self.max_size_gb,
        )
