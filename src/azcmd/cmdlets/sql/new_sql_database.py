#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create a database on an Azure SQL server.

## Overview

The database is created in the location of its server. Without
`--service-objective` or `--edition`, the default tier of the server version
is used:

    $ azcmd [options] new_sql_database -g data-rg -s app-sql-01 -n orders \\
        --edition Standard --service-objective S1 --max-size-gb 250

## Reference

### Synopsis

    $ azcmd [options] new_sql_database [cmdlet options]

### Cmdlet Options

`--edition EDITION`
: The edition, such as `Standard`.

`--service-objective NAME`
: The service objective, such as `S1`.

`--max-size-gb GB`
: The maximum size of the database.

`--collation NAME`
: The collation. The default is `SQL_Latin1_General_CP1_CI_AS`.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg, add_tag_arg
from azcmd.cmdlets.sql import add_database_sku_args, add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a SQL database."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        add_database_sku_args(parser)
        parser.add_argument("--collation", metavar="NAME", help="database collation")
        add_tag_arg(parser, cfg)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(
        self,
        resource_group,
        server,
        name,
        edition=None,
        service_objective=None,
        max_size_gb=None,
        collation=None,
        tags=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.edition = edition
        self.service_objective = service_objective
        self.max_size_gb = max_size_gb
        self.collation = collation
        self.tags = tags

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.create_database(
            self.resource_group,
            self.server,
            self.name,
            edition=self.edition,
            service_objective=self.service_objective,
            max_size_gb=self.max_size_gb,
            collation=self.collation,
            tags=self.tags,
        )
