#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Copy an Azure SQL database to another server.

## Overview

A one-time copy creates a new database that is consistent with the source as
of the end of the copy. It can be placed on the same server under another name
or on any server in the subscription:

    $ azcmd [options] start_sql_database_copy -g data-rg -s app-sql-01 \\
        -n orders --partner-server app-sql-01 --partner-database orders-copy

A continuous copy, specified with `--continuous`, is a readable secondary on a
server in another region that is kept in sync with the source until it is
stopped with `stop_sql_database_copy`. It has the name of its source:

    $ azcmd [options] start_sql_database_copy -g data-rg -s app-sql-01 \\
        -n orders --partner-server app-sql-dr --continuous

The copy is created in the location of the partner server. The command waits
until the copy is complete.

## Reference

### Synopsis

    $ azcmd [options] start_sql_database_copy [cmdlet options]

### Cmdlet Options

`--partner-server NAME`
: The server on which the copy is created.

`--partner-database NAME`
: The name of the copy. The default is the name of the source. Not allowed
  with `--continuous`.

`--partner-resource-group NAME`
: The resource group of the partner server. The default is the resource group
  of the source.

`--continuous`
: Make a continuous copy.

`--edition EDITION`, `--service-objective NAME`
: The performance tier of a one-time copy. The default is the tier of the
  source.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Copy a SQL database."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        parser.add_argument(
            "--partner-server",
            metavar="NAME",
            required=True,
            help="server on which to create the copy",
        )
        parser.add_argument(
            "--partner-database", metavar="NAME", help="name of the copy"
        )
        parser.add_argument(
            "--partner-resource-group",
            metavar="NAME",
            help="resource group of the partner server",
        )
        parser.add_argument(
            "--continuous",
            action="store_true",
            help="keep the copy in sync with the source",
        )
        parser.add_argument(
            "--edition", metavar="EDITION", help="edition of a one-time copy"
        )
        parser.add_argument(
            "--service-objective",
            metavar="NAME",
            help="service objective of a one-time copy",
        )

        args = parser.parse_args(argv)
        if args.continuous and args.partner_database:
            parser.error("--partner-database is not allowed with --continuous")
        if args.continuous and (args.edition or args.service_objective):
            parser.error("a continuous copy has the performance tier of its source")
        return cls(**vars(args))

    def __init__(
        self,
        resource_group,
        server,
        name,
        partner_server,
        partner_database=None,
        partner_resource_group=None,
        continuous=False,
        edition=None,
        service_objective=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.partner_server = partner_server
        self.partner_database = partner_database
        self.partner_resource_group = partner_resource_group
        self.continuous = continuous
        self.edition = edition
        self.service_objective = service_objective

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.copy_database(
            self.resource_group,
            self.server,
            self.name,
            self.partner_server,
            partner_database=self.partner_database,
            partner_resource_group=self.partner_resource_group,
            continuous=self.continuous,
            edition=self.edition,
            service_objective=self.service_objective,
        )
