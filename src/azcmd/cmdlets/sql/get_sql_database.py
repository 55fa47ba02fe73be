#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the databases of an Azure SQL server.

## Overview

Lists the databases of a server, including the `master` database, with their
edition, service objective, and maximum size:

    $ azcmd [options] get_sql_database -g data-rg -s app-sql-01
    00000000-0000-0000-0000-000000000000:
    name      status  edition   service_objective  max_size_gb
    ====      ======  =======   =================  ===========
    master    Online  System    System0            32
    orders    Online  Standard  S1                 250

## Reference

### Synopsis

    $ azcmd [options] get_sql_database [cmdlet options]

### Cmdlet Options

`--server NAME`
: The SQL server.

`--name NAME`
: Display only the named database.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display SQL databases."""

    columns = ["name", "status", "edition", "service_objective", "max_size_gb"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, server, name=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        databases = client.filter_databases(self.resource_group, self.server, self.name)
        return databases[0] if self.name else databases
