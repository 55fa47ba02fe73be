#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create an Azure SQL logical server.

## Overview

Creates a server with a SQL administrator login. The password of the login is
read from the environment variable named by `--admin-password-env`, which is
`SQL_ADMIN_PASSWORD` by default. If the variable is not set, the password is
prompted for once, before any subscription is processed:

    $ SQL_ADMIN_PASSWORD=... azcmd [options] new_sql_server -g data-rg \\
        -n app-sql-01 -l eastus2 --admin-login sqladmin

Server names are unique across Azure because they are part of the host name
`NAME.database.windows.net`.

## Reference

### Synopsis

    $ azcmd [options] new_sql_server [cmdlet options]

### Configuration

    Commands:
      new_sql_server:
        resource_group: STRING
        location: STRING
        admin_login: STRING
        admin_password_env: STRING
        version: STRING
        tags:
          KEY: VALUE

### Cmdlet Options

`--admin-login LOGIN`
: The SQL administrator login. Required unless configured.

`--admin-password-env VAR`
: The environment variable with the administrator password.

`--version VERSION`
: The server version. The default is `12.0`.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import (
    add_location_arg,
    add_name_arg,
    add_resource_group_arg,
    add_tag_arg,
)
from azcmd.cmdlets.sql import add_admin_login_args, pop_secret
from azcmd.config import Str
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a SQL server."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "SQL server")
        add_location_arg(parser, cfg)

        add_admin_login_args(parser, cfg)
        parser.add_argument(
            "--version",
            default=cfg("version", type=Str, default="12.0"),
            help="server version",
        )
        add_tag_arg(parser, cfg)

        kwargs = vars(parser.parse_args(argv))
        kwargs["admin_password"] = pop_secret(
            kwargs,
            "admin_password_env",
            f"SQL administrator password for {kwargs['admin_login']}: ",
        )
        return cls(**kwargs)

    def __init__(
        self,
        resource_group,
        name,
        location,
        admin_login,
        admin_password,
        version="12.0",
        tags=None,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.location = location
        self.admin_login = admin_login
        self.admin_password = admin_password
        self.version = version
        self.tags = tags

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.create_server(
            self.resource_group,
            self.name,
            self.location,
            self.admin_login,
            self.admin_password,
            version=self.version,
            tags=self.tags,
        )
