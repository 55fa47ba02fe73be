#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Export an Azure SQL database to a BACPAC file in blob storage.

## Overview

The database is exported to the blob named by `--storage-uri`, which must
include the container and the blob name. The export signs in to the server
with the SQL administrator login, and writes the blob with an access key of
the storage account. The administrator password and the storage key are read
from environment variables, `SQL_ADMIN_PASSWORD` and `AZURE_STORAGE_KEY` by
default, or prompted for if those are not set:

    $ azcmd [options] start_sql_database_export -g data-rg -s app-sql-01 \\
        -n orders --admin-login sqladmin \\
        --storage-uri https://backups.blob.core.windows.net/bacpacs/orders.bacpac

The command waits until the export is complete. Use
`get_sql_database_import_export_status` from another terminal to follow its
progress.

## Reference

### Synopsis

    $ azcmd [options] start_sql_database_export [cmdlet options]

### Configuration

    Commands:
      start_sql_database_export:
        resource_group: STRING
        server: STRING
        admin_login: STRING
        admin_password_env: STRING
        storage_key_env: STRING

### Cmdlet Options

`--storage-uri URL`
: The URL of the BACPAC blob to create.

`--storage-key-env VAR`
: The environment variable with the storage account key.

`--admin-login LOGIN`
: The SQL administrator login. Required unless configured.

`--admin-password-env VAR`
: The environment variable with the administrator password.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import (
    add_admin_login_args,
    add_server_arg,
    add_storage_args,
    secrets_from_cli,
)
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Export a SQL database."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        add_storage_args(parser, cfg)
        add_admin_login_args(parser, cfg)
        return cls(**secrets_from_cli(vars(parser.parse_args(argv))))

    def __init__(
        self,
        resource_group,
        server,
        name,
        storage_uri,
        storage_key,
        admin_login,
        admin_password,
        output="text",
    ):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.storage_uri = storage_uri
        self.storage_key = storage_key
        self.admin_login = admin_login
        self.admin_password = admin_password

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.export_database(
            self.resource_group,
            self.server,
            self.name,
            self.storage_uri,
            self.storage_key,
            self.admin_login,
            self.admin_password,
        )
