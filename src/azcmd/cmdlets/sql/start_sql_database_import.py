#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Import a BACPAC file from blob storage into a new Azure SQL database.

## Overview

Creates the database named by `--name` from the blob named by
`--storage-uri`. The credentials are given as for
`start_sql_database_export`:

    $ azcmd [options] start_sql_database_import -g data-rg -s app-sql-02 \\
        -n orders --admin-login sqladmin --edition Standard \\
        --service-objective S1 --max-size-gb 250 \\
        --storage-uri https://backups.blob.core.windows.net/bacpacs/orders.bacpac

## Reference

### Synopsis

    $ azcmd [options] start_sql_database_import [cmdlet options]

### Cmdlet Options

`--storage-uri URL`
: The URL of the BACPAC blob to import.

`--storage-key-env VAR`
: The environment variable with the storage account key.

`--admin-login LOGIN`
: The SQL administrator login. Required unless configured.

`--admin-password-env VAR`
: The environment variable with the administrator password.

`--edition EDITION`, `--service-objective NAME`, `--max-size-gb GB`
: The performance tier and maximum size of the new database.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import (
    add_admin_login_args,
    add_database_sku_args,
    add_server_arg,
    add_storage_args,
    secrets_from_cli,
)
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Import a SQL database."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "database")
        add_storage_args(parser, cfg)
        add_admin_login_args(parser, cfg)
        add_database_sku_args(parser)
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
        edition=None,
        service_objective=None,
        max_size_gb=None,
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
        self.edition = edition
        self.service_objective = service_objective
        self.max_size_gb = max_size_gb

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.import_database(
            self.resource_group,
            self.server,
            self.name,
            self.storage_uri,
            self.storage_key,
            self.admin_login,
            self.admin_password,
            edition=self.edition,
            service_objective=self.service_objective,
            max_size_gb=self.max_size_gb,
        )
