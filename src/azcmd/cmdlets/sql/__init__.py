#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cmdlets for Azure SQL servers, databases, and firewall rules.

All of these cmdlets use the `azcmd.clients.sql.SqlClient` facade. Databases
and firewall rules belong to a logical server, which is selected with
`--server` and its resource group with `--resource-group`. Both can be
configured in the section of each cmdlet in the azcmd configuration file:

    Commands:
      get_sql_database:
        resource_group: data-rg
        server: app-sql-01

Cmdlets that sign in to a server, such as `new_sql_server` and
`start_sql_database_export`, read secrets from environment variables, so they
never appear on the command line. A secret whose variable is not set is
prompted for once, before any subscription is processed.

Use `get_sql_service_objective` to find the service objectives, such as `S0`
or `GP_Gen5_2`, that can be given to `new_sql_database` and
`set_sql_database` in a location.
"""

import getpass
import os

from azcmd.config import Str


def add_server_arg(parser, cfg):
    """Adds `--server` with a default from the `server` key."""
    default = cfg("server", type=Str)
    parser.add_argument(
        "--server",
        "-s",
        metavar="NAME",
        default=default,
        required=default is None,
        help="name of the SQL server",
    )


def add_database_sku_args(parser):
    """Adds the options that select the performance tier of a database."""
    parser.add_argument(
        "--edition",
        metavar="EDITION",
        help="edition such as Basic, Standard, or GeneralPurpose",
    )
    parser.add_argument(
        "--service-objective",
        metavar="NAME",
        help="service objective such as S0 or GP_Gen5_2",
    )
    parser.add_argument(
        "--max-size-gb",
        metavar="GB",
        type=int,
        help="maximum size of the database in GB",
    )


def add_admin_login_args(parser, cfg):
    """Adds `--admin-login` and `--admin-password-env` for the SQL admin."""
    login = cfg("admin_login", type=Str)
    parser.add_argument(
        "--admin-login",
        metavar="LOGIN",
        default=login,
        required=login is None,
        help="SQL administrator login",
    )
    parser.add_argument(
        "--admin-password-env",
        metavar="VAR",
        default=cfg("admin_password_env", type=Str, default="SQL_ADMIN_PASSWORD"),
        help="environment variable with the administrator password",
    )


def add_storage_args(parser, cfg):
    """Adds `--storage-uri` and `--storage-key-env` to locate a BACPAC blob."""
    parser.add_argument(
        "--storage-uri",
        metavar="URL",
        required=True,
        help="URL of the BACPAC blob",
    )
    parser.add_argument(
        "--storage-key-env",
        metavar="VAR",
        default=cfg("storage_key_env", type=Str, default="AZURE_STORAGE_KEY"),
        help="environment variable with the storage account key",
    )


def pop_secret(kwargs, env_key, prompt):
    """Removes `env_key` from `kwargs` and returns the secret it names.

    The value of `kwargs[env_key]` is the name of an environment variable. If
    the variable is not set, the secret is read from the terminal.
    """
    env = kwargs.pop(env_key)
    return os.environ.get(env) or getpass.getpass(prompt)


def secrets_from_cli(kwargs):
    """Replaces the variable names of the storage key and admin password.

    Used by the cmdlets that sign in to a server and a storage account, which
    take `storage_key` and `admin_password` instead.
    """
    kwargs["storage_key"] = pop_secret(
        kwargs, "storage_key_env", "Storage account key: "
    )
    kwargs["admin_password"] = pop_secret(
        kwargs,
        "admin_password_env",
        f"SQL administrator password for {kwargs['admin_login']}: ",
    )
    return kwargs
