#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Plug-ins for Azure credential loading.

The plug-ins in this module control how credentials are obtained for the
subscriptions processed by the azcmd CLI. To select one, or a user-defined
plug-in, specify a `Credentials` block in the user configuration file:

    Credentials:
      plugin: PYTHON_MODULE.CLASSNAME
      options:
        ARG1: VAL1

The `plugin` key may be one of the following values:

azcmd.plugins.creds.Default
:  `Default` uses the default Azure SDK credential chain.

azcmd.plugins.creds.ServicePrincipal
:  `ServicePrincipal` authenticates as an app registration with a secret.

your.own.module.PluginSubclass
:  A custom plug-in installed in the Python path that subclasses
`azcmd.plugmgr.Plugin` and returns an `azcmd.session.SessionProvider`.
"""

import getpass
import os

from azcmd.config import Str, UUID
from azcmd.plugmgr import Plugin
from azcmd.session.azure import CredsViaAzureDefault, CredsViaServicePrincipal


class Default(Plugin):
    """CLI plug-in that uses the default Azure credential chain.

    ## Overview

    Credentials are obtained via environment variables, a managed identity on
    an Azure host, Azure VSCode, Azure CLI, or interactively via the browser.
    These are tried in order until one succeeds.

    ## Configuration

        Credentials:
          plugin: azcmd.plugins.creds.Default
          options:
            authority: STRING

    ## Plug-in Options

    `authority`, `--ad-authority`
    :  The Microsoft AD authority host. The default is
    "login.microsoftonline.com".
    """

    def __init__(self, parser, cfg):
        super().__init__(parser, cfg)

        # Plug-in flags are commingled with the main CLI flags, so they are
        # prefixed with '--ad-'.
        group = parser.add_argument_group("Azure authentication options")
        group.add_argument(
            "--ad-authority",
            metavar="NAME",
            default=self.cfg(
                "authority", type=Str, default="login.microsoftonline.com"
            ),
            help="Azure AD authority host",
        )

    def instantiate(self, args):
        return CredsViaAzureDefault(authority=args.ad_authority)


class ServicePrincipal(Plugin):
    """CLI plug-in that authenticates as a service principal.

    ## Overview

    Credentials are obtained for an Azure AD app registration using its client
    ID and a client secret. The secret should not be stored in the
    configuration file. By default it is read from the `AZURE_CLIENT_SECRET`
    environment variable, and if that is not set, the user is prompted.

    ## Configuration

    Options with an asterisk are mandatory and must be provided:

        Credentials:
          plugin: azcmd.plugins.creds.ServicePrincipal
          options:
            tenant: GUID *
            client_id: GUID *
            secret_env: STRING
            authority: STRING

    ## Plug-in Options

    `tenant`, `--sp-tenant`
    :  The tenant (directory) ID of the app registration.

    `client_id`, `--sp-client-id`
    :  The application (client) ID of the app registration.

    `secret_env`, `--sp-secret-env`
    :  The environment variable holding the client secret. The default is
    `AZURE_CLIENT_SECRET`.

    `authority`, `--ad-authority`
    :  The Microsoft AD authority host. The default is
    "login.microsoftonline.com".
    """

    def __init__(self, parser, cfg):
        super().__init__(parser, cfg)

        group = parser.add_argument_group("Azure service principal options")
        group.add_argument(
            "--sp-tenant",
            metavar="ID",
            default=self.cfg("tenant", type=UUID),
            help="tenant ID of the app registration",
        )

        group.add_argument(
            "--sp-client-id",
            metavar="ID",
            default=self.cfg("client_id", type=UUID),
            help="client ID of the app registration",
        )

        group.add_argument(
            "--sp-secret-env",
            metavar="VAR",
            default=self.cfg("secret_env", type=Str, default="AZURE_CLIENT_SECRET"),
            help="environment variable containing the client secret",
        )

        group.add_argument(
            "--ad-authority",
            metavar="NAME",
            default=self.cfg(
                "authority", type=Str, default="login.microsoftonline.com"
            ),
            help="Azure AD authority host",
        )

    def instantiate(self, args):
        if not args.sp_tenant or not args.sp_client_id:
            self.parser.error("--sp-tenant and --sp-client-id must be specified")

        secret = os.environ.get(args.sp_secret_env) or getpass.getpass(
            f"Client secret for {args.sp_client_id}? "
        )

        return CredsViaServicePrincipal(
            args.sp_tenant,
            args.sp_client_id,
            secret,
            authority=args.ad_authority,
        )
