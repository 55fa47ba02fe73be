#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Obtain Azure credentials via a variety of means.

## Overview

Two session providers are included in this module. Each returns the same
`azure-identity` credential regardless of the subscription requested, because a
credential is scoped to a tenant rather than to a subscription. None of them
handle subscriptions spread across multiple tenants.

`CredsViaAzureDefault`
:  Credentials are obtained from one of the following sources: environment
variables, an Azure managed identity, the user signed into VSCode, the Azure
CLI, or interactively via the browser.

`CredsViaServicePrincipal`
:  Credentials are obtained for an app registration using its client ID and
client secret. This is the provider to use from automation.

## Quick Start

    session_provider = CredsViaServicePrincipal(tenant_id, client_id, secret)

    sub_id = '00000000-0000-0000-0000-000000000000'
    creds = session_provider.session(sub_id)
    rmc = ResourceManagementClient(creds, sub_id)

## Caching

The Azure SDK clients call `get_token` on the credential for each request. The
credentials in `azure-identity` cache access tokens in memory and refresh them
as needed, so the same credential object is handed out for every subscription.
"""

import logging

from azure.identity import ClientSecretCredential, DefaultAzureCredential

from azcmd.session import SessionProvider

LOG = logging.getLogger(__name__)

# Scope used to validate credentials before any subscription is processed.
ARM_SCOPE = "https://management.azure.com/.default"


# pylint: disable=too-few-public-methods


class CredsViaAzureDefault(SessionProvider):
    """A session provider that obtains credentials from a variety of sources.

    Credentials are obtained via environment variables, managed identity on an
    Azure host, Azure VSCode, Azure CLI, or interactively via the browser. These
    are tried in order until one succeeds.

    The `authority` argument specifies the Microsoft authority host to use. If
    none is provided, the default is "login.microsoftonline.com".
    """

    def __init__(self, authority=None):
        self.creds = DefaultAzureCredential(
            exclude_interactive_browser_credential=False, authority=authority
        )

    def session(self, _subscription_id):
        return self.creds


class CredsViaServicePrincipal(SessionProvider):
    """A session provider that authenticates as a service principal.

    `tenant_id` is the directory of the app registration, `client_id` is its
    application ID, and `client_secret` is one of its secrets. The `authority`
    argument is optional and specifies the Microsoft authority host to use.

    A token is requested in the constructor, so an invalid secret is reported
    before any subscription is processed rather than once per subscription.
    """

    def __init__(self, tenant_id, client_id, client_secret, authority=None):
        kwargs = {"authority": authority} if authority else {}
        self.creds = ClientSecretCredential(
            tenant_id, client_id, client_secret, **kwargs
        )

        LOG.info("validating service principal %s in tenant %s", client_id, tenant_id)
        self.creds.get_token(ARM_SCOPE)

    def session(self, _subscription_id):
        return self.creds
