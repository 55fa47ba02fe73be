#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facade over the Azure storage management client.

`StorageClient` lists, creates, updates, and deletes storage accounts, and
retrieves or regenerates their access keys. Before an account is created, the
availability of its name is checked, because storage account names are global
across Azure:

    client = StorageClient.from_session(creds, sub_id)
    client.create_storage_account("app-rg", "appdata01", "eastus2")
"""

import logging

from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.storage.models import (
    Sku,
    StorageAccountCheckNameAvailabilityParameters,
    StorageAccountCreateParameters,
    StorageAccountRegenerateKeyParameters,
    StorageAccountUpdateParameters,
)

from azcmd.clients import (
    ManagementClient,
    StorageAccountNameUnavailableError,
    resource_group_of,
    value_of,
    wait,
)
from azcmd.paging import get_paginated_resources

LOG = logging.getLogger(__name__)

KEY_NAMES = ("key1", "key2")


class StorageClient(ManagementClient):
    """Facade over `azure.mgmt.storage.StorageManagementClient`."""

    sdk_class = StorageManagementClient

    def filter_storage_accounts(self, resource_group=None, name=None):
        """Returns the storage accounts in the subscription or a resource group."""
        if resource_group and name:
            return [self.get_storage_account(resource_group, name)]

        def predicate(sa):
            return not name or sa.name.lower() == name.lower()

        if resource_group:
            accounts = get_paginated_resources(
                self.client.storage_accounts.list_by_resource_group,
                predicate,
                resource_group_name=resource_group,
            )
        else:
            accounts = get_paginated_resources(
                self.client.storage_accounts.list, predicate
            )
        return [storage_account_record(sa) for sa in accounts]

    def get_storage_account(self, resource_group, name):
        sa = self.client.storage_accounts.get_properties(resource_group, name)
        return storage_account_record(sa)

    def create_storage_account(
        self,
        resource_group,
        name,
        location,
        sku="Standard_LRS",
        kind="StorageV2",
        tags=None,
    ):
        """Creates a storage account and returns it.

        Raises `azcmd.clients.StorageAccountNameUnavailableError` with the
        reason given by the service if the name cannot be used.
        """
        availability = self.client.storage_accounts.check_name_availability(
            StorageAccountCheckNameAvailabilityParameters(
                name=name, type="Microsoft.Storage/storageAccounts"
            )
        )
        if not availability.name_available:
            raise StorageAccountNameUnavailableError(
                name, value_of(availability.reason), availability.message
            )

        parameters = StorageAccountCreateParameters(
            sku=Sku(name=sku), kind=kind, location=location, tags=tags
        )
        sa = wait(
            self.client.storage_accounts.begin_create(resource_group, name, parameters),
            f"creation of storage account {name}",
        )
        return storage_account_record(sa)

    def update_storage_account(self, resource_group, name, sku=None, tags=None):
        """Changes the SKU or replaces the tags of a storage account."""
        if not sku and tags is None:
            raise ValueError("Nothing to update, specify a SKU or tags")

        parameters = StorageAccountUpdateParameters(
            sku=Sku(name=sku) if sku else None, tags=tags
        )
        sa = self.client.storage_accounts.update(resource_group, name, parameters)
        return storage_account_record(sa)

    def delete_storage_account(self, resource_group, name):
        LOG.info("deleting storage account %s in %s", name, resource_group)
        self.client.storage_accounts.delete(resource_group, name)

    def get_storage_keys(self, resource_group, name):
        """Returns the access keys of a storage account."""
        result = self.client.storage_accounts.list_keys(resource_group, name)
        return [key_record(name, k) for k in result.keys or []]

    def regenerate_key(self, resource_group, name, key_name):
        """Regenerates `key1` or `key2` and returns the keys."""
        if key_name not in KEY_NAMES:
            raise ValueError(f"Key name must be one of {', '.join(KEY_NAMES)}")

        LOG.info("regenerating %s of storage account %s", key_name, name)
        result = self.client.storage_accounts.regenerate_key(
            resource_group,
            name,
            StorageAccountRegenerateKeyParameters(key_name=key_name),
        )
        return [key_record(name, k) for k in result.keys or []]


def storage_account_record(sa):
    endpoints = sa.primary_endpoints
    return {
        "name": sa.name,
        "resource_group": resource_group_of(sa.id),
        "location": sa.location,
        "kind": value_of(sa.kind),
        "sku": value_of(sa.sku.name) if sa.sku else None,
        "provisioning_state": value_of(sa.provisioning_state),
        "status_of_primary": value_of(sa.status_of_primary),
        "blob_endpoint": endpoints.blob if endpoints else None,
        "creation_time": sa.creation_time,
        "tags": sa.tags or {},
    }


def key_record(account, key):
    return {
        "account": account,
        "key_name": key.key_name,
        "value": key.value,
        "permissions": value_of(key.permissions),
    }
