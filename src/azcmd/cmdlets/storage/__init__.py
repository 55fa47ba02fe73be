#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cmdlets for storage accounts and their access keys.

All of these cmdlets use the `azcmd.clients.storage.StorageClient` facade.
Storage account names must be between 3 and 24 lowercase letters and digits,
and are unique across all of Azure.
"""

SKUS = (
    "Standard_LRS",
    "Standard_GRS",
    "Standard_RAGRS",
    "Standard_ZRS",
    "Standard_GZRS",
    "Standard_RAGZRS",
    "Premium_LRS",
    "Premium_ZRS",
)

KINDS = ("StorageV2", "Storage", "BlobStorage", "BlockBlobStorage", "FileStorage")
