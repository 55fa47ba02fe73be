#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facades over the Azure management SDK clients.

## Overview

Each module in this package wraps one Azure management SDK client and exposes
the handful of operations used by the cmdlets in `azcmd.cmdlets`:

`azcmd.clients.resources.ResourcesClient`
:  Resource groups, generic resources, template deployments, and locations.

`azcmd.clients.storage.StorageClient`
:  Storage accounts and their access keys.

`azcmd.clients.compute.ComputeClient`
:  Virtual machines and their power state.

`azcmd.clients.automation.AutomationClient`
:  Automation accounts, runbooks, jobs, and schedules.

`azcmd.clients.sql.SqlClient`
:  SQL servers, databases, firewall rules, and service objectives.

A facade forwards calls to the SDK, follows continuation tokens with
`azcmd.paging`, applies filters the service cannot do server-side, and maps the
SDK models to display records, which are plain dicts consumed by
`azcmd.display`. The SDK client is passed to the constructor of a facade, so
tests can provide a mock. The `from_session` factory builds the SDK client from
a credential and subscription ID.

## Errors

Exceptions raised by the SDK, such as `azure.core.exceptions.HttpResponseError`
and `azure.core.exceptions.ResourceNotFoundError`, propagate unchanged unless a
friendlier error applies. The friendlier errors are defined in this module and
derive from `AzcmdError`. Use `describe_error` to obtain a one-line message
suitable for the user from any of them.
"""

import json
import logging

from azure.core.exceptions import HttpResponseError

LOG = logging.getLogger(__name__)


class ManagementClient:
    """Base class of the facades over an Azure SDK management client.

    Subclasses set `sdk_class` to the SDK client class built by `from_session`.
    """

    sdk_class = None

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_session(cls, credential, subscription_id):
        """Returns a facade for the subscription using `credential`."""
        return cls(cls.sdk_class(credential, subscription_id))


class AzcmdError(Exception):
    """Base class of the errors raised by the facades."""


class ResourceGroupNotFoundError(AzcmdError):
    """Raised when a resource group does not exist."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Provided resource group does not exist: {name}")


class ResourceGroupExistsError(AzcmdError):
    """Raised when creating a resource group that exists without overwrite."""

    def __init__(self, name):
        self.name = name
        super().__init__(
            f"Resource group '{name}' already exists, use --overwrite to update it"
        )


class DeploymentValidationError(AzcmdError):
    """Raised when a template deployment fails validation.

    `errors` is the list of formatted validation errors.
    """

    def __init__(self, errors):
        self.errors = errors
        super().__init__(
            "Deployment template validation failed:\n" + "\n".join(errors)
        )


class NoRunningDeploymentError(AzcmdError):
    """Raised when there is no running deployment to cancel."""

    def __init__(self, resource_group, name=None):
        self.resource_group = resource_group
        self.name = name
        if name:
            msg = f"There is no deployment called '{name}' to cancel in {resource_group}"
        else:
            msg = f"There are no running deployments in {resource_group}"
        super().__init__(msg)


class AmbiguousDeploymentError(AzcmdError):
    """Raised when more than one deployment matches a cancellation request."""

    def __init__(self, resource_group, names):
        self.resource_group = resource_group
        self.names = names
        super().__init__(
            f"There is more than one running deployment in {resource_group}, "
            f"specify one of: {', '.join(names)}"
        )


class UnknownResourceTypeError(AzcmdError):
    """Raised when a resource type is not registered with its provider."""

    def __init__(self, resource_type):
        self.resource_type = resource_type
        super().__init__(f"Unknown resource type: {resource_type}")


class RunbookNotPublishedError(AzcmdError):
    """Raised when starting or scheduling a runbook that was never published."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Runbook '{name}' has no published version")


class ScheduleExistsError(AzcmdError):
    """Raised when creating a schedule whose name is taken."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"A schedule called '{name}' already exists")


class DatabaseCopyNotFoundError(AzcmdError):
    """Raised when a database has no copy on the partner server."""

    def __init__(self, name, partner_server, partner_database=None):
        self.name = name
        self.partner_server = partner_server
        self.partner_database = partner_database
        target = partner_server
        if partner_database:
            target += f"/{partner_database}"
        super().__init__(f"Database '{name}' has no copy on {target}")


class StorageAccountNameUnavailableError(AzcmdError):
    """Raised when a storage account name cannot be used."""

    def __init__(self, name, reason=None, message=None):
        self.name = name
        self.reason = reason
        super().__init__(
            f"Storage account name '{name}' is not available: "
            f"{message or reason or 'unknown reason'}"
        )


def describe_error(e):
    """Returns a one-line description of an exception for the user.

    SDK errors are described by the error code and message sent by the
    service. Other exceptions are described by their string representation.
    """
    if isinstance(e, HttpResponseError):
        error = getattr(e, "error", None)
        if error is not None and getattr(error, "code", None):
            return f"{error.code}: {error.message}"
        return parse_error_message(e.message or str(e))
    return str(e)


def parse_error_message(text):
    """Returns the message contained in a JSON error body.

    The body is expected to contain either a top-level `message` key or an
    `error` object with a `message` key. If `text` is not such a document, it is
    returned unchanged.
    """
    try:
        doc = json.loads(text)
    except (TypeError, ValueError):
        return text

    if not isinstance(doc, dict):
        return text
    if doc.get("message"):
        return doc["message"]
    if isinstance(doc.get("error"), dict) and doc["error"].get("message"):
        return doc["error"]["message"]
    return text


def value_of(v):
    """Returns the value of an SDK enum, or `v` itself if it is not one."""
    return getattr(v, "value", v)


def odata_literal(value):
    """Returns `value` as a quoted OData string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def resource_group_of(resource_id):
    """Returns the resource group name contained in an ARM resource ID."""
    parts = (resource_id or "").split("/")
    for i, part in enumerate(parts[:-1]):
        if part.lower() == "resourcegroups":
            return parts[i + 1]
    return None


def wait(poller, description):
    """Waits for a long-running operation and returns its result."""
    LOG.info("started %s", description)
    result = poller.result()
    LOG.info("completed %s", description)
    return result
