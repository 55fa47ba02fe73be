#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facade over the Azure resource management client.

## Overview

`ResourcesClient` manages resource groups, generic resources, template
deployments, and the locations in which resource types are available. Listing
operations follow continuation tokens via `azcmd.paging` and client-side
filters are applied only after all pages have been retrieved.

## Deployments

A template deployment is described by a `DeploymentSpec`, which references the
template by file, by URI, or inline, along with its parameters:

    spec = DeploymentSpec(
        template_file="webapp.json",
        parameters_file="webapp.parameters.json",
        parameters={"siteName": "myapp"})

    client = ResourcesClient.from_session(creds, sub_id)
    deployment = client.execute_deployment("app-rg", spec)

The deployment is validated before it is submitted. Validation errors raise a
`azcmd.clients.DeploymentValidationError`. Once submitted, the status of the
deployment is checked every two seconds until it has been canceled, has
succeeded, or has failed. Each time one of the operations of the deployment
changes status, a message is logged and passed to the optional `progress`
callback.
"""

import json
import logging
import time
import uuid
from pathlib import Path

from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.resource.resources.models import (
    Deployment,
    DeploymentProperties,
    GenericResource,
    ResourceGroup,
    TemplateLink,
)

from azcmd.clients import (
    AmbiguousDeploymentError,
    DeploymentValidationError,
    ManagementClient,
    NoRunningDeploymentError,
    ResourceGroupExistsError,
    ResourceGroupNotFoundError,
    UnknownResourceTypeError,
    odata_literal,
    parse_error_message,
    resource_group_of,
    value_of,
    wait,
)
from azcmd.paging import get_paginated_resources

LOG = logging.getLogger(__name__)

TERMINAL_STATES = ("Canceled", "Succeeded", "Failed")
"""Provisioning states of a deployment that has finished."""

FINISHED_STATES = ("Failed", "Succeeded")
"""Provisioning states of a deployment that cannot be canceled."""


class DeploymentSpec:
    """Describes a template deployment.

    Exactly one of `template_file`, `template_uri`, or `template` must be
    provided. `template` is the template as a dict. Parameters are taken from
    `parameters_file`, a standard ARM parameters file, and then from
    `parameters`, a dict of parameter names to values, which take precedence.
    `mode` is either `Incremental` or `Complete`.
    """

    def __init__(
        self,
        name=None,
        template_file=None,
        template_uri=None,
        template=None,
        parameters_file=None,
        parameters=None,
        mode="Incremental",
    ):
        sources = [s for s in (template_file, template_uri, template) if s]
        if len(sources) != 1:
            raise ValueError(
                "Exactly one of a template file, template URI, or template is required"
            )

        self.name = name
        self.template_file = template_file
        self.template_uri = template_uri
        self.template = template
        self.parameters_file = parameters_file
        self.parameters = parameters or {}
        self.mode = mode

    def deployment_name(self):
        """Returns the explicit name, else the template file stem, else a unique name."""
        if self.name:
            return self.name
        if self.template_file:
            return Path(self.template_file).stem
        return f"deployment-{uuid.uuid4()}"

    def template_parameters(self):
        """Returns the parameters in the form expected by the deployments API."""
        result = {}
        if self.parameters_file:
            with open(self.parameters_file) as f:
                doc = json.load(f)
            # Standard parameter files nest the values under 'parameters'.
            if "$schema" in doc or "contentVersion" in doc:
                doc = doc.get("parameters", {})
            result.update(doc)

        for name, value in self.parameters.items():
            result[name] = {"value": value}
        return result

    def properties(self):
        """Returns the `DeploymentProperties` for the deployments API."""
        if self.template_uri:
            source = {"template_link": TemplateLink(uri=self.template_uri)}
        elif self.template_file:
            with open(self.template_file) as f:
                source = {"template": json.load(f)}
        else:
            source = {"template": self.template}

        return DeploymentProperties(
            mode=self.mode, parameters=self.template_parameters(), **source
        )


class ResourcesClient(ManagementClient):
    """Facade over `azure.mgmt.resource.ResourceManagementClient`."""

    sdk_class = ResourceManagementClient

    # Resource groups

    def create_resource_group(
        self,
        name,
        location,
        tags=None,
        overwrite=False,
        deployment=None,
        progress=None,
    ):
        """Creates a resource group and optionally deploys a template into it.

        Raises `azcmd.clients.ResourceGroupExistsError` if the group exists and
        `overwrite` is `False`. If `deployment`, a `DeploymentSpec`, is
        provided, it is executed in the new group and the record returned
        includes the deployment's name, outputs, and the group's resources.
        """
        if self.client.resource_groups.check_existence(name) and not overwrite:
            raise ResourceGroupExistsError(name)

        LOG.info("creating resource group %s in %s", name, location)
        rg = self.client.resource_groups.create_or_update(
            name, ResourceGroup(location=location, tags=tags)
        )
        record = resource_group_record(rg)

        if deployment:
            result = self.execute_deployment(name, deployment, progress)
            record["deployment"] = result["name"]
            record["resources"] = [r["name"] for r in self.filter_resources(name)]
            record["outputs"] = result["outputs"]

        return record

    def filter_resource_groups(self, name=None):
        """Returns the resource group called `name` or all of them."""
        if name:
            return [resource_group_record(self._get_resource_group(name))]
        return [
            resource_group_record(rg)
            for rg in get_paginated_resources(self.client.resource_groups.list)
        ]

    def delete_resource_group(self, name):
        """Deletes a resource group and all of its resources."""
        if not self.client.resource_groups.check_existence(name):
            raise ResourceGroupNotFoundError(name)
        wait(
            self.client.resource_groups.begin_delete(name),
            f"deletion of resource group {name}",
        )

    def _get_resource_group(self, name):
        try:
            return self.client.resource_groups.get(name)
        except ResourceNotFoundError as e:
            raise ResourceGroupNotFoundError(name) from e

    # Resources

    def filter_resources(
        self, resource_group=None, name=None, resource_type=None, tag=None
    ):
        """Returns the resources matching the specified criteria.

        `tag` is either a tag name or a `name=value` pair. The service does not
        allow a tag filter to be combined with a type filter, so when both are
        given, the type is matched client-side. Names are always matched
        client-side, ignoring case.
        """
        server_filter = None
        client_type = None
        if tag:
            tag_name, _, tag_value = tag.partition("=")
            server_filter = f"tagName eq {odata_literal(tag_name)}"
            if tag_value:
                server_filter += f" and tagValue eq {odata_literal(tag_value)}"
            client_type = resource_type
        elif resource_type:
            server_filter = f"resourceType eq {odata_literal(resource_type)}"

        def predicate(r):
            if name and r.name.lower() != name.lower():
                return False
            if client_type and r.type.lower() != client_type.lower():
                return False
            return True

        kwargs = {"filter": server_filter} if server_filter else {}
        if resource_group:
            resources = get_paginated_resources(
                self.client.resources.list_by_resource_group,
                predicate,
                resource_group_name=resource_group,
                **kwargs,
            )
        else:
            resources = get_paginated_resources(
                self.client.resources.list, predicate, **kwargs
            )
        return [resource_record(r) for r in resources]

    def get_resource(
        self, resource_group, name, resource_type, parent=None, api_version=None
    ):
        """Returns a resource including its properties.

        `resource_type` is the fully qualified type, such as
        `Microsoft.Web/sites`. `parent` is the path of the parent of a nested
        resource, such as `servers/myserver`.
        """
        args = self._resource_args(resource_group, name, resource_type, parent)
        api_version = api_version or self.api_version(resource_type)
        resource = self.client.resources.get(*args, api_version=api_version)
        return resource_record(resource, properties=True)

    def create_resource(
        self,
        resource_group,
        name,
        resource_type,
        location,
        properties=None,
        tags=None,
        parent=None,
        api_version=None,
        overwrite=False,
    ):
        """Creates a resource and returns it.

        Raises `azure.core.exceptions.ResourceExistsError` if the resource
        exists and `overwrite` is `False`.
        """
        args = self._resource_args(resource_group, name, resource_type, parent)
        api_version = api_version or self.api_version(resource_type)

        exists = self.client.resources.check_existence(*args, api_version=api_version)
        if exists and not overwrite:
            raise ResourceExistsError(
                f"Resource '{name}' of type {resource_type} already exists "
                f"in {resource_group}, use --overwrite to replace it"
            )

        parameters = GenericResource(
            location=location, properties=properties or {}, tags=tags
        )
        resource = wait(
            self.client.resources.begin_create_or_update(
                *args, api_version=api_version, parameters=parameters
            ),
            f"creation of {resource_type} {name}",
        )
        return resource_record(resource, properties=True)

    def update_resource(
        self,
        resource_group,
        name,
        resource_type,
        properties=None,
        tags=None,
        parent=None,
        api_version=None,
    ):
        """Updates the properties or tags of a resource and returns it."""
        args = self._resource_args(resource_group, name, resource_type, parent)
        api_version = api_version or self.api_version(resource_type)

        parameters = GenericResource(properties=properties, tags=tags)
        resource = wait(
            self.client.resources.begin_update(
                *args, api_version=api_version, parameters=parameters
            ),
            f"update of {resource_type} {name}",
        )
        return resource_record(resource, properties=True)

    def delete_resource(
        self, resource_group, name, resource_type, parent=None, api_version=None
    ):
        """Deletes a resource."""
        args = self._resource_args(resource_group, name, resource_type, parent)
        api_version = api_version or self.api_version(resource_type)
        wait(
            self.client.resources.begin_delete(*args, api_version=api_version),
            f"deletion of {resource_type} {name}",
        )

    def api_version(self, resource_type):
        """Returns the newest API version of a resource type.

        Stable versions are preferred over preview versions. Raises
        `azcmd.clients.UnknownResourceTypeError` if the provider does not
        register the type.
        """
        namespace, _, type_name = resource_type.partition("/")
        provider = self.client.providers.get(namespace)

        for rt in provider.resource_types or []:
            if rt.resource_type.lower() != type_name.lower():
                continue
            versions = sorted(rt.api_versions or [], reverse=True)
            stable = [v for v in versions if "preview" not in v.lower()]
            if stable or versions:
                return (stable or versions)[0]

        raise UnknownResourceTypeError(resource_type)

    @staticmethod
    def _resource_args(resource_group, name, resource_type, parent):
        namespace, _, type_name = resource_type.partition("/")
        if not namespace or not type_name:
            raise ValueError(
                f"Resource type must be fully qualified, e.g. Microsoft.Web/sites: {resource_type}"
            )

        # Nested types such as Microsoft.Sql/servers/databases name the child
        # type only; the parent path carries the rest.
        if "/" in type_name:
            type_name = type_name.rsplit("/", 1)[1]
        return (resource_group, namespace, parent or "", type_name, name)

    # Deployments

    def execute_deployment(
        self, resource_group, spec, progress=None, poll_interval=2
    ):
        """Validates, submits, and waits for a template deployment.

        Returns the deployment record, which includes the outputs of the
        deployment. `progress` is called with a message each time one of the
        deployment's operations changes status.
        """
        name = spec.deployment_name()
        properties = spec.properties()

        errors = self._validate(resource_group, name, properties)
        if errors:
            raise DeploymentValidationError(format_validation_errors(errors))

        LOG.info("starting deployment %s in %s", name, resource_group)
        self.client.deployments.begin_create_or_update(
            resource_group, name, Deployment(properties=properties)
        )

        deployment = self._watch_deployment(
            resource_group, name, progress, poll_interval
        )
        return deployment_record(deployment)

    def validate_template(self, resource_group, spec):
        """Returns the validation errors of a deployment, empty if valid.

        Each error is a record with `code`, `message`, and `target` keys.
        """
        return self._validate(
            resource_group, spec.deployment_name(), spec.properties()
        )

    def _validate(self, resource_group, name, properties):
        try:
            result = self.client.deployments.begin_validate(
                resource_group, name, Deployment(properties=properties)
            ).result()
            error = getattr(result, "error", None)
        except HttpResponseError as e:
            error = e.error
            if error is None:
                raise

        if not error:
            return []

        details = getattr(error, "details", None) or [error]
        return [
            {
                "code": d.code,
                "message": parse_error_message(d.message),
                "target": getattr(d, "target", None),
            }
            for d in details
        ]

    def _watch_deployment(self, resource_group, name, progress, poll_interval):
        location = self._get_resource_group(resource_group).location
        seen = {}

        while True:
            deployment = self.client.deployments.get(resource_group, name)
            self._report_operations(resource_group, name, location, seen, progress)

            state = value_of(deployment.properties.provisioning_state)
            if state in TERMINAL_STATES:
                LOG.info("deployment %s finished: %s", name, state)
                return deployment

            time.sleep(poll_interval)

    def _report_operations(self, resource_group, name, location, seen, progress):
        operations = get_paginated_resources(
            self.client.deployment_operations.list,
            resource_group_name=resource_group,
            deployment_name=name,
        )

        for op in operations:
            props = op.properties
            state = value_of(props.provisioning_state)
            if seen.get(op.operation_id) == state:
                continue
            seen[op.operation_id] = state

            target = props.target_resource
            rtype = target.resource_type if target else "unknown"
            rname = target.resource_name if target else "unknown"

            if state == "Failed":
                message = (
                    f"Resource {rtype} '{rname}' in location '{location}' "
                    f"failed with message '{_status_message(props.status_message)}'"
                )
                LOG.error(message)
            else:
                message = (
                    f"Resource {rtype} '{rname}' provisioning status "
                    f"in location '{location}' is {state}"
                )
                LOG.info(message)

            if progress:
                progress(message)

    def filter_deployments(
        self, resource_group, name=None, include_states=None, exclude_states=None
    ):
        """Returns the deployments of a resource group.

        `include_states` and `exclude_states` are lists of provisioning states
        compared without regard to case.
        """
        include = {s.lower() for s in include_states or []}
        exclude = {s.lower() for s in exclude_states or []}

        def predicate(d):
            if name and d.name.lower() != name.lower():
                return False
            state = (value_of(d.properties.provisioning_state) or "").lower()
            if include and state not in include:
                return False
            return state not in exclude

        return [
            deployment_record(d)
            for d in get_paginated_resources(
                self.client.deployments.list_by_resource_group,
                predicate,
                resource_group_name=resource_group,
            )
        ]

    def cancel_deployment(self, resource_group, name=None):
        """Cancels a running deployment and returns its record.

        If `name` is not provided, there must be exactly one deployment in the
        resource group that has not failed or succeeded.
        """
        running = self.filter_deployments(
            resource_group, name=name, exclude_states=FINISHED_STATES
        )
        if not running:
            raise NoRunningDeploymentError(resource_group, name)
        if len(running) > 1:
            raise AmbiguousDeploymentError(
                resource_group, [d["name"] for d in running]
            )

        deployment = running[0]
        LOG.info("canceling deployment %s in %s", deployment["name"], resource_group)
        self.client.deployments.cancel(resource_group, deployment["name"])
        return deployment

    # Locations

    def get_locations(self, resource_types=None):
        """Returns the locations where each provider resource type is available.

        `resource_types` is an optional list of fully qualified types.
        """
        wanted = {t.lower() for t in resource_types or []}
        records = []
        for provider in get_paginated_resources(self.client.providers.list):
            for rt in provider.resource_types or []:
                full_type = f"{provider.namespace}/{rt.resource_type}"
                if wanted and full_type.lower() not in wanted:
                    continue
                records.append(
                    {"resource_type": full_type, "locations": list(rt.locations or [])}
                )
        return records


def format_validation_errors(errors):
    """Returns validation error records as numbered lines of text."""
    return [
        f"Error {n}: Code={e['code']}; Message={e['message']}"
        for n, e in enumerate(errors, 1)
    ]


def _status_message(status_message):
    if isinstance(status_message, dict):
        return parse_error_message(json.dumps(status_message))
    return parse_error_message(str(status_message))


def resource_group_record(rg):
    props = rg.properties
    return {
        "name": rg.name,
        "location": rg.location,
        "provisioning_state": props.provisioning_state if props else None,
        "tags": rg.tags or {},
        "id": rg.id,
    }


def resource_record(r, properties=False):
    record = {
        "name": r.name,
        "resource_group": resource_group_of(r.id),
        "resource_type": r.type,
        "location": r.location,
        "tags": r.tags or {},
        "id": r.id,
    }
    if properties:
        record["properties"] = r.properties or {}
    return record


def deployment_record(d):
    props = d.properties
    return {
        "name": d.name,
        "resource_group": resource_group_of(d.id),
        "provisioning_state": value_of(props.provisioning_state),
        "timestamp": props.timestamp,
        "mode": value_of(props.mode),
        "correlation_id": props.correlation_id,
        "parameters": props.parameters or {},
        "outputs": props.outputs or {},
    }
