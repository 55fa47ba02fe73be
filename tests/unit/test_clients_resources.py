#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)

from azcmd.clients import (
    AmbiguousDeploymentError,
    DeploymentValidationError,
    NoRunningDeploymentError,
    ResourceGroupExistsError,
    ResourceGroupNotFoundError,
    UnknownResourceTypeError,
    describe_error,
    odata_literal,
    parse_error_message,
    resource_group_of,
)
from azcmd.clients.resources import (
    DeploymentSpec,
    ResourcesClient,
    format_validation_errors,
)


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def client(sdk):
    return ResourcesClient(sdk)


def make_rg(name, location="eastus"):
    return SimpleNamespace(
        name=name,
        location=location,
        properties=SimpleNamespace(provisioning_state="Succeeded"),
        tags={"env": "dev"},
        id=f"/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/{name}",
    )


def make_resource(resource_id, name, rtype):
    return SimpleNamespace(
        name=name,
        type=rtype,
        location="eastus",
        tags=None,
        id=resource_id("app-rg", rtype, name),
        properties={"sku": "basic"},
    )


def make_deployment(name, state, outputs=None):
    return SimpleNamespace(
        name=name,
        id=(
            "/subscriptions/00000000-0000-0000-0000-000000000000"
            f"/resourceGroups/app-rg/providers/Microsoft.Resources/deployments/{name}"
        ),
        properties=SimpleNamespace(
            provisioning_state=state,
            timestamp=None,
            mode="Incremental",
            correlation_id="abc",
            parameters=None,
            outputs=outputs,
        ),
    )


def make_operation(op_id, state, rname="app-web"):
    return SimpleNamespace(
        operation_id=op_id,
        properties=SimpleNamespace(
            provisioning_state=state,
            target_resource=SimpleNamespace(
                resource_type="Microsoft.Web/sites", resource_name=rname
            ),
            status_message={"error": {"message": "quota exceeded"}},
        ),
    )


# DeploymentSpec


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"template_file": "a.json", "template_uri": "https://example.com/a.json"},
        {"template_file": "a.json", "template": {"resources": []}},
    ],
)
def test_deployment_spec_requires_one_template(kwargs):
    with pytest.raises(ValueError):
        DeploymentSpec(**kwargs)


def test_deployment_name():
    assert DeploymentSpec(name="web", template_file="a.json").deployment_name() == "web"
    assert DeploymentSpec(template_file="dir/webapp.json").deployment_name() == "webapp"

    generated = DeploymentSpec(template={"resources": []}).deployment_name()
    assert generated.startswith("deployment-")


def test_template_parameters_from_standard_file_and_overrides(tmp_path):
    params = tmp_path / "params.json"
    params.write_text(
        json.dumps(
            {
                "$schema": "https://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json#",
                "contentVersion": "1.0.0.0",
                "parameters": {
                    "siteName": {"value": "from-file"},
                    "sku": {"value": "B1"},
                },
            }
        )
    )

    spec = DeploymentSpec(
        template={"resources": []},
        parameters_file=str(params),
        parameters={"siteName": "from-cli"},
    )
    assert spec.template_parameters() == {
        "siteName": {"value": "from-cli"},
        "sku": {"value": "B1"},
    }


def test_template_parameters_from_bare_file(tmp_path):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"sku": {"value": "S1"}}))

    spec = DeploymentSpec(template={"resources": []}, parameters_file=str(params))
    assert spec.template_parameters() == {"sku": {"value": "S1"}}


def test_properties_from_file_and_uri(tmp_path):
    template = tmp_path / "webapp.json"
    template.write_text(json.dumps({"resources": ["site"]}))

    props = DeploymentSpec(template_file=str(template), mode="Complete").properties()
    assert props.template == {"resources": ["site"]}
    assert props.mode == "Complete"

    props = DeploymentSpec(template_uri="https://example.com/t.json").properties()
    assert props.template_link.uri == "https://example.com/t.json"
    assert props.template is None


# Resource groups


def test_create_resource_group_exists(client, sdk):
    sdk.resource_groups.check_existence.return_value = True

    with pytest.raises(ResourceGroupExistsError, match="app-rg"):
        client.create_resource_group("app-rg", "eastus")
    sdk.resource_groups.create_or_update.assert_not_called()


def test_create_resource_group_overwrite(client, sdk):
    sdk.resource_groups.check_existence.return_value = True
    sdk.resource_groups.create_or_update.return_value = make_rg("app-rg")

    record = client.create_resource_group(
        "app-rg", "eastus", tags={"env": "dev"}, overwrite=True
    )

    assert record["name"] == "app-rg"
    assert record["provisioning_state"] == "Succeeded"
    name, group = sdk.resource_groups.create_or_update.call_args[0]
    assert name == "app-rg"
    assert group.location == "eastus"
    assert group.tags == {"env": "dev"}


def test_filter_resource_groups(client, sdk, paged):
    sdk.resource_groups.list.return_value = paged(
        [make_rg("a-rg")], [make_rg("b-rg")]
    )
    assert [r["name"] for r in client.filter_resource_groups()] == ["a-rg", "b-rg"]


def test_filter_resource_groups_by_name_not_found(client, sdk):
    sdk.resource_groups.get.side_effect = ResourceNotFoundError("nope")
    with pytest.raises(ResourceGroupNotFoundError):
        client.filter_resource_groups("missing-rg")


def test_delete_resource_group_not_found(client, sdk):
    sdk.resource_groups.check_existence.return_value = False
    with pytest.raises(ResourceGroupNotFoundError, match="missing-rg"):
        client.delete_resource_group("missing-rg")
    sdk.resource_groups.begin_delete.assert_not_called()


def test_delete_resource_group_waits(client, sdk):
    sdk.resource_groups.check_existence.return_value = True
    client.delete_resource_group("app-rg")
    sdk.resource_groups.begin_delete.return_value.result.assert_called_once()


# Resources


def test_filter_resources_tag_and_type(client, sdk, paged, resource_id):
    sdk.resources.list_by_resource_group.return_value = paged(
        [
            make_resource(resource_id, "app-web", "Microsoft.Web/sites"),
            make_resource(resource_id, "appstore", "Microsoft.Storage/storageAccounts"),
        ]
    )

    result = client.filter_resources(
        "app-rg", resource_type="microsoft.web/sites", tag="env=dev"
    )

    assert [r["name"] for r in result] == ["app-web"]
    assert result[0]["resource_group"] == "app-rg"
    kwargs = sdk.resources.list_by_resource_group.call_args[1]
    assert kwargs["filter"] == "tagName eq 'env' and tagValue eq 'dev'"
    assert kwargs["resource_group_name"] == "app-rg"


def test_filter_resources_type_server_side(client, sdk, paged, resource_id):
    sdk.resources.list.return_value = paged(
        [make_resource(resource_id, "App-Web", "Microsoft.Web/sites")],
        [make_resource(resource_id, "other", "Microsoft.Web/sites")],
    )

    result = client.filter_resources(name="app-web", resource_type="Microsoft.Web/sites")

    assert [r["name"] for r in result] == ["App-Web"]
    assert sdk.resources.list.call_args[1] == {
        "filter": "resourceType eq 'Microsoft.Web/sites'"
    }


def test_filter_resources_quotes_tag_values(client, sdk, paged):
    sdk.resources.list.return_value = paged([])

    client.filter_resources(tag="owner=O'Brien")

    assert sdk.resources.list.call_args[1] == {
        "filter": "tagName eq 'owner' and tagValue eq 'O''Brien'"
    }


def provider(*types):
    return SimpleNamespace(
        namespace="Microsoft.Web",
        resource_types=[
            SimpleNamespace(resource_type=t, api_versions=v, locations=l)
            for t, v, l in types
        ],
    )


def test_api_version_prefers_stable(client, sdk):
    sdk.providers.get.return_value = provider(
        ("sites", ["2021-01-01", "2023-01-01-preview", "2022-03-01"], [])
    )
    assert client.api_version("Microsoft.Web/sites") == "2022-03-01"
    sdk.providers.get.assert_called_once_with("Microsoft.Web")


def test_api_version_preview_only(client, sdk):
    sdk.providers.get.return_value = provider(("sites", ["2023-01-01-preview"], []))
    assert client.api_version("Microsoft.Web/Sites") == "2023-01-01-preview"


def test_api_version_unknown_type(client, sdk):
    sdk.providers.get.return_value = provider(("sites", ["2022-03-01"], []))
    with pytest.raises(UnknownResourceTypeError):
        client.api_version("Microsoft.Web/serverfarms")


def test_get_resource_nested_type(client, sdk, resource_id):
    sdk.resources.get.return_value = make_resource(
        resource_id, "appdb", "Microsoft.Sql/servers/databases"
    )

    record = client.get_resource(
        "app-rg",
        "appdb",
        "Microsoft.Sql/servers/databases",
        parent="servers/app-sql",
        api_version="2021-11-01",
    )

    assert record["properties"] == {"sku": "basic"}
    sdk.resources.get.assert_called_once_with(
        "app-rg",
        "Microsoft.Sql",
        "servers/app-sql",
        "databases",
        "appdb",
        api_version="2021-11-01",
    )


def test_unqualified_resource_type(client):
    with pytest.raises(ValueError, match="fully qualified"):
        client.get_resource("app-rg", "app-web", "sites", api_version="2022-03-01")


def test_create_resource_exists(client, sdk):
    sdk.resources.check_existence.return_value = True
    with pytest.raises(ResourceExistsError, match="--overwrite"):
        client.create_resource(
            "app-rg", "app-web", "Microsoft.Web/sites", "eastus", api_version="1"
        )
    sdk.resources.begin_create_or_update.assert_not_called()


def test_create_resource(client, sdk, resource_id):
    sdk.resources.check_existence.return_value = False
    sdk.resources.begin_create_or_update.return_value.result.return_value = (
        make_resource(resource_id, "app-web", "Microsoft.Web/sites")
    )

    record = client.create_resource(
        "app-rg",
        "app-web",
        "Microsoft.Web/sites",
        "eastus",
        properties={"httpsOnly": True},
        api_version="2022-03-01",
    )

    assert record["name"] == "app-web"
    kwargs = sdk.resources.begin_create_or_update.call_args[1]
    assert kwargs["parameters"].properties == {"httpsOnly": True}
    assert kwargs["parameters"].location == "eastus"


# Deployments


def test_execute_deployment_validation_failure(client, sdk):
    sdk.deployments.begin_validate.return_value.result.return_value = SimpleNamespace(
        error=SimpleNamespace(
            code="InvalidTemplate",
            message="bad",
            details=[
                SimpleNamespace(code="A", message='{"message": "first"}', target=None),
                SimpleNamespace(code="B", message="second", target="sku"),
            ],
        )
    )

    with pytest.raises(DeploymentValidationError) as excinfo:
        client.execute_deployment(
            "app-rg", DeploymentSpec(template={"resources": []}, name="x")
        )

    assert excinfo.value.errors == [
        "Error 1: Code=A; Message=first",
        "Error 2: Code=B; Message=second",
    ]
    sdk.deployments.begin_create_or_update.assert_not_called()


def test_execute_deployment_reports_progress(client, sdk, paged, mocker):
    sleep = mocker.patch("azcmd.clients.resources.time.sleep")
    sdk.deployments.begin_validate.return_value.result.return_value = SimpleNamespace(
        error=None
    )
    sdk.resource_groups.get.return_value = make_rg("app-rg", "westus")
    sdk.deployments.get.side_effect = [
        make_deployment("web", "Running"),
        make_deployment("web", "Succeeded", outputs={"url": {"value": "https://x"}}),
    ]
    sdk.deployment_operations.list.side_effect = [
        paged([make_operation("1", "Running")]),
        paged([make_operation("1", "Succeeded"), make_operation("2", "Failed", "db")]),
    ]

    messages = []
    record = client.execute_deployment(
        "app-rg",
        DeploymentSpec(name="web", template={"resources": []}),
        progress=messages.append,
    )

    assert record["name"] == "web"
    assert record["provisioning_state"] == "Succeeded"
    assert record["outputs"] == {"url": {"value": "https://x"}}
    assert messages == [
        "Resource Microsoft.Web/sites 'app-web' provisioning status in location 'westus' is Running",
        "Resource Microsoft.Web/sites 'app-web' provisioning status in location 'westus' is Succeeded",
        "Resource Microsoft.Web/sites 'db' in location 'westus' failed with message 'quota exceeded'",
    ]
    sleep.assert_called_once_with(2)


def test_validate_template_http_error(client, sdk):
    error = HttpResponseError(message="validation failed")
    error.error = SimpleNamespace(
        code="InvalidTemplate", message="Template is broken", details=None
    )
    sdk.deployments.begin_validate.side_effect = error

    spec = DeploymentSpec(template={"resources": []})
    errors = client.validate_template("app-rg", spec)
    assert errors == [
        {"code": "InvalidTemplate", "message": "Template is broken", "target": None}
    ]


def test_validate_template_valid(client, sdk):
    sdk.deployments.begin_validate.return_value.result.return_value = SimpleNamespace(
        error=None
    )
    spec = DeploymentSpec(template={"resources": []})
    assert client.validate_template("app-rg", spec) == []


def test_filter_deployments_states(client, sdk, paged):
    sdk.deployments.list_by_resource_group.return_value = paged(
        [make_deployment("a", "Succeeded"), make_deployment("b", "Running")],
        [make_deployment("c", "Failed")],
    )

    result = client.filter_deployments("app-rg", include_states=["running", "FAILED"])
    assert [d["name"] for d in result] == ["b", "c"]


def test_cancel_deployment_none_running(client, sdk, paged):
    sdk.deployments.list_by_resource_group.return_value = paged(
        [make_deployment("a", "Succeeded")]
    )
    with pytest.raises(NoRunningDeploymentError):
        client.cancel_deployment("app-rg")


def test_cancel_deployment_ambiguous(client, sdk, paged):
    sdk.deployments.list_by_resource_group.return_value = paged(
        [make_deployment("a", "Running"), make_deployment("b", "Accepted")]
    )
    with pytest.raises(AmbiguousDeploymentError, match="a, b"):
        client.cancel_deployment("app-rg")
    sdk.deployments.cancel.assert_not_called()


def test_cancel_deployment_by_name(client, sdk, paged):
    sdk.deployments.list_by_resource_group.return_value = paged(
        [make_deployment("a", "Running"), make_deployment("b", "Accepted")]
    )
    record = client.cancel_deployment("app-rg", "B")

    assert record["name"] == "b"
    sdk.deployments.cancel.assert_called_once_with("app-rg", "b")


def test_get_locations(client, sdk, paged):
    sdk.providers.list.return_value = paged(
        [
            provider(
                ("sites", [], ["East US", "West US"]),
                ("serverfarms", [], ["East US"]),
            )
        ]
    )

    assert client.get_locations(["microsoft.web/sites"]) == [
        {"resource_type": "Microsoft.Web/sites", "locations": ["East US", "West US"]}
    ]
    assert len(client.get_locations()) == 2


# Helpers


def test_format_validation_errors():
    assert format_validation_errors([{"code": "X", "message": "broken"}]) == [
        "Error 1: Code=X; Message=broken"
    ]


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"message": "top"}', "top"),
        ('{"error": {"code": "X", "message": "nested"}}', "nested"),
        ('{"other": 1}', '{"other": 1}'),
        ("[1, 2]", "[1, 2]"),
        ("plain text", "plain text"),
    ],
)
def test_parse_error_message(text, expected):
    assert parse_error_message(text) == expected


def test_describe_error():
    error = HttpResponseError(message="failed")
    error.error = SimpleNamespace(code="AuthorizationFailed", message="not allowed")
    assert describe_error(error) == "AuthorizationFailed: not allowed"

    assert describe_error(HttpResponseError(message='{"message": "busy"}')) == "busy"
    assert describe_error(ValueError("bad value")) == "bad value"


def test_resource_group_of(resource_id):
    assert resource_group_of(resource_id("App-RG", "Microsoft.Web/sites", "x")) == "App-RG"
    assert resource_group_of("/subscriptions/abc") is None
    assert resource_group_of(None) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("dev", "'dev'"),
        ("O'Brien", "'O''Brien'"),
        ("''", "''''''"),
        ("", "''"),
    ],
)
def test_odata_literal(value, expected):
    assert odata_literal(value) == expected
