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

from azcmd.subload import (
    AzureSubscriptionLoader,
    IdentitySubscriptionLoader,
    InvalidFormatTemplateError,
    MetaSubscriptionLoader,
    SubscriptionsNotFoundError,
    URLSubscriptionLoader,
)

PROD = "00000000-0000-0000-0000-000000000000"
DEV = "11111111-1111-1111-1111-111111111111"
QA = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def subs():
    return [
        {"id": PROD, "name": "sub-retail-prod", "env": "prod", "state": "Enabled"},
        {"id": DEV, "name": "sub-retail-dev", "env": "dev", "state": "Enabled"},
        {"id": QA, "name": "sub-retail-qa", "env": "qa", "state": "Disabled"},
    ]


def ids(subscriptions):
    return [s.id for s in subscriptions]


def test_identity_loader_preserves_order_and_removes_duplicates():
    loader = IdentitySubscriptionLoader()
    result = loader.subscriptions([DEV, PROD, DEV.upper()])
    assert ids(result) == [DEV, PROD]
    assert str(result[0]) == DEV
    assert loader.attributes() == {}


def test_identity_loader_rejects_filters():
    loader = IdentitySubscriptionLoader()
    with pytest.raises(AttributeError):
        loader.subscriptions([PROD], include={"env": ["prod"]})


def test_meta_loader_all(subs):
    loader = MetaSubscriptionLoader(subs)
    assert ids(loader.subscriptions()) == [PROD, DEV, QA]


def test_meta_loader_select_by_id_or_name(subs):
    loader = MetaSubscriptionLoader(subs)
    result = loader.subscriptions(["SUB-RETAIL-QA", PROD.upper(), "sub-retail-qa"])
    assert ids(result) == [QA, PROD]


def test_meta_loader_missing_subscriptions(subs):
    loader = MetaSubscriptionLoader(subs)
    with pytest.raises(SubscriptionsNotFoundError) as e:
        loader.subscriptions([PROD, "sub-missing", "33333333"])
    assert e.value.missing == ["sub-missing", "33333333"]


@pytest.mark.parametrize(
    "include, exclude, expected",
    [
        ({"env": ["prod"]}, None, [PROD]),
        ({"env": ["prod", "dev"]}, None, [PROD, DEV]),
        ({"env": ["prod", "dev"], "state": ["Enabled"]}, None, [PROD, DEV]),
        (None, {"state": ["Disabled"]}, [PROD, DEV]),
        ({"state": ["Enabled"]}, {"env": ["dev"]}, [PROD]),
        ({"env": ["staging"]}, None, []),
    ],
)
def test_meta_loader_filters(subs, include, exclude, expected):
    loader = MetaSubscriptionLoader(subs)
    assert ids(loader.subscriptions(include=include, exclude=exclude)) == expected


def test_meta_loader_unknown_filter_attribute(subs):
    loader = MetaSubscriptionLoader(subs)
    with pytest.raises(AttributeError, match="bu"):
        loader.subscriptions(include={"bu": ["retail"]})


def test_meta_loader_attributes(subs):
    attrs = MetaSubscriptionLoader(subs).attributes()
    assert attrs["env"] == {"prod", "dev", "qa"}
    assert attrs["state"] == {"Enabled", "Disabled"}


def test_meta_loader_missing_attributes_are_none():
    loader = MetaSubscriptionLoader([{"id": PROD, "owner": "team-a"}, {"id": DEV}])
    result = loader.subscriptions([DEV])
    assert result[0].owner is None


def test_meta_loader_munges_attribute_names():
    loader = MetaSubscriptionLoader(
        [{"id": PROD, "cost center": "42", "2fa": True, "class": "gold"}]
    )
    sub = loader.subscriptions()[0]
    assert sub.cost_center == "42"
    assert sub._2fa is True  # pylint: disable=protected-access
    assert sub.class_ == "gold"


@pytest.mark.parametrize(
    "bad",
    [
        {"Subscriptions": []},
        [{"name": "no-id"}],
        [{"id": 42}],
    ],
)
def test_meta_loader_invalid_input(bad):
    with pytest.raises((TypeError, ValueError)):
        MetaSubscriptionLoader(bad)


def test_meta_loader_str_template(subs):
    loader = MetaSubscriptionLoader(subs, str_template="{name}/{env}")
    assert str(loader.subscriptions([PROD])[0]) == "sub-retail-prod/prod"


def test_meta_loader_invalid_str_template(subs):
    with pytest.raises(InvalidFormatTemplateError) as e:
        MetaSubscriptionLoader(subs, str_template="{name}-{bu}")
    assert e.value.unknown_attrs == {"bu"}


def test_subscription_objects(subs):
    sub = MetaSubscriptionLoader(subs).subscriptions([PROD])[0]
    assert sub.env == "prod"
    assert sub == MetaSubscriptionLoader(subs).subscriptions([PROD])[0]
    assert {sub: 1}[sub] == 1
    assert "sub-retail-prod" in repr(sub)
    with pytest.raises(AttributeError):
        sub.missing  # pylint: disable=pointless-statement


def sdk_subscription(sub_id, name, state="Enabled"):
    return SimpleNamespace(
        subscription_id=sub_id,
        display_name=name,
        state=SimpleNamespace(value=state),
        tenant_id="tenant-1",
    )


@pytest.fixture
def subscription_client(paged):
    client = MagicMock()
    client.subscriptions.list.return_value = paged(
        [sdk_subscription(PROD, "sub-retail-prod")],
        [sdk_subscription(DEV, "sub-hr-dev", "Disabled"), sdk_subscription(QA, "legacy")],
    )
    return client


def test_azure_loader_follows_pages(subscription_client):
    loader = AzureSubscriptionLoader(subscription_client=subscription_client)
    result = loader.subscriptions()
    assert ids(result) == [PROD, DEV, QA]
    assert result[1].state == "Disabled"
    assert result[1].tenant_id == "tenant-1"


def test_azure_loader_name_regexp(subscription_client):
    loader = AzureSubscriptionLoader(
        name_regexp=r"^sub-(?P<bu>[^-]+)-(?P<env>.+)$",
        subscription_client=subscription_client,
    )
    assert ids(loader.subscriptions(include={"bu": ["retail"]})) == [PROD]
    assert loader.subscriptions([QA])[0].env is None


@pytest.mark.parametrize("regexp", [r"^sub-(.+)$", r"^sub-(?P<bu"])
def test_azure_loader_invalid_name_regexp(subscription_client, regexp):
    with pytest.raises(ValueError):
        AzureSubscriptionLoader(
            name_regexp=regexp, subscription_client=subscription_client
        )


def test_azure_loader_caches_list(subscription_client, tmp_path):
    cache_path = tmp_path / "subs.json"
    AzureSubscriptionLoader(
        subscription_client=subscription_client, cache_path=cache_path, max_age=300
    )
    cached = json.loads(cache_path.read_text())
    assert [s["id"] for s in cached] == [PROD, DEV, QA]

    subscription_client.subscriptions.list.reset_mock()
    loader = AzureSubscriptionLoader(
        subscription_client=subscription_client, cache_path=cache_path, max_age=300
    )
    assert ids(loader.subscriptions()) == [PROD, DEV, QA]
    subscription_client.subscriptions.list.assert_not_called()


def test_url_loader_json(tmp_path, subs):
    doc = tmp_path / "subs.json"
    doc.write_text(json.dumps({"Subscriptions": subs}))

    loader = URLSubscriptionLoader(doc.as_uri(), path=["Subscriptions"])
    assert ids(loader.subscriptions(include={"env": ["qa"]})) == [QA]


def test_url_loader_yaml(tmp_path):
    doc = tmp_path / "subs.yaml"
    doc.write_text(
        f"- id: '{PROD}'\n  name: sub-retail-prod\n  env: prod\n"
        f"- id: '{DEV}'\n  name: sub-retail-dev\n  env: dev\n"
    )

    loader = URLSubscriptionLoader(doc.as_uri(), fmt="yaml")
    assert ids(loader.subscriptions(["sub-retail-dev"])) == [DEV]


def test_url_loader_bad_path(tmp_path, subs):
    doc = tmp_path / "subs.json"
    doc.write_text(json.dumps({"Subscriptions": subs}))
    with pytest.raises(ValueError, match="Accounts"):
        URLSubscriptionLoader(doc.as_uri(), path=["Accounts"])


def test_url_loader_unsupported_format():
    with pytest.raises(ValueError):
        URLSubscriptionLoader("file:///dev/null", fmt="csv")
