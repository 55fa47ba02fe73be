#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import json
from datetime import timedelta

from freezegun import freeze_time

from azcmd import cache


class SubscriptionLister:
    """Stands in for a call to the subscriptions API, counting its calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return [{"id": f"sub-{self.calls}", "state": "Enabled"}]


def test_expiring_value_is_lazy():
    lister = SubscriptionLister()
    ev = cache.ExpiringValue(lister, max_age=300)
    assert lister.calls == 0
    ev.value()
    assert lister.calls == 1


def test_expiring_value_caching():
    lister = SubscriptionLister()
    with freeze_time() as frozen_datetime:
        ev = cache.ExpiringValue(lister, max_age=300)
        initial_value = ev.value()

        frozen_datetime.tick(delta=timedelta(seconds=299))
        assert ev.value() == initial_value
        assert lister.calls == 1

        frozen_datetime.tick(delta=timedelta(seconds=1))
        second_value = ev.value()
        assert second_value != initial_value
        assert lister.calls == 2


def test_expiring_value_refresh():
    lister = SubscriptionLister()
    ev = cache.ExpiringValue(lister, max_age=300)
    ev.value()
    refreshed = ev.value(refresh=True)
    assert refreshed == [{"id": "sub-2", "state": "Enabled"}]
    assert ev.value() == refreshed
    assert lister.calls == 2


def test_expiring_value_no_caching():
    lister = SubscriptionLister()
    ev = cache.ExpiringValue(lister, max_age=0)
    ev.value()
    ev.value()
    assert lister.calls == 2


def test_persistent_expiring_value_caching(tmp_path):
    lister = SubscriptionLister()
    cache_file = tmp_path / "azcmd" / "subscriptions.json"

    with freeze_time() as frozen_datetime:
        ev = cache.PersistentExpiringValue(lister, cache_file, max_age=300)
        initial_value = ev.value()
        assert json.loads(cache_file.read_text()) == initial_value

        frozen_datetime.tick(delta=timedelta(seconds=60))
        assert ev.value() == initial_value
        assert lister.calls == 1

        frozen_datetime.tick(delta=timedelta(seconds=241))
        assert ev.value() != initial_value
        assert lister.calls == 2


def test_persistent_expiring_value_shared_between_instances(tmp_path):
    cache_file = tmp_path / "subscriptions.json"
    first = SubscriptionLister()
    cache.PersistentExpiringValue(first, cache_file, max_age=300).value()

    second = SubscriptionLister()
    value = cache.PersistentExpiringValue(second, str(cache_file), max_age=300).value()

    assert value == [{"id": "sub-1", "state": "Enabled"}]
    assert second.calls == 0


def test_persistent_expiring_value_no_caching(tmp_path):
    lister = SubscriptionLister()
    cache_file = tmp_path / "subscriptions.json"

    ev = cache.PersistentExpiringValue(lister, cache_file, max_age=0)
    ev.value()
    ev.value()

    assert not cache_file.exists()
    assert lister.calls == 2
    assert not cache_file.with_suffix(".tmp").exists()
