#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import pytest


class FakePageIterator:
    """Mimics the page iterator returned by `ItemPaged.by_page`."""

    def __init__(self, pages, start):
        self._pages = pages
        self._index = start
        self.continuation_token = None

    def __iter__(self):
        return self

    def __next__(self):
        if self._index >= len(self._pages):
            raise StopIteration
        page = self._pages[self._index]
        self._index += 1
        has_more = self._index < len(self._pages)
        self.continuation_token = (
            f"https://management.azure.com/next?$skiptoken={self._index}"
            if has_more
            else None
        )
        return iter(page)


class FakeItemPaged:
    """Mimics the `azure.core.paging.ItemPaged` returned by SDK list methods."""

    def __init__(self, pages):
        self.pages = pages
        self.tokens = []

    def by_page(self, continuation_token=None):
        self.tokens.append(continuation_token)
        start = int(continuation_token.rsplit("=", 1)[1]) if continuation_token else 0
        return FakePageIterator(self.pages, start)


@pytest.fixture
def paged():
    """Returns a factory of fake SDK listings, one argument per page."""

    def make(*pages):
        return FakeItemPaged([list(p) for p in pages])

    return make


@pytest.fixture
def sub():
    """Returns a subscription object like those built by the loaders."""

    class Subscription:
        id = "00000000-0000-0000-0000-000000000000"
        name = "sub-dev"

        def __str__(self):
            return self.id

    return Subscription()


def arm_id(resource_group, provider_type, name):
    return (
        "/subscriptions/00000000-0000-0000-0000-000000000000"
        f"/resourceGroups/{resource_group}/providers/{provider_type}/{name}"
    )


@pytest.fixture
def resource_id():
    """Returns a function that builds ARM resource IDs."""
    return arm_id
