#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

from unittest.mock import MagicMock

import pytest

from azcmd.paging import (
    InvalidContinuationTokenError,
    fetch_all,
    get_paginated_resources,
    sdk_page_fetcher,
    skip_token,
)


def make_fetcher(pages):
    """Returns a page function over `pages` and the list of tokens it saw."""
    seen = []

    def fetch_page(token):
        seen.append(token)
        index = 0 if token is None else int(token)
        next_token = str(index + 1) if index + 1 < len(pages) else None
        return pages[index], next_token

    return fetch_page, seen


def test_fetch_all_concatenates_pages_in_order():
    fetch_page, seen = make_fetcher([[1, 2], [3], [4, 5, 6]])
    assert fetch_all(fetch_page) == [1, 2, 3, 4, 5, 6]
    assert seen == [None, "1", "2"]


def test_fetch_all_single_page():
    fetch_page, seen = make_fetcher([["a", "b"]])
    assert fetch_all(fetch_page) == ["a", "b"]
    assert seen == [None]


def test_fetch_all_empty_first_page():
    fetch_page, _ = make_fetcher([[]])
    assert fetch_all(fetch_page) == []


@pytest.mark.parametrize("last_token", [None, ""])
def test_fetch_all_stops_on_absent_or_empty_token(last_token):
    calls = []

    def fetch_page(token):
        calls.append(token)
        if token is None:
            return ["first"], "next"
        return ["second"], last_token

    assert fetch_all(fetch_page) == ["first", "second"]
    assert calls == [None, "next"]


def test_fetch_all_keeps_empty_intermediate_pages_going():
    fetch_page, seen = make_fetcher([[1], [], [2]])
    assert fetch_all(fetch_page) == [1, 2]
    assert len(seen) == 3


def test_fetch_all_applies_predicate_after_all_pages():
    fetch_page, seen = make_fetcher([[1, 2, 3], [4, 5, 6]])
    assert fetch_all(fetch_page, lambda i: i % 2 == 0) == [2, 4, 6]
    assert len(seen) == 2


def test_fetch_all_propagates_errors_without_partial_result():
    def fetch_page(token):
        if token is None:
            return [1, 2], "next"
        raise RuntimeError("service unavailable")

    with pytest.raises(RuntimeError, match="service unavailable"):
        fetch_all(fetch_page)


def test_sdk_page_fetcher_follows_continuation_tokens(paged):
    listing = paged(["rg1", "rg2"], ["rg3"])
    list_method = MagicMock(return_value=listing)

    fetch_page = sdk_page_fetcher(list_method, "arg", top=10)
    assert fetch_all(fetch_page) == ["rg1", "rg2", "rg3"]

    assert listing.tokens == [None, "https://management.azure.com/next?$skiptoken=1"]
    assert list_method.call_count == 2
    list_method.assert_called_with("arg", top=10)


def test_sdk_page_fetcher_with_empty_skip_token_in_next_link():
    next_link = "https://management.azure.com/next?$skiptoken=&page=2"
    pages = {None: (["a"], next_link), next_link: (["b"], None)}

    class Pager:
        def __init__(self, token):
            items, self.continuation_token = pages[token]
            self._pages = iter([items])

        def __next__(self):
            return next(self._pages)

    def by_page(continuation_token=None):
        return Pager(continuation_token)

    list_method = MagicMock(return_value=MagicMock(by_page=by_page))
    assert fetch_all(sdk_page_fetcher(list_method)) == ["a", "b"]


def test_sdk_page_fetcher_with_no_pages(paged):
    fetch_page = sdk_page_fetcher(MagicMock(return_value=paged()))
    assert fetch_page(None) == ([], None)


def test_get_paginated_resources_passes_kwargs_and_filters(paged):
    list_method = MagicMock(return_value=paged(["web-1", "db-1"], ["web-2"]))

    result = get_paginated_resources(
        list_method, lambda n: n.startswith("web"), resource_group_name="app-rg"
    )

    assert result == ["web-1", "web-2"]
    list_method.assert_called_with(resource_group_name="app-rg")


def test_get_paginated_resources_without_predicate(paged):
    list_method = MagicMock(return_value=paged([1], [2], [3]))
    assert get_paginated_resources(list_method) == [1, 2, 3]


def test_skip_token():
    link = (
        "https://management.azure.com/subscriptions/x/resourcegroups"
        "?api-version=2021-04-01&$skiptoken=abc123"
    )
    assert skip_token(link) == "abc123"


@pytest.mark.parametrize(
    "link",
    [
        None,
        "",
        "https://management.azure.com/subscriptions?api-version=2020-01-01",
        "https://management.azure.com/subscriptions?$skiptoken=",
    ],
)
def test_skip_token_invalid(link):
    with pytest.raises(InvalidContinuationTokenError) as e:
        skip_token(link)
    assert e.value.next_link == link


def test_fetch_all_is_repeatable_on_stateless_source():
    fetch_page, seen = make_fetcher([[1, 2], [3]])

    first = fetch_all(fetch_page)
    second = fetch_all(fetch_page)

    assert first == second == [1, 2, 3]
    assert seen == [None, "1", None, "1"]


def test_get_paginated_resources_is_repeatable(paged):
    listing = paged(["rg1"], ["rg2"])
    list_method = MagicMock(return_value=listing)

    assert get_paginated_resources(list_method) == ["rg1", "rg2"]
    assert get_paginated_resources(list_method) == ["rg1", "rg2"]

    next_link = "https://management.azure.com/next?$skiptoken=1"
    assert listing.tokens == [None, next_link, None, next_link]


def test_get_paginated_resources_passes_positional_args(paged):
    list_method = MagicMock(return_value=paged(["db-1", "db-2"]))

    result = get_paginated_resources(
        list_method, lambda n: n.endswith("2"), "sql-rg", "sql-1"
    )

    assert result == ["db-2"]
    list_method.assert_called_with("sql-rg", "sql-1")
