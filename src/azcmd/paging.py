#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Follows continuation tokens to retrieve complete listings.

## Overview

Azure listing operations return a page of items along with an opaque
continuation token, the `nextLink` of the REST API, that identifies where the
next page begins. A complete collection is obtained by requesting pages until
the service stops returning a token. This module provides `fetch_all`, which
drives that loop for any page function, and `sdk_page_fetcher`, which adapts a
listing operation of an Azure SDK client to the page function contract.

A page function takes a single argument, the continuation token of the page to
fetch (`None` for the first page), and returns a tuple of the items on that page
and the token of the next page:

    def fetch_page(token):
        response = call_the_api(token)
        return response.items, response.next_token

    items = fetch_all(fetch_page)

`fetch_all` concatenates the items of every page in the order the pages were
returned. It stops when the next token is `None` or empty. If the page function
raises an exception, the exception propagates immediately and no partial result
is returned. Retries, if any, are the responsibility of the HTTP pipeline of the
SDK client, not of this module. Nothing is cached between calls.

Filtering that the service cannot do server-side is applied with a `predicate`
only after all pages have been retrieved:

    rgs = get_paginated_resources(
        rmc.resource_groups.list,
        lambda rg: rg.name.lower().startswith("prod"))
"""

import logging
from typing import Callable
from urllib.parse import parse_qs, urlparse

LOG = logging.getLogger(__name__)


def fetch_all(fetch_page, predicate: Callable = None):
    """Returns the items of all pages produced by `fetch_page`.

    `fetch_page` is called with `None` to obtain the first page and then with
    each continuation token returned until the token is absent or empty. It must
    return a tuple of `(items, next_token)`. If `predicate` is provided, it is
    applied to the complete collection and only items for which it returns
    `True` are included.
    """
    items = []
    token = None
    pages = 0

    while True:
        page, token = fetch_page(token)
        pages += 1
        items.extend(page)
        LOG.info("fetched page %d with %d items", pages, len(page))
        if not token:
            break

    if predicate is None:
        return items
    return [i for i in items if predicate(i)]


def sdk_page_fetcher(list_method, *args, **kwargs):
    """Returns a page function for an Azure SDK listing operation.

    `list_method` is a bound method of an SDK operations group, such as
    `client.resource_groups.list`, that returns an `azure.core.paging.ItemPaged`.
    The remaining `args` and `kwargs` are passed to `list_method` each time a
    page is requested. The returned function satisfies the contract expected by
    `fetch_all`.
    """

    def fetch_page(token):
        pager = list_method(*args, **kwargs).by_page(continuation_token=token)
        try:
            page = list(next(pager))
        except StopIteration:
            return [], None

        next_token = pager.continuation_token
        LOG.debug("next page begins at %s", next_token)
        return page, next_token

    return fetch_page


def get_paginated_resources(
    list_method, predicate: Callable = None, *args, **kwargs
):
    """Return the full list of Azure SDK models from a listing operation.

    `list_method` is a bound method of an SDK operations group and `args` and
    `kwargs` are passed to it. `predicate` determines which models are
    included in the returned list. For example, to list the VMs in a resource
    group that are tagged with an owner:

        vms = get_paginated_resources(
            cmc.virtual_machines.list,
            lambda vm: "owner" in (vm.tags or {}),
            resource_group_name="my-rg")
    """
    return fetch_all(sdk_page_fetcher(list_method, *args, **kwargs), predicate)


def skip_token(next_link):
    """Returns the `$skiptoken` query parameter of a next link URL.

    Raises `InvalidContinuationTokenError` if the link does not contain one.
    """
    values = parse_qs(urlparse(next_link or "").query).get("$skiptoken")
    if not values or not values[0]:
        raise InvalidContinuationTokenError(next_link)
    return values[0]


class InvalidContinuationTokenError(Exception):
    """Raised if a continuation token does not contain a skip token."""

    def __init__(self, next_link):
        self.next_link = next_link
        super().__init__(f"Invalid continuation token: {next_link}")
