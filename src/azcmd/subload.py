#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Loads subscription objects and metadata for those subscriptions.

## Overview

A `SubscriptionLoader` builds the objects representing the subscriptions a
cmdlet is executed against and attaches metadata to them as attributes. The CLI
passes those objects to `azcmd.runner.SubscriptionRunner.run`, which hands each
of them to `azcmd.runner.Cmdlet.execute`.

`IdentitySubscriptionLoader`
:  Builds subscription objects for the IDs given on the command line. No
metadata other than `id` is available and filters cannot be used.

`MetaSubscriptionLoader`
:  Builds subscription objects from a list of dicts of metadata. Subscriptions
can be selected by ID or by name and filtered by any of their attributes.

`AzureSubscriptionLoader`
:  A `MetaSubscriptionLoader` whose dicts come from the Azure subscriptions API.
The list can be cached on disk to avoid a round trip on every invocation.

`URLSubscriptionLoader`
:  A `MetaSubscriptionLoader` whose dicts come from a JSON or YAML document
retrieved from a URL, such as an inventory maintained by a platform team.

Two exceptions are defined. `SubscriptionsNotFoundError` is raised when an ID
or name requested explicitly does not exist. `InvalidFormatTemplateError` is
raised when the string template refers to unknown attributes.
"""

import itertools
import keyword
import logging
import re
from collections import defaultdict

import requests
import yaml
from azure.mgmt.resource import SubscriptionClient
from requests_file import FileAdapter

from azcmd.cache import PersistentExpiringValue
from azcmd.paging import fetch_all, sdk_page_fetcher

LOG = logging.getLogger(__name__)


class SubscriptionLoader:
    """Abstract base class to load objects representing subscriptions.

    Subclasses must provide implementations for `attributes` and
    `subscriptions`. Every object returned by `subscriptions` must have an `id`
    attribute holding the subscription GUID.
    """

    def attributes(self):
        """Returns a dict of all metadata attribute names and values."""
        raise NotImplementedError

    def subscriptions(self, sub_ids=None, include=None, exclude=None):
        """Returns a list of subscription objects.

        `sub_ids` limits the list to the specified subscription IDs or names.
        `include` and `exclude` are dicts of attribute names to lists of values
        used to filter the subscriptions by metadata.
        """
        raise NotImplementedError


class IdentitySubscriptionLoader(SubscriptionLoader):
    """A `SubscriptionLoader` that does not consult any external source.

    The subscriptions returned are exactly those requested by ID, without
    duplicates and in the order first requested. As there is no metadata, the
    use of filters raises an `AttributeError`.
    """

    def __init__(self, str_template="{id}"):
        self.Subscription = _make_subscription_class(str_template)

    def attributes(self):
        return {}

    def subscriptions(self, sub_ids=None, include=None, exclude=None):
        if include or exclude:
            raise AttributeError("Cannot use filters as no attributes are defined")

        seen = set()
        subs = []
        for sub_id in sub_ids or []:
            if sub_id.lower() in seen:
                continue
            seen.add(sub_id.lower())
            subs.append(self.Subscription({"id": sub_id}))
        return subs


class MetaSubscriptionLoader(SubscriptionLoader):
    """A `SubscriptionLoader` that builds subscriptions from dicts of metadata.

    `subs` is a list of dicts, each containing an `id` key and any other
    metadata associated with the subscription:

        subs = [
            {'id': '00000000-...', 'name': 'sub-retail-prod', 'state': 'Enabled'},
            {'id': '11111111-...', 'name': 'sub-retail-dev', 'state': 'Disabled'},
        ]
        loader = MetaSubscriptionLoader(subs)

        sub = loader.subscriptions(['sub-retail-prod'])[0]
        assert sub.state == 'Enabled'

    Keys that are not valid Python identifiers are munged into valid attribute
    names. A subscription missing a key present in others has that attribute
    set to `None`.

    The `str()` of a subscription object is generated from `str_template`,
    which defaults to `'{id}'`. For example, `'{name}'` or `'{id}/{name}'`. If
    the template refers to an unknown attribute, `InvalidFormatTemplateError`
    is raised.
    """

    def __init__(self, subs, str_template=None):
        self.str_template = str_template or "{id}"
        self.Subscription = _make_subscription_class(self.str_template)
        self.subs, self.attrs = self._parse(subs)
        LOG.info(
            "loaded %d subscriptions with the metadata attributes: %s",
            len(self.subs),
            self.attrs,
        )

    def attributes(self):
        """Returns a dict of attribute names to the set of values they take.

            attrs = loader.attributes()
            assert attrs['state'] == {'Enabled', 'Disabled'}
        """
        d = defaultdict(set)
        for sub in self.subs:
            for attr, value in sub.items():
                d[attr].add(value)
        return d

    def subscriptions(self, sub_ids=None, include=None, exclude=None):
        """Returns a list of subscription objects.

        Without arguments, all subscriptions are returned. `sub_ids` may list
        subscription IDs or names, both matched case-insensitively, to limit the
        result. If any of them cannot be found, `SubscriptionsNotFoundError` is
        raised.

        The `include` filter is applied next, followed by the `exclude` filter.
        When a filter has multiple keys, each key must match. A key matches if
        any of its values is equal to the attribute:

            include = {'env': ['prod']}
            exclude = {'state': ['Disabled', 'Warned']}

        A filter naming an unknown attribute raises `AttributeError`.
        """
        subs = self.subs
        include = {} if include is None else include
        exclude = {} if exclude is None else exclude

        if sub_ids:
            subs = self._select(sub_ids)

        for attr in itertools.chain(include.keys(), exclude.keys()):
            if attr not in self.attrs:
                raise AttributeError(f"Invalid attribute '{attr}' in filter")

        return [self.Subscription(s) for s in subs if _filter(s, include, exclude)]

    def _select(self, sub_ids):
        """Returns the subscription dicts matching `sub_ids` by ID or by name."""
        selected, missing, seen = [], [], set()
        for requested in sub_ids:
            key = requested.lower()
            matches = [
                s
                for s in self.subs
                if s["id"].lower() == key or str(s.get("name") or "").lower() == key
            ]
            if not matches:
                missing.append(requested)
            for sub in matches:
                if sub["id"] not in seen:
                    seen.add(sub["id"])
                    selected.append(sub)

        if missing:
            raise SubscriptionsNotFoundError(missing)
        return selected

    def _parse(self, subs):
        if not isinstance(subs, list):
            raise TypeError(f"Subscription list must be a list of dicts: {subs}")

        for sub in subs:
            if not isinstance(sub.get("id"), str):
                raise ValueError(f"No 'id' string attribute in subscription '{sub}'")
            _convert_keys_to_valid_attribute_names(sub)

        attrs = set()
        for sub in subs:
            attrs.update(sub.keys())
        for sub in subs:
            for key in attrs.difference(sub.keys()):
                sub[key] = None

        tokens = re.findall(r"\{(\w+)(?::[^}]+)?\}", self.str_template, re.ASCII)
        unknown = set(tokens).difference(attrs)
        if unknown:
            raise InvalidFormatTemplateError(unknown, sorted(attrs))

        return subs, attrs


class AzureSubscriptionLoader(MetaSubscriptionLoader):
    """Loads the subscriptions visible to `credential` from Azure.

    The following metadata is attached to each subscription: `id`, `name`,
    `state`, and `tenant_id`. In addition, named capture groups of the
    `name_regexp` pattern applied to the subscription name become attributes.
    For example, `^sub-(?P<bu>[^-]+)-(?P<env>.+)` adds `bu` and `env`. If a
    name does not match, those attributes are set to `None`.

    When `max_age` is greater than 0, the list retrieved from Azure is cached
    as JSON at `cache_path` for `max_age` seconds.

    `subscription_client` can be provided to use an existing
    `azure.mgmt.resource.SubscriptionClient`.
    """

    def __init__(
        self,
        credential=None,
        name_regexp=None,
        str_template=None,
        cache_path=None,
        max_age=0,
        subscription_client=None,
    ):
        if name_regexp:
            try:
                name_regexp = re.compile(name_regexp)
            except re.error as e:
                raise ValueError(f"Subscription name regexp invalid: {e}") from e
            if not name_regexp.groupindex:
                raise ValueError("Subscription name regexp has no named capture groups")

        client = subscription_client or SubscriptionClient(credential)

        def list_subscriptions():
            fetch_page = sdk_page_fetcher(client.subscriptions.list)
            return [_subscription_record(s) for s in fetch_all(fetch_page)]

        if max_age and cache_path:
            subs = PersistentExpiringValue(list_subscriptions, cache_path, max_age)
            subs = subs.value()
        else:
            subs = list_subscriptions()

        if name_regexp:
            for sub in subs:
                match = name_regexp.search(sub.get("name") or "")
                groups = match.groupdict() if match else {}
                if not match:
                    LOG.info("%s does not match %s", sub.get("name"), name_regexp.pattern)
                for name in name_regexp.groupindex:
                    sub[name] = groups.get(name)

        super().__init__(subs, str_template=str_template)


class URLSubscriptionLoader(MetaSubscriptionLoader):
    """Loads subscriptions and their metadata from a JSON or YAML document.

    The document is retrieved from `url`, which may be a `file://` URL to read
    a local file. `fmt` is either `json` or `yaml`. `path` is a list of keys
    followed into the document to find the list of subscription dicts. Given
    the following YAML at http://example.com/subs.yaml:

        Subscriptions:
          - id: 00000000-0000-0000-0000-000000000000
            name: sub-retail-prod
            env: prod
          - id: 11111111-1111-1111-1111-111111111111
            name: sub-retail-dev
            env: dev

    The loader builds subscriptions with `id`, `name`, and `env` attributes:

        loader = URLSubscriptionLoader(
            'http://example.com/subs.yaml', fmt='yaml', path=['Subscriptions'])
        subs = loader.subscriptions(include={'env': ['prod']})

    When `max_age` is greater than 0, the document is cached as JSON at
    `cache_path` for `max_age` seconds. Set `no_verify` to skip verification of
    the server's TLS certificate.
    """

    def __init__(
        self,
        url,
        fmt="json",
        path=None,
        str_template=None,
        cache_path=None,
        max_age=0,
        no_verify=False,
    ):
        if fmt not in ("json", "yaml"):
            raise ValueError(f"Unsupported subscription document format: {fmt}")
        path = [] if path is None else path

        session = requests.Session()
        session.mount("file://", FileAdapter())

        def load_document():
            LOG.info("loading subscriptions from %s", url)
            r = session.get(url, verify=not no_verify)
            r.raise_for_status()
            return r.json() if fmt == "json" else yaml.safe_load(r.text)

        if max_age and cache_path:
            doc = PersistentExpiringValue(load_document, cache_path, max_age)
            doc = doc.value()
        else:
            doc = load_document()

        for key in path:
            if not isinstance(doc, dict) or key not in doc:
                raise ValueError(f"Key '{key}' not found in subscription document")
            doc = doc[key]

        super().__init__(doc, str_template=str_template)


class AbstractSubscription:
    """Abstract base class used by the loaders to represent a subscription.

    Loaders create a subclass with a class variable `_str_template`, which is
    used by `__str__`. Metadata is stored in the dict `_attrs` and exposed as
    attributes:

        class Subscription(AbstractSubscription):
            _str_template = '{name}'

        sub = Subscription({'id': '0000...', 'name': 'sub-retail-prod'})
        assert sub.name == 'sub-retail-prod'
        assert str(sub) == 'sub-retail-prod'
    """

    _str_template = None
    __slots__ = ("_attrs",)

    def __init__(self, attributes):
        self._attrs = attributes

    def __getattr__(self, name):
        if name == "_attrs" or name.startswith("__") or name not in self._attrs:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )
        return self._attrs[name]

    def __eq__(self, other):
        return self._attrs == other._attrs  # pylint: disable=protected-access

    def __hash__(self):
        return hash(self._attrs["id"])

    def __repr__(self):
        pairs = (f"{k}={repr(v)}" for k, v in self._attrs.items())
        return f'Subscription({", ".join(pairs)})'

    def __str__(self):
        return self._str_template.format(**self._attrs)


class SubscriptionsNotFoundError(Exception):
    """Raised if a requested subscription ID or name was not found.

    The `missing` attribute contains the IDs or names that were not found.
    """

    def __init__(self, missing):
        self.missing = missing
        super().__init__(f'Subscriptions not found: {", ".join(missing)}')


class InvalidFormatTemplateError(Exception):
    """Raised if the string template refers to unknown subscription attributes."""

    def __init__(self, unknown, valid):
        self.unknown_attrs = unknown
        self.valid_attrs = valid

        def quote(attrs):
            return ", ".join(["'" + a + "'" for a in sorted(attrs)])

        super().__init__(
            f"Unknown attributes in format template: {quote(unknown)}. Valid attributes are: {quote(valid)}"
        )


def _make_subscription_class(str_template):
    # A class per loader so different loaders can use different templates.
    cls = type("Subscription", (AbstractSubscription,), {"__slots__": ()})
    cls._str_template = str_template  # pylint: disable=protected-access
    return cls


def _subscription_record(sub):
    state = sub.state
    return {
        "id": sub.subscription_id,
        "name": sub.display_name,
        "state": getattr(state, "value", state),
        "tenant_id": getattr(sub, "tenant_id", None),
    }


def _filter(sub, include, exclude):
    def test(dictionary, default):
        if not dictionary:
            return default
        return all(
            any(sub[attr] == v for v in values) for attr, values in dictionary.items()
        )

    return test(include, True) and not test(exclude, False)


def _convert_keys_to_valid_attribute_names(d):
    """Rename, in place, keys that are not valid Python attribute names."""
    invalid_keys = [k for k in d.keys() if not k.isidentifier() or keyword.iskeyword(k)]
    for key in invalid_keys:
        d[_make_valid_attribute_name(key)] = d.pop(key)


def _make_valid_attribute_name(s):
    """Return a string that is a valid Python attribute name.

    Leading digits are prefixed with underscores, non-alpha numeric characters
    are replaced with underscores, and keywords are appended with an underscore.
    """
    if not s.isidentifier():
        s = re.sub(r"[^0-9a-zA-Z_]", r"_", s)
        s = re.sub(r"^([0-9]+)", r"_\1", s)
    if keyword.iskeyword(s):
        s = s + "_"
    return s
