#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides the ability to cache single values.

## Overview

Listing every subscription visible to a user requires a round trip to Azure on
every invocation of the CLI. The `azcmd.subload.AzureSubscriptionLoader` avoids
that by caching the list with the classes in this module.

`AbstractExpiringValue` lazily loads a value that is cached for a finite amount
of time. Subclasses decide where the value is kept by implementing
`is_expired`, `load`, and `save`. `ExpiringValue` keeps the value in memory
and `PersistentExpiringValue` keeps it on disk as JSON:

    >>> ev = PersistentExpiringValue(list_subscriptions, "/tmp/subs.json", max_age=3600)
    >>> subs = ev.value()              # calls list_subscriptions()
    >>> subs = ev.value()              # read from /tmp/subs.json
    >>> subs = ev.value(refresh=True)  # calls list_subscriptions() again
"""

import json
import logging
import time
from pathlib import Path

LOG = logging.getLogger(__name__)


class AbstractExpiringValue:
    """Abstract base class to represent a value that expires.

    The constructor takes a `refresh_fn` function of zero arguments, which is
    called to obtain the value to be cached for `max_age` seconds. The value is
    not retrieved at instantiation, only the first time `value` is invoked, and
    it is not refreshed when it expires, only the next time `value` is called.
    """

    def __init__(self, refresh_fn, max_age):
        self._refresh_fn = refresh_fn
        self._max_age = max_age

    def value(self, refresh=False):
        """Returns the value.

        The first call obtains the value from `refresh_fn`. Later calls return
        the cached value until it expires. If `refresh` is `True`, the value is
        refreshed and the expiration reset before it is returned.
        """
        if not refresh and not self.is_expired():
            return self.load()

        value = self._refresh_fn()
        self.save(value)
        LOG.info("refreshed data and saved in cache")
        return value

    def is_expired(self):
        """Returns `True` if the value needs to be refreshed."""
        raise NotImplementedError

    def load(self):
        """Returns the value from the cache."""
        raise NotImplementedError

    def save(self, value):
        """Saves the value to the cache."""
        raise NotImplementedError


class ExpiringValue(AbstractExpiringValue):
    """Represents a lazily loaded value cached in memory for `max_age` seconds."""

    def __init__(self, refresh_fn, max_age):
        super().__init__(refresh_fn, max_age)
        self._value = None
        self._expiry = 0

    def is_expired(self):
        return time.time() >= self._expiry

    def load(self):
        LOG.debug("Loading data from cache")
        return self._value

    def save(self, value):
        LOG.debug("Saving value to cache")
        self._value = value
        self._expiry = time.time() + self._max_age


class PersistentExpiringValue(ExpiringValue):
    """Represents an expiring value that is persisted to disk as JSON.

    The value is cached in the file at `path`, either a string or a
    `pathlib.Path`, and is considered expired `max_age` seconds after the file
    was last written. A `max_age` of 0 disables the cache entirely. If the value
    cannot be serialized as JSON, a `TypeError` is raised.
    """

    def __init__(self, refresh_fn, path, max_age):
        super().__init__(refresh_fn, max_age)
        self._path = path if isinstance(path, Path) else Path(path)

    def is_expired(self):
        if not self._path.exists():
            return True
        last_modification = self._path.stat().st_mtime
        return time.time() > last_modification + self._max_age

    def load(self):
        LOG.debug("Loading cached data from %s", self._path)
        with self._path.open("r", encoding="utf-8") as file:
            return json.load(file)

    def save(self, value):
        if self._max_age == 0:
            return

        LOG.debug("Saving data to cache file %s", self._path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as file:
            json.dump(value, file)

        # Path.replace uses os.replace, which is atomic on POSIX systems.
        tmp.replace(self._path)
