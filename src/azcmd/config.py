#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides a YAML/JSON config file reader with type-checked values.

## Overview

`Config` wraps the dict loaded from the azcmd user configuration file. It
provides default values, mandatory values, and type checking of values using the
type specifications defined in this module. Parsers are registered by file
extension, so `Config.from_file` picks `YAMLConfig` for `.yaml` and `.yml` files
and `JSONConfig` for `.json` files. Other parsers can be added with
`Config.register_filetype`.

## Type Checking

Simple types are provided as pre-defined objects: `Str`, `Int`, `Bool`, `Float`,
`File`, `IP`, `UUID`, `Location`, and `Dotted`. Type classes such as `StrMatch`,
`Choice`, `List`, and `Dict` build more complex types, and the combinators
`Not`, `And`, and `Or` combine any of them. For example, the type used by the
CLI for its metadata filters is a dict of string keys to lists of anything:

    Dict(Str, List(Any))

## Reading Values

Given the following configuration in `~/.azcmd.yaml`:

    CLI:
      subscription:
        - 00000000-0000-0000-0000-000000000000
      log_level: INFO

    Commands:
      get_vm:
        output: yaml
        status: true

Values are read with `Config.get` by listing the keys leading to the value:

    c = Config.from_file(Path.home() / '.azcmd.yaml')

    assert c.get('CLI', 'log_level', type=Choice('DEBUG', 'INFO')) == 'INFO'
    assert c.get('CLI', 'subscription', type=List(UUID), default=[]) == [
        '00000000-0000-0000-0000-000000000000']
    assert c.get('Commands', 'get_vm', 'status', type=Bool, default=False)

If a value does not match the expected type, a `TypeError` is raised. Custom
types subclass `Type` and implement `type_check` and `__str__`.
"""

import ipaddress
import json
import logging
import re
from functools import reduce
from pathlib import Path

import yaml

LOG = logging.getLogger(__name__)

# pylint: disable=unidiomatic-typecheck
#
# isinstance(True, int) is true, so exact type comparisons are used throughout
# this module. True must not type check as an int.


class Config:
    """A `Config` reads type-checked values from a Python dictionary.

    Values are looked up by a path of keys. The class also keeps a registry of
    configuration parsers keyed by file extension, which is used by
    `Config.from_file`.
    """

    _filetypes = {}

    @classmethod
    def register_filetype(cls, config_class, *extensions):
        """Register a parser for files with one of the specified extensions.

        Extensions are specified as '.ext'. A later registration for the same
        extension replaces the earlier one.
        """
        for ext in extensions:
            cls._filetypes[ext] = config_class

    @classmethod
    def from_file(cls, filename, must_exist=False):
        """Factory method to load a `Config` from a filename.

        The parser is chosen by the extension of `filename`. If the file does
        not exist, an empty `Config` is returned unless `must_exist` is true,
        in which case `FileNotFoundError` is raised.
        """
        path = Path(filename)

        if not path.is_file():
            if must_exist:
                raise FileNotFoundError(f"Config file not found: {filename}")
            LOG.info("no config file at %s, using defaults", path)
            return Config({})

        if path.suffix not in cls._filetypes:
            raise ValueError(f"Unregistered file type extension: {path.suffix}")

        LOG.info("loading config file %s", path)
        with path.open(encoding="utf-8") as f:
            return cls._filetypes[path.suffix](f)

    def __init__(self, d):
        self.conf = d or {}

    def get(self, *keys, default=None, type=None, must_exist=False):
        """Return the specified value from the `Config`.

        The value is found by following `keys` into the configuration. If no
        value exists at that path, `default` is returned, unless `must_exist`
        is `True`, in which case a `ValueError` is raised.

        If `type` is provided, the value must type check against it or a
        `TypeError` is raised:

            c.get('Commands', 'new_vm', 'size', type=Str)
            c.get('Commands', 'get_job', 'limit', type=Int)
            c.get('CLI', 'subscription', type=List(Or(UUID, Str)))
            c.get('CLI', 'include', type=Dict(Str, List(Any)))
            c.get('Commands', 'new_sql_firewall_rule', 'start_ip', type=IP)
        """
        # pylint: disable=redefined-builtin
        try:
            value = reduce(lambda a, p: a.get(p, {}), keys, self.conf)
        except AttributeError as e:
            raise ValueError(
                f"Error in config: {'->'.join(keys[:-1])}: not a dictionary"
            ) from e

        # An empty dict means at least one of the keys was missing.
        if value == {}:
            if must_exist:
                raise ValueError(f"Error in config: {'->'.join(keys)}: must be set")
            value = default

        if value is None or not type:
            return value

        if type.type_check(value):
            return value

        raise TypeError(
            f"Error in config: {'->'.join(keys)}: not a {type}: {repr(value)}"
        )


EmptyConfig = Config({})
"""Singleton representing an empty `Config`."""


class YAMLConfig(Config):
    """Loads a YAML configuration from a stream."""

    def __init__(self, stream):
        super().__init__(yaml.safe_load(stream))


class JSONConfig(Config):
    """Loads a JSON configuration from a stream."""

    def __init__(self, stream):
        super().__init__(json.load(stream))


Config.register_filetype(JSONConfig, ".json")
Config.register_filetype(YAMLConfig, ".yaml", ".yml")


class Type:
    """Represents a type that can be used in type-check comparisons."""

    def type_check(self, obj):
        """Returns true if obj is a type matching this `Type`."""
        raise NotImplementedError

    def __str__(self):
        """Returns a string representing this `Type`."""
        raise NotImplementedError


class Not(Type):
    """Represents a type that is not `config_type`."""

    def __init__(self, config_type):
        self.config_type = config_type

    def type_check(self, obj):
        return not self.config_type.type_check(obj)

    def __str__(self):
        return "not " + str(self.config_type)


class Or(Type):
    """Represents a type that is one of the `config_types`.

        Or(UUID, Str)
        Or(Int, Float)
    """

    def __init__(self, *config_types):
        self.config_types = config_types

    def type_check(self, obj):
        return any(t.type_check(obj) for t in self.config_types)

    def __str__(self):
        return "(" + " or ".join(str(t) for t in self.config_types) + ")"


class And(Type):
    """Represents a type that is all of the `config_types`."""

    def __init__(self, *config_types):
        self.config_types = config_types

    def type_check(self, obj):
        return all(t.type_check(obj) for t in self.config_types)

    def __str__(self):
        return "(" + " and ".join(str(t) for t in self.config_types) + ")"


class Const(Type):
    """Represents a constant value."""

    def __init__(self, const):
        self.const = const

    def type_check(self, obj):
        # True == 1 in Python, so the types must match before equality.
        if type(obj) != type(self.const):  # noqa: E721
            return False
        return obj == self.const

    def __str__(self):
        return f"constant '{self.const}'"


class Choice(Or):
    """Represents a choice of constants.

        Choice('text', 'json', 'yaml')
    """

    def __init__(self, *constants):
        super().__init__(*[Const(c) for c in constants])


class Scalar(Type):
    """Represents a value whose type is exactly the builtin `type_`."""

    def __init__(self, type_):
        self.type = type_

    def type_check(self, obj):
        return type(obj) == self.type  # noqa: E721

    def __str__(self):
        return self.type.__name__


class StrMatch(Type):
    """Represents a string matching `pattern`.

    `pattern` is matched using `re.search` so anchors should be explicit.
    """

    def __init__(self, pattern, description=None):
        self.pattern = pattern
        self.description = description

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        return bool(re.search(self.pattern, obj))

    def __str__(self):
        return self.description or f"str matching '{self.pattern}'"


class IpAddress(Type):
    """Represents a string matching an IP address (v4 or v6)."""

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        try:
            ipaddress.ip_address(obj)
            return True
        except ValueError:
            return False

    def __str__(self):
        return "IPv4 or IPv6 address"


class FileType(Type):
    """Represents a string pointing to an existing file."""

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        return Path(obj).exists()

    def __str__(self):
        return "existing file"


class AnyType(Type):
    """Represents any type."""

    def type_check(self, obj):
        return True

    def __str__(self):
        return "any type"


Str = Scalar(str)
"""Singleton representing a str."""

Int = Scalar(int)
"""Singleton representing an int."""

Bool = Scalar(bool)
"""Singleton representing a bool."""

Float = Scalar(float)
"""Singleton representing a float."""

Any = AnyType()
"""Singleton representing any type."""

File = FileType()
"""Singleton representing an existing filename."""

IP = IpAddress()
"""Singleton representing an IP address (v4 or v6)."""

UUID = StrMatch(
    r"^[0-9a-fA-F]{8}-([0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}$", "subscription/tenant GUID"
)
"""Singleton representing a GUID such as a subscription or tenant ID."""

Location = StrMatch(r"^[a-z][a-z0-9]*$", "Azure location name")
"""Singleton representing a location name such as 'eastus2'."""

Dotted = StrMatch(r"^[^.]+(\.[^.]+)*$")
"""Singleton representing a dotted Python path."""


class List(Type):
    """Represents a list containing elements of `element_type`.

        List(Str)
        List(UUID)
        List(Dict(Str, Str))
    """

    def __init__(self, element_type):
        self.element_type = element_type

    def type_check(self, obj):
        if type(obj) != list:  # noqa: E721
            return False
        return all(self.element_type.type_check(e) for e in obj)

    def __str__(self):
        return f"list of {self.element_type}"


class Dict(Type):
    """Represents a dict with keys of `key_type` and values of `value_type`.

        Dict(Str, Str)
        Dict(Str, List(Any))
    """

    def __init__(self, key_type, value_type):
        self.key_type = key_type
        self.value_type = value_type

    def type_check(self, obj):
        if type(obj) != dict:  # noqa: E721
            return False
        return all(self.key_type.type_check(k) for k in obj.keys()) and all(
            self.value_type.type_check(v) for v in obj.values()
        )

    def __str__(self):
        return f"dict with {self.key_type} keys and {self.value_type} values"
