#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides additional actions, types, and formatters for argparse."""

import argparse
import builtins
import re
from datetime import datetime, timezone


class RawAndDefaultsFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    """Mixin of ArgumentDefaultsHelpFormatter and RawDescriptionHelpFormatter.

    The argparse module does not allow for easy combinations of help formatters.
    This class combines the raw formatter with the default args formatter, which
    is used by the azcmd CLI and the parsers built for each cmdlet.
    """


class AppendWithoutDefault(argparse.Action):
    """Argparse action to append to a list without the default.

    With the builtin `append` action, values given on the command line are
    appended to the default list. This action only uses the default when no
    values were given on the command line:

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('--subscription', action=AppendWithoutDefault, default=['dev'])
        >>> parser.parse_args('--subscription qa --subscription prod'.split())
        Namespace(subscription=['qa', 'prod'])
        >>> parser.parse_args('')
        Namespace(subscription=['dev'])
    """

    def __init__(self, *args, **kwargs):
        self.has_been_called = False
        super().__init__(*args, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        current = [] if not self.has_been_called else getattr(namespace, self.dest)
        current.append(values)
        setattr(namespace, self.dest, current)
        self.has_been_called = True


class AppendAttributeValuePair(argparse.Action):
    """Argparse action to construct a dict of attributes and lists of values.

    Options are given as `name=val1,val2` or `name=type:val1,val2` where `type`
    is one of `str`, `int`, `float`, or `bool`. This is used for the metadata
    filters of the CLI:

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('--include', action=AppendAttributeValuePair)
        >>> parser.parse_args('--include env=dev,qa --include env=prod'.split()).include
        {'env': ['dev', 'qa', 'prod']}
        >>> parser.parse_args('--include env=prod --include isDefault=bool:yes'.split()).include
        {'env': ['prod'], 'isDefault': [True]}
    """

    def __call__(self, parser, namespace, values, option_string=None):
        match = re.match(r"([^=]+)=(?:(str|int|float|bool):)?(.+)", values)  # type: ignore
        if not match:
            parser.error(f"{option_string}: expected attr=val1,val2,etc")

        name, value_type, comma_sep_values = match.groups()
        cast = from_str_to(value_type)

        # The namespace attribute always exists because argparse sets the
        # default, which may be None or a dict supplied by the user config.
        d = getattr(namespace, self.dest)
        if d is None:
            d = {}

        if name not in d:
            d[name] = []

        try:
            d[name].extend(cast(v.strip()) for v in comma_sep_values.split(","))

        except ValueError:
            parser.error(f"{option_string}: invalid {value_type} in {match.group()}")

        setattr(namespace, self.dest, d)


class KeyValuePair(argparse.Action):
    """Argparse action to construct a dict of single valued key/value pairs.

    Unlike `AppendAttributeValuePair`, the right-hand side of `=` is a single
    value that may contain commas and further `=` characters. Later options
    with the same key replace earlier ones. This is used for resource tags and
    runbook parameters:

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('--tag', action=KeyValuePair, default={})
        >>> parser.parse_args('--tag env=prod --tag owner=a,b'.split()).tag
        {'env': 'prod', 'owner': 'a,b'}

    The same `name=type:value` syntax as `AppendAttributeValuePair` can be used
    to convert the value to an int, float, or bool.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        match = re.match(r"([^=]+)=(?:(str|int|float|bool):)?(.*)", values)
        if not match:
            parser.error(f"{option_string}: expected key=value")

        key, value_type, value = match.groups()

        # Copy so a dict provided as the default is not mutated.
        d = dict(getattr(namespace, self.dest) or {})

        try:
            d[key.strip()] = from_str_to(value_type)(value)
        except ValueError:
            parser.error(f"{option_string}: invalid {value_type} in {match.group()}")

        setattr(namespace, self.dest, d)


def from_str_to(type_):
    """Return a cast function to convert a string to a builtin type.

    Returns the builtin cast function if `type_` is "str", "int", or "float".
    If `type_` is "bool", the returned function returns `True` for the values
    "y", "yes", "true", and "1" (case insensitive). For anything else, the
    builtin `str` function is returned.

        >>> from_str_to("int")("10")
        10
        >>> [from_str_to("bool")(s) for s in ['yes', 'no', 'True', 'false']]
        [True, False, True, False]
    """
    if type_ in ("str", "int", "float"):
        return getattr(builtins, type_)
    if type_ == "bool":
        return lambda s: s.lower() in ("y", "yes", "true", "1")
    return str


def iso_datetime(value):
    """Argparse type that parses an ISO 8601 timestamp into an aware datetime.

    A trailing `Z` is accepted for UTC. Timestamps without an offset are
    assumed to be UTC.

        >>> iso_datetime('2020-01-02T03:04:05Z')
        datetime.datetime(2020, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: {value}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
