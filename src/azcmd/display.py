#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Renders the records returned by cmdlets.

## Overview

Cmdlets return display records, plain dicts produced by the mapping functions
in `azcmd.clients`, and this module turns them into text. Three formats are
supported:

`text`
:  A list of records is printed as a table with a row of `=` under the column
headings. A single record is printed as a list of `key : value` lines. A
string is printed as-is after the subscription.

`json`
:  A JSON document with the subscription and the result.

`yaml`
:  A YAML document with the subscription and the result.

For example, a list of resource groups in text format:

    00000000-0000-0000-0000-000000000000:
    name       location  provisioning_state
    ====       ========  ==================
    app-prod   eastus2   Succeeded
    app-dev    eastus2   Succeeded
"""

import json
from datetime import date, datetime
from enum import Enum

import yaml

FORMATS = ("text", "json", "yaml")
"""Output formats supported by `render`."""


def render(sub, result, fmt="text", columns=None):
    """Returns `result` rendered as a string in the format `fmt`.

    `sub` is the subscription object the result belongs to and is included in
    the output. `result` is `None`, a string, a record, or a list of records.
    `columns` selects and orders the keys used for the columns of a text table.
    If it is not provided, the keys of the first record are used.
    """
    if result is None:
        return ""

    if fmt == "json":
        doc = {"subscription": str(sub), "result": plain(result)}
        return json.dumps(doc, indent=2, default=str) + "\n"

    if fmt == "yaml":
        doc = {"subscription": str(sub), "result": plain(result)}
        return "---\n" + yaml.safe_dump(doc, default_flow_style=False, sort_keys=False)

    if fmt != "text":
        raise ValueError(f"Unknown output format: {fmt}")

    if isinstance(result, str):
        return f"{sub}: {result}\n"

    if isinstance(result, dict):
        return f"{sub}:\n{format_record(result)}\n"

    if not result:
        return f"{sub}: no items found\n"

    return f"{sub}:\n{format_table(result, columns)}\n"


def format_table(records, columns=None):
    """Returns `records` formatted as a table of `columns`."""
    columns = columns or list(records[0].keys())
    rows = [[format_value(r.get(c)) for c in columns] for r in records]

    widths = [
        max([len(c)] + [len(row[i]) for row in rows]) for i, c in enumerate(columns)
    ]

    def line(cells):
        return "  ".join(f"{cell:{w}}" for cell, w in zip(cells, widths)).rstrip()

    lines = [line(columns), line("=" * len(c) for c in columns)]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines) + "\n"


def format_record(record):
    """Returns a single record formatted as aligned `key : value` lines.

    Values that are deployment outputs or parameters, dicts of names to dicts
    with `type` and `value` keys, are printed as a nested table.
    """
    width = max((len(k) for k in record), default=0)
    lines = []
    for key, value in record.items():
        if _is_parameter_dict(value):
            lines.append(f"{key:{width}} :")
            lines.append(format_parameters(value))
        else:
            lines.append(f"{key:{width}} : {format_value(value)}")
    return "\n".join(lines) + "\n"


def format_parameters(params):
    """Returns deployment outputs or parameters formatted as a table.

    The `Name`, `Type`, and `Value` columns are at least 15, 25, and 10
    characters wide respectively.
    """
    widths = [15, 25, 10]
    rows = [
        [name, str(p.get("type", "")), format_value(p.get("value"))]
        for name, p in params.items()
    ]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells):
        return "  ".join(f"{cell:{w}}" for cell, w in zip(cells, widths)).rstrip()

    lines = [line(["Name", "Type", "Value"]), line("=" * w for w in widths)]
    lines.extend(line(row) for row in rows)
    return "\n".join("    " + x for x in lines)


def format_value(value):
    """Returns a single value as a string suitable for a table cell."""
    value = plain(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(format_value(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}={format_value(v)}" for k, v in value.items())
    return str(value)


def plain(obj):
    """Returns `obj` converted to builtin types that JSON and YAML can dump.

    Enums are replaced by their values and unknown objects by their `str()`.
    """
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (bool, int, float, datetime, date)):
        return obj
    if isinstance(obj, str):
        return str(obj)
    if isinstance(obj, dict):
        return {str(k): plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [plain(v) for v in obj]
    return str(obj)


def _is_parameter_dict(value):
    return (
        isinstance(value, dict)
        and bool(value)
        and all(isinstance(v, dict) and "value" in v for v in value.values())
    )
