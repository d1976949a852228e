"""Reading codec options attached to dataclass fields.

Options live in a field's ``metadata`` mapping under the keys ``json``,
``query`` and ``format``. The ``json`` and ``query`` values are a name
followed by comma separated flags, e.g. ``"req_int,required"``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass

JSON_TAG = "json"
QUERY_TAG = "query"
FORMAT_TAG = "format"


@dataclass(frozen=True)
class JSONTag:
    """Parsed ``json`` option of a field."""

    name: str
    required: bool = False
    extras: bool = False
    metadata: bool = False
    inline: bool = False


@dataclass(frozen=True)
class QueryTag:
    """Parsed ``query`` option of a field."""

    name: str
    omitempty: bool = False
    omitzero: bool = False
    inline: bool = False


def _tag_text(field: dataclasses.Field, key: str) -> str | None:
    metadata: Mapping = getattr(field, "metadata", None) or {}
    return metadata.get(key)


def parse_json_tag(field: dataclasses.Field) -> JSONTag | None:
    """Return the field's ``json`` option, or None if it has none."""
    raw = _tag_text(field, JSON_TAG)
    if raw is None:
        return None
    name, *options = raw.split(",")
    return JSONTag(
        name=name,
        required="required" in options,
        extras="extras" in options,
        metadata="metadata" in options,
        inline="inline" in options,
    )


def parse_query_tag(field: dataclasses.Field) -> QueryTag | None:
    """Return the field's ``query`` option, or None if it has none."""
    raw = _tag_text(field, QUERY_TAG)
    if raw is None:
        return None
    name, *options = raw.split(",")
    return QueryTag(
        name=name,
        omitempty="omitempty" in options,
        omitzero="omitzero" in options,
        inline="inline" in options,
    )


def parse_format_tag(field: dataclasses.Field) -> str | None:
    """Return the field's ``format`` option, or None if it has none."""
    return _tag_text(field, FORMAT_TAG)