"""Serialising values to compact JSON text.

Dataclass fields are written only when they carry a ``json`` option; they
are emitted in name order, and a field flagged ``extras`` holding a mapping
has its entries merged in afterwards. An object with a ``marshal_json()``
method returning JSON text supplies its own encoding, except at the root of
:func:`marshal_root`.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import decimal
import enum
import json
import math
from collections.abc import Mapping
from typing import Any

from apicodec.tags import parse_format_tag, parse_json_tag
from apicodec.unions import StructUnion

_DATE_TIME = "date-time"
_DATE = "date"
_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def marshal(value: Any) -> str | None:
    """Encode ``value`` as JSON text; None when there is nothing to encode."""
    return _encode(value, _DATE_TIME, root=False)


def marshal_root(value: Any) -> str | None:
    """Like :func:`marshal`, ignoring ``marshal_json`` on the value itself."""
    return _encode(value, _DATE_TIME, root=True)


def _encode(value: Any, date_format: str, root: bool) -> str | None:
    if value is None:
        return None
    if isinstance(value, dt.date):
        return _encode_time(value, date_format)
    if not root and not isinstance(value, type):
        custom = getattr(value, "marshal_json", None)
        if callable(custom):
            return custom()
    if isinstance(value, enum.Enum):
        return _encode(value.value, date_format, root=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return _quote(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if isinstance(value, StructUnion):
            return _encode_struct_union(value, date_format)
        return _encode_struct(value, date_format)
    if isinstance(value, Mapping):
        entries: dict[str, str] = {}
        _add_map_entries(entries, value, date_format)
        return _object(entries)
    if isinstance(value, (list, tuple)):
        items = (_encode(item, date_format, root=False) or "null" for item in value)
        return "[" + ",".join(items) + "]"
    raise TypeError(f"unknown type received at primitive encoder: {type(value).__name__}")


def _quote(text: str) -> str:
    quoted = json.dumps(text, ensure_ascii=False)
    for char, escape in _HTML_ESCAPES.items():
        quoted = quoted.replace(char, escape)
    return quoted


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"unsupported float value: {value}")
    return format(decimal.Decimal(repr(value)).normalize(), "f")


def _encode_time(value: dt.date, date_format: str) -> str:
    if date_format == _DATE:
        day = value.date() if isinstance(value, dt.datetime) else value
        return f'"{day.year:04d}-{day.month:02d}-{day.day:02d}"'
    if not isinstance(value, dt.datetime):
        value = dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    offset = value.utcoffset()
    if not offset:
        return f'"{text}Z"'
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f'"{text}{sign}{hours:02d}:{minutes:02d}"'


def _object(entries: dict[str, str]) -> str:
    return "{" + ",".join(f"{_quote(key)}:{encoded}" for key, encoded in entries.items()) + "}"


def _path_escaped(key: str) -> bytes:
    return key.replace(".", "\\.").replace(":", "\\:").replace("*", "\\*").encode()


def _add_map_entries(entries: dict[str, str], mapping: Mapping, date_format: str) -> None:
    pairs = []
    for key, item in mapping.items():
        if isinstance(key, enum.Enum):
            key = key.value
        text = key if isinstance(key, str) else _encode(key, date_format, root=False)
        if text is None:
            raise TypeError(f"cannot encode map key {key!r}")
        pairs.append((text, item))
    pairs.sort(key=lambda pair: _path_escaped(pair[0]))
    for text, item in pairs:
        encoded = _encode(item, date_format, root=False)
        if encoded:
            entries[text] = encoded


def _encode_struct(value: Any, date_format: str) -> str:
    fields = []
    extras = None
    for field in dataclasses.fields(value):
        tag = parse_json_tag(field)
        if tag is None:
            continue
        if tag.extras:
            extras = getattr(value, field.name)
            continue
        if tag.metadata or tag.name in ("-", ""):
            continue
        field_format = parse_format_tag(field)
        if field_format not in (_DATE, _DATE_TIME):
            field_format = date_format
        fields.append((tag.name, getattr(value, field.name), field_format))
    fields.sort(key=lambda entry: entry[0])

    entries: dict[str, str] = {}
    for name, item, field_format in fields:
        encoded = _encode(item, field_format, root=False)
        if encoded is not None:
            entries[name] = encoded
    if extras:
        _add_map_entries(entries, extras, date_format)
    return _object(entries)


def _encode_struct_union(value: StructUnion, date_format: str) -> str | None:
    for field in dataclasses.fields(value):
        item = getattr(value, field.name)
        if item is not None:
            return _encode(item, date_format, root=False)
    return None