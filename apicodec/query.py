"""Encoding values as URL query parameters.

Dataclass fields are written only when they carry a ``query`` option. Nested
objects produce keys such as ``a[b]`` or ``a.b`` and lists are written
according to :class:`ArrayFormat`. ``None`` produces no parameter. An object
with a ``marshal_json()`` method is written as that JSON text, except at the
root.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import decimal
import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from apicodec.tags import parse_format_tag, parse_query_tag
from apicodec.unions import StructUnion

_DATE_TIME = "date-time"
_DATE = "date"

Pairs = list[tuple[str, str]]


class NestedFormat(enum.Enum):
    """How keys of nested objects are joined."""

    BRACKETS = 0
    DOTS = 1


class ArrayFormat(enum.Enum):
    """How list values are written."""

    COMMA = 0
    REPEAT = 1
    INDICES = 2
    BRACKETS = 3


@dataclass(frozen=True)
class QuerySettings:
    """Formatting choices for query encoding."""

    nested_format: NestedFormat = NestedFormat.BRACKETS
    array_format: ArrayFormat = ArrayFormat.COMMA


def marshal_with_settings(value: Any, settings: QuerySettings | None = None) -> dict[str, list[str]]:
    """Encode ``value`` as a mapping of query keys to their values, in order."""
    encoder = _Encoder(settings or QuerySettings())
    result: dict[str, list[str]] = {}
    for key, text in encoder.encode("", value, _DATE_TIME, root=True):
        result.setdefault(key, []).append(text)
    return result


def marshal_query(value: Any) -> dict[str, list[str]]:
    """Encode ``value`` with the default settings."""
    return marshal_with_settings(value, QuerySettings())


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(decimal.Decimal(repr(float(value))).normalize(), "f")


def _format_complex(value: complex) -> str:
    imag = _format_float(value.imag)
    if imag[0] not in "+-":
        imag = "+" + imag
    return f"({_format_float(value.real)}{imag}i)"


def _format_time(value: dt.date, date_format: str) -> str:
    if date_format == _DATE:
        day = value.date() if isinstance(value, dt.datetime) else value
        return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
    if not isinstance(value, dt.datetime):
        value = dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, str, bytes, list, tuple, Mapping)):
        return not value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


class _Encoder:
    def __init__(self, settings: QuerySettings) -> None:
        self.settings = settings

    def key_path(self, key: str, subkey: str) -> str:
        if not key:
            return subkey
        if self.settings.nested_format is NestedFormat.DOTS:
            return f"{key}.{subkey}"
        return f"{key}[{subkey}]"

    def encode(self, key: str, value: Any, fmt: str, root: bool = False) -> Pairs:
        if value is None:
            return []
        if isinstance(value, dt.date):
            return [(key, _format_time(value, fmt))]
        if not root and not isinstance(value, type):
            custom = getattr(value, "marshal_json", None)
            if callable(custom):
                return [(key, custom())]
        if isinstance(value, enum.Enum):
            return self.encode(key, value.value, fmt)
        if isinstance(value, bool):
            return [(key, "true" if value else "false")]
        if isinstance(value, int):
            return [(key, str(int(value)))]
        if isinstance(value, float):
            return [(key, _format_float(value))]
        if isinstance(value, complex):
            return [(key, _format_complex(value))]
        if isinstance(value, str):
            return [(key, str.__str__(value))]
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            if isinstance(value, StructUnion):
                return self.encode_struct_union(key, value, fmt)
            return self.encode_struct(key, value, fmt)
        if isinstance(value, Mapping):
            return self.encode_map(key, value, fmt)
        if isinstance(value, (list, tuple)):
            return self.encode_array(key, value, fmt)
        return []

    def encode_struct(self, key: str, value: Any, fmt: str) -> Pairs:
        pairs: Pairs = []
        for field in dataclasses.fields(value):
            tag = parse_query_tag(field)
            if tag is None:
                continue
            if tag.name in ("-", "") and not tag.inline:
                continue
            field_format = parse_format_tag(field)
            if field_format not in (_DATE, _DATE_TIME):
                field_format = fmt
            item = getattr(value, field.name)
            if tag.omitzero and _is_zero(item):
                continue
            subkey = key if tag.inline else self.key_path(key, tag.name)
            pairs.extend(self.encode(subkey, item, field_format))
        return pairs

    def encode_struct_union(self, key: str, value: StructUnion, fmt: str) -> Pairs:
        for field in dataclasses.fields(value):
            item = getattr(value, field.name)
            if item is not None:
                return self.encode(key, item, fmt)
        raise ValueError(f"union {type(value).__name__} has no field set")

    def encode_map(self, key: str, value: Mapping, fmt: str) -> Pairs:
        pairs: Pairs = []
        for map_key, item in value.items():
            encoded_key = self.encode("", map_key, fmt)
            if len(encoded_key) != 1:
                raise ValueError(
                    "unexpected number of parts for encoded map key, map may contain non-primitive"
                )
            pairs.extend(self.encode(self.key_path(key, encoded_key[0][1]), item, fmt))
        return pairs

    def encode_array(self, key: str, value: list | tuple, fmt: str) -> Pairs:
        array_format = self.settings.array_format
        if array_format is ArrayFormat.COMMA:
            elements = [text for item in value for _, text in self.encode("", item, fmt)]
            return [(key, ",".join(elements))] if elements else []
        if array_format is ArrayFormat.REPEAT:
            return [pair for item in value for pair in self.encode(key, item, fmt)]
        if array_format is ArrayFormat.BRACKETS:
            return [pair for item in value for pair in self.encode(key + "[]", item, fmt)]
        raise ValueError(f"the array format {array_format.name} is not supported")