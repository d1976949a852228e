"""Copying JSON-tagged values and their field metadata between dataclasses."""

from __future__ import annotations

import dataclasses
import types
import typing
from typing import Any

from apicodec.tags import JSONTag, parse_json_tag

_NONE_TYPE = type(None)


def port(source: Any, target_type: type) -> Any:
    """Build a ``target_type`` from the fields of ``source`` that share JSON names.

    Values are matched by the name in their ``json`` option. Dataclass-valued
    fields without a ``json`` option are treated as embedded: their fields
    are collected first, so that the outer object's fields win. The per-field
    metadata, the raw JSON text and the extra fields recorded on the source
    are carried over to the target's metadata object.
    """
    if not (isinstance(target_type, type) and dataclasses.is_dataclass(target_type)):
        raise TypeError(f"destination must be a dataclass type, not {target_type!r}")
    if not dataclasses.is_dataclass(source) or isinstance(source, type):
        raise TypeError(f"source must be a dataclass instance, not {source!r}")

    values: dict[str, Any] = {}
    fields_meta: dict[str, Any] = {}
    _collect(source, values, fields_meta)
    source_meta = _metadata_of(source)

    provided: dict[str, Any] = {}
    meta_values: dict[str, Any] = {}
    target_meta_field: dataclasses.Field | None = None
    for field in dataclasses.fields(target_type):
        tag = parse_json_tag(field)
        if _is_metadata(field, tag):
            target_meta_field = field
            continue
        if tag is None or tag.name == "-":
            continue
        if tag.name in values:
            provided[field.name] = values.pop(tag.name)
        if tag.name in fields_meta:
            meta_values[field.name] = fields_meta[tag.name]

    if target_meta_field is not None:
        meta_type = _unwrap_optional(_field_type(target_meta_field))
        if isinstance(meta_type, type) and dataclasses.is_dataclass(meta_type):
            names = {f.name for f in dataclasses.fields(meta_type)}
            meta_kwargs = {name: item for name, item in meta_values.items() if name in names}
            if source_meta is not None:
                if "raw" in names:
                    meta_kwargs["raw"] = getattr(source_meta, "raw", "")
                if "extra_fields" in names and hasattr(source_meta, "extra_fields"):
                    meta_kwargs["extra_fields"] = source_meta.extra_fields
            provided[target_meta_field.name] = _build(meta_type, meta_kwargs)

    return _build(target_type, provided)


def _field_type(field: dataclasses.Field) -> Any:
    """The field's declared type, or one inferred from its default when written as text."""
    if not isinstance(field.type, str):
        return field.type
    if field.default_factory is not dataclasses.MISSING:
        return type(field.default_factory())
    if field.default is not dataclasses.MISSING and field.default is not None:
        return type(field.default)
    return None


def _is_metadata(field: dataclasses.Field, tag: JSONTag | None) -> bool:
    if tag is not None:
        return tag.metadata
    return field.name == "json"


def _metadata_of(obj: Any) -> Any:
    for field in dataclasses.fields(obj):
        if _is_metadata(field, parse_json_tag(field)):
            meta = getattr(obj, field.name)
            if dataclasses.is_dataclass(meta) and not isinstance(meta, type):
                return meta
    return None


def _collect(obj: Any, values: dict[str, Any], fields_meta: dict[str, Any]) -> None:
    for field in dataclasses.fields(obj):
        tag = parse_json_tag(field)
        if tag is None and not _is_metadata(field, tag):
            item = getattr(obj, field.name)
            if dataclasses.is_dataclass(item) and not isinstance(item, type):
                _collect(item, values, fields_meta)

    meta = _metadata_of(obj)
    for field in dataclasses.fields(obj):
        tag = parse_json_tag(field)
        if tag is None or tag.metadata or tag.name in ("-", ""):
            continue
        values[tag.name] = getattr(obj, field.name)
        if meta is not None and hasattr(meta, field.name):
            fields_meta[tag.name] = getattr(meta, field.name)


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(tp) if arg is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return tp


def _zero(tp: Any) -> Any:
    if tp is None:
        return None
    if _unwrap_optional(tp) is not tp or typing.get_origin(tp) is not None:
        return None
    if isinstance(tp, type):
        if issubclass(tp, bool):
            return False
        if issubclass(tp, (int, float, str)) and not hasattr(tp, "__members__"):
            return tp()
        if dataclasses.is_dataclass(tp):
            return _build(tp, {})
    return None


def _build(cls: type, provided: dict[str, Any]) -> Any:
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        if field.name in provided:
            kwargs[field.name] = provided[field.name]
        elif field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            kwargs[field.name] = _zero(_field_type(field))
    return cls(**kwargs)