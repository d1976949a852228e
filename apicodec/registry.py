"""Registries of enum validators and union variants."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from apicodec.tags import parse_json_tag

# The kinds of JSON value a union variant may be chosen for.
_JSON_KINDS = frozenset({"null", "false", "true", "number", "string", "json"})


@dataclass(frozen=True)
class ValidationEntry:
    """Legal enum values for one field of a dataclass.

    ``bools`` is 1 when only true is legal, 0 when only false is, and -1
    when either is.
    """

    attribute: str
    name: str
    strings: tuple[str, ...] = ()
    bools: int = -1
    ints: tuple[int, ...] = ()


@dataclass(frozen=True)
class UnionVariant:
    """One member of a union, picked by JSON kind and discriminator value.

    ``type_filter`` is one of ``null``, ``false``, ``true``, ``number``,
    ``string`` or ``json`` (objects and arrays).
    """

    type_filter: str
    variant_type: Any
    discriminator_value: Any = None

    def __post_init__(self) -> None:
        if self.type_filter not in _JSON_KINDS:
            raise ValueError(f"unknown JSON kind for union variant: {self.type_filter!r}")


_validation_registry: dict[type, list[ValidationEntry]] = {}
_union_registry: dict[Any, tuple[str, tuple[UnionVariant, ...]]] = {}


def register_field_validator(cls: type, field_name: str, *args: str | bool | int) -> None:
    """Restrict the JSON field ``field_name`` of ``cls`` to the given values.

    All values must be of one kind: strings, integers or booleans.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"cannot initialize validator for non-dataclass {cls!r}")

    for candidate in dataclasses.fields(cls):
        tag = parse_json_tag(candidate)
        if tag is not None and tag.name == field_name:
            attribute = candidate.name
            break
    else:
        raise ValueError(f"cannot find field {field_name} in {cls.__name__}")

    if all(isinstance(value, bool) for value in args):
        bools = -1
        for position, value in enumerate(args):
            current = 1 if value else 0
            if position > 0 and bools != current:
                bools = -1
                break
            bools = current
        entry = ValidationEntry(attribute, field_name, bools=bools)
    elif all(isinstance(value, str) for value in args):
        entry = ValidationEntry(attribute, field_name, strings=tuple(args))
    elif all(isinstance(value, int) and not isinstance(value, bool) for value in args):
        entry = ValidationEntry(attribute, field_name, ints=tuple(args))
    else:
        raise TypeError("validator values must all be strings, integers or booleans")

    _validation_registry.setdefault(cls, []).append(entry)


def validators_for(cls: type) -> tuple[ValidationEntry, ...]:
    """Every validator registered for ``cls``, in registration order."""
    return tuple(_validation_registry.get(cls, ()))


def discriminator(variant_type: Any, value: Any) -> UnionVariant:
    """A JSON-object variant chosen when the discriminator equals ``value``."""
    return UnionVariant(type_filter="json", variant_type=variant_type, discriminator_value=value)


def register_union(union_type: Any, discriminator_key: str, *args: UnionVariant) -> None:
    """Register the variants of ``union_type``; an empty key means no discriminator."""
    _union_registry[union_type] = (discriminator_key, tuple(args))


def register_discriminated_union(cls: Any, key: str, mappings: dict[Any, Any]) -> None:
    """Register a union whose variant is picked by the value under ``key``."""
    variants = tuple(
        UnionVariant(type_filter="null", variant_type=variant_type, discriminator_value=value)
        for value, variant_type in mappings.items()
    )
    _union_registry[cls] = (key, variants)


def union_entry(union_type: Any) -> tuple[str, tuple[UnionVariant, ...]] | None:
    """The discriminator key and variants of a registered union, or None."""
    return _union_registry.get(union_type)