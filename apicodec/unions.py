"""Decoding JSON into unions, choosing the variant that fits best.

A decoder function takes a parsed JSON value (as produced by ``json.loads``)
and a :class:`~apicodec.state.DecoderState`, and returns the decoded value
or raises :class:`DecodeError`. A *type decoder* maps a type to such a
function.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from apicodec.registry import union_entry
from apicodec.state import DecoderState, Exactness, guard_strict

Decoder = Callable[[Any, DecoderState], Any]
TypeDecoder = Callable[[Any], Decoder]


class DecodeError(ValueError):
    """A JSON value could not be decoded into the requested type."""


class StructUnion:
    """Base for dataclasses whose fields are mutually exclusive variants.

    Each field holds one possible variant and defaults to None; after a
    decode exactly one of them is set. Field annotations must be real types,
    not strings.
    """


def is_struct_union(cls: Any) -> bool:
    """True if ``cls`` is a dataclass deriving from :class:`StructUnion`."""
    return isinstance(cls, type) and dataclasses.is_dataclass(cls) and issubclass(cls, StructUnion)


def json_kind(node: Any) -> str:
    """The JSON kind of a parsed value: null, true, false, number, string or json."""
    if node is None:
        return "null"
    if node is True:
        return "true"
    if node is False:
        return "false"
    if isinstance(node, (int, float)):
        return "number"
    if isinstance(node, str):
        return "string"
    return "json"


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _lookup(node: Any, key: str) -> Any:
    return node.get(key) if isinstance(node, dict) else None


@dataclass
class _StructVariant:
    name: str
    variant_type: Any
    decode: Decoder
    needs_object: bool
    discriminator_value: Any = None


def make_struct_union_decoder(cls: type, type_decoder: TypeDecoder) -> Decoder:
    """Build a decoder for a :class:`StructUnion` dataclass."""
    variants = []
    for field in dataclasses.fields(cls):
        if isinstance(field.type, str):
            raise TypeError(f"field {field.name!r} of {cls!r} needs a real type annotation")
        variant_type = _unwrap_optional(field.type)
        variants.append(
            _StructVariant(
                name=field.name,
                variant_type=variant_type,
                decode=type_decoder(variant_type),
                needs_object=dataclasses.is_dataclass(variant_type),
            )
        )

    entry = union_entry(cls)
    key = ""
    if entry is not None:
        key, registered = entry
        for union_variant in registered:
            for variant in variants:
                if variant.variant_type == union_variant.variant_type:
                    variant.discriminator_value = union_variant.discriminator_value
                    break

    def build(name: str, value: Any) -> Any:
        kwargs = {variant.name: None for variant in variants}
        kwargs[name] = value
        return cls(**kwargs)

    def decode(node: Any, state: DecoderState) -> Any:
        kind = json_kind(node)
        if entry is not None and kind == "json" and key:
            wanted = _lookup(node, key)
            for variant in variants:
                if wanted == variant.discriminator_value:
                    return build(variant.name, variant.decode(node, state))
            raise DecodeError("was not able to find discriminated union variant")

        best: tuple[_StructVariant, Any] | None = None
        best_exactness: Exactness | None = None
        for variant in variants:
            if kind != "json" and variant.needs_object:
                continue
            sub = DecoderState(strict=state.strict)
            try:
                value = variant.decode(node, sub)
            except (ValueError, TypeError):
                continue
            if sub.exactness == Exactness.EXACT:
                best, best_exactness = (variant, value), Exactness.EXACT
                break
            if best_exactness is None or sub.exactness > best_exactness:
                best, best_exactness = (variant, value), sub.exactness

        if best is None:
            raise DecodeError("was not able to coerce type as union")
        if guard_strict(state, best_exactness != Exactness.EXACT):
            raise DecodeError("was not able to coerce type as union strictly")
        return build(best[0].name, best[1])

    return decode


def make_union_decoder(union_type: Any, type_decoder: TypeDecoder) -> Decoder:
    """Build a decoder for a union registered with ``register_union``.

    A discriminator match wins outright; otherwise the most exact variant
    is chosen, ties going to the earliest registered.
    """
    entry = union_entry(union_type)
    if entry is None:
        raise KeyError(f"couldn't find union of type {union_type!r} in union registry")
    key, variants = entry
    decoders = [type_decoder(variant.variant_type) for variant in variants]
    pairs = list(zip(variants, decoders))

    def decode(node: Any, state: DecoderState) -> Any:
        kind = json_kind(node)
        if key:
            for variant, variant_decoder in pairs:
                if variant.type_filter != kind:
                    continue
                if _lookup(node, key) == variant.discriminator_value:
                    return variant_decoder(node, state)

        found = False
        best: Any = None
        best_exactness: Exactness | None = None
        for variant, variant_decoder in pairs:
            if variant.type_filter != kind:
                continue
            sub = DecoderState(strict=state.strict)
            try:
                value = variant_decoder(node, sub)
            except (ValueError, TypeError):
                continue
            if sub.exactness == Exactness.EXACT:
                return value
            if best_exactness is None or sub.exactness > best_exactness:
                found, best, best_exactness = True, value, sub.exactness

        if not found:
            raise DecodeError("was not able to coerce type as union")
        if guard_strict(state, best_exactness != Exactness.EXACT):
            raise DecodeError("was not able to coerce type as union strictly")
        return best

    return decode