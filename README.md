# apicodec

Building blocks for the models behind an HTTP API client:

- **JSON encoding** of dataclasses to compact JSON text with a fixed key order.
- **URL query encoding** with a choice of nested-key and array styles.
- **Union resolution**: decoders that try each variant of a union and keep
  the one that fits the data most exactly, or pick one by a discriminator.
- **Enum validation** registries that mark values outside a legal set as a
  loose match.
- **Porting** a value from one model to another that shares its JSON keys,
  together with the per-field metadata it carries.

It uses only the standard library.

## Installing

```
pip install apicodec
```

To run the test suite:

```
pip install "apicodec[test]"
pytest
```

## Describing a model

Models are dataclasses. The wire name and options of a field go in the field's
metadata under `"json"` for JSON and under `"query"` for query strings. Each is
a name followed by comma separated options. Dates take a `"format"` entry, either
`"date"` or `"date-time"`. The default is `"date-time"`.

```python
from dataclasses import dataclass, field
from datetime import date


@dataclass
class Event:
    name: str = field(default="", metadata={"json": "name", "query": "name"})
    day: date | None = field(
        default=None, metadata={"json": "day", "query": "day", "format": "date"}
    )
```

The JSON codec ignores a field that has no `"json"` entry. The query encoder
ignores a field that has no `"query"` entry. These are the JSON options:

| option     | meaning                                                        |
|------------|----------------------------------------------------------------|
| `required` | the key is required by the API                                 |
| `extras`   | a mapping whose entries are written alongside the other keys   |
| `inline`   | the field stands for the whole document                        |
| `metadata` | the field holds per-field `Field` records instead of data      |

The query options are `omitzero`, `omitempty` and `inline`.

`apicodec.tags` reads these entries:

- `parse_json_tag(field)` returns a `JSONTag`.
- `parse_query_tag(field)` returns a `QueryTag`.
- `parse_format_tag(field)` returns the format string.

Each of them returns `None` when the field has no such entry.

## Encoding JSON

```python
from apicodec.encoder import marshal

marshal(Event("launch", date(2024, 3, 29)))
# '{"day":"2024-03-29","name":"launch"}'
```

Fields are written in order of their JSON names. A field whose value is `None`
is left out. In a list, `None` is written as `null`.

Mapping keys are written in sorted order. The entries of an `extras` field come
after the named fields.

A date-time is written without fractional seconds. It ends in `Z` when it has no
UTC offset or a zero offset, and otherwise ends in `±hh:mm`.

An object with a `marshal_json()` method supplies its own JSON text.
`marshal_root` works like `marshal`, but it does not call `marshal_json()` on the
value passed to it. A `StructUnion` is encoded as its first field that is not
`None`. A value of any other type raises `TypeError`.

## Encoding query strings

```python
from apicodec.query import ArrayFormat, NestedFormat, QuerySettings, marshal_query, marshal_with_settings

marshal_query(Event("launch", date(2024, 3, 29)))
# {'name': ['launch'], 'day': ['2024-03-29']}

marshal_with_settings(
    value, QuerySettings(nested_format=NestedFormat.DOTS, array_format=ArrayFormat.REPEAT)
)
```

The result maps each key to its values, in order.

Nested objects and mappings are written as `a[b][c]` by default, or as `a.b.c`
with `NestedFormat.DOTS`. An `inline` field is written under its parent's key.
An `omitzero` field is skipped when its value is empty or zero.

Lists are written as follows:

- `ArrayFormat.COMMA` (the default) joins the elements, as in `f=1,2,3`.
- `ArrayFormat.REPEAT` repeats the key.
- `ArrayFormat.BRACKETS` appends `[]` to the key.
- `ArrayFormat.INDICES` is not supported and raises `ValueError`.

A `StructUnion` with no field set also raises `ValueError`.

## Field metadata

`apicodec.field.Field` records the raw JSON text of a field and a `FieldStatus`,
which is one of `MISSING`, `NULL`, `INVALID` or `VALID`. Its methods are:

- `is_missing()`: the key was absent.
- `is_null()`: the key was explicitly `null`, or it was absent.
- `is_invalid()`: the key was present but the value could not be decoded.

## Enums and unions

`apicodec.registry` holds the registrations:

- `register_field_validator(cls, field_name, *values)` limits a field to a set of
  legal strings, integers or booleans. `validators_for(cls)` returns the
  validators registered for a class.
- `register_union(union_type, discriminator_key, *variants)` registers a union.
  Each `UnionVariant` names the JSON kind it accepts: `null`, `true`, `false`,
  `number`, `string` or `json`. It may also carry a discriminator value.
- `discriminator(variant_type, value)` builds a variant for JSON objects that is
  selected by its discriminator value.
- `register_discriminated_union(cls, key, mappings)` maps discriminator values
  to the variant types of a `StructUnion`.
- `union_entry(union_type)` returns the key and variants of a registered union.

`apicodec.state` holds the run-time decoding state:

- `DecoderState` carries strictness, a running `Exactness` (`LOOSE`, `EXTRAS` or
  `EXACT`) and the active validator. Its `validate_string`, `validate_int` and
  `validate_bool` methods lower the exactness to `LOOSE` when a value is not
  legal for the active validator.
- `guard_strict` fails a strict decode and marks a lenient decode as loose.
- `can_parse_as_number` checks whether a string is a numeric literal.

`apicodec.unions` builds decoders for unions. A decoder takes an already parsed
JSON value (as returned by `json.loads`) and a `DecoderState`. You supply a
*type decoder*, which maps each variant type to its decoder.

```python
from apicodec.registry import UnionVariant, register_union
from apicodec.state import DecoderState
from apicodec.unions import DecodeError, make_union_decoder


class Identifier:
    pass


def type_decoder(tp):
    def decode(node, state):
        if isinstance(node, tp) and not isinstance(node, bool):
            return node
        raise DecodeError(f"not a {tp.__name__}")
    return decode


register_union(Identifier, "", UnionVariant("number", int), UnionVariant("string", str))
decode = make_union_decoder(Identifier, type_decoder)
decode(12, DecoderState())  # 12
```

A discriminator match wins outright. Otherwise the most exact variant wins, and
ties go to the earlier variant. `make_struct_union_decoder(cls, type_decoder)`
does the same for a `StructUnion` dataclass. It returns an instance with exactly
one field set. A variant that is a dataclass is only tried for JSON objects and
arrays. When nothing fits, the decoder raises `DecodeError`.

## Porting between models

```python
from apicodec.port import port

card = port(visa_card, Card)
```

`port` builds a new `Card` from every field whose JSON name the two models share.
Dataclass fields without a `"json"` entry count as embedded, and the outer
object's fields win over theirs.

The per-field `Field` records, the `raw` text and the `extra_fields` of the
source's metadata object are copied to the target's metadata object. The
metadata object is the field tagged `metadata`, or otherwise a field named
`json`.

## What is not included

There is no function that decodes JSON text into a model. The package parses
tags, keeps registries and state, and resolves unions. Decoding primitives,
dates, lists and plain dataclasses from parsed JSON is up to the type decoder
you pass to `make_union_decoder` or `make_struct_union_decoder`. Query strings
can only be encoded, not parsed.