import dataclasses

import pytest

from apicodec.field import Field, FieldStatus


def test_default_field_is_missing_and_null():
    field = Field()
    assert field.raw == ""
    assert field.status is FieldStatus.MISSING
    assert field.is_missing()
    assert field.is_null()
    assert not field.is_invalid()


def test_explicit_null_is_null_but_not_missing():
    field = Field(raw="null", status=FieldStatus.NULL)
    assert field.is_null()
    assert not field.is_missing()
    assert not field.is_invalid()


def test_invalid_field():
    field = Field(raw='"12"', status=FieldStatus.INVALID)
    assert field.is_invalid()
    assert not field.is_null()
    assert not field.is_missing()
    assert field.raw == '"12"'


def test_valid_field():
    field = Field(raw="12", status=FieldStatus.VALID)
    assert not field.is_invalid()
    assert not field.is_null()
    assert not field.is_missing()


def test_status_order_follows_null_checks():
    ordered = sorted(FieldStatus)
    assert ordered == [
        FieldStatus.MISSING,
        FieldStatus.NULL,
        FieldStatus.INVALID,
        FieldStatus.VALID,
    ]
    assert [Field(status=status).is_null() for status in ordered] == [True, True, False, False]
    assert Field(status=FieldStatus(3)).status is FieldStatus.VALID


def test_fields_compare_by_value_and_are_frozen():
    field = Field(raw="true", status=FieldStatus.VALID)
    assert field == Field(raw="true", status=FieldStatus.VALID)
    with pytest.raises(dataclasses.FrozenInstanceError):
        field.raw = "false"