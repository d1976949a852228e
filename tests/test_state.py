import pytest

from apicodec.registry import ValidationEntry
from apicodec.state import DecoderState, Exactness, can_parse_as_number, guard_strict

STRING_ENUM = ValidationEntry(
    attribute="string_enum", name="string_enum", strings=("one", "two", "three")
)
INT_ENUM = ValidationEntry(attribute="int_enum", name="int_enum", ints=(200, 404))
FALSE_ONLY = ValidationEntry(attribute="bool_enum", name="bool_enum", bools=0)
EITHER_BOOL = ValidationEntry(attribute="weird_bool_enum", name="weird_bool_enum", bools=-1)


def test_default_state():
    state = DecoderState()
    assert state.exactness is Exactness.EXACT
    assert not state.strict
    assert state.validator is None


def test_exactness_order_through_guard():
    state = DecoderState()
    assert state.exactness > Exactness.EXTRAS > Exactness.LOOSE
    guard_strict(state, True)
    assert state.exactness == Exactness.LOOSE
    assert state.exactness < Exactness.EXTRAS


@pytest.mark.parametrize(
    "value, expected",
    [("one", Exactness.EXACT), ("three", Exactness.EXACT), ("none", Exactness.LOOSE)],
)
def test_validate_string(value, expected):
    state = DecoderState(validator=STRING_ENUM)
    state.validate_string(value)
    assert state.exactness is expected


@pytest.mark.parametrize(
    "value, expected",
    [(200, Exactness.EXACT), (404, Exactness.EXACT), (500, Exactness.LOOSE)],
)
def test_validate_int(value, expected):
    state = DecoderState(validator=INT_ENUM)
    state.validate_int(value)
    assert state.exactness is expected


def test_validate_bool_single_value():
    state = DecoderState(validator=FALSE_ONLY)
    state.validate_bool(False)
    assert state.exactness is Exactness.EXACT
    state.validate_bool(True)
    assert state.exactness is Exactness.LOOSE


@pytest.mark.parametrize("value", [True, False])
def test_validate_bool_either(value):
    state = DecoderState(validator=EITHER_BOOL)
    state.validate_bool(value)
    assert state.exactness is Exactness.EXACT


def test_validation_without_validator_keeps_exactness():
    state = DecoderState()
    state.validate_string("none")
    state.validate_int(500)
    state.validate_bool(True)
    assert state.exactness is Exactness.EXACT


def test_guard_strict_false_condition():
    state = DecoderState(strict=True)
    assert guard_strict(state, False) is False
    assert state.exactness is Exactness.EXACT


def test_guard_strict_fails_in_strict_mode():
    state = DecoderState(strict=True)
    assert guard_strict(state, True) is True
    assert state.exactness is Exactness.EXACT


def test_guard_strict_marks_loose_in_lenient_mode():
    state = DecoderState()
    assert guard_strict(state, True) is False
    assert state.exactness is Exactness.LOOSE


@pytest.mark.parametrize("text", ["65", "12", "1.54", "9999.43", "inf"])
def test_numbers_parse(text):
    assert can_parse_as_number(text) is True


@pytest.mark.parametrize("text", ["thirty", "", " 12", "1e400", "1_0", "true"])
def test_non_numbers_do_not_parse(text):
    assert can_parse_as_number(text) is False