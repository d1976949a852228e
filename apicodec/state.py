"""Run-time state threaded through a decode."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apicodec.registry import ValidationEntry


class Exactness(enum.IntEnum):
    """How closely a decoded value matched its target type."""

    LOOSE = 0
    EXTRAS = 1
    EXACT = 2


@dataclass
class DecoderState:
    """Strictness, running exactness and the active field validator."""

    strict: bool = False
    exactness: Exactness = Exactness.EXACT
    validator: ValidationEntry | None = None

    def validate_string(self, value: str) -> None:
        """Mark the decode loose if the string is not a legal enum value."""
        if self.validator is None:
            return
        if value not in self.validator.strings:
            self.exactness = Exactness.LOOSE

    def validate_int(self, value: int) -> None:
        """Mark the decode loose if the integer is not a legal enum value."""
        if self.validator is None:
            return
        if value not in self.validator.ints:
            self.exactness = Exactness.LOOSE

    def validate_bool(self, value: bool) -> None:
        """Mark the decode loose if the boolean is not the allowed one."""
        if self.validator is None:
            return
        allowed = self.validator.bools
        if (allowed == 1 and not value) or (allowed == 0 and value):
            self.exactness = Exactness.LOOSE


def guard_strict(state: DecoderState, cond: bool) -> bool:
    """Return True if ``cond`` must fail the decode.

    When ``cond`` holds but the state is lenient, the decode goes on and is
    marked loose instead.
    """
    if not cond:
        return False
    if state.strict:
        return True
    state.exactness = Exactness.LOOSE
    return False


_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+\Z"
)
_INFINITY = re.compile(r"[+-]?(?:inf|infinity)\Z", re.IGNORECASE)


def can_parse_as_number(text: str) -> bool:
    """True if ``text`` is, as a whole, a finite-range floating point literal."""
    if not text or text != text.strip() or "_" in text:
        return False
    if _HEX_FLOAT.match(text):
        try:
            float.fromhex(text)
        except (ValueError, OverflowError):
            return False
        return True
    try:
        value = float(text)
    except ValueError:
        return False
    if math.isnan(value):
        return text[0] not in "+-"
    if math.isinf(value):
        return bool(_INFINITY.match(text))
    return True