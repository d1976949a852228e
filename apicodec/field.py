"""Per-field metadata recorded while decoding a JSON object."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class FieldStatus(enum.IntEnum):
    """How a field looked in the decoded JSON, from least to most present."""

    MISSING = 0
    NULL = 1
    INVALID = 2
    VALID = 3


@dataclass(frozen=True)
class Field:
    """The raw JSON text of a field and how well it decoded."""

    raw: str = ""
    status: FieldStatus = FieldStatus.MISSING

    def is_null(self) -> bool:
        """True if the field is explicitly null or absent altogether."""
        return self.status <= FieldStatus.NULL

    def is_missing(self) -> bool:
        """True if the field's key did not appear in the JSON."""
        return self.status == FieldStatus.MISSING

    def is_invalid(self) -> bool:
        """True if the field was present but could not be decoded."""
        return self.status == FieldStatus.INVALID