"""Per-field results of encoding and decoding.

Conversion failures on a single field never abort a message. The encoder
reports each field as ``Ok`` or ``Filled`` (zero bytes substituted), the
decoder records the failure on the ParsedValue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..exceptions import DecodeError, EncodeError
from ..models import FieldType


@dataclass(frozen=True)
class Ok:
    """A field that encoded successfully."""

    key: str
    data: bytes


@dataclass(frozen=True)
class Filled:
    """A field whose value could not be encoded and was zero filled.

    Attributes:
        key: ``header.<name>`` or ``payload.<name>``
        data: The zero bytes written in its place
        cause: Why the value was rejected
    """

    key: str
    data: bytes
    cause: EncodeError


FieldResult = Union[Ok, Filled]


@dataclass(frozen=True)
class ParsedValue:
    """A decoded field.

    Attributes:
        raw: Bytes consumed from the message, in wire order (empty when the
            buffer was too short)
        display: Human-readable value (``"N/A"`` when the buffer was too short)
        field_name: Field name
        field_type: Canonical field type
        error: Set when the bytes could not be interpreted
    """

    raw: bytes
    display: str
    field_name: str
    field_type: FieldType
    error: Optional[DecodeError] = None

    @property
    def hex_value(self) -> str:
        """Raw bytes as space-separated hex (``"0A 0B"``)."""
        return self.raw.hex(" ").upper()

    @property
    def ok(self) -> bool:
        if self.error is not None:
            return False
        return bool(self.raw) or self.display != "N/A"
