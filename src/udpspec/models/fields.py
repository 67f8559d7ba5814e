"""Canonical field and bit-field definitions.

A FieldDefinition describes one fixed-width slot of the wire layout. Its byte
width is derived from ``type`` (fixed widths) or ``size`` (padding, string,
bytes). BitFieldDefinitions subdivide an integer field into named bit ranges.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

import structlog
from pydantic import Field, field_validator

from .base import OptionalText, SpecModel, Text, TextMap

logger = structlog.get_logger(__name__)

Endian = Literal["little", "big"]
ValueFormat = Literal["decimal", "hex", "binary"]


class FieldType(str, enum.Enum):
    """Canonical wire types."""

    BYTE = "byte"
    INT8 = "int8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    PADDING = "padding"
    STRING = "string"
    BYTES = "bytes"

    @property
    def fixed_size(self) -> int | None:
        """Width in bytes, or None for the variable-width types."""
        return _FIXED_SIZES.get(self)

    @property
    def is_variable(self) -> bool:
        return self in DEFAULT_VARIABLE_SIZES

    @property
    def is_integer(self) -> bool:
        return self in _STRUCT_CODES and self not in (FieldType.FLOAT, FieldType.DOUBLE)

    @property
    def struct_code(self) -> str | None:
        """``struct`` module format character for numeric types."""
        return _STRUCT_CODES.get(self)

    @classmethod
    def parse(cls, name: str) -> FieldType:
        """Resolve a type name, accepting the common aliases.

        Unknown names fall back to BYTE.

        Example:
            >>> FieldType.parse("UInt8")
            <FieldType.BYTE: 'byte'>
        """
        key = name.strip().lower()
        try:
            return cls(_TYPE_ALIASES.get(key, key))
        except ValueError:
            logger.warning("unknown_field_type", type_name=name, fallback=cls.BYTE.value)
            return cls.BYTE


_FIXED_SIZES = {
    FieldType.BYTE: 1,
    FieldType.INT8: 1,
    FieldType.INT16: 2,
    FieldType.UINT16: 2,
    FieldType.INT32: 4,
    FieldType.UINT32: 4,
    FieldType.INT64: 8,
    FieldType.UINT64: 8,
    FieldType.FLOAT: 4,
    FieldType.DOUBLE: 8,
}

_STRUCT_CODES = {
    FieldType.BYTE: "B",
    FieldType.INT8: "b",
    FieldType.INT16: "h",
    FieldType.UINT16: "H",
    FieldType.INT32: "i",
    FieldType.UINT32: "I",
    FieldType.INT64: "q",
    FieldType.UINT64: "Q",
    FieldType.FLOAT: "f",
    FieldType.DOUBLE: "d",
}

_TYPE_ALIASES = {
    "uint8": "byte",
    "short": "int16",
    "int": "int32",
    "uint": "uint32",
    "float32": "float",
    "float64": "double",
    "bytearray": "bytes",
}

DEFAULT_VARIABLE_SIZES = {
    FieldType.PADDING: 1,
    FieldType.STRING: 16,
    FieldType.BYTES: 16,
}


class BitFieldDefinition(SpecModel):
    """A named bit range inside an integer field.

    Bits are numbered from the least significant bit (0). Either ``single_bit``
    (YAML ``bit``) or ``bit_range`` (YAML ``bits``, ``"start:end"``) should be
    set; with neither, the definition covers bit 0 only.

    Example:
        >>> flag = BitFieldDefinition(name="mode", bit_range="2:4")
        >>> flag.bit_size, hex(flag.bit_mask), flag.max_value
        (3, '0x1c', 7)
    """

    name: Text = ""
    single_bit: Optional[int] = Field(default=None, alias="bit")
    bit_range: OptionalText = Field(default=None, alias="bits")
    value: OptionalText = None
    description: Text = ""
    enum_values: TextMap = Field(default=None, alias="enum")

    @property
    def start_bit(self) -> int:
        if self.single_bit is not None:
            return self.single_bit
        if self.bit_range:
            start = _parse_int(self.bit_range.split(":")[0])
            if start is not None:
                return start
        return 0

    @property
    def end_bit(self) -> int:
        if self.single_bit is not None:
            return self.single_bit
        if self.bit_range:
            parts = self.bit_range.split(":")
            if len(parts) >= 2:
                end = _parse_int(parts[1])
                if end is not None:
                    return end
            start = _parse_int(parts[0])
            if start is not None:
                return start
        return 0

    @property
    def bit_size(self) -> int:
        return self.end_bit - self.start_bit + 1

    @property
    def bit_mask(self) -> int:
        mask = 0
        for bit in range(self.start_bit, self.end_bit + 1):
            mask |= 1 << bit
        return mask

    @property
    def max_value(self) -> int:
        return (1 << self.bit_size) - 1 if self.bit_size > 0 else 0


class FieldDefinition(SpecModel):
    """One field of a message header or payload.

    Attributes:
        name: Field name (flattened names such as ``pt[0].x`` are allowed)
        type: Canonical wire type
        value: Default value as text, interpreted according to ``format``
        size: Total bytes for padding/string/bytes; ignored for fixed types
        endian: Byte order of multi-byte values
        description: Free-form description
        format: How ``value`` is written and how decoded values are displayed
        enum_values: Display value -> label mapping (YAML ``enum``)
        bit_fields: Named bit ranges within an integer field (YAML ``bits``)
        component_ref: ``$ref`` placeholder, replaced during reference resolution
    """

    name: Text = ""
    type: FieldType = FieldType.BYTE
    value: OptionalText = None
    size: Optional[int] = Field(default=None, ge=0)
    endian: Endian = "little"
    description: Text = ""
    format: ValueFormat = "decimal"
    enum_values: TextMap = Field(default=None, alias="enum")
    bit_fields: Optional[list[BitFieldDefinition]] = Field(default=None, alias="bits")
    component_ref: OptionalText = Field(default=None, alias="$ref")

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return FieldType.parse(value)
        return value

    @field_validator("endian", mode="before")
    @classmethod
    def _parse_endian(cls, value: Any) -> Any:
        if value is None:
            return "little"
        return "big" if str(value).strip().lower() == "big" else "little"

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: Any) -> Any:
        text = str(value or "").strip().lower()
        return text if text in ("hex", "binary") else "decimal"

    @property
    def byte_size(self) -> int:
        """Number of bytes this field occupies on the wire."""
        fixed = self.type.fixed_size
        if fixed is not None:
            return fixed
        if self.size is not None:
            return self.size
        return DEFAULT_VARIABLE_SIZES[self.type]

    @property
    def has_bit_fields(self) -> bool:
        return bool(self.bit_fields)

    @property
    def is_big_endian(self) -> bool:
        return self.endian == "big"

    def with_type(self, new_type: FieldType | str) -> FieldDefinition:
        """Return a copy re-typed to ``new_type`` with ``size`` recomputed.

        Variable-width types get their default size; fixed-width types drop it.

        Example:
            >>> FieldDefinition(name="x").with_type("string").byte_size
            16
        """
        field_type = FieldType.parse(new_type) if isinstance(new_type, str) else new_type
        size = DEFAULT_VARIABLE_SIZES.get(field_type)
        return self.model_copy(update={"type": field_type, "size": size})


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None
