"""Schema-driven binary encoder.

This module provides encode(), which turns a MessageSchema plus textual field
values into the wire bytes of a message. Fields are written header first, then
payload, each in list order; that order is the wire order.

Values are keyed ``header.<name>`` / ``payload.<name>``. A value that cannot
be converted does not abort the message: the field is zero filled and the
failure is reported as a ``Filled`` result.
"""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Optional

import structlog

from ..exceptions import EncodeError
from ..models import FieldDefinition, FieldType, MessageSchema
from .bits import insert_bits
from .results import FieldResult, Filled, Ok

logger = structlog.get_logger(__name__)


def encode(schema: MessageSchema, values: Optional[Mapping[str, str]] = None) -> bytes:
    """Encode a message to bytes.

    Args:
        schema: Header and payload field definitions
        values: Field values keyed ``header.<name>`` / ``payload.<name>``.
            Missing fields use their definition's ``value``, else ``"0"``.

    Returns:
        The encoded message, always ``schema.total_size`` bytes long

    Examples:
        ```python
        from udpspec import FieldDefinition, MessageSchema, encode

        schema = MessageSchema(
            header=[FieldDefinition(name="msgId", type="uint16", endian="big")],
            payload=[FieldDefinition(name="code", type="byte", format="hex")],
        )
        data = encode(schema, {"header.msgId": "1", "payload.code": "0x2A"})
        assert data == b"\\x00\\x01\\x2a"
        ```
    """
    return b"".join(result.data for result in encode_fields(schema, values))


def encode_fields(
    schema: MessageSchema, values: Optional[Mapping[str, str]] = None
) -> list[FieldResult]:
    """Encode every field and report how each one went.

    Returns:
        One ``Ok`` or ``Filled`` per field, in wire order
    """
    values = values or {}
    results: list[FieldResult] = []

    for section, fields in schema.sections():
        for field_def in fields:
            key = f"{section}.{field_def.name}"
            text = values.get(key)
            if text is None:
                text = field_def.value if field_def.value is not None else "0"

            bit_values: dict[str, str] = {}
            if field_def.bit_fields and key not in values:
                for bit in field_def.bit_fields:
                    bit_text = values.get(f"{key}.{bit.name}", bit.value)
                    if bit_text is not None and bit_text.strip():
                        bit_values[bit.name] = bit_text

            try:
                results.append(Ok(key, encode_field(field_def, text, bit_values)))
            except EncodeError as e:
                logger.warning("field_zero_filled", field=key, reason=str(e))
                results.append(Filled(key, bytes(field_def.byte_size), e))

    return results


def encode_field(
    field_def: FieldDefinition,
    value: str,
    bit_values: Optional[Mapping[str, str]] = None,
) -> bytes:
    """Encode a single field value.

    Args:
        field_def: Field definition
        value: Value text, interpreted according to ``field_def.format``
        bit_values: Bit name -> value text, placed over the parsed value for
            fields with bit definitions

    Returns:
        Exactly ``field_def.byte_size`` bytes

    Raises:
        EncodeError: If the value cannot be represented
    """
    field_type = field_def.type
    size = field_def.byte_size

    if field_type is FieldType.PADDING:
        return bytes(size)
    if field_type is FieldType.STRING:
        data = _fit(value.encode("ascii", errors="replace"), size)
    elif field_type is FieldType.BYTES:
        data = _fit(_parse_hex_octets(value, field_def.name), size)
    elif field_type in (FieldType.FLOAT, FieldType.DOUBLE):
        data = _pack_float(field_def, value)
    else:
        number = parse_integer(value, field_def.format, field_def.name)
        if bit_values and field_def.bit_fields:
            number = _apply_bits(field_def, number, bit_values)
        data = _pack_integer(field_def, number)

    if field_def.is_big_endian and size > 1:
        data = data[::-1]
    return data


def parse_integer(text: str, fmt: str = "decimal", field_name: str = "") -> int:
    """Parse an integer literal.

    Args:
        text: Literal text
        fmt: ``hex`` (optional ``0x`` prefix), ``binary`` (optional ``0b``
            prefix) or ``decimal``. A decimal literal written with a ``0x`` or
            ``0b`` prefix is read in that base.
        field_name: Used in the error message

    Raises:
        EncodeError: If the literal is malformed

    Example:
        >>> parse_integer("0x1A2B", "hex"), parse_integer("101", "binary")
        (6699, 5)
    """
    literal = text.strip()
    prefix = literal[:2].lower()
    if fmt not in ("hex", "binary") and prefix in ("0x", "0b"):
        fmt = "hex" if prefix == "0x" else "binary"
    try:
        if fmt == "hex":
            if literal[:2].lower() == "0x":
                literal = literal[2:]
            return int(literal, 16)
        if fmt == "binary":
            if literal[:2].lower() == "0b":
                literal = literal[2:]
            return int(literal, 2)
        return int(literal)
    except ValueError as e:
        raise EncodeError(f"Invalid {fmt} value {text!r} for field '{field_name}'") from e


def _apply_bits(field_def: FieldDefinition, number: int, bit_values: Mapping[str, str]) -> int:
    for bit in field_def.bit_fields or []:
        text = bit_values.get(bit.name)
        if text is None:
            continue
        bit_value = parse_integer(text, "decimal", f"{field_def.name}.{bit.name}")
        try:
            number = insert_bits(number, bit, bit_value)
        except ValueError as e:
            raise EncodeError(str(e)) from e
    return number


def _pack_integer(field_def: FieldDefinition, number: int) -> bytes:
    """Pack an integer little-endian, checking it fits the field width.

    Signed fields accept the unsigned two's-complement range when the value
    was written in hex or binary.
    """
    size = field_def.byte_size
    bits = size * 8
    if field_def.type in (FieldType.INT8, FieldType.INT16, FieldType.INT32, FieldType.INT64):
        min_value = -(1 << (bits - 1))
        max_value = (1 << (bits - 1)) - 1
        if field_def.format in ("hex", "binary"):
            max_value = (1 << bits) - 1
    else:
        min_value = 0
        max_value = (1 << bits) - 1

    if number < min_value or number > max_value:
        raise EncodeError(
            f"Value {number} out of range for {field_def.type.value} field "
            f"'{field_def.name}' (range: {min_value} to {max_value})"
        )

    return (number & ((1 << bits) - 1)).to_bytes(size, "little")


def _pack_float(field_def: FieldDefinition, value: str) -> bytes:
    code = field_def.type.struct_code
    if code is None:
        raise EncodeError(f"Field '{field_def.name}' is not a floating point field")
    try:
        return struct.pack("<" + code, float(value.strip()))
    except ValueError as e:
        raise EncodeError(f"Invalid float value {value!r} for field '{field_def.name}'") from e
    except (OverflowError, struct.error) as e:
        raise EncodeError(
            f"Value {value!r} out of range for {field_def.type.value} field '{field_def.name}'"
        ) from e


def _parse_hex_octets(value: str, field_name: str) -> bytes:
    """Parse ``"0A 0x0B ff"`` style text into bytes."""
    octets = bytearray()
    for token in value.split():
        literal = token[2:] if token[:2].lower() == "0x" else token
        try:
            octet = int(literal, 16)
        except ValueError as e:
            raise EncodeError(f"Invalid hex octet {token!r} for field '{field_name}'") from e
        if not 0 <= octet <= 0xFF:
            raise EncodeError(f"Hex octet {token!r} out of range for field '{field_name}'")
        octets.append(octet)
    return bytes(octets)


def _fit(data: bytes, size: int) -> bytes:
    """Truncate or zero pad to exactly ``size`` bytes."""
    return data[:size].ljust(size, b"\x00")


class MessageBuilder:
    """Accumulates field values for one schema and encodes them.

    Example:
        ```python
        data = (
            MessageBuilder(schema)
            .set_header_value("msgId", "1")
            .set_payload_value("code", "0x2A")
            .build()
        )
        ```
    """

    def __init__(self, schema: MessageSchema) -> None:
        self._schema = schema
        self._values: dict[str, str] = {}

    def set_header_value(self, field_name: str, value: str) -> MessageBuilder:
        self._values[f"header.{field_name}"] = value
        return self

    def set_payload_value(self, field_name: str, value: str) -> MessageBuilder:
        self._values[f"payload.{field_name}"] = value
        return self

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    @property
    def total_size(self) -> int:
        return self._schema.total_size

    def build(self) -> bytes:
        return encode(self._schema, self._values)

    def build_fields(self) -> list[FieldResult]:
        return encode_fields(self._schema, self._values)
