"""Schema-driven binary decoder.

This module provides decode(), which walks a MessageSchema over received
bytes and produces labeled, display-formatted values.
"""

from __future__ import annotations

import struct

import structlog

from ..exceptions import DecodeError
from ..models import FieldDefinition, FieldType, MessageSchema
from .bits import extract_bits
from .results import ParsedValue

logger = structlog.get_logger(__name__)

NOT_AVAILABLE = "N/A"


def decode(data: bytes, schema: MessageSchema) -> dict[str, ParsedValue]:
    """Decode a received message.

    Header fields are read first, then payload fields. Decoding stops as soon
    as the offset reaches the end of the buffer. A field that needs more bytes
    than remain is reported with display ``"N/A"`` and empty ``raw``, and ends
    the walk, so the result always covers a prefix of the schema's fields.

    For fields with bit definitions, one extra entry per bit is added under
    ``<section>.<field>.<bit>``.

    Args:
        data: Received bytes
        schema: Header and payload field definitions

    Returns:
        Decoded values keyed ``header.<name>`` / ``payload.<name>``, in wire order

    Examples:
        ```python
        from udpspec import FieldDefinition, MessageSchema, decode

        schema = MessageSchema(payload=[
            FieldDefinition(name="code", type="byte", format="hex", enum={"0x01": "OK"}),
        ])
        values = decode(b"\\x01", schema)
        print(values["payload.code"].display)  # OK (0x01)
        ```
    """
    results: dict[str, ParsedValue] = {}
    offset = 0

    for section, fields in schema.sections():
        for field_def in fields:
            if offset >= len(data):
                break

            key = f"{section}.{field_def.name}"
            parsed, offset = decode_field(data, offset, field_def)
            results[key] = parsed
            if parsed.display == NOT_AVAILABLE and not parsed.raw:
                # Nothing after a short field can be placed
                offset = len(data)
                break

            if parsed.ok and field_def.bit_fields:
                results.update(_decode_bits(key, parsed, field_def))

    logger.debug("message_decoded", size=len(data), fields=len(results))
    return results


def decode_field(data: bytes, offset: int, field_def: FieldDefinition) -> tuple[ParsedValue, int]:
    """Decode one field at ``offset``.

    Returns:
        The parsed value and the offset after the field
    """
    size = field_def.byte_size
    if offset + size > len(data):
        return (
            ParsedValue(
                raw=b"",
                display=NOT_AVAILABLE,
                field_name=field_def.name,
                field_type=field_def.type,
            ),
            offset,
        )

    raw = bytes(data[offset : offset + size])
    try:
        display = format_value(raw, field_def)
        error = None
    except DecodeError as e:
        logger.warning("field_undecodable", field=field_def.name, reason=str(e))
        display = raw.hex("-").upper()
        error = e

    return (
        ParsedValue(
            raw=raw,
            display=display,
            field_name=field_def.name,
            field_type=field_def.type,
            error=error,
        ),
        offset + size,
    )


def format_value(raw: bytes, field_def: FieldDefinition) -> str:
    """Render wire bytes as display text.

    Raises:
        DecodeError: If the bytes cannot be interpreted as the field type
    """
    field_type = field_def.type
    numeric = _numeric_order(raw, field_def)

    if field_type is FieldType.PADDING:
        display = f"[{len(raw)} bytes padding]"
    elif field_type is FieldType.STRING:
        try:
            display = numeric.decode("ascii").rstrip("\x00")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Field '{field_def.name}' is not ASCII text") from e
    elif field_type is FieldType.BYTES:
        display = numeric.hex(" ").upper()
    elif field_type is FieldType.FLOAT:
        display = f"{_unpack(numeric, field_def):.4f}"
    elif field_type is FieldType.DOUBLE:
        display = f"{_unpack(numeric, field_def):.6f}"
    else:
        display = str(_unpack(numeric, field_def))

    if field_def.format == "hex":
        display = format_hex(numeric, field_def)

    if field_def.enum_values and display in field_def.enum_values:
        display = f"{field_def.enum_values[display]} ({display})"

    return display


def format_hex(numeric: bytes, field_def: FieldDefinition) -> str:
    """Zero-padded hex for integers (``0x002A``), a hex dump for anything else."""
    if field_def.type.is_integer:
        value = int.from_bytes(numeric, "little")
        return f"0x{value:0{len(numeric) * 2}X}"
    return numeric.hex(" ").upper()


def _numeric_order(raw: bytes, field_def: FieldDefinition) -> bytes:
    """Little-endian (logical) order of a field's bytes."""
    if field_def.is_big_endian and len(raw) > 1:
        return raw[::-1]
    return raw


def _unpack(numeric: bytes, field_def: FieldDefinition) -> int | float:
    code = field_def.type.struct_code
    if code is None:
        raise DecodeError(f"Field '{field_def.name}' has no numeric interpretation")
    try:
        return struct.unpack("<" + code, numeric)[0]
    except struct.error as e:
        raise DecodeError(f"Cannot unpack field '{field_def.name}': {e}") from e


def _decode_bits(
    key: str, parsed: ParsedValue, field_def: FieldDefinition
) -> dict[str, ParsedValue]:
    if not field_def.bit_fields or not field_def.type.is_integer:
        return {}

    storage = int.from_bytes(_numeric_order(parsed.raw, field_def), "little")
    entries: dict[str, ParsedValue] = {}
    for bit in field_def.bit_fields:
        display = str(extract_bits(storage, bit))
        if bit.enum_values and display in bit.enum_values:
            display = f"{bit.enum_values[display]} ({display})"
        entries[f"{key}.{bit.name}"] = ParsedValue(
            raw=parsed.raw,
            display=display,
            field_name=f"{field_def.name}.{bit.name}",
            field_type=field_def.type,
        )
    return entries
