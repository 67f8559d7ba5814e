"""Message size and layout calculation utilities.

This module computes wire offsets and sizes from a schema without encoding
anything.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..idl.models import IdlDocument
from ..models import MessageSchema


@dataclass(frozen=True)
class FieldLayout:
    """Position of one field in the encoded message.

    Attributes:
        key: ``header.<name>`` or ``payload.<name>``
        name: Field name
        type_name: Canonical type name
        offset: Byte offset from the start of the message
        size: Size in bytes
        endian: Byte order
        bits: ``name[start:end]`` for each bit definition
    """

    key: str
    name: str
    type_name: str
    offset: int
    size: int
    endian: str
    bits: tuple[str, ...] = ()


def field_layout(schema: MessageSchema) -> list[FieldLayout]:
    """List every field with its offset and size, in wire order.

    Example:
        >>> layout = field_layout(schema)
        >>> [(f.key, f.offset, f.size) for f in layout]
        [('header.msgId', 0, 2), ('payload.code', 2, 1)]
    """
    layout: list[FieldLayout] = []
    offset = 0
    for section, fields in schema.sections():
        for field_def in fields:
            bits = tuple(
                f"{bit.name}[{bit.start_bit}:{bit.end_bit}]" for bit in field_def.bit_fields or []
            )
            layout.append(
                FieldLayout(
                    key=f"{section}.{field_def.name}",
                    name=field_def.name,
                    type_name=field_def.type.value,
                    offset=offset,
                    size=field_def.byte_size,
                    endian=field_def.endian,
                    bits=bits,
                )
            )
            offset += field_def.byte_size
    return layout


def encoded_size(schema: MessageSchema) -> int:
    """Total size of an encoded message in bytes."""
    return schema.total_size


def field_sizes(schema: MessageSchema) -> dict[str, int]:
    """Size in bytes of each field, keyed ``header.<name>`` / ``payload.<name>``."""
    return {entry.key: entry.size for entry in field_layout(schema)}


def struct_sizes(doc: IdlDocument, pack_bit_fields: bool = True) -> dict[str, int]:
    """Size in bytes of every struct declared in an IDL document.

    Returns:
        Struct name -> size, header struct first, then user and message structs
    """
    sizes: dict[str, int] = {}
    if doc.header_struct is not None:
        sizes[doc.header_struct.name] = doc.header_struct.calculate_size(doc, pack_bit_fields)
    for struct_def in [*doc.user_structs, *doc.message_structs]:
        sizes[struct_def.name] = struct_def.calculate_size(doc, pack_bit_fields)
    return sizes
