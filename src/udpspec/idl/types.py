"""Primitive type table for the IDL grammar.

Maps a type name token such as ``unsigned short`` or ``uint16`` to its byte
width, signedness and canonical field type. Names that match no alias are
treated as references to a user struct.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping

from ..models.fields import FieldType


class PrimitiveType(enum.Enum):
    """IDL primitive types.

    Each member carries ``(byte width, signed, canonical FieldType)``.
    ``STRUCT`` has width 0; its size comes from the referenced struct.
    """

    CHAR = (1, True, FieldType.INT8)
    UNSIGNED_CHAR = (1, False, FieldType.BYTE)
    SHORT = (2, True, FieldType.INT16)
    UNSIGNED_SHORT = (2, False, FieldType.UINT16)
    INT = (4, True, FieldType.INT32)
    UNSIGNED_INT = (4, False, FieldType.UINT32)
    LONG = (8, True, FieldType.INT64)
    UNSIGNED_LONG = (8, False, FieldType.UINT64)
    FLOAT = (4, True, FieldType.FLOAT)
    DOUBLE = (8, True, FieldType.DOUBLE)
    STRUCT = (0, False, None)

    @property
    def size(self) -> int:
        """Width of a single element in bytes (0 for STRUCT)."""
        return self.value[0]

    @property
    def signed(self) -> bool:
        return self.value[1]

    @property
    def field_type(self) -> FieldType:
        """Canonical field type; STRUCT falls back to BYTE."""
        return self.value[2] or FieldType.BYTE

    @property
    def is_integer(self) -> bool:
        return self not in (PrimitiveType.FLOAT, PrimitiveType.DOUBLE, PrimitiveType.STRUCT)


DEFAULT_TYPE_ALIASES: Mapping[str, PrimitiveType] = {
    "unsignedchar": PrimitiveType.UNSIGNED_CHAR,
    "uint8": PrimitiveType.UNSIGNED_CHAR,
    "byte": PrimitiveType.UNSIGNED_CHAR,
    "char": PrimitiveType.CHAR,
    "int8": PrimitiveType.CHAR,
    "unsignedshort": PrimitiveType.UNSIGNED_SHORT,
    "uint16": PrimitiveType.UNSIGNED_SHORT,
    "ushort": PrimitiveType.UNSIGNED_SHORT,
    "short": PrimitiveType.SHORT,
    "int16": PrimitiveType.SHORT,
    "unsignedint": PrimitiveType.UNSIGNED_INT,
    "uint32": PrimitiveType.UNSIGNED_INT,
    "uint": PrimitiveType.UNSIGNED_INT,
    "int": PrimitiveType.INT,
    "int32": PrimitiveType.INT,
    "unsignedlong": PrimitiveType.UNSIGNED_LONG,
    "ulong": PrimitiveType.UNSIGNED_LONG,
    "long": PrimitiveType.LONG,
    "int64": PrimitiveType.LONG,
    "float": PrimitiveType.FLOAT,
    "double": PrimitiveType.DOUBLE,
}

# Canonical field type -> IDL spelling, used when regenerating IDL text
IDL_TYPE_NAMES: Mapping[FieldType, str] = {
    FieldType.BYTE: "unsigned char",
    FieldType.INT8: "char",
    FieldType.INT16: "short",
    FieldType.UINT16: "unsigned short",
    FieldType.INT32: "int",
    FieldType.UINT32: "unsigned int",
    FieldType.INT64: "long",
    FieldType.UINT64: "unsigned long",
    FieldType.FLOAT: "float",
    FieldType.DOUBLE: "double",
}


def normalize_type_name(type_name: str) -> str:
    """Lower-case a type name and drop all whitespace (``unsigned  short`` -> ``unsignedshort``)."""
    return "".join(type_name.lower().split())


def resolve_primitive(
    type_name: str, aliases: Mapping[str, PrimitiveType] = DEFAULT_TYPE_ALIASES
) -> PrimitiveType:
    """Look up a type name in the alias table.

    Args:
        type_name: Type name as written in the source (may be multi-word)
        aliases: Alias table to consult

    Returns:
        The matching primitive, or ``PrimitiveType.STRUCT`` when nothing matches
    """
    return aliases.get(normalize_type_name(type_name), PrimitiveType.STRUCT)
