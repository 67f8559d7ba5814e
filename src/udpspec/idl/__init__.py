"""IDL grammar support for udpspec.

The AST and primitive type table live here. The parser is in
``udpspec.idl.grammar`` and the schema converter in ``udpspec.idl.convert``.
"""

from __future__ import annotations

from .models import (
    BitFieldGroup,
    IdlDirectives,
    IdlDocument,
    IdlField,
    IdlMessageStruct,
    IdlStruct,
    iter_layout_units,
)
from .types import DEFAULT_TYPE_ALIASES, PrimitiveType, resolve_primitive

__all__ = [
    "IdlDirectives",
    "IdlDocument",
    "IdlField",
    "IdlStruct",
    "IdlMessageStruct",
    "BitFieldGroup",
    "iter_layout_units",
    "PrimitiveType",
    "DEFAULT_TYPE_ALIASES",
    "resolve_primitive",
]
