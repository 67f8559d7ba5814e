"""Binary codec for udpspec.

This module provides schema-driven encoding and decoding of fixed-layout
messages.
"""

from __future__ import annotations

from .bits import compose_bits, extract_bits, insert_bits
from .decoder import decode, decode_field
from .encoder import MessageBuilder, encode, encode_field, encode_fields
from .results import FieldResult, Filled, Ok, ParsedValue

__all__ = [
    "encode",
    "encode_fields",
    "encode_field",
    "decode",
    "decode_field",
    "MessageBuilder",
    "Ok",
    "Filled",
    "FieldResult",
    "ParsedValue",
    "insert_bits",
    "extract_bits",
    "compose_bits",
]
