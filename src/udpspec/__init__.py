"""udpspec: Schema-Driven UDP Message Codec

A Python library for describing fixed-layout binary network messages in a
compact struct-like IDL or in YAML, and for encoding field values into bytes
and decoding received bytes back into typed, labeled values.

Key Features:
- IDL grammar with struct nesting, arrays, bit fields and message-id markers
- YAML notation with reusable ``$ref`` components
- Pydantic-based canonical schema model
- Fail-soft encoder and decoder with per-field results

Quick Start:
    >>> from udpspec import IdlSpecParser, decode, encode
    >>>
    >>> spec = IdlSpecParser().parse('''
    ... //+MOST_BYTE=true
    ... struct MsgHeader  //$()$
    ... {
    ...     unsigned short MsgID;   //$()$
    ...     unsigned short Length;
    ... };
    ... struct Ping  //$(1)$
    ... {
    ...     MsgHeader h;
    ...     unsigned char code;
    ... };
    ... ''')
    >>> schema = spec.messages["Msg_0001_Ping"].request
    >>> data = encode(schema, {"payload.code": "7"})
    >>> data.hex()
    '0001000007'
    >>> decode(data, schema)["payload.code"].display
    '7'
"""

from __future__ import annotations

from .codec import Filled, MessageBuilder, Ok, ParsedValue, decode, encode, encode_fields
from .config import DEFAULT_CONFIG, ParserConfig, Settings, get_settings
from .exceptions import (
    DecodeError,
    EmptyInputError,
    EncodeError,
    SpecNotFoundError,
    SpecSyntaxError,
    SpecValidationError,
    UdpSpecError,
    UnsupportedFormatError,
)
from .idl.convert import lower, raise_idl
from .idl.grammar import parse_idl
from .log import setup_logging
from .models import (
    BitFieldDefinition,
    FieldDefinition,
    FieldType,
    MessageDefinition,
    MessageSchema,
    UdpApiSpec,
    create_default_spec,
)
from .parsers import (
    IdlSpecParser,
    SpecParser,
    SpecParserType,
    YamlSpecParser,
    create_parser,
    create_parser_for,
    load_spec,
    resolve_references,
    save_spec,
)
from .utils import encoded_size, field_layout, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "encode_fields",
    "decode",
    "MessageBuilder",
    "Ok",
    "Filled",
    "ParsedValue",
    # Schema model
    "FieldType",
    "FieldDefinition",
    "BitFieldDefinition",
    "MessageSchema",
    "MessageDefinition",
    "UdpApiSpec",
    "create_default_spec",
    # IDL
    "parse_idl",
    "lower",
    "raise_idl",
    # Parsers
    "SpecParser",
    "IdlSpecParser",
    "YamlSpecParser",
    "SpecParserType",
    "create_parser",
    "create_parser_for",
    "load_spec",
    "save_spec",
    "resolve_references",
    # Configuration
    "ParserConfig",
    "DEFAULT_CONFIG",
    "Settings",
    "get_settings",
    "setup_logging",
    # Exceptions
    "UdpSpecError",
    "SpecNotFoundError",
    "EmptyInputError",
    "SpecValidationError",
    "SpecSyntaxError",
    "UnsupportedFormatError",
    "EncodeError",
    "DecodeError",
    # Sizing
    "encoded_size",
    "field_layout",
    "field_sizes",
    # Version
    "__version__",
]
