"""Spec notations (IDL and YAML) and the parser registry."""

from __future__ import annotations

from .base import SpecParser
from .idl_spec import IdlSpecParser
from .references import lookup_reference, resolve_references, resolve_schema
from .registry import (
    SpecParserType,
    create_parser,
    create_parser_for,
    default_parser,
    is_supported,
    load_spec,
    save_spec,
    supported_extensions,
)
from .yaml_spec import YamlSpecParser, validate_spec

__all__ = [
    "SpecParser",
    "IdlSpecParser",
    "YamlSpecParser",
    "SpecParserType",
    "create_parser",
    "create_parser_for",
    "default_parser",
    "is_supported",
    "supported_extensions",
    "load_spec",
    "save_spec",
    "resolve_references",
    "resolve_schema",
    "lookup_reference",
    "validate_spec",
]
