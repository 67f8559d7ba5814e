"""Parser selection by file extension or notation type."""

from __future__ import annotations

import enum
from collections.abc import Callable
from pathlib import Path

from ..exceptions import UnsupportedFormatError
from ..models import UdpApiSpec
from .base import PathLike, SpecParser
from .idl_spec import IdlSpecParser
from .yaml_spec import YamlSpecParser


class SpecParserType(enum.Enum):
    """Known spec notations. XML is recognized but has no parser."""

    IDL = "idl"
    YAML = "yaml"
    XML = "xml"


_PARSERS_BY_TYPE: dict[SpecParserType, Callable[[], SpecParser]] = {
    SpecParserType.IDL: IdlSpecParser,
    SpecParserType.YAML: YamlSpecParser,
}

_PARSERS_BY_EXTENSION: dict[str, Callable[[], SpecParser]] = {
    ".idl": IdlSpecParser,
    ".gidl": IdlSpecParser,
    ".yaml": YamlSpecParser,
    ".yml": YamlSpecParser,
}


def supported_extensions() -> list[str]:
    return list(_PARSERS_BY_EXTENSION)


def is_supported(path: PathLike) -> bool:
    """Return True if a parser exists for the file's extension (case-insensitive)."""
    return Path(path).suffix.lower() in _PARSERS_BY_EXTENSION


def create_parser(path: PathLike) -> SpecParser:
    """Create the parser for a file path.

    Raises:
        UnsupportedFormatError: If the extension is not registered

    Example:
        >>> type(create_parser("api/telemetry.YML")).__name__
        'YamlSpecParser'
    """
    suffix = Path(path).suffix.lower()
    factory = _PARSERS_BY_EXTENSION.get(suffix)
    if factory is None:
        raise UnsupportedFormatError(
            f"Unsupported file extension '{suffix}'. "
            f"Supported: {', '.join(supported_extensions())}"
        )
    return factory()


def create_parser_for(parser_type: SpecParserType) -> SpecParser:
    """Create the parser for a notation type.

    Raises:
        UnsupportedFormatError: If no parser implements the notation
    """
    factory = _PARSERS_BY_TYPE.get(parser_type)
    if factory is None:
        raise UnsupportedFormatError(f"No parser available for {parser_type.value}")
    return factory()


def default_parser() -> SpecParser:
    return YamlSpecParser()


def load_spec(path: PathLike) -> UdpApiSpec:
    """Parse a spec file with the parser matching its extension."""
    return create_parser(path).parse_file(path)


def save_spec(spec: UdpApiSpec, path: PathLike) -> None:
    """Write a spec in the notation matching the file extension."""
    create_parser(path).save_to_file(spec, path)
