"""Line-oriented parser for the IDL grammar.

The grammar is a C-like struct notation with two kinds of annotations:

    //+PACK_SIZE=1
    //+MOST_BYTE=true

    struct MsgHeader  //$()$
    {
        unsigned short MsgID;   //$()$
        unsigned short Length;
    };

    struct Ping  //$(0x01)$
    {
        MsgHeader header;
        unsigned char code;     // reply code
        unsigned char flags : 3;
    };

Leading ``//+KEY=VALUE`` lines are directives. ``//$()$`` after a struct name
marks the header struct, ``//$(id)$`` marks a message struct. Parsing is
permissive: lines that do not parse are skipped, never raised.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Optional

import structlog

from ..config import DEFAULT_CONFIG, ParserConfig
from .models import IdlDirectives, IdlDocument, IdlField, IdlMessageStruct, IdlStruct
from .types import PrimitiveType, resolve_primitive

logger = structlog.get_logger(__name__)

DIRECTIVE_PATTERN = re.compile(r"//\+(\w+)=(\w+)")
STRUCT_PATTERN = re.compile(r"struct\s+(\w+)\s*(//\$\(([^)]*)\)\$)?")
COMMENT_PATTERN = re.compile(r"//(.*)$")
ARRAY_PATTERN = re.compile(r"(.+)\[(\d+)\]$")

MESSAGE_ID_MARKER = "//$()$"


def parse_idl(text: str, config: ParserConfig = DEFAULT_CONFIG) -> IdlDocument:
    """Parse IDL source text into an IdlDocument.

    Args:
        text: IDL source
        config: Parser configuration (type aliases, directive defaults)

    Returns:
        The parsed document. Malformed lines are skipped.

    Example:
        >>> doc = parse_idl("struct P\\n{\\n    short x;\\n};\\n")
        >>> [f.name for f in doc.user_structs[0].fields]
        ['x']
    """
    lines = text.splitlines()
    directives, index = _parse_directives(lines, config)
    doc = IdlDocument(directives=directives)

    while index < len(lines):
        line = lines[index].strip()

        if not line or (line.startswith("//") and "struct" not in line):
            index += 1
            continue

        match = STRUCT_PATTERN.search(line)
        if match is None:
            index += 1
            continue

        name = match.group(1)
        has_marker = match.group(2) is not None
        marker = match.group(3) or ""

        # Body starts after the line holding "{" (which may be the struct line)
        if "{" not in line:
            index += 1
            while index < len(lines) and "{" not in lines[index]:
                index += 1
        index += 1
        fields, index = _parse_struct_body(lines, index, config.type_aliases)

        if has_marker and not marker:
            if doc.header_struct is not None:
                logger.warning(
                    "duplicate_header_struct", previous=doc.header_struct.name, current=name
                )
            doc.header_struct = IdlStruct(name=name, fields=fields)
        elif has_marker:
            doc.message_structs.append(
                IdlMessageStruct(
                    name=name,
                    fields=fields,
                    message_id=parse_message_id(marker),
                    message_id_text=marker,
                )
            )
        else:
            doc.user_structs.append(IdlStruct(name=name, fields=fields))

    logger.debug(
        "idl_parsed",
        user_structs=len(doc.user_structs),
        message_structs=len(doc.message_structs),
        has_header=doc.header_struct is not None,
    )
    return doc


def _parse_directives(lines: Sequence[str], config: ParserConfig) -> tuple[IdlDirectives, int]:
    """Read leading directive/comment/blank lines.

    Returns:
        The directive set and the index of the first line after the preamble
    """
    pack_size = config.default_pack_size
    big_endian = config.default_big_endian
    index = 0

    while index < len(lines):
        line = lines[index].strip()
        if line and not line.startswith("//"):
            break

        match = DIRECTIVE_PATTERN.search(line)
        if match:
            key = match.group(1).upper()
            value = match.group(2)
            if key == "PACK_SIZE":
                try:
                    pack_size = max(1, int(value))
                except ValueError:
                    logger.debug("invalid_pack_size", value=value)
            elif key == "MOST_BYTE":
                big_endian = value.lower() == "true"
            else:
                logger.debug("unknown_directive", key=key)
        index += 1

    return IdlDirectives(pack_size=pack_size, big_endian=big_endian), index


def _parse_struct_body(
    lines: Sequence[str], index: int, aliases: Mapping[str, PrimitiveType]
) -> tuple[list[IdlField], int]:
    fields: list[IdlField] = []

    while index < len(lines):
        line = lines[index].strip()
        index += 1

        if line.startswith("}"):
            break

        if not line or (line.startswith("//") and ";" not in line):
            continue

        parsed = parse_field(line, aliases)
        if parsed is None:
            logger.debug("skipped_field_line", line_number=index, line=line)
        else:
            fields.append(parsed)

    return fields, index


def parse_field(
    line: str, aliases: Mapping[str, PrimitiveType] = DEFAULT_CONFIG.type_aliases
) -> Optional[IdlField]:
    """Parse one field declaration line.

    Handles, in order: the ``//$()$`` message-id marker, a trailing comment,
    the ``;``, a ``: bits`` width, a ``[N]`` array size, and finally the
    ``type name`` tokens (the last token is the name, the rest the type).

    Args:
        line: Source line
        aliases: Type alias table used to resolve the primitive type

    Returns:
        The field, or None when the line is not a field declaration

    Example:
        >>> f = parse_field("unsigned short MsgID;   //$()$ id of the message")
        >>> f.type_name, f.name, f.is_message_id_marker, f.comment
        ('unsigned short', 'MsgID', True, 'id of the message')
    """
    if ";" not in line:
        return None

    is_marker = False
    if MESSAGE_ID_MARKER in line:
        is_marker = True
        line = line.replace(MESSAGE_ID_MARKER, "").strip()

    comment = ""
    comment_match = COMMENT_PATTERN.search(line)
    if comment_match:
        comment = comment_match.group(1).strip()
        line = line[: comment_match.start()].strip()

    line = line.rstrip(";").strip()

    bit_field_size = None
    parts = line.split(":")
    if len(parts) == 2:
        try:
            bit_field_size = int(parts[1].strip())
            line = parts[0].strip()
        except ValueError:
            pass

    array_size = None
    array_match = ARRAY_PATTERN.match(line)
    if array_match:
        array_size = int(array_match.group(2))
        line = array_match.group(1).strip()

    tokens = line.split()
    if len(tokens) < 2:
        return None

    type_name = " ".join(tokens[:-1])
    return IdlField(
        name=tokens[-1],
        type_name=type_name,
        array_size=array_size,
        bit_field_size=bit_field_size,
        is_message_id_marker=is_marker,
        comment=comment,
        primitive_type=resolve_primitive(type_name, aliases),
    )


def parse_message_id(text: str) -> int:
    """Parse a message marker id: decimal, or hex with a ``0x``/``0X`` prefix.

    Unparseable ids yield 0.

    Example:
        >>> parse_message_id("0x0A"), parse_message_id("10")
        (10, 10)
    """
    value = text.strip()
    try:
        if value.lower().startswith("0x"):
            return int(value, 16)
        return int(value)
    except ValueError:
        logger.warning("invalid_message_id", text=text)
        return 0
