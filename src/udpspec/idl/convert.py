"""Conversion between the IDL AST and the canonical schema model.

``lower`` turns an IdlDocument into a UdpApiSpec: user structs become component
schemas, the header struct becomes ``components.headers["CommonHeader"]`` and
each message struct becomes a message whose struct-typed, array and bit fields
are flattened into plain wire fields.

``raise_idl`` goes the other way and is deliberately lossy:

- the header is always a synthetic ``MsgHeader { MsgID; Length; }``
- message ids are renumbered 1, 2, 3, ...
- request headers are dropped (only payloads are emitted)
- flattened names are turned into identifiers, so nested structs stay flat

A spec that has been through ``lower(raise_idl(...))`` once is stable under
further cycles.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import structlog

from ..config import DEFAULT_CONFIG, ParserConfig
from ..models.fields import BitFieldDefinition, FieldDefinition
from ..models.spec import (
    ApiInfo,
    ComponentsDefinition,
    MessageDefinition,
    MessageSchema,
    SchemaDefinition,
    UdpApiSpec,
)
from .models import BitFieldGroup, IdlDocument, IdlField, IdlMessageStruct, iter_layout_units
from .types import IDL_TYPE_NAMES

logger = structlog.get_logger(__name__)

HEADER_STRUCT_NAME = "MsgHeader"
_MESSAGE_NAME_PREFIX = re.compile(r"^Msg_\d+_")
_FIRST_ELEMENT = re.compile(r"(.+)\[0\]")
_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


# ---------------------------------------------------------------------------
# IDL -> schema
# ---------------------------------------------------------------------------


def lower(
    doc: IdlDocument,
    source_name: Optional[str] = None,
    config: ParserConfig = DEFAULT_CONFIG,
) -> UdpApiSpec:
    """Convert a parsed IDL document into a canonical spec.

    Args:
        doc: Parsed IDL document
        source_name: Source file path; its stem becomes the spec title
        config: Parser configuration

    Returns:
        A new UdpApiSpec. The document is not modified.
    """
    directives = doc.directives
    endian_label = "Big" if directives.big_endian else "Little"
    spec = UdpApiSpec(
        version="1.0.0",
        info=ApiInfo(
            title=Path(source_name).stem if source_name else "IDL Specification",
            description=(
                f"Converted from IDL (Pack Size: {directives.pack_size}, Endian: {endian_label})"
            ),
            version="1.0.0",
        ),
    )

    if doc.user_structs or doc.header_struct is not None:
        components = ComponentsDefinition()
        if doc.header_struct is not None:
            components.headers[config.header_component_name] = lower_fields(
                doc.header_struct.fields, doc, config, (doc.header_struct.name,)
            )
        for user_struct in doc.user_structs:
            components.schemas[user_struct.name] = SchemaDefinition(
                description=user_struct.comment,
                fields=lower_fields(user_struct.fields, doc, config, (user_struct.name,)),
            )
        spec.components = components

    for message_struct in doc.message_structs:
        name = f"Msg_{message_struct.message_id:04d}_{message_struct.name}"
        spec.messages[name] = _lower_message(message_struct, doc, config)

    return spec


def _lower_message(
    message_struct: IdlMessageStruct, doc: IdlDocument, config: ParserConfig
) -> MessageDefinition:
    header_struct = doc.header_struct
    header: list[FieldDefinition] = []
    payload: list[FieldDefinition] = []
    visiting = (message_struct.name,)

    for unit in iter_layout_units(message_struct.fields, config.pack_bit_fields):
        if (
            header_struct is not None
            and isinstance(unit, IdlField)
            and unit.type_name == header_struct.name
        ):
            # The header struct is spliced in as the request header
            fields = lower_fields(header_struct.fields, doc, config, visiting)
            _assign_message_id(fields, header_struct.fields, message_struct.message_id_text, config)
            header.extend(fields)
        else:
            payload.extend(_lower_unit(unit, doc, config, visiting))

    return MessageDefinition(
        description=f"Message ID: {message_struct.message_id_text} ({message_struct.name})",
        timeout_ms=config.default_timeout_ms,
        request=MessageSchema(header=header, payload=payload),
    )


def _assign_message_id(
    fields: list[FieldDefinition],
    source_fields: Sequence[IdlField],
    message_id_text: str,
    config: ParserConfig,
) -> None:
    """Write the message id into the id field of a spliced header.

    The first field with a configured id name wins; otherwise the field
    carrying the ``//$()$`` marker receives it.
    """
    for field_def in fields:
        if field_def.name in config.message_id_field_names:
            field_def.value = message_id_text
            return

    marked = {f.name for f in source_fields if f.is_message_id_marker}
    for field_def in fields:
        if field_def.name in marked:
            field_def.value = message_id_text
            return


def lower_fields(
    fields: Sequence[IdlField],
    doc: IdlDocument,
    config: ParserConfig = DEFAULT_CONFIG,
    _visiting: tuple[str, ...] = (),
) -> list[FieldDefinition]:
    """Lower a struct's field list, grouping bit fields into storage fields."""
    result: list[FieldDefinition] = []
    for unit in iter_layout_units(fields, config.pack_bit_fields):
        result.extend(_lower_unit(unit, doc, config, _visiting))
    return result


def _lower_unit(
    unit: IdlField | BitFieldGroup,
    doc: IdlDocument,
    config: ParserConfig,
    visiting: tuple[str, ...],
) -> list[FieldDefinition]:
    if isinstance(unit, BitFieldGroup):
        return [_lower_bit_group(unit, doc)]
    return lower_field(unit, doc, config, visiting)


def _lower_bit_group(group: BitFieldGroup, doc: IdlDocument) -> FieldDefinition:
    first, _ = group.members[0]
    return FieldDefinition(
        name=group.name,
        type=group.storage.field_type,
        value="0",
        description=first.comment,
        endian=doc.directives.endian,
        bit_fields=[
            BitFieldDefinition(
                name=member.name,
                bit_range=f"{start}:{start + (member.bit_field_size or 1) - 1}",
                description=member.comment,
            )
            for member, start in group.members
        ],
    )


def lower_field(
    field: IdlField,
    doc: IdlDocument,
    config: ParserConfig = DEFAULT_CONFIG,
    _visiting: tuple[str, ...] = (),
) -> list[FieldDefinition]:
    """Lower one IDL field into one or more wire fields.

    - Bit field: one storage field with a single bit range ``0..width-1``
    - Struct-typed field: the referenced struct's fields, renamed
      ``<field>.<inner>`` (or ``<field>[i].<inner>`` for arrays)
    - Primitive array: ``<field>[i]`` for each element
    - Scalar: one field

    Example:
        ``Point pt[2]`` with ``Point { short x; short y; }`` lowers to
        ``pt[0].x, pt[0].y, pt[1].x, pt[1].y``.
    """
    endian = doc.directives.endian

    if field.is_bit_field:
        return lower_fields([field], doc, config, _visiting)

    if field.is_struct_type:
        struct_def = doc.find_struct(field.type_name)
        if struct_def is None:
            logger.warning("unknown_struct_type", field=field.name, type_name=field.type_name)
            return []
        if field.type_name in _visiting:
            logger.warning("recursive_struct_type", field=field.name, type_name=field.type_name)
            return []

        inner = lower_fields(struct_def.fields, doc, config, _visiting + (field.type_name,))
        results: list[FieldDefinition] = []
        for i in range(field.count):
            prefix = f"{field.name}[{i}]" if field.count > 1 else field.name
            for inner_field in inner:
                name = f"{prefix}.{inner_field.name}"
                results.append(inner_field.model_copy(update={"name": name}, deep=True))
        return results

    field_type = field.primitive.field_type

    if field.is_array:
        return [
            FieldDefinition(
                name=f"{field.name}[{i}]",
                type=field_type,
                value="0",
                description=field.comment if i == 0 else "",
                endian=endian,
            )
            for i in range(field.count)
        ]

    return [
        FieldDefinition(
            name=field.name,
            type=field_type,
            value="0",
            description=field.comment,
            endian=endian,
        )
    ]


# ---------------------------------------------------------------------------
# schema -> IDL
# ---------------------------------------------------------------------------


def raise_idl(spec: UdpApiSpec) -> str:
    """Regenerate IDL text from a canonical spec.

    The result always declares a ``MsgHeader`` header struct; see the module
    docstring for what is not preserved.

    Args:
        spec: Spec to export

    Returns:
        IDL source text
    """
    big_endian = _detect_big_endian(spec)
    lines = [
        "//+PACK_SIZE=1",
        f"//+MOST_BYTE={'true' if big_endian else 'false'}",
        "",
        "// Message Header",
        f"struct {HEADER_STRUCT_NAME}  //$()$",
        "{",
        "    unsigned short MsgID;   //$()$",
        "    unsigned short Length;",
        "};",
        "",
    ]

    if spec.components is not None:
        for name, schema in spec.components.schemas.items():
            lines.extend(_comment_lines(schema.description))
            lines.append(f"struct {_identifier(name)}")
            lines.append("{")
            lines.extend(f"    {decl}" for decl in field_declarations(schema.fields))
            lines.append("};")
            lines.append("")

    for msg_id, (name, message) in enumerate(spec.messages.items(), start=1):
        payload = message.request.payload if message.request is not None else []
        lines.extend(_comment_lines(message.description))
        lines.append(f"struct {_struct_name(name)}   //$({msg_id})$")
        lines.append("{")
        lines.append(f"    {HEADER_STRUCT_NAME} header;")
        lines.extend(f"    {decl}" for decl in field_declarations(payload))
        lines.append("};")
        lines.append("")

    return "\n".join(lines)


def field_declarations(fields: Sequence[FieldDefinition]) -> list[str]:
    """Render wire fields as IDL declarations.

    Runs of ``name[0]``, ``name[1]``, ... of one type fold back into
    ``type name[n];``. Padding, string and bytes fields become
    ``unsigned char name[size];`` and bit-field storage is emitted as one
    ``type bit : width;`` line per bit.
    """
    declarations: list[str] = []
    index = 0

    while index < len(fields):
        field_def = fields[index]
        type_name = IDL_TYPE_NAMES.get(field_def.type, "unsigned char")

        if field_def.bit_fields:
            for bit in field_def.bit_fields:
                declarations.append(
                    f"{type_name} {_identifier(bit.name)} : {bit.bit_size};"
                    + _trailing_comment(bit.description)
                )
            index += 1
            continue

        if field_def.type.is_variable:
            declarations.append(
                f"unsigned char {_identifier(field_def.name)}[{field_def.byte_size}];"
                + _trailing_comment(field_def.description)
            )
            index += 1
            continue

        first = _FIRST_ELEMENT.fullmatch(field_def.name)
        if first:
            base = first.group(1)
            count = 1
            while index + count < len(fields):
                candidate = fields[index + count]
                if (
                    candidate.name != f"{base}[{count}]"
                    or candidate.type != field_def.type
                    or candidate.bit_fields
                ):
                    break
                count += 1
            declarations.append(
                f"{type_name} {_identifier(base)}[{count}];"
                + _trailing_comment(field_def.description)
            )
            index += count
            continue

        declarations.append(
            f"{type_name} {_identifier(field_def.name)};" + _trailing_comment(field_def.description)
        )
        index += 1

    return declarations


def _detect_big_endian(spec: UdpApiSpec) -> bool:
    """Byte order of the first field found, defaulting to big endian."""
    candidates: list[FieldDefinition] = []
    if spec.components is not None:
        for schema in spec.components.schemas.values():
            candidates.extend(schema.fields)
    for message in spec.messages.values():
        if message.request is not None:
            candidates.extend(message.request.header)
            candidates.extend(message.request.payload)
    return candidates[0].is_big_endian if candidates else True


def _identifier(name: str) -> str:
    return _NON_IDENTIFIER.sub("_", name) or "_"


def _struct_name(message_name: str) -> str:
    return _identifier(_MESSAGE_NAME_PREFIX.sub("", message_name))


def _single_line(text: str) -> str:
    return " ".join(text.split())


def _comment_lines(text: str) -> list[str]:
    # A comment line mentioning "struct" would be read back as a declaration
    text = _single_line(text)
    if not text or "struct" in text:
        return []
    return [f"// {text}"]


def _trailing_comment(text: str) -> str:
    text = _single_line(text)
    return f"  // {text}" if text else ""
