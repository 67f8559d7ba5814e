"""``$ref`` resolution for component schemas and headers."""

from __future__ import annotations

from typing import Optional

import structlog

from ..models import ComponentsDefinition, FieldDefinition, MessageSchema, UdpApiSpec

logger = structlog.get_logger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"
HEADER_REF_PREFIX = "#/components/headers/"


def resolve_references(spec: UdpApiSpec) -> UdpApiSpec:
    """Splice referenced component fields into every message, in place.

    For each message request and response (header, then payload), an entry
    with a ``component_ref`` is replaced by copies of the referenced fields.
    Resolution is a single pass: references inside components are not
    followed. Unknown references are left in place.

    Args:
        spec: Spec to resolve; modified in place

    Returns:
        The same spec, for chaining

    Example:
        A payload ``[a, {$ref: "#/components/schemas/P"}, b]`` with
        ``P = [x, y]`` becomes ``[a, x, y, b]``.
    """
    components = spec.components
    if components is None:
        return spec

    for name, message in spec.messages.items():
        for schema in (message.request, message.response):
            if schema is None:
                continue
            schema.header = _resolve_list(schema.header, components, name)
            schema.payload = _resolve_list(schema.payload, components, name)

    return spec


def resolve_schema(schema: MessageSchema, components: ComponentsDefinition) -> MessageSchema:
    """Return a resolved copy of one message schema."""
    return MessageSchema(
        header=_resolve_list(schema.header, components, ""),
        payload=_resolve_list(schema.payload, components, ""),
    )


def lookup_reference(
    ref: str, components: ComponentsDefinition
) -> Optional[list[FieldDefinition]]:
    """Return the field list a reference points at, or None if it is unknown."""
    if ref.startswith(SCHEMA_REF_PREFIX):
        schema = components.schemas.get(ref[len(SCHEMA_REF_PREFIX) :])
        return schema.fields if schema is not None else None
    if ref.startswith(HEADER_REF_PREFIX):
        return components.headers.get(ref[len(HEADER_REF_PREFIX) :])
    return None


def _resolve_list(
    fields: list[FieldDefinition], components: ComponentsDefinition, message_name: str
) -> list[FieldDefinition]:
    resolved: list[FieldDefinition] = []
    for field_def in fields:
        if not field_def.component_ref:
            resolved.append(field_def)
            continue

        target = lookup_reference(field_def.component_ref, components)
        if target is None:
            logger.warning(
                "unresolved_reference", message_name=message_name, ref=field_def.component_ref
            )
            resolved.append(field_def)
            continue

        resolved.extend(f.model_copy(deep=True) for f in target)
    return resolved
