"""Canonical schema model for udpspec.

This module provides the notation-independent Pydantic models consumed by the
encoder and decoder.
"""

from __future__ import annotations

from .base import SpecModel
from .fields import BitFieldDefinition, FieldDefinition, FieldType
from .spec import (
    ApiInfo,
    ComponentsDefinition,
    ContactInfo,
    EndpointReference,
    MessageDefinition,
    MessageSchema,
    SchemaDefinition,
    ServerInfo,
    UdpApiSpec,
    create_default_spec,
)

__all__ = [
    "SpecModel",
    "FieldType",
    "FieldDefinition",
    "BitFieldDefinition",
    "MessageSchema",
    "MessageDefinition",
    "EndpointReference",
    "SchemaDefinition",
    "ComponentsDefinition",
    "ApiInfo",
    "ContactInfo",
    "ServerInfo",
    "UdpApiSpec",
    "create_default_spec",
]
