"""Document-level schema models: messages, components, servers and the spec root."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import OptionalText, SpecModel, Text
from .fields import FieldDefinition


class MessageSchema(SpecModel):
    """Header and payload field lists. List order is wire order."""

    header: list[FieldDefinition] = Field(default_factory=list)
    payload: list[FieldDefinition] = Field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(f.byte_size for f in self.header) + sum(f.byte_size for f in self.payload)

    def sections(self) -> list[tuple[str, list[FieldDefinition]]]:
        """Return ``[("header", ...), ("payload", ...)]`` in wire order."""
        return [("header", self.header), ("payload", self.payload)]


class EndpointReference(SpecModel):
    """Target of a message: a named server, or a direct ip/port."""

    server_ref: OptionalText = None
    ip_address: OptionalText = Field(default=None, alias="ip")
    port: Optional[int] = None


class MessageDefinition(SpecModel):
    description: Text = ""
    group: Text = ""
    endpoint: Optional[EndpointReference] = None
    request: Optional[MessageSchema] = None
    response: Optional[MessageSchema] = None
    timeout_ms: int = 5000


class SchemaDefinition(SpecModel):
    """Reusable field group, addressed as ``#/components/schemas/<name>``."""

    description: Text = ""
    fields: list[FieldDefinition] = Field(default_factory=list)


class ComponentsDefinition(SpecModel):
    schemas: dict[str, SchemaDefinition] = Field(default_factory=dict)
    headers: dict[str, list[FieldDefinition]] = Field(default_factory=dict)


class ContactInfo(SpecModel):
    name: Text = ""
    email: Text = ""


class ApiInfo(SpecModel):
    title: Text = ""
    description: Text = ""
    version: Text = "1.0.0"
    contact: Optional[ContactInfo] = None


class ServerInfo(SpecModel):
    name: Text = ""
    description: Text = ""
    ip_address: Text = Field(default="127.0.0.1", alias="ip")
    port: int = 8080


class UdpApiSpec(SpecModel):
    """Root of a message specification.

    Attributes:
        version: Spec format version (YAML key ``udpapi``)
        info: Title, description and contact details
        servers: Known peers
        messages: Message definitions keyed by name, in document order
        components: Reusable schemas and headers, if any
    """

    version: Text = Field(default="1.0.0", alias="udpapi")
    info: ApiInfo = Field(default_factory=ApiInfo)
    servers: list[ServerInfo] = Field(default_factory=list)
    messages: dict[str, MessageDefinition] = Field(default_factory=dict)
    components: Optional[ComponentsDefinition] = None


def create_default_spec() -> UdpApiSpec:
    """Create a new, minimal spec with one local server."""
    return UdpApiSpec(
        version="1.0.0",
        info=ApiInfo(title="New UDP API", description="New UDP API specification", version="1.0.0"),
        servers=[ServerInfo(name="Default Server", ip_address="127.0.0.1", port=8080)],
    )
