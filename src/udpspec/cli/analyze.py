"""Spec analysis CLI command."""

from __future__ import annotations

from pathlib import Path

from ..config import DEFAULT_CONFIG
from ..idl.grammar import parse_idl
from ..models import MessageDefinition, UdpApiSpec
from ..parsers import IdlSpecParser, load_spec
from ..utils.sizing import field_layout, struct_sizes


def analyze_file(file_path: Path) -> None:
    """Print the wire layout of every message in a spec file.

    Args:
        file_path: Path to an IDL or YAML spec
    """
    spec = load_spec(file_path)

    print("|" * 7, "udpspec: Schema-Driven UDP Message Codec", "|" * 7)
    print(f"{spec.info.title} (version {spec.info.version})")
    count = len(spec.messages)
    print(f"{count} message{'s' if count != 1 else ''} loaded.")
    print("Field sizes are in bytes.")
    print()

    if file_path.suffix.lower() in IdlSpecParser().supported_extensions:
        analyze_structs(file_path)

    for name, message in spec.messages.items():
        analyze_message(name, message)

    analyze_summary(spec)


def analyze_structs(file_path: Path) -> None:
    """Print the size of every struct declared in an IDL file."""
    doc = parse_idl(file_path.read_text(encoding="utf-8"))
    sizes = struct_sizes(doc, DEFAULT_CONFIG.pack_bit_fields)
    if not sizes:
        return

    print(f"{'-' * 27} Structs {'-' * 26}")
    print(f"Pack size: {doc.directives.pack_size}, byte order: {doc.directives.endian}")
    for struct_name, size in sizes.items():
        dots = "." * max(1, 54 - len(struct_name) - len(str(size)) - len(" bytes"))
        print(f"        {struct_name}{dots}{size} bytes")
    print()


def analyze_message(name: str, message: MessageDefinition) -> None:
    """Print offsets and sizes for one message's request."""
    print(f"{'=' * 19} {name} {'=' * 19}")
    if message.description:
        print(message.description)

    if message.request is None:
        print("No request schema.")
        print()
        return

    schema = message.request
    header_size = sum(f.byte_size for f in schema.header)
    payload_size = sum(f.byte_size for f in schema.payload)
    print(f"Total size of message: {schema.total_size} bytes")
    print(f"        header{'.' * 32}{header_size}")
    print(f"        payload{'.' * 31}{payload_size}")
    print()

    print(f"{'-' * 24} Layout {'-' * 24}")
    for i, entry in enumerate(field_layout(schema), 1):
        field_desc = f"{i}. {entry.key}"
        info = f"@{entry.offset} {entry.type_name}"
        if entry.size > 1 and entry.type_name not in ("padding", "string", "bytes"):
            info += f" ({entry.endian})"
        dots = "." * max(1, 54 - len(field_desc) - len(str(entry.size)) - len(" bytes"))
        print(f"        {field_desc}{dots}{entry.size} bytes {info}")
        for bit in entry.bits:
            print(f"            bit {bit}")
    print()


def analyze_summary(spec: UdpApiSpec) -> None:
    print(f"{'=' * 24} Summary {'=' * 24}")
    sizes = [m.request.total_size for m in spec.messages.values() if m.request is not None]
    if sizes:
        print(f"Smallest message: {min(sizes)} bytes")
        print(f"Largest message: {max(sizes)} bytes")
    if spec.components is not None:
        print(
            f"Components: {len(spec.components.schemas)} schemas, "
            f"{len(spec.components.headers)} headers"
        )
    print()
