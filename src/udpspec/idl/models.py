"""IDL document AST: directives, structs and fields.

These are the raw results of the grammar parser. The converter lowers them into
the canonical schema model.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from typing import Optional, Union

import structlog

from .types import PrimitiveType, resolve_primitive

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IdlDirectives:
    """Document-level compiler directives (``//+PACK_SIZE=n``, ``//+MOST_BYTE=true``)."""

    pack_size: int = 1
    big_endian: bool = True

    @property
    def endian(self) -> str:
        return "big" if self.big_endian else "little"


@dataclass(frozen=True)
class IdlField:
    """A field declaration inside a struct body.

    Attributes:
        name: Field name
        type_name: Type as written (``unsigned short``, ``Point``, ...)
        array_size: Element count for ``name[N]`` declarations
        bit_field_size: Bit width for ``name : N`` declarations
        is_message_id_marker: Field carried the ``//$()$`` marker
        comment: Trailing ``//`` comment text
        primitive_type: Resolved primitive; STRUCT for user struct references
    """

    name: str
    type_name: str
    array_size: Optional[int] = None
    bit_field_size: Optional[int] = None
    is_message_id_marker: bool = False
    comment: str = ""
    primitive_type: Optional[PrimitiveType] = None

    def __post_init__(self) -> None:
        if self.primitive_type is None:
            object.__setattr__(self, "primitive_type", resolve_primitive(self.type_name))

    @property
    def primitive(self) -> PrimitiveType:
        return self.primitive_type or resolve_primitive(self.type_name)

    @property
    def is_struct_type(self) -> bool:
        return self.primitive is PrimitiveType.STRUCT

    @property
    def is_array(self) -> bool:
        return self.array_size is not None and self.array_size > 0

    @property
    def is_bit_field(self) -> bool:
        return self.bit_field_size is not None and self.bit_field_size > 0

    @property
    def element_size(self) -> int:
        """Size of one element in bytes; 0 for struct types (see calculate_size)."""
        return self.primitive.size

    @property
    def count(self) -> int:
        return self.array_size if self.is_array and self.array_size else 1

    def calculate_size(
        self,
        doc: IdlDocument,
        pack_bit_fields: bool = True,
        _visiting: tuple[str, ...] = (),
    ) -> int:
        """Total size in bytes, including array repetition.

        Bit fields return 0: they only have a size as part of their storage
        group, which IdlStruct.calculate_size accounts for.
        """
        if self.is_bit_field:
            return 0

        if self.is_struct_type:
            struct_def = doc.find_struct(self.type_name)
            if struct_def is None or self.type_name in _visiting:
                element_size = 0
            else:
                element_size = struct_def.calculate_size(doc, pack_bit_fields, _visiting)
        else:
            element_size = self.element_size

        return element_size * self.count


@dataclass(frozen=True)
class BitFieldGroup:
    """Consecutive bit fields sharing one integer storage unit.

    Attributes:
        storage: Primitive type of the storage unit
        members: ``(field, start_bit)`` pairs, least significant bit first
    """

    storage: PrimitiveType
    members: tuple[tuple[IdlField, int], ...]

    @property
    def name(self) -> str:
        return "_".join(f.name for f, _ in self.members)

    @property
    def size(self) -> int:
        return self.storage.size

    @property
    def used_bits(self) -> int:
        last_field, last_start = self.members[-1]
        return last_start + (last_field.bit_field_size or 0)


LayoutUnit = Union[IdlField, BitFieldGroup]


def _storage_for(f: IdlField) -> PrimitiveType:
    return f.primitive if f.primitive.is_integer else PrimitiveType.UNSIGNED_CHAR


def _fit_to_storage(f: IdlField, unit: PrimitiveType) -> IdlField:
    """Clamp a bit field to the width of its storage unit."""
    max_width = unit.size * 8
    if (f.bit_field_size or 0) <= max_width:
        return f
    logger.warning(
        "bit_field_too_wide",
        field=f.name,
        width=f.bit_field_size,
        storage=unit.name,
        max_width=max_width,
    )
    return replace(f, bit_field_size=max_width)


def iter_layout_units(
    fields: Sequence[IdlField], pack_bit_fields: bool = True
) -> Iterator[LayoutUnit]:
    """Walk struct fields, grouping bit fields into storage units.

    With ``pack_bit_fields`` a bit field joins the open group when it has the
    same storage type and still fits; otherwise it starts a new group. Any
    ordinary field closes the open group. Without packing each bit field is a
    group of its own. A bit field wider than its storage type is clamped to
    that width.

    Example:
        For ``unsigned char a:3; unsigned char b:4; unsigned char c:2;`` the
        units are ``[a@0, b@3]`` then ``[c@0]``.
    """
    group: list[tuple[IdlField, int]] = []
    storage = PrimitiveType.UNSIGNED_CHAR
    used = 0

    for f in fields:
        if not f.is_bit_field:
            if group:
                yield BitFieldGroup(storage, tuple(group))
                group, used = [], 0
            yield f
            continue

        unit = _storage_for(f)
        f = _fit_to_storage(f, unit)
        width = f.bit_field_size or 0
        fits = storage is unit and used + width <= unit.size * 8
        if group and (not pack_bit_fields or not fits):
            yield BitFieldGroup(storage, tuple(group))
            group, used = [], 0

        storage = unit
        group.append((f, used))
        used += width

    if group:
        yield BitFieldGroup(storage, tuple(group))


@dataclass
class IdlStruct:
    """A ``struct Name { ... };`` declaration."""

    name: str
    fields: list[IdlField] = field(default_factory=list)
    comment: str = ""

    def calculate_size(
        self,
        doc: IdlDocument,
        pack_bit_fields: bool = True,
        _visiting: tuple[str, ...] = (),
    ) -> int:
        """Total size in bytes, with bit fields counted once per storage unit."""
        visiting = _visiting + (self.name,)
        size = 0
        for unit in iter_layout_units(self.fields, pack_bit_fields):
            if isinstance(unit, BitFieldGroup):
                size += unit.size
            else:
                size += unit.calculate_size(doc, pack_bit_fields, visiting)
        return size


@dataclass
class IdlMessageStruct(IdlStruct):
    """A struct tagged ``//$(id)$``.

    Attributes:
        message_id: Parsed id (decimal, or hex with a ``0x`` prefix)
        message_id_text: The literal as written, e.g. ``"0x0A"``
    """

    message_id: int = 0
    message_id_text: str = ""


@dataclass
class IdlDocument:
    """A parsed IDL document."""

    directives: IdlDirectives = field(default_factory=IdlDirectives)
    header_struct: Optional[IdlStruct] = None
    user_structs: list[IdlStruct] = field(default_factory=list)
    message_structs: list[IdlMessageStruct] = field(default_factory=list)
    file_path: str = ""

    def find_struct(self, name: str) -> Optional[IdlStruct]:
        """Find the header or a user struct by exact name."""
        if self.header_struct is not None and self.header_struct.name == name:
            return self.header_struct
        for struct_def in self.user_structs:
            if struct_def.name == name:
                return struct_def
        return None
