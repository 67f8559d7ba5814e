"""Bit-field composition and extraction.

Bits are numbered from the least significant bit of the storage value, the
layout C compilers use for ``type name : width;`` declarations.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models import BitFieldDefinition


def insert_bits(storage: int, bit: BitFieldDefinition, value: int) -> int:
    """Place ``value`` into the bit range of ``bit`` within ``storage``.

    Args:
        storage: Current storage value
        bit: Bit range definition
        value: Unsigned value to place

    Returns:
        The updated storage value

    Raises:
        ValueError: If value is negative or does not fit in the bit width

    Example:
        >>> insert_bits(0, BitFieldDefinition(name="mode", bit_range="2:4"), 5)
        20
    """
    if value < 0:
        raise ValueError(f"Bit field '{bit.name}' requires non-negative value, got {value}")
    if bit.bit_size < 1:
        raise ValueError(f"Bit field '{bit.name}' has invalid range {bit.start_bit}:{bit.end_bit}")
    if value > bit.max_value:
        raise ValueError(
            f"Value {value} requires more than {bit.bit_size} bits "
            f"for bit field '{bit.name}' (max: {bit.max_value})"
        )
    return (storage & ~bit.bit_mask) | (value << bit.start_bit)


def extract_bits(storage: int, bit: BitFieldDefinition) -> int:
    """Read the value of ``bit`` out of ``storage``.

    Example:
        >>> extract_bits(20, BitFieldDefinition(name="mode", bit_range="2:4"))
        5
    """
    if bit.bit_size < 1:
        return 0
    return (storage & bit.bit_mask) >> bit.start_bit


def compose_bits(values: Iterable[tuple[BitFieldDefinition, int]]) -> int:
    """Build a storage value from ``(bit, value)`` pairs.

    Raises:
        ValueError: If any value does not fit its bit width
    """
    storage = 0
    for bit, value in values:
        storage = insert_bits(storage, bit, value)
    return storage
