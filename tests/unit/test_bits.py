"""Tests for bit-field composition and extraction."""

from __future__ import annotations

import pytest

from udpspec.codec.bits import compose_bits, extract_bits, insert_bits
from udpspec.models import BitFieldDefinition


class TestInsertBits:
    """Test placing values into storage."""

    def test_insert(self) -> None:
        """Test a value lands at its start bit."""
        mode = BitFieldDefinition(name="mode", bit_range="2:4")
        assert insert_bits(0, mode, 5) == 0b10100

    def test_insert_replaces_existing_bits(self) -> None:
        """Test bits already set in the range are cleared first."""
        mode = BitFieldDefinition(name="mode", bit_range="2:4")
        assert insert_bits(0xFF, mode, 0) == 0b11100011

    def test_value_too_large(self) -> None:
        """Test values wider than the range are rejected."""
        flag = BitFieldDefinition(name="flag", single_bit=3)
        with pytest.raises(ValueError, match="requires more than 1 bits"):
            insert_bits(0, flag, 2)

    def test_negative_value(self) -> None:
        """Test negative values are rejected."""
        flag = BitFieldDefinition(name="flag", single_bit=3)
        with pytest.raises(ValueError, match="non-negative"):
            insert_bits(0, flag, -1)

    def test_inverted_range(self) -> None:
        """Test a range whose end precedes its start is rejected."""
        bad = BitFieldDefinition(name="bad", bit_range="4:2")
        with pytest.raises(ValueError, match="invalid range"):
            insert_bits(0, bad, 0)


class TestExtractBits:
    """Test reading values from storage."""

    def test_extract(self) -> None:
        """Test extraction masks and shifts."""
        assert extract_bits(0b10110, BitFieldDefinition(name="m", bit_range="1:3")) == 0b011
        assert extract_bits(0x8000, BitFieldDefinition(name="top", single_bit=15)) == 1

    def test_inverted_range(self) -> None:
        """Test an empty range extracts 0."""
        assert extract_bits(0xFF, BitFieldDefinition(name="bad", bit_range="4:2")) == 0

    def test_compose(self) -> None:
        """Test composing several bits."""
        bits = [
            (BitFieldDefinition(name="a", single_bit=0), 1),
            (BitFieldDefinition(name="b", bit_range="1:3"), 7),
            (BitFieldDefinition(name="c", bit_range="4:7"), 0),
        ]
        assert compose_bits(bits) == 0x0F
