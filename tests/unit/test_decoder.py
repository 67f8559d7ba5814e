"""Unit tests for decoding."""

from __future__ import annotations

import pytest

from udpspec import DecodeError
from udpspec.codec import ParsedValue, decode, encode
from udpspec.models import BitFieldDefinition, FieldDefinition, FieldType, MessageSchema


def _payload(*fields: FieldDefinition) -> MessageSchema:
    return MessageSchema(payload=list(fields))


class TestDecodeValues:
    """Test display formatting per type."""

    @pytest.mark.parametrize(
        "field_type,data,display",
        [
            ("byte", b"\xff", "255"),
            ("int8", b"\xff", "-1"),
            ("int16", b"\xfe\xff", "-2"),
            ("uint16", b"\x2b\x1a", "6699"),
            ("int32", b"\xff\xff\xff\xff", "-1"),
            ("uint32", b"\xff\xff\xff\xff", "4294967295"),
            ("uint64", b"\x01" + b"\x00" * 7, "1"),
            ("float", b"\x00\x00\xc0\x3f", "1.5000"),
            ("double", b"\x00\x00\x00\x00\x00\x00\x00\xc0", "-2.000000"),
        ],
    )
    def test_numeric(self, field_type: str, data: bytes, display: str) -> None:
        """Test numeric display values."""
        value = decode(data, _payload(FieldDefinition(name="v", type=field_type)))["payload.v"]
        assert value.display == display
        assert value.raw == data
        assert value.ok

    def test_big_endian(self) -> None:
        """Test big endian interpretation keeps raw in wire order."""
        f = FieldDefinition(name="v", type="uint16", endian="big")
        value = decode(b"\x1a\x2b", _payload(f))["payload.v"]
        assert value.display == "6699"
        assert value.raw == b"\x1a\x2b"
        assert value.hex_value == "1A 2B"

    @pytest.mark.parametrize(
        "field_type,data,display",
        [
            ("byte", b"\x0a", "0x0A"),
            ("uint16", b"\x2a\x00", "0x002A"),
            ("int32", b"\xff\xff\xff\xff", "0xFFFFFFFF"),
            ("uint64", b"\x01" + b"\x00" * 7, "0x0000000000000001"),
        ],
    )
    def test_hex_format(self, field_type: str, data: bytes, display: str) -> None:
        """Test hex display is zero padded to the field width."""
        f = FieldDefinition(name="v", type=field_type, format="hex")
        assert decode(data, _payload(f))["payload.v"].display == display

    def test_padding_string_bytes(self) -> None:
        """Test non-numeric display values."""
        schema = _payload(
            FieldDefinition(name="pad", type="padding", size=2),
            FieldDefinition(name="s", type="string", size=5),
            FieldDefinition(name="b", type="bytes", size=2),
        )
        values = decode(b"\x00\x00hi\x00\x00\x00\x0a\x0b", schema)
        assert values["payload.pad"].display == "[2 bytes padding]"
        assert values["payload.s"].display == "hi"
        assert values["payload.b"].display == "0A 0B"

    def test_big_endian_string_bytes(self) -> None:
        """Test big endian text and octets are reversed before display."""
        schema = _payload(
            FieldDefinition(name="s", type="string", size=5, endian="big"),
            FieldDefinition(name="b", type="bytes", size=2, endian="big"),
        )
        values = decode(b"\x00\x00cba\x0b\x0a", schema)
        assert values["payload.s"].display == "abc"
        assert values["payload.s"].raw == b"\x00\x00cba"
        assert values["payload.b"].display == "0A 0B"

    def test_big_endian_string_roundtrip(self) -> None:
        """Test encode and decode agree on big endian text."""
        schema = _payload(FieldDefinition(name="s", type="string", size=8, endian="big"))
        data = encode(schema, {"payload.s": "AUV-1"})
        assert decode(data, schema)["payload.s"].display == "AUV-1"

    def test_enum_mapping(self) -> None:
        """Test enum labels apply to the display string."""
        schema = _payload(
            FieldDefinition(name="state", type="byte", enum={"1": "RUNNING"}),
            FieldDefinition(name="code", type="byte", format="hex", enum={"0x02": "ACK"}),
        )
        values = decode(b"\x01\x02", schema)
        assert values["payload.state"].display == "RUNNING (1)"
        assert values["payload.code"].display == "ACK (0x02)"

    def test_undecodable_string(self) -> None:
        """Test bytes that are not ASCII produce a hex dump and an error."""
        value = decode(b"\xff\xfe", _payload(FieldDefinition(name="s", type="string", size=2)))[
            "payload.s"
        ]
        assert value.display == "FF-FE"
        assert isinstance(value.error, DecodeError)
        assert not value.ok


class TestShortBuffers:
    """Test decoding of truncated data."""

    def test_short_field_is_not_available(self) -> None:
        """Test [byte, uint32] with 2 bytes gives a value then N/A."""
        schema = _payload(
            FieldDefinition(name="a", type="byte"),
            FieldDefinition(name="b", type="uint32"),
        )
        values = decode(b"\x05\x06", schema)
        assert values["payload.a"].display == "5"
        assert values["payload.b"].display == "N/A"
        assert values["payload.b"].raw == b""
        assert not values["payload.b"].ok

    def test_short_field_ends_decoding(self) -> None:
        """Test no later field is read from the bytes of a short field."""
        schema = _payload(
            FieldDefinition(name="a", type="uint16"),
            FieldDefinition(name="b", type="byte"),
        )
        values = decode(b"\x2a", schema)
        assert list(values) == ["payload.a"]
        assert values["payload.a"].display == "N/A"

    def test_short_header_field_skips_payload(self) -> None:
        """Test a short header field also ends the payload."""
        schema = MessageSchema(
            header=[FieldDefinition(name="id", type="uint32")],
            payload=[FieldDefinition(name="code", type="byte")],
        )
        values = decode(b"\x01\x02", schema)
        assert list(values) == ["header.id"]
        assert values["header.id"].display == "N/A"

    def test_stops_at_end_of_buffer(self) -> None:
        """Test fields past the end of the data are omitted."""
        schema = MessageSchema(
            header=[FieldDefinition(name="id", type="byte")],
            payload=[FieldDefinition(name="a", type="byte"), FieldDefinition(name="b", type="byte")],
        )
        assert list(decode(b"\x01", schema)) == ["header.id"]
        assert decode(b"", schema) == {}

    def test_keys_in_wire_order(self) -> None:
        """Test result ordering follows header then payload."""
        schema = MessageSchema(
            header=[FieldDefinition(name="id", type="byte")],
            payload=[FieldDefinition(name="x", type="byte")],
        )
        assert list(decode(b"\x01\x02", schema)) == ["header.id", "payload.x"]


class TestDecodeBits:
    """Test bit-field entries."""

    def test_bit_entries(self) -> None:
        """Test each bit gets its own entry after the storage field."""
        flags = FieldDefinition(
            name="flags",
            type="byte",
            bits=[
                BitFieldDefinition(name="armed", single_bit=0),
                BitFieldDefinition(name="mode", bit_range="1:3", enum={"5": "SURVEY"}),
            ],
        )
        values = decode(bytes([0b1011]), _payload(flags))

        assert list(values) == ["payload.flags", "payload.flags.armed", "payload.flags.mode"]
        assert values["payload.flags"].display == "11"
        assert values["payload.flags.armed"].display == "1"
        assert values["payload.flags.mode"].display == "SURVEY (5)"

    def test_big_endian_storage(self) -> None:
        """Test bits of a big endian multi-byte storage field."""
        word = FieldDefinition(
            name="word",
            type="uint16",
            endian="big",
            bits=[BitFieldDefinition(name="hi", bit_range="8:15")],
        )
        values = decode(b"\x12\x00", _payload(word))
        assert values["payload.word.hi"].display == "18"

    def test_round_trip_with_encoder(self) -> None:
        """Test composed bits decode back."""
        flags = FieldDefinition(
            name="flags",
            type="byte",
            bits=[
                BitFieldDefinition(name="a", bit_range="0:2"),
                BitFieldDefinition(name="b", bit_range="3:4"),
            ],
        )
        schema = _payload(flags)
        data = encode(schema, {"payload.flags.a": "6", "payload.flags.b": "2"})
        values = decode(data, schema)
        assert values["payload.flags.a"].display == "6"
        assert values["payload.flags.b"].display == "2"


class TestParsedValue:
    """Test the result type."""

    def test_properties(self) -> None:
        """Test hex_value and ok."""
        value = ParsedValue(raw=b"\x0a\x0b", display="x", field_name="f", field_type=FieldType.BYTES)
        assert value.hex_value == "0A 0B"
        assert value.ok

        empty_padding = ParsedValue(
            raw=b"", display="[0 bytes padding]", field_name="p", field_type=FieldType.PADDING
        )
        assert empty_padding.ok
