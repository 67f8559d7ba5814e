"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

PING_IDL = """\
//+PACK_SIZE=1
//+MOST_BYTE=true

// Message Header
struct MsgHeader  //$()$
{
    unsigned short MsgID;   //$()$
    unsigned short Length;
};

struct Ping  //$(1)$
{
    MsgHeader h;
    unsigned char code;     // reply code
};
"""

TELEMETRY_IDL = """\
//+PACK_SIZE=1
//+MOST_BYTE=false

struct Point
{
    short x;
    short y;
};

struct MsgHeader  //$()$
{
    unsigned short MsgID;   //$()$
    unsigned short Length;
};

struct Position  //$(0x0A)$
{
    MsgHeader header;
    Point pt[2];
    unsigned char flags : 3;
    unsigned char mode : 2;
    double depth;           // metres
    unsigned char raw[3];
};
"""

SAMPLE_YAML = """\
udpapi: "1.0.0"
info:
  title: Telemetry
  description: Vehicle telemetry
  version: "2.1"
servers:
  - name: Vehicle
    ip: 10.0.0.5
    port: 5000
components:
  headers:
    Common:
      - name: msgId
        type: uint16
        endian: big
        value: "0x0101"
        format: hex
      - name: length
        type: uint16
        endian: big
  schemas:
    Point:
      description: 2D point
      fields:
        - {name: x, type: int16}
        - {name: y, type: int16}
messages:
  Status:
    description: Status report
    group: telemetry
    timeoutMs: 1000
    endpoint:
      serverRef: Vehicle
    request:
      header:
        - $ref: "#/components/headers/Common"
      payload:
        - name: state
          type: byte
          enum:
            0: IDLE
            1: RUNNING
        - $ref: "#/components/schemas/Point"
        - name: flags
          type: byte
          bits:
            - {name: armed, bit: 0}
            - {name: mode, bits: "1:3"}
        - name: label
          type: string
          size: 8
"""


@pytest.fixture
def ping_idl() -> str:
    """Minimal IDL document with a header struct and one message."""
    return PING_IDL


@pytest.fixture
def telemetry_idl() -> str:
    """IDL document with a user struct, struct arrays, bit fields and a hex id."""
    return TELEMETRY_IDL


@pytest.fixture
def sample_yaml() -> str:
    """YAML spec exercising components, references, enums and bit fields."""
    return SAMPLE_YAML


@pytest.fixture
def idl_file(tmp_path: Path) -> Path:
    path = tmp_path / "telemetry.idl"
    path.write_text(TELEMETRY_IDL, encoding="utf-8")
    return path


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "telemetry.yaml"
    path.write_text(SAMPLE_YAML, encoding="utf-8")
    return path
