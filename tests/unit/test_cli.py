"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from udpspec import __version__
from udpspec.cli.main import main


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "udpspec.cli.main", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "udpspec: Schema-Driven UDP Message Codec" in result.stdout
    assert "--analyze" in result.stdout
    assert "--convert" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert f"udpspec {__version__}" in result.stdout


def test_cli_analyze_idl(idl_file: Path) -> None:
    """Test CLI --analyze with an IDL file."""
    result = _run("--analyze", str(idl_file))
    assert result.returncode == 0
    assert "udpspec: Schema-Driven UDP Message Codec" in result.stdout
    assert "1 message loaded" in result.stdout
    assert "Msg_0010_Position" in result.stdout
    assert "Total size of message: 24 bytes" in result.stdout
    assert "Structs" in result.stdout
    assert "payload.pt[1].y" in result.stdout
    assert "bit mode[3:4]" in result.stdout


def test_cli_analyze_yaml(yaml_file: Path) -> None:
    """Test CLI --analyze with a YAML file."""
    result = _run("--analyze", str(yaml_file))
    assert result.returncode == 0
    assert "Telemetry (version 2.1)" in result.stdout
    assert "Status" in result.stdout
    assert "Total size of message: 18 bytes" in result.stdout
    assert "Structs" not in result.stdout


def test_cli_analyze_missing_file() -> None:
    """Test CLI --analyze with missing file."""
    result = _run("--analyze", "nonexistent.idl")
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_analyze_invalid_yaml(tmp_path: Path) -> None:
    """Test CLI --analyze with a spec that fails validation."""
    path = tmp_path / "bad.yaml"
    path.write_text("info:\n  description: no title\n", encoding="utf-8")
    result = _run("--analyze", str(path))
    assert result.returncode == 1
    assert "Error" in result.stderr
    assert "title" in result.stderr


def test_cli_convert(idl_file: Path, tmp_path: Path) -> None:
    """Test CLI --convert from IDL to YAML."""
    target = tmp_path / "out.yaml"
    result = _run("--convert", str(idl_file), str(target))
    assert result.returncode == 0
    assert "1 messages" in result.stdout
    assert target.exists()
    assert "Msg_0010_Position" in target.read_text(encoding="utf-8")


def test_cli_convert_unsupported(idl_file: Path, tmp_path: Path) -> None:
    """Test CLI --convert to an unknown format."""
    result = _run("--convert", str(idl_file), str(tmp_path / "out.json"))
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = _run()
    assert result.returncode == 0
    assert "udpspec: Schema-Driven UDP Message Codec" in result.stdout


def test_main_in_process(idl_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test calling main() directly."""
    assert main(["--analyze", str(idl_file)]) == 0
    assert "Msg_0010_Position" in capsys.readouterr().out
