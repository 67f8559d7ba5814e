"""Parser interface shared by every spec notation."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from ..models import UdpApiSpec

PathLike = Union[str, Path]


@runtime_checkable
class SpecParser(Protocol):
    """Reads and writes one spec notation.

    Implementations are stateless; one instance may be reused for any number
    of documents.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        """Lower-case file extensions, including the leading dot."""
        ...

    def parse(self, text: str) -> UdpApiSpec: ...

    def serialize(self, spec: UdpApiSpec) -> str: ...

    def parse_file(self, path: PathLike) -> UdpApiSpec: ...

    def save_to_file(self, spec: UdpApiSpec, path: PathLike) -> None: ...

    def create_default_spec(self) -> UdpApiSpec: ...
