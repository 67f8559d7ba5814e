"""Configuration for parsing and for the process-level environment.

ParserConfig is passed explicitly into the grammar parser and converter; there
is no module-level mutable state. Settings reads logging options from the
environment (``UDPSPEC_LOG_LEVEL``, ``UDPSPEC_LOG_FORMAT``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic_settings import BaseSettings, SettingsConfigDict

from .idl.types import DEFAULT_TYPE_ALIASES, PrimitiveType


@dataclass(frozen=True)
class ParserConfig:
    """Options that shape how IDL text is read and lowered.

    Attributes:
        type_aliases: Normalized type name -> primitive type. Names that are
            not found are treated as user struct references.
        default_pack_size: PACK_SIZE used when the document has no directive
        default_big_endian: Byte order used when MOST_BYTE is absent
        pack_bit_fields: If True, consecutive bit fields sharing a storage type
            are packed into one storage field (C compiler layout). If False,
            every bit field gets its own storage field.
        header_component_name: Key under ``components.headers`` for the
            document's header struct
        message_id_field_names: Header field names that receive the message id
        default_timeout_ms: Timeout assigned to lowered messages

    Examples:
        ```python
        from udpspec.config import ParserConfig
        from udpspec.idl.types import DEFAULT_TYPE_ALIASES, PrimitiveType

        # Little-endian by default, and accept "word" as a 16-bit alias
        config = ParserConfig(
            default_big_endian=False,
            type_aliases={**DEFAULT_TYPE_ALIASES, "word": PrimitiveType.UNSIGNED_SHORT},
        )
        ```
    """

    type_aliases: Mapping[str, PrimitiveType] = field(
        default_factory=lambda: dict(DEFAULT_TYPE_ALIASES)
    )
    default_pack_size: int = 1
    default_big_endian: bool = True
    pack_bit_fields: bool = True
    header_component_name: str = "CommonHeader"
    message_id_field_names: tuple[str, ...] = ("MsgID", "msgId")
    default_timeout_ms: int = 5000

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.default_pack_size < 1:
            raise ValueError(f"default_pack_size must be >= 1, got {self.default_pack_size}")

        if self.default_timeout_ms < 0:
            raise ValueError(f"default_timeout_ms must be >= 0, got {self.default_timeout_ms}")

        if not self.header_component_name:
            raise ValueError("header_component_name must not be empty")


DEFAULT_CONFIG = ParserConfig()


class Settings(BaseSettings):
    """Process settings, read from ``UDPSPEC_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="UDPSPEC_")

    log_level: str = "WARNING"
    log_format: str = "console"


def get_settings() -> Settings:
    return Settings()
