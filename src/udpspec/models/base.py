"""Base model class and shared Pydantic configuration for the canonical schema.

All schema models inherit from SpecModel. Field names are snake_case in Python
and camelCase in the structured (YAML) notation.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _to_text(value: Any) -> Any:
    """Accept YAML scalars (numbers, bools, null) where a string is expected."""
    if value is None:
        return ""
    if isinstance(value, (int, float, bool)):
        return str(value)
    return value


def _to_optional_text(value: Any) -> Any:
    if value is None:
        return None
    return _to_text(value)


def _to_text_map(value: Any) -> Any:
    # enum: {0: OFF, 1: ON} loads with int keys
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items()}
    return value


Text = Annotated[str, BeforeValidator(_to_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_to_optional_text)]
TextMap = Annotated[Optional[dict[str, str]], BeforeValidator(_to_text_map)]


class SpecModel(BaseModel):
    """Base class for all canonical schema models.

    Configuration:
        - camelCase aliases for the YAML notation (``timeout_ms`` <-> ``timeoutMs``)
        - Python field names are accepted too
        - Unknown keys are ignored
        - Assignments are validated
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )
