"""YAML notation for message specs.

Example document:

    udpapi: "1.0.0"
    info:
      title: Telemetry
    components:
      headers:
        Common:
          - {name: msgId, type: uint16, endian: big}
    messages:
      Ping:
        request:
          header:
            - $ref: "#/components/headers/Common"
          payload:
            - {name: code, type: byte, format: hex}
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from ..exceptions import EmptyInputError, SpecNotFoundError, SpecSyntaxError, SpecValidationError
from ..models import UdpApiSpec, create_default_spec
from .base import PathLike
from .references import resolve_references

logger = structlog.get_logger(__name__)

_KEPT_RESOLVER_TAGS = ("tag:yaml.org,2002:null", "tag:yaml.org,2002:merge")


class SpecLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars as written.

    Only ``null`` and merge keys are resolved implicitly. Literals such as
    ``0x0101`` or ``1.50`` stay text, so values and enum keys keep their
    spelling and the models convert them per field.
    """


SpecLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag in _KEPT_RESOLVER_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def validate_spec(spec: UdpApiSpec) -> None:
    """Check the parse-time invariants of a spec.

    Raises:
        SpecValidationError: If ``info.title`` is empty or a message has no request
    """
    if not spec.info.title.strip():
        raise SpecValidationError("Spec info.title is required")

    for name, message in spec.messages.items():
        if message.request is None:
            raise SpecValidationError(f"Message '{name}' has no request schema")


class YamlSpecParser:
    """Reads and writes the YAML notation.

    Example:
        >>> parser = YamlSpecParser()
        >>> spec = parser.parse("info: {title: Demo}\\nmessages: {}\\n")
        >>> spec.info.title
        'Demo'
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".yaml", ".yml")

    def parse(self, text: str) -> UdpApiSpec:
        """Parse YAML text into a validated, reference-resolved spec.

        Args:
            text: YAML document

        Returns:
            The parsed spec

        Raises:
            EmptyInputError: If text is blank
            SpecSyntaxError: If the YAML is malformed or does not match the model
            SpecValidationError: If the spec violates a parse-time invariant
        """
        if not text or not text.strip():
            raise EmptyInputError("YAML content is empty")

        try:
            data = yaml.load(text, Loader=SpecLoader)
        except yaml.YAMLError as e:
            raise SpecSyntaxError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise SpecSyntaxError(
                f"YAML document must be a mapping, got {type(data).__name__}"
            )

        try:
            spec = UdpApiSpec.model_validate(data)
        except ValidationError as e:
            raise SpecSyntaxError(f"Invalid spec structure: {e}") from e

        validate_spec(spec)
        resolve_references(spec)

        logger.debug("yaml_spec_parsed", title=spec.info.title, messages=len(spec.messages))
        return spec

    def serialize(self, spec: UdpApiSpec) -> str:
        """Dump a spec as YAML with camelCase keys; unset optional values are omitted."""
        data = spec.model_dump(by_alias=True, exclude_none=True, mode="json")
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    def parse_file(self, path: PathLike) -> UdpApiSpec:
        """Read and parse a YAML spec file.

        Raises:
            SpecNotFoundError: If the file does not exist
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise SpecNotFoundError(f"Spec file not found: {file_path}")
        return self.parse(file_path.read_text(encoding="utf-8"))

    def save_to_file(self, spec: UdpApiSpec, path: PathLike) -> None:
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.serialize(spec), encoding="utf-8")
        logger.info("spec_saved", path=str(file_path), format="yaml")

    def create_default_spec(self) -> UdpApiSpec:
        return create_default_spec()
