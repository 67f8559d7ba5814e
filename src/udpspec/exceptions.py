"""Exception hierarchy for udpspec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from UdpSpecError for easy catching of any udpspec-specific error.
"""

from __future__ import annotations


class UdpSpecError(Exception):
    """Base exception for all udpspec errors."""

    pass


class SpecNotFoundError(UdpSpecError):
    """Raised when a spec source file does not exist."""

    pass


class EmptyInputError(UdpSpecError):
    """Raised when a parser is handed blank text."""

    pass


class SpecValidationError(UdpSpecError):
    """Raised when a structurally parsed spec fails semantic checks.

    Examples:
        - ``info.title`` is missing or empty
        - A message has no ``request`` schema
    """

    pass


class SpecSyntaxError(UdpSpecError):
    """Raised when structured-notation (YAML) text cannot be deserialized.

    The IDL grammar parser never raises this; it skips malformed lines instead.
    """

    pass


class UnsupportedFormatError(UdpSpecError):
    """Raised for an unrecognized file extension or parser type."""

    pass


class EncodeError(UdpSpecError):
    """Raised when a single field value cannot be converted to bytes.

    The encoder never lets this escape. It is recorded as the cause of a
    zero-filled field result.

    Examples:
        - Value out of range for the field width
        - Malformed hex/binary literal
        - Bit-field value exceeds the bit width
    """

    pass


class DecodeError(UdpSpecError):
    """Raised when a field's bytes cannot be interpreted.

    Like EncodeError, it is captured on the decoded value rather than raised.
    """

    pass
