"""Utility functions for udpspec.

This module provides size and layout calculation helpers.
"""

from __future__ import annotations

from .sizing import FieldLayout, encoded_size, field_layout, field_sizes, struct_sizes

__all__ = [
    "FieldLayout",
    "field_layout",
    "encoded_size",
    "field_sizes",
    "struct_sizes",
]
