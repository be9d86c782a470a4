"""Helpers for building SQL text"""

from .identifiers import is_valid_identifier, quote_identifier, quote_name

__all__ = [
    "is_valid_identifier",
    "quote_identifier",
    "quote_name",
]
