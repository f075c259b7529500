"""
Utility functions for the Genium broker assistant.
"""

from .helpers import (
    string_to_uuid,
    format_number,
    format_price,
    truncate_text,
)

__all__ = [
    "string_to_uuid",
    "format_number",
    "format_price",
    "truncate_text",
]
