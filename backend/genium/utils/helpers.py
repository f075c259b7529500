"""
Helper utility functions.
"""

import uuid
from typing import Optional, Union

Number = Union[int, float]

# Namespace for deterministic unit ids
_UNIT_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "genium/units")


def string_to_uuid(value: str) -> str:
    """
    Derive a stable UUID from an arbitrary string.

    Args:
        value: Source string

    Returns:
        UUID string (same input, same UUID)
    """
    return str(uuid.uuid5(_UNIT_NAMESPACE, value))


def format_number(value: Optional[Number]) -> str:
    """
    Format a number without a spurious decimal part.

    Args:
        value: Number (can be None)

    Returns:
        '2' for 2.0, '2.5' for 2.5, 'N/A' for None
    """
    if value is None:
        return "N/A"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_price(price: Optional[Number]) -> str:
    """
    Format a price with thousands separators.

    Args:
        price: Price value (can be None)

    Returns:
        Formatted price string without currency symbol, e.g. '298,000'
    """
    if price is None:
        return "N/A"
    if float(price).is_integer():
        return f"{int(price):,}"
    return f"{price:,.2f}".rstrip("0").rstrip(".")


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
