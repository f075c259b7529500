"""
Tests for formatting helpers
"""

import pytest

from genium.utils import format_number, format_price, string_to_uuid, truncate_text


@pytest.mark.parametrize("value,expected", [
    (2.0, "2"),
    (2.5, "2.5"),
    (1200, "1200"),
    (None, "N/A"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize("value,expected", [
    (298000, "298,000"),
    (298000.0, "298,000"),
    (1234.5, "1,234.5"),
    (None, "N/A"),
])
def test_format_price(value, expected):
    assert format_price(value) == expected


def test_string_to_uuid_is_stable():
    assert string_to_uuid("Sunset Heights|2BR|3|298000.0") == string_to_uuid("Sunset Heights|2BR|3|298000.0")
    assert string_to_uuid("a") != string_to_uuid("b")


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("a" * 20, 10) == "aaaaaaa..."
