"""Tests for size and cpu unit conversion."""
from decimal import Decimal

import pytest
from stackdef.sdl.units import (
    format_memory_size,
    is_size_literal,
    is_whole_millicores,
    parse_cpu_units,
    parse_memory_size,
    parse_price_amount,
    parse_storage_size,
)

@pytest.mark.parametrize("literal, expected", [
    ("512Mi", 512 * 1024 * 1024),
    ("1G", 1024 ** 3),
    ("1Gi", 1024 ** 3),
    ("100k", 100 * 1024),
    ("2Ti", 2 * 1024 ** 4),
    ("4t", 4 * 1024 ** 4),
    ("64mi", 64 * 1024 ** 2),
])
def test_parse_memory_size(literal, expected):
    """Test binary multipliers with and without the i suffix."""
    assert parse_memory_size(literal) == expected

@pytest.mark.parametrize("literal", ["xyz", "M", "", "512", "512Mb", "1.5Gi", " 512Mi", "512Mi\n", "-1Gi", None])
def test_parse_memory_size_invalid(literal):
    """Test that anything outside the grammar converts to zero."""
    assert parse_memory_size(literal) == 0
    assert not is_size_literal(literal)

def test_zero_size_matches_grammar():
    """Test that a zero size is well-formed but converts to zero."""
    assert is_size_literal("0Gi")
    assert parse_memory_size("0Gi") == 0

def test_parse_storage_size():
    """Test that storage sizes use the memory grammar."""
    assert parse_storage_size("10Gi") == parse_memory_size("10Gi")
    assert parse_storage_size("not-a-valid-size") == 0

@pytest.mark.parametrize("value, expected", [
    ("0.5", Decimal("0.5")),
    ("1", Decimal("1")),
    (2, Decimal("2")),
    (0.25, Decimal("0.25")),
    ("100m", Decimal("0.1")),
    ("1500m", Decimal("1.5")),
])
def test_parse_cpu_units(value, expected):
    """Test decimal cores and millicores."""
    assert parse_cpu_units(value) == expected

@pytest.mark.parametrize("value", ["abc", "", "1.2.3", "-1", None, True])
def test_parse_cpu_units_invalid(value):
    """Test unparseable cpu units."""
    assert parse_cpu_units(value) is None

def test_format_memory_size():
    """Test rendering byte counts with binary units."""
    assert format_memory_size(2 * 1024 ** 3) == "2Gi"
    assert format_memory_size(512 * 1024 ** 2) == "512Mi"
    assert format_memory_size(64 * 1024) == "64Ki"
    assert format_memory_size(100) == "100"

def test_format_memory_size_rounds_half_up():
    """Test that halves round up to the next whole unit."""
    assert format_memory_size(int(2.5 * 1024 ** 3)) == "3Gi"
    assert format_memory_size(1.5 * 1024 ** 2) == "2Mi"
    assert format_memory_size(int(2.4 * 1024 ** 3)) == "2Gi"

def test_is_whole_millicores():
    """Test millicore precision of cpu units."""
    assert is_whole_millicores(Decimal("0.5"))
    assert is_whole_millicores(Decimal("0.001"))
    assert not is_whole_millicores(Decimal("0.0001"))
    assert not is_whole_millicores(Decimal("1.2345"))

@pytest.mark.parametrize("value, expected", [
    ("1000", Decimal("1000")),
    ("0.5", Decimal("0.5")),
    ("0", Decimal("0")),
    (" 12 ", Decimal("12")),
])
def test_parse_price_amount(value, expected):
    """Test integer and fractional bid prices."""
    assert parse_price_amount(value) == expected

@pytest.mark.parametrize("value", ["abc", "", "-1", "NaN", "Infinity", None, True])
def test_parse_price_amount_invalid(value):
    """Test amounts that are not non-negative numbers."""
    assert parse_price_amount(value) is None
