import pytest

from rootstock_mcp.rootstock_api.units import (
    format_ether,
    format_units,
    from_quantity,
    parse_ether,
    parse_units,
    to_quantity,
)


def test_format_units_keeps_one_fraction_digit():
    assert format_ether(10**18) == "1.0"
    assert format_ether(0) == "0.0"
    assert format_ether(1_500_000_000_000_000_000) == "1.5"
    assert format_units(123456, 6) == "0.123456"
    assert format_units(42, 0) == "42.0"


def test_parse_units_exact_integer_math():
    assert parse_ether("1") == 10**18
    assert parse_ether("0.000000000000000001") == 1
    assert parse_units("1.50", 6) == 1_500_000
    assert parse_units(".5", 2) == 50
    # Larger than Decimal's default precision
    big = "123456789012345678901234567890.123456789012345678"
    assert parse_ether(big) == 123456789012345678901234567890123456789012345678


@pytest.mark.parametrize("bad", ["", ".", "-1", "abc", "1.2.3", "1e18", None, True])
def test_parse_units_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_ether(bad)


def test_parse_units_rejects_excess_precision():
    with pytest.raises(ValueError):
        parse_units("1.001", 2)
    # Trailing zeros beyond precision are fine
    assert parse_units("1.100", 1) == 11


def test_quantity_helpers():
    assert to_quantity(255) == "0xff"
    assert from_quantity("0xff") == 255
    assert from_quantity("12") == 12
    assert from_quantity(7) == 7
    assert from_quantity(None, 0) == 0
    assert from_quantity("0xzz", -1) == -1
