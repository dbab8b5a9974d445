from rootstock_mcp.tools.validators import (
    check_gas,
    is_uint_string,
    is_valid_address,
    is_valid_amount,
    is_valid_hash,
    is_valid_hex_data,
    parse_flag,
    parse_optional_int,
)

from conftest import TEST_ADDRESS, TX_HASH


def test_address_checksum_rules():
    assert is_valid_address(TEST_ADDRESS)
    assert is_valid_address(TEST_ADDRESS.lower())
    assert is_valid_address("0x" + TEST_ADDRESS[2:].upper())
    # Mixed case with a broken checksum
    assert not is_valid_address("0xF39Fd6e51aad88F6F4ce6aB8827279cffFb92266")
    assert not is_valid_address(TEST_ADDRESS[:-1])
    assert not is_valid_address("f39fd6e51aad88f6f4ce6ab8827279cfffb92266")
    assert not is_valid_address(None)


def test_hash_and_hex_data():
    assert is_valid_hash(TX_HASH)
    assert not is_valid_hash(TX_HASH[:-2])
    assert is_valid_hex_data("0x")
    assert is_valid_hex_data("0xa9059cbb")
    assert not is_valid_hex_data("0xabc")
    assert not is_valid_hex_data("a9059cbb")


def test_amounts():
    assert is_valid_amount("0.5")
    assert is_valid_amount("10")
    assert is_valid_amount(3)
    assert not is_valid_amount("-1")
    assert not is_valid_amount("1.5.0")
    assert not is_valid_amount(True)
    assert not is_valid_amount("0.0000000000000000001", decimals=18)
    assert is_valid_amount("0.000000000000000001", decimals=18)


def test_uint_and_gas():
    assert is_uint_string("21000")
    assert is_uint_string("0x5208")
    assert is_uint_string(0)
    assert not is_uint_string(-1)
    assert not is_uint_string("1.5")
    assert not is_uint_string(False)
    assert check_gas(None, None) is None
    assert check_gas("21000", "0x3938700") is None
    assert check_gas("lots", None) == "Invalid gas limit."
    assert check_gas(None, "-1") == "Invalid gas price."


def test_parse_optional_int():
    assert parse_optional_int("5") == 5
    assert parse_optional_int(None) is None
    assert parse_optional_int("") is None
    assert parse_optional_int("x") is None
    assert parse_optional_int(True) is None


def test_parse_flag():
    assert parse_flag(True) is True
    assert parse_flag(None) is False
    assert parse_flag("False") is False
    assert parse_flag(" true ") is True
    assert parse_flag("no") is None
    assert parse_flag(0) is None
