"""Shared validation helpers for Rootstock MCP tools."""

from __future__ import annotations

import re
from typing import Any, Optional

from rootstock_mcp.rootstock_api.abi import is_valid_address as _is_strict_address
from rootstock_mcp.rootstock_api.units import parse_units

# 0x-prefixed 32-byte hex (transaction and block hashes).
HASH_REGEX = re.compile(r"^0x[0-9a-fA-F]{64}$")
ADDRESS_REGEX = re.compile(r"^0x[0-9a-fA-F]{40}$")
HEX_DATA_REGEX = re.compile(r"^0x([0-9a-fA-F]{2})*$")
UINT_REGEX = re.compile(r"^(0x[0-9a-fA-F]+|\d+)$")


def is_valid_address(address: Optional[str]) -> bool:
    """Hex address check; mixed-case input must carry a valid EIP-55 checksum."""
    if not address or not isinstance(address, str):
        return False
    return _is_strict_address(address.strip())


def is_valid_hash(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(HASH_REGEX.fullmatch(value.strip()))


def is_valid_hex_data(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return bool(HEX_DATA_REGEX.fullmatch(value.strip()))


def is_valid_amount(value: Any, *, decimals: Optional[int] = None) -> bool:
    """
    Validate a human-readable, non-negative amount such as ``"0.5"``.

    With ``decimals`` set, also reject amounts carrying more fractional digits
    than the unit allows.
    """
    if value is None or isinstance(value, bool):
        return False
    try:
        parse_units(value, decimals if decimals is not None else 78)
    except ValueError:
        return False
    return True


def is_uint_string(value: Any) -> bool:
    """Non-negative integer given as an int, a decimal string or a 0x-hex string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if not isinstance(value, str):
        return False
    return bool(UINT_REGEX.fullmatch(value.strip()))


def parse_optional_int(value: Any) -> Optional[int]:
    """Coerce optional integer inputs, returning None when missing or invalid."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_flag(value: Any) -> Optional[bool]:
    """Accept real booleans or the strings "true"/"false"; anything else is None."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def check_gas(gas_limit: Any, gas_price: Any) -> Optional[str]:
    """Return a problem description for malformed gas overrides, else None."""
    if gas_limit not in (None, "") and not is_uint_string(gas_limit):
        return "Invalid gas limit."
    if gas_price not in (None, "") and not is_uint_string(gas_price):
        return "Invalid gas price."
    return None
