"""Conversions between on-chain integer quantities and human-readable amounts."""

from __future__ import annotations

import re
from typing import Any, Optional

ETHER_DECIMALS = 18
_AMOUNT_REGEX = re.compile(r"^\d*\.?\d*$")


def format_units(value: int, decimals: int = ETHER_DECIMALS) -> str:
    """
    Render an integer amount with ``decimals`` fractional digits.

    Trailing zeros are trimmed but at least one fractional digit is kept, so
    ``10**18`` renders as ``"1.0"`` and zero as ``"0.0"``.
    """
    value = int(value)
    decimals = int(decimals)
    negative = value < 0
    value = abs(value)
    if decimals <= 0:
        text = f"{value}.0"
    else:
        whole, frac = divmod(value, 10**decimals)
        frac_text = str(frac).rjust(decimals, "0").rstrip("0") or "0"
        text = f"{whole}.{frac_text}"
    return f"-{text}" if negative else text


def format_ether(value: int) -> str:
    return format_units(value, ETHER_DECIMALS)


def parse_units(amount: Any, decimals: int = ETHER_DECIMALS) -> int:
    """
    Parse a decimal amount into its integer base-unit quantity.

    Raises:
        ValueError: if the amount is malformed, negative, or carries more
            fractional digits than ``decimals`` allows.
    """
    if isinstance(amount, bool) or amount is None:
        raise ValueError("Invalid amount.")
    text = str(amount).strip()
    if not text or text == "." or not _AMOUNT_REGEX.fullmatch(text):
        raise ValueError(f"Invalid amount: {amount}")
    decimals = int(decimals)
    whole, _, frac = text.partition(".")
    frac = frac.rstrip("0")
    if len(frac) > decimals:
        raise ValueError(f"Too many decimal places for {decimals}-decimal unit: {amount}")
    return int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")


def parse_ether(amount: Any) -> int:
    return parse_units(amount, ETHER_DECIMALS)


def to_quantity(value: int) -> str:
    """Encode an integer as a JSON-RPC hex quantity."""
    return hex(int(value))


def from_quantity(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Decode a JSON-RPC hex quantity (ints pass through)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError:
            return default
    return default
