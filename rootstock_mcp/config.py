"""
Configuration helpers for the Rootstock MCP server.

This module centralizes RPC endpoint selection, network metadata, wallet
bootstrap variables, timeouts and rate limits. Values are read from the
environment (and a local ``.env`` file when present); nothing secret is stored
in the repository.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

# Network defaults (Rootstock testnet)
DEFAULT_RPC_URL = os.getenv("ROOTSTOCK_RPC_URL", "https://public-node.testnet.rsk.co")
DEFAULT_NETWORK_NAME = os.getenv("ROOTSTOCK_NETWORK_NAME", "Rootstock Testnet")
DEFAULT_EXPLORER_URL = os.getenv("ROOTSTOCK_EXPLORER_URL", "https://explorer.testnet.rootstock.io")
DEFAULT_CURRENCY_SYMBOL = os.getenv("ROOTSTOCK_CURRENCY_SYMBOL", "tRBTC")

# Wallet bootstrap
PRIVATE_KEYS_ENV_VAR = "ROOTSTOCK_PRIVATE_KEYS"
PRIVATE_KEY_ENV_VAR = "ROOTSTOCK_PRIVATE_KEY"
ADDRESSES_ENV_VAR = "ROOTSTOCK_ADDRESSES"
CURRENT_ADDRESS_ENV_VAR = "ROOTSTOCK_CURRENT_ADDRESS"


def _load_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw:
        try:
            return int(raw.strip())
        except ValueError:
            return default
    return default


def _load_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw:
        try:
            return float(raw)
        except ValueError:
            return default
    return default


def _load_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _parse_csv(raw: Optional[str]) -> List[str]:
    """Split a comma-separated env value, dropping blank entries."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_rate_map(raw: Optional[str]) -> Dict[str, float]:
    """Parse `tool=qps` pairs such as `send_transaction=0.5,deploy_erc20_token=0.1`."""
    limits: Dict[str, float] = {}
    for item in _parse_csv(raw):
        name, sep, value = item.partition("=")
        if not sep:
            continue
        try:
            limits[name.strip()] = float(value)
        except ValueError:
            continue
    return limits


def load_private_keys() -> List[str]:
    """
    Collect bootstrap private keys from the environment.

    ``ROOTSTOCK_PRIVATE_KEYS`` holds a comma-separated list; the single
    ``ROOTSTOCK_PRIVATE_KEY`` form is appended when it is not already present.
    Keys are never logged.
    """
    keys = _parse_csv(os.getenv(PRIVATE_KEYS_ENV_VAR))
    single = (os.getenv(PRIVATE_KEY_ENV_VAR) or "").strip()
    if single and single not in keys:
        keys.append(single)
    return keys


DEFAULT_CHAIN_ID = _load_int("ROOTSTOCK_CHAIN_ID", 31)
DEFAULT_TIMEOUT = _load_float("ROOTSTOCK_HTTP_TIMEOUT", 60.0)
DEFAULT_RECEIPT_TIMEOUT = _load_float("ROOTSTOCK_RECEIPT_TIMEOUT", 120.0)
DEFAULT_RECEIPT_POLL_INTERVAL = _load_float("ROOTSTOCK_RECEIPT_POLL_INTERVAL", 2.0)
DEFAULT_FALLBACK_COOLDOWN = _load_float("ROOTSTOCK_FALLBACK_COOLDOWN_SECONDS", 30.0)
DEFAULT_RATE_LIMIT_QPS = _load_float("ROOTSTOCK_MCP_RATE_LIMIT_QPS", 5.0)
DEBUG = _load_bool("ROOTSTOCK_MCP_DEBUG")
LOG_LEVEL = "DEBUG" if DEBUG else os.getenv("ROOTSTOCK_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("ROOTSTOCK_MCP_LOG_FORMAT", "json")  # json or plain
ARTIFACTS_DIR = os.getenv("ROOTSTOCK_ARTIFACTS_DIR")

# Safety limits
MAX_CONTRACT_PARAMS = 32
MAX_ABI_ENTRIES = 256
DEFAULT_TOKEN_DECIMALS = 18


@dataclass(slots=True)
class RootstockConfig:
    """Runtime configuration for Rootstock node access."""

    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    network_name: str = DEFAULT_NETWORK_NAME
    explorer_url: str = DEFAULT_EXPLORER_URL
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    timeout: float = DEFAULT_TIMEOUT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    receipt_poll_interval: float = DEFAULT_RECEIPT_POLL_INTERVAL
    fallback_rpc_urls: List[str] = field(
        default_factory=lambda: _parse_csv(os.getenv("ROOTSTOCK_FALLBACK_RPC_URLS"))
    )
    fallback_cooldown_seconds: float = DEFAULT_FALLBACK_COOLDOWN
    private_keys: List[str] = field(default_factory=load_private_keys)
    addresses: List[str] = field(default_factory=lambda: _parse_csv(os.getenv(ADDRESSES_ENV_VAR)))
    current_address: Optional[str] = os.getenv(CURRENT_ADDRESS_ENV_VAR)
    artifacts_dir: Optional[str] = ARTIFACTS_DIR
    max_contract_params: int = MAX_CONTRACT_PARAMS
    max_abi_entries: int = MAX_ABI_ENTRIES
    default_token_decimals: int = DEFAULT_TOKEN_DECIMALS
    rate_limit_qps: float = DEFAULT_RATE_LIMIT_QPS
    debug: bool = DEBUG
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    per_tool_rate_limits: Dict[str, float] = field(
        default_factory=lambda: _parse_rate_map(os.getenv("ROOTSTOCK_MCP_TOOL_RATE_LIMITS"))
    )


default_config = RootstockConfig()
