"""Address and balance tools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from eth_utils import to_checksum_address

from rootstock_mcp.rootstock_api import default_client
from rootstock_mcp.tools.common import EXPECTED_ERRORS, NO_WALLET_MESSAGE, failure
from rootstock_mcp.tools.validators import is_valid_address
from rootstock_mcp.wallets import NoCurrentWalletError, WalletManager, default_wallet_manager

logger = logging.getLogger(__name__)


def validate_address(address: str) -> Dict[str, Any]:
    """Return whether an address is well formed, plus its checksummed form."""
    if not is_valid_address(address):
        return {"isValid": False}
    return {"isValid": True, "address": to_checksum_address(address.strip())}


async def get_balance(
    address: str,
    token_address: Optional[str] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    """
    Native or ERC20 balance of an address.

    Args:
        address: Account to inspect.
        token_address: ERC20 contract; when omitted the native balance is returned.
        client: Rootstock client (override for testing).
    """
    if not is_valid_address(address):
        return {"error": "Failed to get balance: Invalid address."}
    if token_address and not is_valid_address(token_address):
        return {"error": "Failed to get balance: Invalid token address."}

    try:
        if token_address:
            token = await client.get_token_balance(address, token_address)
            result = token.to_dict()
            result["address"] = to_checksum_address(address)
            return result
        balance = await client.get_balance(address)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get balance", exc)
    except Exception:
        logger.exception("Unexpected error fetching balance")
        return {"error": "Failed to get balance: unexpected error."}

    return {
        "address": to_checksum_address(address),
        "balance": balance,
        "symbol": client.currency_symbol,
    }


async def get_native_balance(
    address: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    """Native balance with the network it was read from; defaults to the current wallet."""
    if not address:
        try:
            address = wallets.get_current_address()
        except NoCurrentWalletError:
            return {"error": NO_WALLET_MESSAGE}
    if not is_valid_address(address):
        return {"error": "Failed to get native balance: Invalid address."}

    try:
        balance, network = await asyncio.gather(client.get_balance(address), client.get_network_info())
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get native balance", exc)
    except Exception:
        logger.exception("Unexpected error fetching native balance")
        return {"error": "Failed to get native balance: unexpected error."}

    return {
        "address": to_checksum_address(address),
        "balance": balance,
        "symbol": client.currency_symbol,
        "networkName": network.network_name,
        "chainId": network.chain_id,
        "blockNumber": network.block_number,
    }
