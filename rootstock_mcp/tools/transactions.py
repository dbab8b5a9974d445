"""Transfer, transaction lookup and gas estimation tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from rootstock_mcp.rootstock_api import default_client
from rootstock_mcp.tools.common import (
    EXPECTED_ERRORS,
    NO_WALLET_MESSAGE,
    current_account,
    failure,
    record_transaction,
    with_explorer_links,
)
from rootstock_mcp.tools.validators import (
    check_gas,
    is_valid_address,
    is_valid_amount,
    is_valid_hash,
    is_valid_hex_data,
)
from rootstock_mcp.wallets import WalletManager, default_wallet_manager

logger = logging.getLogger(__name__)


async def send_transaction(
    to: str,
    amount: str,
    token_address: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    """
    Send native currency, or ERC20 tokens when ``token_address`` is given,
    from the current wallet and wait for the receipt.
    """
    if not is_valid_address(to):
        return {"error": "Failed to send transaction: Invalid recipient address."}
    if token_address and not is_valid_address(token_address):
        return {"error": "Failed to send transaction: Invalid token address."}
    if not is_valid_amount(amount, decimals=None if token_address else 18):
        return {"error": "Failed to send transaction: Invalid amount."}
    gas_error = check_gas(gas_limit, gas_price)
    if gas_error:
        return {"error": f"Failed to send transaction: {gas_error}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        if token_address:
            tx = await client.send_token_transaction(
                account, token_address, to, amount, gas_limit=gas_limit, gas_price=gas_price
            )
        else:
            tx = await client.send_transaction(account, to, amount, gas_limit=gas_limit, gas_price=gas_price)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to send transaction", exc)
    except Exception:
        logger.exception("Unexpected error sending transaction")
        return {"error": "Failed to send transaction: unexpected error."}

    record_transaction(tx.status)
    result = tx.to_dict()
    if token_address:
        result["tokenAddress"] = token_address
    else:
        result["symbol"] = client.currency_symbol
    return with_explorer_links(result, client, tx_hash=tx.hash)


async def get_transaction(tx_hash: str, *, client=default_client) -> Dict[str, Any]:
    if not is_valid_hash(tx_hash):
        return {"error": "Failed to get transaction: Invalid transaction hash."}
    try:
        tx = await client.get_transaction(tx_hash.strip())
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get transaction", exc)
    except Exception:
        logger.exception("Unexpected error fetching transaction")
        return {"error": "Failed to get transaction: unexpected error."}

    result = tx.to_dict()
    result["symbol"] = client.currency_symbol
    return with_explorer_links(result, client, tx_hash=tx.hash)


async def estimate_gas(
    to: str,
    value: Optional[str] = None,
    data: Optional[str] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    if not is_valid_address(to):
        return {"error": "Failed to estimate gas: Invalid recipient address."}
    if value not in (None, "") and not is_valid_amount(value, decimals=18):
        return {"error": "Failed to estimate gas: Invalid value."}
    if data not in (None, "") and not is_valid_hex_data(data):
        return {"error": "Failed to estimate gas: Data must be 0x-prefixed hex."}

    try:
        estimate = await client.estimate_gas(to, value=value or None, data=data or None)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to estimate gas", exc)
    except Exception:
        logger.exception("Unexpected error estimating gas")
        return {"error": "Failed to estimate gas: unexpected error."}

    result = estimate.to_dict()
    result["symbol"] = client.currency_symbol
    return result
