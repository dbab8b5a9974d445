"""ERC20 deployment, inspection and minting tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from rootstock_mcp.config import RootstockConfig, default_config
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
    parse_flag,
    parse_optional_int,
)
from rootstock_mcp.wallets import WalletManager, default_wallet_manager

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 64
SYMBOL_MAX_LENGTH = 16
MAX_DECIMALS = 36


def check_name_symbol(name: Any, symbol: Any) -> Optional[str]:
    if not isinstance(name, str) or not name.strip() or len(name) > NAME_MAX_LENGTH:
        return "Invalid token name."
    if not isinstance(symbol, str) or not symbol.strip() or len(symbol) > SYMBOL_MAX_LENGTH:
        return "Invalid token symbol."
    return None


def _check_supply(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.strip().isdigit()


async def deploy_erc20_token(
    name: str,
    symbol: str,
    initial_supply: str,
    decimals: Any = None,
    mintable: bool = False,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
    config: RootstockConfig = default_config,
) -> Dict[str, Any]:
    """
    Deploy the standard or mintable ERC20 template from the current wallet.

    ``initial_supply`` is passed to the constructor as a raw integer; it is
    not scaled by ``decimals``.
    """
    problem = check_name_symbol(name, symbol)
    parsed_decimals = parse_optional_int(decimals) if decimals not in (None, "") else config.default_token_decimals
    if problem is None and (parsed_decimals is None or not 0 <= parsed_decimals <= MAX_DECIMALS):
        problem = "Invalid decimals."
    if problem is None and not _check_supply(initial_supply):
        problem = "Initial supply must be a non-negative integer."
    is_mintable = parse_flag(mintable)
    if problem is None and is_mintable is None:
        problem = "Invalid mintable flag."
    if problem is None:
        problem = check_gas(gas_limit, gas_price)
    if problem:
        return {"error": f"Failed to deploy ERC20 token: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        deployment = await client.deploy_erc20_token(
            account,
            name.strip(),
            symbol.strip(),
            decimals=parsed_decimals,
            initial_supply=str(initial_supply).strip(),
            mintable=is_mintable,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
    except EXPECTED_ERRORS as exc:
        return failure("Failed to deploy ERC20 token", exc)
    except Exception:
        logger.exception("Unexpected error deploying ERC20 token")
        return {"error": "Failed to deploy ERC20 token: unexpected error."}

    record_transaction("confirmed")
    return with_explorer_links(
        deployment.to_dict(),
        client,
        tx_hash=deployment.transaction_hash,
        address=deployment.contract_address,
    )


async def get_token_info(token_address: str, *, client=default_client) -> Dict[str, Any]:
    if not is_valid_address(token_address):
        return {"error": "Failed to get token info: Invalid token address."}
    try:
        info = await client.get_token_info(token_address)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get token info", exc)
    except Exception:
        logger.exception("Unexpected error fetching token info")
        return {"error": "Failed to get token info: unexpected error."}
    return info.to_dict()


async def mint_tokens(
    token_address: str,
    to: str,
    amount: str,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    """Mint tokens on a mintable ERC20; the current wallet must own the contract."""
    if not is_valid_address(token_address):
        return {"error": "Failed to mint tokens: Invalid token address."}
    if not is_valid_address(to):
        return {"error": "Failed to mint tokens: Invalid recipient address."}
    if not is_valid_amount(amount):
        return {"error": "Failed to mint tokens: Invalid amount."}
    problem = check_gas(gas_limit, gas_price)
    if problem:
        return {"error": f"Failed to mint tokens: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        tx = await client.mint_tokens(account, token_address, to, amount, gas_limit=gas_limit, gas_price=gas_price)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to mint tokens", exc)
    except Exception:
        logger.exception("Unexpected error minting tokens")
        return {"error": "Failed to mint tokens: unexpected error."}

    record_transaction(tx.status)
    result = tx.to_dict()
    result["tokenAddress"] = tx.to
    result["mintedTo"] = to
    result["amount"] = amount
    return with_explorer_links(result, client, tx_hash=tx.hash, address=tx.to)
