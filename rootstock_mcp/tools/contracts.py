"""Generic smart-contract call and transaction tools."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

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
from rootstock_mcp.tools.validators import check_gas, is_valid_address, is_valid_amount
from rootstock_mcp.wallets import WalletManager, default_wallet_manager

logger = logging.getLogger(__name__)

METHOD_NAME_MAX_LENGTH = 128


def _check_call_inputs(
    contract_address: str,
    method_name: str,
    parameters: Any,
    abi: Any,
    config: RootstockConfig,
) -> Optional[str]:
    if not is_valid_address(contract_address):
        return "Invalid contract address."
    if not isinstance(method_name, str) or not method_name.strip() or len(method_name) > METHOD_NAME_MAX_LENGTH:
        return "Invalid method name."
    if parameters is not None and not isinstance(parameters, list):
        return "Parameters must be an array."
    if parameters and len(parameters) > config.max_contract_params:
        return f"Too many parameters (max {config.max_contract_params})."
    if abi is not None:
        entries = _abi_entries(abi)
        if entries is None:
            return "ABI must be an array."
        if len(entries) > config.max_abi_entries:
            return f"ABI too large (max {config.max_abi_entries} entries)."
    return None


def _abi_entries(abi: Any) -> Optional[List[Any]]:
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except ValueError:
            return None
    return abi if isinstance(abi, list) else None


async def call_contract(
    contract_address: str,
    method_name: str,
    parameters: Optional[List[Any]] = None,
    abi: Optional[Any] = None,
    *,
    client=default_client,
    config: RootstockConfig = default_config,
) -> Dict[str, Any]:
    """
    Read-only contract call via ``eth_call``.

    Without an ABI the method is assumed to take uint256 arguments and return a
    single uint256.
    """
    problem = _check_call_inputs(contract_address, method_name, parameters, abi, config)
    if problem:
        return {"error": f"Failed to call contract: {problem}"}

    try:
        response = await client.call_contract(contract_address, method_name.strip(), parameters or [], abi=abi or None)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to call contract", exc)
    except Exception:
        logger.exception("Unexpected error calling contract")
        return {"error": "Failed to call contract: unexpected error."}

    return {
        "contractAddress": contract_address,
        "methodName": method_name.strip(),
        "result": response.get("result"),
    }


async def send_contract_transaction(
    contract_address: str,
    method_name: str,
    parameters: Optional[List[Any]] = None,
    abi: Optional[Any] = None,
    value: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
    config: RootstockConfig = default_config,
) -> Dict[str, Any]:
    problem = _check_call_inputs(contract_address, method_name, parameters, abi, config)
    if problem is None and value not in (None, "") and not is_valid_amount(value, decimals=18):
        problem = "Invalid value."
    if problem is None:
        problem = check_gas(gas_limit, gas_price)
    if problem:
        return {"error": f"Failed to send contract transaction: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        tx = await client.send_contract_transaction(
            account,
            contract_address,
            method_name.strip(),
            parameters or [],
            abi=abi or None,
            value=value or None,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
    except EXPECTED_ERRORS as exc:
        return failure("Failed to send contract transaction", exc)
    except Exception:
        logger.exception("Unexpected error sending contract transaction")
        return {"error": "Failed to send contract transaction: unexpected error."}

    record_transaction(tx.status)
    result = tx.to_dict()
    result["contractAddress"] = tx.to
    result["methodName"] = method_name.strip()
    return with_explorer_links(result, client, tx_hash=tx.hash, address=tx.to)
