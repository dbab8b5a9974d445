"""ERC721 deployment, inspection, minting and transfer tools."""

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
from rootstock_mcp.tools.tokens import check_name_symbol
from rootstock_mcp.tools.validators import check_gas, is_uint_string, is_valid_address, parse_flag
from rootstock_mcp.wallets import WalletManager, default_wallet_manager

logger = logging.getLogger(__name__)

TOKEN_URI_MAX_LENGTH = 2048


async def deploy_erc721_token(
    name: str,
    symbol: str,
    mintable: bool = False,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    problem = check_name_symbol(name, symbol) or check_gas(gas_limit, gas_price)
    is_mintable = parse_flag(mintable)
    if problem is None and is_mintable is None:
        problem = "Invalid mintable flag."
    if problem:
        return {"error": f"Failed to deploy ERC721 token: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        deployment = await client.deploy_erc721_token(
            account,
            name.strip(),
            symbol.strip(),
            mintable=is_mintable,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
    except EXPECTED_ERRORS as exc:
        return failure("Failed to deploy ERC721 token", exc)
    except Exception:
        logger.exception("Unexpected error deploying ERC721 token")
        return {"error": "Failed to deploy ERC721 token: unexpected error."}

    record_transaction("confirmed")
    return with_explorer_links(
        deployment.to_dict(),
        client,
        tx_hash=deployment.transaction_hash,
        address=deployment.contract_address,
    )


async def get_nft_info(
    token_address: str,
    token_id: Optional[Any] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    """Collection info, plus ``tokenURI`` and owner when a token id is given."""
    if not is_valid_address(token_address):
        return {"error": "Failed to get NFT info: Invalid token address."}
    if token_id not in (None, "") and not is_uint_string(token_id):
        return {"error": "Failed to get NFT info: Invalid token ID."}

    try:
        info = await client.get_nft_info(token_address, str(token_id) if token_id not in (None, "") else None)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get NFT info", exc)
    except Exception:
        logger.exception("Unexpected error fetching NFT info")
        return {"error": "Failed to get NFT info: unexpected error."}
    return info.to_dict()


async def mint_nft(
    token_address: str,
    to: str,
    token_id: Any,
    token_uri: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    if not is_valid_address(token_address):
        return {"error": "Failed to mint NFT: Invalid token address."}
    if not is_valid_address(to):
        return {"error": "Failed to mint NFT: Invalid recipient address."}
    if not is_uint_string(token_id):
        return {"error": "Failed to mint NFT: Invalid token ID."}
    if token_uri is not None and (not isinstance(token_uri, str) or len(token_uri) > TOKEN_URI_MAX_LENGTH):
        return {"error": "Failed to mint NFT: Invalid token URI."}
    problem = check_gas(gas_limit, gas_price)
    if problem:
        return {"error": f"Failed to mint NFT: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        minted = await client.mint_nft(
            account,
            token_address,
            to,
            str(token_id).strip(),
            token_uri or "",
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
    except EXPECTED_ERRORS as exc:
        return failure("Failed to mint NFT", exc)
    except Exception:
        logger.exception("Unexpected error minting NFT")
        return {"error": "Failed to mint NFT: unexpected error."}

    record_transaction(minted.status)
    result = minted.to_dict()
    result["tokenAddress"] = token_address
    return with_explorer_links(result, client, tx_hash=minted.transaction_hash, address=token_address)


async def transfer_nft(
    token_address: str,
    to: str,
    token_id: Any,
    from_address: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    """
    Move an NFT with ``transferFrom``.

    ``from_address`` defaults to the current wallet; the current wallet must
    own or be approved for the token.
    """
    if not is_valid_address(token_address):
        return {"error": "Failed to transfer NFT: Invalid token address."}
    if not is_valid_address(to):
        return {"error": "Failed to transfer NFT: Invalid recipient address."}
    if from_address and not is_valid_address(from_address):
        return {"error": "Failed to transfer NFT: Invalid sender address."}
    if not is_uint_string(token_id):
        return {"error": "Failed to transfer NFT: Invalid token ID."}
    problem = check_gas(gas_limit, gas_price)
    if problem:
        return {"error": f"Failed to transfer NFT: {problem}"}

    account = current_account(wallets)
    if account is None:
        return {"error": NO_WALLET_MESSAGE}

    try:
        tx = await client.transfer_nft(
            account,
            token_address,
            from_address or account.address,
            to,
            str(token_id).strip(),
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
    except EXPECTED_ERRORS as exc:
        return failure("Failed to transfer NFT", exc)
    except Exception:
        logger.exception("Unexpected error transferring NFT")
        return {"error": "Failed to transfer NFT: unexpected error."}

    record_transaction(tx.status)
    result = tx.to_dict()
    result["tokenAddress"] = token_address
    result["tokenId"] = str(token_id).strip()
    return with_explorer_links(result, client, tx_hash=tx.hash, address=token_address)
