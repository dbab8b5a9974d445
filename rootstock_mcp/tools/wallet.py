"""Wallet keystore tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from rootstock_mcp.tools.common import NO_WALLET_MESSAGE, failure
from rootstock_mcp.tools.validators import is_valid_address
from rootstock_mcp.wallets import (
    NoCurrentWalletError,
    WalletError,
    WalletManager,
    default_wallet_manager,
)

logger = logging.getLogger(__name__)


def create_wallet(name: Optional[str] = None, *, wallets: WalletManager = default_wallet_manager) -> Dict[str, Any]:
    """
    Generate a new mnemonic-backed wallet and add it to the keystore.

    The mnemonic is returned once; it is the only way to recover the wallet.
    """
    try:
        info = wallets.create_wallet(name=name)
    except WalletError as exc:
        return failure("Failed to create wallet", exc)
    except Exception:
        logger.exception("Unexpected error creating wallet")
        return {"error": "Failed to create wallet: unexpected error."}

    result = info.to_dict()
    result.pop("privateKey", None)
    result["isCurrent"] = wallets.get_current_address().lower() == info.address.lower()
    return result


def import_wallet(
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    name: Optional[str] = None,
    *,
    wallets: WalletManager = default_wallet_manager,
) -> Dict[str, Any]:
    """Import a wallet from a private key or a BIP39 mnemonic."""
    if not private_key and not mnemonic:
        return {"error": "Failed to import wallet: Either private key or mnemonic must be provided"}
    try:
        info = wallets.import_wallet(private_key=private_key, mnemonic=mnemonic, name=name)
    except WalletError as exc:
        return failure("Failed to import wallet", exc)
    except Exception:
        logger.exception("Unexpected error importing wallet")
        return {"error": "Failed to import wallet: unexpected error."}

    result: Dict[str, Any] = {"address": info.address, "publicKey": info.public_key}
    if name:
        result["name"] = name
    result["isCurrent"] = wallets.get_current_address().lower() == info.address.lower()
    return result


def list_wallets(*, wallets: WalletManager = default_wallet_manager) -> Dict[str, Any]:
    try:
        current = wallets.get_current_address()
    except NoCurrentWalletError:
        current = None

    entries = []
    for info in wallets.list_wallets():
        entry = info.to_dict()
        entry["isCurrent"] = current is not None and info.address.lower() == current.lower()
        entries.append(entry)
    return {"wallets": entries, "count": len(entries), "currentAddress": current}


def set_current_wallet(address: str, *, wallets: WalletManager = default_wallet_manager) -> Dict[str, Any]:
    if not is_valid_address(address):
        return {"error": "Failed to set current wallet: Invalid address."}
    try:
        wallets.set_current_wallet(address)
    except WalletError as exc:
        return failure("Failed to set current wallet", exc)
    return {"currentAddress": wallets.get_current_address()}


def get_current_wallet(*, wallets: WalletManager = default_wallet_manager) -> Dict[str, Any]:
    """Current wallet details; the private key is masked."""
    try:
        info = wallets.get_wallet_info(wallets.get_current_address())
    except NoCurrentWalletError:
        return {"error": NO_WALLET_MESSAGE}
    except WalletError as exc:
        return failure("Failed to get current wallet", exc)
    return info.to_dict()
