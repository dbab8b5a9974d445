"""Error shaping and wallet lookup shared by the tool modules."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from eth_account.signers.local import LocalAccount

from rootstock_mcp.metrics import default_metrics
from rootstock_mcp.rootstock_api import (
    NodeUnreachableError,
    RootstockApiError,
    UnauthorizedError,
)
from rootstock_mcp.rootstock_api.contracts import ContractArtifactError
from rootstock_mcp.wallets import NoCurrentWalletError, WalletError, WalletManager

logger = logging.getLogger(__name__)

NO_WALLET_MESSAGE = "No wallet configured. Import one with import_wallet or set ROOTSTOCK_PRIVATE_KEYS."

# Exception families whose message is safe to surface to the caller.
EXPECTED_ERRORS = (RootstockApiError, WalletError, ContractArtifactError, ValueError)


def failure(prefix: str, exc: Exception) -> Dict[str, str]:
    """Build a ``{"error": "<prefix>: <reason>"}`` dict for an expected failure."""
    if isinstance(exc, UnauthorizedError):
        reason = "Unauthorized by RPC endpoint."
    elif isinstance(exc, NodeUnreachableError):
        reason = "Node unreachable"
    else:
        reason = str(exc) or type(exc).__name__
    return {"error": f"{prefix}: {reason}"}


def current_account(wallets: WalletManager) -> Optional[LocalAccount]:
    """Return the signing account, or None when no wallet is configured."""
    try:
        return wallets.get_current_wallet()
    except NoCurrentWalletError:
        return None


def with_explorer_links(result: Dict[str, Any], client: Any, *, tx_hash: Optional[str] = None, address: Optional[str] = None) -> Dict[str, Any]:
    if tx_hash:
        result["explorerUrl"] = client.tx_url(tx_hash)
    if address:
        result["contractExplorerUrl"] = client.address_url(address)
    return result


def record_transaction(status: str) -> None:
    default_metrics.record_transaction(status)
