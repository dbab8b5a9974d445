"""LLM-facing tool implementations."""

from .wallet import (
    create_wallet,
    import_wallet,
    list_wallets,
    set_current_wallet,
    get_current_wallet,
)
from .account import get_balance, get_native_balance, validate_address
from .transactions import send_transaction, get_transaction, estimate_gas
from .network import get_block, get_network_info
from .contracts import call_contract, send_contract_transaction
from .tokens import deploy_erc20_token, get_token_info, mint_tokens
from .nfts import deploy_erc721_token, get_nft_info, mint_nft, transfer_nft
from . import validators

__all__ = [
    "create_wallet",
    "import_wallet",
    "list_wallets",
    "set_current_wallet",
    "get_current_wallet",
    "validate_address",
    "get_balance",
    "get_native_balance",
    "send_transaction",
    "get_transaction",
    "estimate_gas",
    "get_block",
    "get_network_info",
    "call_contract",
    "send_contract_transaction",
    "deploy_erc20_token",
    "get_token_info",
    "mint_tokens",
    "deploy_erc721_token",
    "get_nft_info",
    "mint_nft",
    "transfer_nft",
    "validators",
]
