"""
Human-readable renderings of tool results.

MCP clients show ``content[0].text`` to the user, so every tool gets a short
text block alongside the structured dict.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

Renderer = Callable[[Dict[str, Any]], str]


def _optional_lines(result: Dict[str, Any], pairs: List[tuple[str, str]]) -> str:
    return "".join(f"\n{label}: {result[key]}" for label, key in pairs if result.get(key) not in (None, ""))


def _links(result: Dict[str, Any], *, tx_label: str = "Transaction Explorer") -> str:
    lines = ""
    if result.get("explorerUrl"):
        lines += f"\n{tx_label}: {result['explorerUrl']}"
    return lines


def create_wallet(result: Dict[str, Any]) -> str:
    return (
        "Wallet created successfully!\n\n"
        f"Address: {result['address']}\n"
        f"Mnemonic: {result.get('mnemonic')}\n\n"
        "IMPORTANT: Save your mnemonic phrase securely. It's the only way to recover your wallet!"
    )


def import_wallet(result: Dict[str, Any]) -> str:
    return f"Wallet imported successfully!\n\nAddress: {result['address']}"


def list_wallets(result: Dict[str, Any]) -> str:
    wallets = result.get("wallets") or []
    text = f"Available Wallets ({len(wallets)}):\n\n"
    for wallet in wallets:
        marker = "-> " if wallet.get("isCurrent") else "   "
        suffix = " (current)" if wallet.get("isCurrent") else ""
        label = f" [{wallet['name']}]" if wallet.get("name") else ""
        text += f"{marker}{wallet['address']}{label}{suffix}\n"
    return text


def set_current_wallet(result: Dict[str, Any]) -> str:
    return f"Current wallet set to: {result['currentAddress']}"


def get_current_wallet(result: Dict[str, Any]) -> str:
    return (
        "Current Wallet:\n\n"
        f"Address: {result['address']}\n"
        f"Public Key: {result.get('publicKey')}\n"
        f"Private Key: {result.get('privateKey')}"
    )


def validate_address(result: Dict[str, Any]) -> str:
    if not result.get("isValid"):
        return "Address is not valid."
    return f"Address is valid.\n\nChecksum Address: {result['address']}"


def get_balance(result: Dict[str, Any]) -> str:
    if result.get("tokenAddress"):
        return (
            "Token Balance:\n\n"
            f"Address: {result['address']}\n"
            f"Token: {result.get('name')} ({result.get('symbol')})\n"
            f"Balance: {result['balance']} {result.get('symbol')}"
        )
    return f"Native Balance:\n\nAddress: {result['address']}\nBalance: {result['balance']} {result.get('symbol')}"


def get_native_balance(result: Dict[str, Any]) -> str:
    return (
        f"Native {result.get('symbol')} Balance:\n\n"
        f"Address: {result['address']}\n"
        f"Balance: {result['balance']} {result.get('symbol')}\n"
        f"Network: {result.get('networkName')} (Chain ID: {result.get('chainId')})\n"
        f"Block: {result.get('blockNumber')}"
    )


def send_transaction(result: Dict[str, Any]) -> str:
    unit = "" if result.get("tokenAddress") else f" {result.get('symbol')}"
    return (
        "Transaction sent successfully!\n\n"
        f"Transaction Hash: {result['hash']}"
        f"{_links(result)}\n\n"
        "Transaction Details:\n"
        f"From: {result.get('from')}\n"
        f"To: {result.get('to')}\n"
        f"Amount: {result.get('value')}{unit}\n"
        f"Status: {result.get('status')}"
    )


def get_transaction(result: Dict[str, Any]) -> str:
    return (
        "Transaction Details:\n\n"
        f"Hash: {result['hash']}"
        f"{_links(result, tx_label='Explorer')}\n\n"
        f"From: {result.get('from')}\n"
        f"To: {result.get('to')}\n"
        f"Value: {result.get('value')} {result.get('symbol')}\n"
        f"Gas Used: {result.get('gasUsed', 'N/A')}\n"
        f"Block: {result.get('blockNumber', 'N/A')}\n"
        f"Status: {result.get('status')}"
    )


def _block_time(result: Dict[str, Any]) -> str:
    if result.get("timestampIso"):
        return result["timestampIso"]
    stamp = datetime.fromtimestamp(int(result.get("timestamp") or 0), tz=timezone.utc)
    return stamp.isoformat()


def get_block(result: Dict[str, Any]) -> str:
    return (
        "Block Information:\n\n"
        f"Number: {result['number']}\n"
        f"Hash: {result['hash']}\n"
        f"Timestamp: {_block_time(result)}\n"
        f"Transactions: {result.get('transactionCount')}\n"
        f"Gas Used: {result.get('gasUsed')}\n"
        f"Gas Limit: {result.get('gasLimit')}\n"
        f"Miner: {result.get('miner')}"
    )


def get_network_info(result: Dict[str, Any]) -> str:
    return (
        "Network Information:\n\n"
        f"Name: {result.get('networkName')}\n"
        f"Chain ID: {result.get('chainId')}\n"
        f"Latest Block: {result.get('blockNumber')}\n"
        f"Gas Price: {result.get('gasPrice')} wei\n"
        f"Connected: {'Yes' if result.get('isConnected') else 'No'}"
    )


def estimate_gas(result: Dict[str, Any]) -> str:
    return (
        "Gas Estimate:\n\n"
        f"Gas Limit: {result.get('gasLimit')}\n"
        f"Gas Price: {result.get('gasPrice')} wei\n"
        f"Estimated Cost: {result.get('estimatedCost')} {result.get('symbol')}"
    )


def call_contract(result: Dict[str, Any]) -> str:
    return (
        "Contract Call Result:\n\n"
        f"Contract: {result['contractAddress']}\n"
        f"Method: {result['methodName']}\n"
        f"Result: {json.dumps(result.get('result'), indent=2)}"
    )


def send_contract_transaction(result: Dict[str, Any]) -> str:
    return (
        "Contract Transaction Sent:\n\n"
        f"Transaction Hash: {result['hash']}"
        f"{_links(result)}\n\n"
        f"Contract: {result['contractAddress']}"
        f"{_optional_lines(result, [('Contract Explorer', 'contractExplorerUrl')])}\n\n"
        f"Method: {result['methodName']}\n"
        f"Status: {result.get('status')}"
    )


def deploy_erc20_token(result: Dict[str, Any]) -> str:
    return (
        "ERC20 Token Deployed Successfully!\n\n"
        f"Contract Address: {result['contractAddress']}"
        f"{_optional_lines(result, [('Contract Explorer', 'contractExplorerUrl')])}\n\n"
        f"Transaction Hash: {result['transactionHash']}"
        f"{_links(result)}\n\n"
        "Token Details:\n"
        f"Name: {result['name']}\n"
        f"Symbol: {result['symbol']}\n"
        f"Decimals: {result.get('decimals')}\n"
        f"Initial Supply: {result.get('initialSupply')}\n"
        f"Mintable: {'Yes' if result.get('mintable') else 'No'}\n"
        f"Deployer: {result['deployer']}"
        + _optional_lines(result, [("Gas Used", "gasUsed"), ("Block Number", "blockNumber")])
    )


def get_token_info(result: Dict[str, Any]) -> str:
    return (
        "Token Information:\n\n"
        f"Address: {result['address']}\n"
        f"Name: {result['name']}\n"
        f"Symbol: {result['symbol']}\n"
        f"Decimals: {result['decimals']}\n"
        f"Total Supply: {result['totalSupply']}"
        + _optional_lines(result, [("Owner", "owner")])
    )


def mint_tokens(result: Dict[str, Any]) -> str:
    return (
        "Tokens Minted Successfully!\n\n"
        f"Transaction Hash: {result['hash']}"
        f"{_links(result)}\n\n"
        f"Token Contract: {result['tokenAddress']}"
        f"{_optional_lines(result, [('Contract Explorer', 'contractExplorerUrl')])}\n\n"
        "Mint Details:\n"
        f"Minted To: {result.get('mintedTo')}\n"
        f"Amount: {result.get('amount')}\n"
        f"Status: {result.get('status')}\n"
        f"Gas Used: {result.get('gasUsed', 'N/A')}"
    )


def deploy_erc721_token(result: Dict[str, Any]) -> str:
    return (
        "ERC721 NFT Contract Deployed Successfully!\n\n"
        f"Contract Address: {result['contractAddress']}\n"
        f"Transaction Hash: {result['transactionHash']}\n"
        f"Name: {result['name']}\n"
        f"Symbol: {result['symbol']}\n"
        f"Mintable: {'Yes' if result.get('mintable') else 'No'}\n"
        f"Deployer: {result['deployer']}"
        + _optional_lines(result, [("Gas Used", "gasUsed"), ("Block Number", "blockNumber")])
    )


def get_nft_info(result: Dict[str, Any]) -> str:
    return (
        "NFT Information:\n\n"
        f"Address: {result['address']}\n"
        f"Name: {result['name']}\n"
        f"Symbol: {result['symbol']}\n"
        f"Total Supply: {result['totalSupply']}"
        + _optional_lines(result, [("Token ID", "tokenId"), ("Token URI", "tokenURI"), ("Owner", "owner")])
    )


def mint_nft(result: Dict[str, Any]) -> str:
    return (
        "NFT Minted Successfully!\n\n"
        f"Transaction Hash: {result['transactionHash']}\n"
        f"To: {result['to']}\n"
        f"Token ID: {result['tokenId']}"
        + _optional_lines(result, [("Token URI", "tokenURI")])
        + f"\nGas Used: {result.get('gasUsed') or 'N/A'}"
        + f"\nBlock Number: {result.get('blockNumber') or 'N/A'}"
    )


def transfer_nft(result: Dict[str, Any]) -> str:
    return (
        "NFT Transferred Successfully!\n\n"
        f"Transaction Hash: {result['hash']}"
        f"{_links(result)}\n\n"
        f"Token Contract: {result['tokenAddress']}\n"
        f"Token ID: {result['tokenId']}\n"
        f"From: {result.get('from')}\n"
        f"To: {result.get('to')}\n"
        f"Status: {result.get('status')}"
    )


RENDERERS: Dict[str, Renderer] = {
    "create_wallet": create_wallet,
    "import_wallet": import_wallet,
    "list_wallets": list_wallets,
    "set_current_wallet": set_current_wallet,
    "get_current_wallet": get_current_wallet,
    "validate_address": validate_address,
    "get_balance": get_balance,
    "get_native_balance": get_native_balance,
    "send_transaction": send_transaction,
    "get_transaction": get_transaction,
    "estimate_gas": estimate_gas,
    "get_block": get_block,
    "get_network_info": get_network_info,
    "call_contract": call_contract,
    "send_contract_transaction": send_contract_transaction,
    "deploy_erc20_token": deploy_erc20_token,
    "get_token_info": get_token_info,
    "mint_tokens": mint_tokens,
    "deploy_erc721_token": deploy_erc721_token,
    "get_nft_info": get_nft_info,
    "mint_nft": mint_nft,
    "transfer_nft": transfer_nft,
}


def render(tool_name: str, result: Any) -> Optional[str]:
    """Text block for a successful tool result, or None when no renderer applies."""
    renderer = RENDERERS.get(tool_name)
    if renderer is None or not isinstance(result, dict) or "error" in result:
        return None
    try:
        return renderer(result)
    except (KeyError, TypeError, ValueError):
        return None
