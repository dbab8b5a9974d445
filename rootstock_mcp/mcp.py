"""
Lightweight JSON-RPC surface for MCP-style tooling.

Maps MCP tool names to the implementations in ``rootstock_mcp.tools``. Tool
arguments arrive in camelCase (``tokenAddress``, ``gasLimit``) and are passed
to the Python callables as snake_case keywords.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from rootstock_mcp.config import default_config
from rootstock_mcp.tools import (
    call_contract,
    create_wallet,
    deploy_erc20_token,
    deploy_erc721_token,
    estimate_gas,
    get_balance,
    get_block,
    get_current_wallet,
    get_native_balance,
    get_network_info,
    get_nft_info,
    get_token_info,
    get_transaction,
    import_wallet,
    list_wallets,
    mint_nft,
    mint_tokens,
    send_contract_transaction,
    send_transaction,
    set_current_wallet,
    transfer_nft,
    validate_address,
)
from rootstock_mcp.tools.validators import ADDRESS_REGEX, HASH_REGEX

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = ADDRESS_REGEX.pattern
HASH_PATTERN = HASH_REGEX.pattern
UINT_PATTERN = r"^(0x[0-9a-fA-F]+|\d+)$"
AMOUNT_PATTERN = r"^\d*\.?\d+$|^\d+\.$"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
# MCP argument names that are not valid or not distinct Python identifiers.
PARAM_ALIASES = {"from": "from_address", "hash": "tx_hash"}


def _address(description: str) -> Dict[str, Any]:
    return {"type": "string", "pattern": ADDRESS_PATTERN, "description": description}


def _gas_properties() -> Dict[str, Any]:
    return {
        "gasLimit": {"type": "string", "pattern": UINT_PATTERN, "description": "Optional gas limit"},
        "gasPrice": {"type": "string", "pattern": UINT_PATTERN, "description": "Optional gas price (wei)"},
    }


def _object_schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required or [],
        "additionalProperties": False,
    }


ToolCallable = Callable[..., Awaitable[Any]] | Callable[..., Any]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Dict[str, Any]
    input_schema: Dict[str, Any]
    callable: ToolCallable


TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    "create_wallet": ToolDefinition(
        name="create_wallet",
        description="Create a new wallet with a generated 12-word mnemonic phrase.",
        params={"name": "string (optional label)"},
        input_schema=_object_schema({"name": {"type": "string", "description": "Optional name for the wallet"}}),
        callable=create_wallet,
    ),
    "import_wallet": ToolDefinition(
        name="import_wallet",
        description="Import an existing wallet using a private key or mnemonic phrase.",
        params={
            "privateKey": "string (optional, alternative to mnemonic)",
            "mnemonic": "string (optional, alternative to privateKey)",
            "name": "string (optional label)",
        },
        input_schema=_object_schema(
            {
                "privateKey": {"type": "string", "description": "Private key to import"},
                "mnemonic": {"type": "string", "description": "Mnemonic phrase to import"},
                "name": {"type": "string", "description": "Optional name for the wallet"},
            }
        ),
        callable=import_wallet,
    ),
    "list_wallets": ToolDefinition(
        name="list_wallets",
        description="List all available wallets and mark the current one.",
        params={},
        input_schema=_object_schema({}),
        callable=list_wallets,
    ),
    "set_current_wallet": ToolDefinition(
        name="set_current_wallet",
        description="Set the current active wallet for transactions.",
        params={"address": "wallet address"},
        input_schema=_object_schema({"address": _address("Wallet address to set as current")}, ["address"]),
        callable=set_current_wallet,
    ),
    "get_current_wallet": ToolDefinition(
        name="get_current_wallet",
        description="Get the current active wallet (private key masked).",
        params={},
        input_schema=_object_schema({}),
        callable=get_current_wallet,
    ),
    "validate_address": ToolDefinition(
        name="validate_address",
        description="Check whether an address is well formed and return its checksum form.",
        params={"address": "string"},
        input_schema=_object_schema({"address": {"type": "string", "description": "Address to validate"}}, ["address"]),
        callable=validate_address,
    ),
    "get_balance": ToolDefinition(
        name="get_balance",
        description="Get the native or ERC20 token balance of an address.",
        params={"address": "address", "tokenAddress": "ERC20 contract address (optional)"},
        input_schema=_object_schema(
            {
                "address": _address("Wallet address to check balance for"),
                "tokenAddress": _address("Optional ERC20 token contract address"),
            },
            ["address"],
        ),
        callable=get_balance,
    ),
    "get_native_balance": ToolDefinition(
        name="get_native_balance",
        description="Get the native balance of an address together with network details.",
        params={"address": "address (optional, defaults to current wallet)"},
        input_schema=_object_schema({"address": _address("Wallet address to check native balance for")}),
        callable=get_native_balance,
    ),
    "send_transaction": ToolDefinition(
        name="send_transaction",
        description="Send native currency or ERC20 tokens from the current wallet.",
        params={
            "to": "recipient address",
            "amount": "string amount in token units (not wei)",
            "tokenAddress": "ERC20 contract address (optional)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "to": _address("Recipient address"),
                "amount": {"type": "string", "pattern": AMOUNT_PATTERN, "description": "Amount to send (in token units, not wei)"},
                "tokenAddress": _address("Optional ERC20 token contract address (for token transfers)"),
                **_gas_properties(),
            },
            ["to", "amount"],
        ),
        callable=send_transaction,
    ),
    "get_transaction": ToolDefinition(
        name="get_transaction",
        description="Get details of a transaction by hash.",
        params={"hash": "0x-prefixed transaction hash"},
        input_schema=_object_schema(
            {"hash": {"type": "string", "pattern": HASH_PATTERN, "description": "Transaction hash"}},
            ["hash"],
        ),
        callable=get_transaction,
    ),
    "estimate_gas": ToolDefinition(
        name="estimate_gas",
        description="Estimate gas limit and cost for a transaction.",
        params={"to": "address", "value": "string ether (optional)", "data": "hex (optional)"},
        input_schema=_object_schema(
            {
                "to": _address("Recipient address"),
                "value": {"type": "string", "pattern": AMOUNT_PATTERN, "description": "Optional value to send (in ether)"},
                "data": {"type": "string", "pattern": r"^0x([0-9a-fA-F]{2})*$", "description": "Optional transaction data"},
            },
            ["to"],
        ),
        callable=estimate_gas,
    ),
    "get_block": ToolDefinition(
        name="get_block",
        description="Get block information by number or hash (latest when omitted).",
        params={"blockNumber": "integer (optional)", "blockHash": "string (optional)"},
        input_schema=_object_schema(
            {
                "blockNumber": {"type": "integer", "minimum": 0, "description": "Block number (alternative to blockHash)"},
                "blockHash": {"type": "string", "pattern": HASH_PATTERN, "description": "Block hash (alternative to blockNumber)"},
            }
        ),
        callable=get_block,
    ),
    "get_network_info": ToolDefinition(
        name="get_network_info",
        description="Get current network information and connection status.",
        params={},
        input_schema=_object_schema({}),
        callable=get_network_info,
    ),
    "call_contract": ToolDefinition(
        name="call_contract",
        description="Call a smart contract method (read-only).",
        params={
            "contractAddress": "address",
            "methodName": "string",
            "parameters": "array (optional)",
            "abi": "array of JSON ABI entries or human-readable fragments (optional)",
        },
        input_schema=_object_schema(
            {
                "contractAddress": _address("Smart contract address"),
                "methodName": {"type": "string", "minLength": 1, "description": "Method name to call"},
                "parameters": {
                    "type": "array",
                    "items": {},
                    "maxItems": default_config.max_contract_params,
                    "description": "Method parameters",
                },
                "abi": {
                    "type": "array",
                    "items": {},
                    "maxItems": default_config.max_abi_entries,
                    "description": "Optional contract ABI",
                },
            },
            ["contractAddress", "methodName"],
        ),
        callable=call_contract,
    ),
    "send_contract_transaction": ToolDefinition(
        name="send_contract_transaction",
        description="Send a state-changing transaction to a smart contract method.",
        params={
            "contractAddress": "address",
            "methodName": "string",
            "parameters": "array (optional)",
            "abi": "array (optional)",
            "value": "string ether (optional)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "contractAddress": _address("Smart contract address"),
                "methodName": {"type": "string", "minLength": 1, "description": "Method name to call"},
                "parameters": {
                    "type": "array",
                    "items": {},
                    "maxItems": default_config.max_contract_params,
                    "description": "Method parameters",
                },
                "abi": {
                    "type": "array",
                    "items": {},
                    "maxItems": default_config.max_abi_entries,
                    "description": "Optional contract ABI",
                },
                "value": {"type": "string", "pattern": AMOUNT_PATTERN, "description": "Optional ether value to send"},
                **_gas_properties(),
            },
            ["contractAddress", "methodName"],
        ),
        callable=send_contract_transaction,
    ),
    "deploy_erc20_token": ToolDefinition(
        name="deploy_erc20_token",
        description="Deploy a new standard or mintable ERC20 token contract.",
        params={
            "name": "string",
            "symbol": "string",
            "initialSupply": "string integer",
            "decimals": "integer (optional, default 18)",
            "mintable": "boolean (optional)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "name": {"type": "string", "minLength": 1, "description": 'Token name (e.g., "My Token")'},
                "symbol": {"type": "string", "minLength": 1, "description": 'Token symbol (e.g., "MTK")'},
                "decimals": {"type": "integer", "minimum": 0, "maximum": 36, "description": "Token decimals (default: 18)"},
                "initialSupply": {"type": "string", "pattern": r"^\d+$", "description": "Initial token supply"},
                "mintable": {"type": "boolean", "description": "Whether the token should be mintable (default: false)"},
                **_gas_properties(),
            },
            ["name", "symbol", "initialSupply"],
        ),
        callable=deploy_erc20_token,
    ),
    "get_token_info": ToolDefinition(
        name="get_token_info",
        description="Get name, symbol, decimals, total supply and owner of an ERC20 token.",
        params={"tokenAddress": "address"},
        input_schema=_object_schema({"tokenAddress": _address("ERC20 token contract address")}, ["tokenAddress"]),
        callable=get_token_info,
    ),
    "mint_tokens": ToolDefinition(
        name="mint_tokens",
        description="Mint tokens on a mintable ERC20 contract owned by the current wallet.",
        params={
            "tokenAddress": "address",
            "to": "address",
            "amount": "string amount in token units",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "tokenAddress": _address("ERC20 token contract address"),
                "to": _address("Address to mint tokens to"),
                "amount": {"type": "string", "pattern": AMOUNT_PATTERN, "description": "Amount of tokens to mint"},
                **_gas_properties(),
            },
            ["tokenAddress", "to", "amount"],
        ),
        callable=mint_tokens,
    ),
    "deploy_erc721_token": ToolDefinition(
        name="deploy_erc721_token",
        description="Deploy a new ERC721 (NFT) contract.",
        params={
            "name": "string",
            "symbol": "string",
            "mintable": "boolean (optional)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "name": {"type": "string", "minLength": 1, "description": "NFT collection name"},
                "symbol": {"type": "string", "minLength": 1, "description": "NFT collection symbol"},
                "mintable": {"type": "boolean", "description": "Whether the NFT should be mintable (default: false)"},
                **_gas_properties(),
            },
            ["name", "symbol"],
        ),
        callable=deploy_erc721_token,
    ),
    "get_nft_info": ToolDefinition(
        name="get_nft_info",
        description="Get information about an ERC721 contract or a specific token.",
        params={"tokenAddress": "address", "tokenId": "string (optional)"},
        input_schema=_object_schema(
            {
                "tokenAddress": _address("Contract address of the NFT"),
                "tokenId": {"type": "string", "pattern": UINT_PATTERN, "description": "Optional token ID"},
            },
            ["tokenAddress"],
        ),
        callable=get_nft_info,
    ),
    "mint_nft": ToolDefinition(
        name="mint_nft",
        description="Mint a new NFT on a mintable ERC721 contract.",
        params={
            "tokenAddress": "address",
            "to": "address",
            "tokenId": "string",
            "tokenURI": "string (optional)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "tokenAddress": _address("Contract address of the mintable NFT"),
                "to": _address("Address to mint NFT to"),
                "tokenId": {"type": "string", "pattern": UINT_PATTERN, "description": "Token ID for the new NFT"},
                "tokenURI": {"type": "string", "description": "Metadata URI for the NFT (optional)"},
                **_gas_properties(),
            },
            ["tokenAddress", "to", "tokenId"],
        ),
        callable=mint_nft,
    ),
    "transfer_nft": ToolDefinition(
        name="transfer_nft",
        description="Transfer an NFT with transferFrom, signed by the current wallet.",
        params={
            "tokenAddress": "address",
            "to": "address",
            "tokenId": "string",
            "from": "address (optional, defaults to current wallet)",
            "gasLimit": "string (optional)",
            "gasPrice": "string wei (optional)",
        },
        input_schema=_object_schema(
            {
                "tokenAddress": _address("Contract address of the NFT"),
                "from": _address("Current owner (defaults to the current wallet)"),
                "to": _address("Recipient address"),
                "tokenId": {"type": "string", "pattern": UINT_PATTERN, "description": "Token ID to transfer"},
                **_gas_properties(),
            },
            ["tokenAddress", "to", "tokenId"],
        ),
        callable=transfer_nft,
    ),
}


def to_snake_case(name: str) -> str:
    """``tokenAddress`` -> ``token_address``; aliases cover reserved words."""
    if name in PARAM_ALIASES:
        return PARAM_ALIASES[name]
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def list_tools() -> List[Dict[str, Any]]:
    """Return a simple list of available tools."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "params": tool.params,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


async def call_tool(tool_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
    """Dispatch to a tool by name."""
    params = params or {}
    tool = TOOL_REGISTRY.get(tool_name)
    if tool is None:
        return {"error": f"Unknown tool: {tool_name}"}

    # Only declared arguments are forwarded; client/wallet overrides stay internal.
    if any(key not in tool.input_schema["properties"] for key in params):
        return {"error": "Invalid parameters."}
    kwargs = {to_snake_case(key): value for key, value in params.items()}
    # Match parameters by name; tools already handle validation and error shaping.
    try:
        result = tool.callable(**kwargs)
        if isinstance(result, Awaitable):
            return await result  # type: ignore[return-value]
        return result
    except TypeError:
        return {"error": "Invalid parameters."}
    except Exception:
        logger.exception("Unexpected error calling tool %s", tool_name)
        return {"error": "Unexpected error while calling tool."}
