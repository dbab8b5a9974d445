"""Value records returned by the wallet manager and the Rootstock client."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

TX_PENDING = "pending"
TX_CONFIRMED = "confirmed"
TX_FAILED = "failed"


class _Record:
    # Field name -> camelCase key where the two differ.
    _KEYS: Dict[str, str] = {}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None:
                continue
            out[self._KEYS.get(f.name, f.name)] = value
        return out


@dataclass(slots=True)
class WalletInfo(_Record):
    address: str
    private_key: Optional[str] = None
    mnemonic: Optional[str] = None
    public_key: Optional[str] = None
    balance: Optional[str] = None
    name: Optional[str] = None

    _KEYS = {"private_key": "privateKey", "public_key": "publicKey"}


@dataclass(slots=True)
class TransactionResponse(_Record):
    hash: str
    from_address: str
    to: str
    value: str
    gas_used: Optional[str] = None
    gas_price: Optional[str] = None
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    timestamp: Optional[int] = None
    status: str = TX_PENDING

    _KEYS = {
        "from_address": "from",
        "gas_used": "gasUsed",
        "gas_price": "gasPrice",
        "block_number": "blockNumber",
        "block_hash": "blockHash",
    }


@dataclass(slots=True)
class BlockInfo(_Record):
    number: int
    hash: str
    parent_hash: str
    timestamp: int
    gas_limit: str
    gas_used: str
    miner: str
    size: int
    transaction_count: int
    difficulty: Optional[str] = None
    total_difficulty: Optional[str] = None

    _KEYS = {
        "parent_hash": "parentHash",
        "gas_limit": "gasLimit",
        "gas_used": "gasUsed",
        "transaction_count": "transactionCount",
        "total_difficulty": "totalDifficulty",
    }


@dataclass(slots=True)
class NetworkInfo(_Record):
    chain_id: int
    network_name: str
    block_number: int
    gas_price: str
    is_connected: bool

    _KEYS = {
        "chain_id": "chainId",
        "network_name": "networkName",
        "block_number": "blockNumber",
        "gas_price": "gasPrice",
        "is_connected": "isConnected",
    }


@dataclass(slots=True)
class TokenBalance(_Record):
    token_address: str
    balance: str
    decimals: int
    symbol: str
    name: str

    _KEYS = {"token_address": "tokenAddress"}


@dataclass(slots=True)
class GasEstimate(_Record):
    gas_limit: str
    gas_price: str
    estimated_cost: str

    _KEYS = {"gas_limit": "gasLimit", "gas_price": "gasPrice", "estimated_cost": "estimatedCost"}


@dataclass(slots=True)
class TokenInfo(_Record):
    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: str
    owner: Optional[str] = None

    _KEYS = {"total_supply": "totalSupply"}


@dataclass(slots=True)
class NFTInfo(_Record):
    address: str
    name: str
    symbol: str
    total_supply: str
    token_id: Optional[str] = None
    token_uri: Optional[str] = None
    owner: Optional[str] = None

    _KEYS = {"total_supply": "totalSupply", "token_id": "tokenId", "token_uri": "tokenURI"}


@dataclass(slots=True)
class DeploymentResult(_Record):
    contract_address: str
    transaction_hash: str
    name: str
    symbol: str
    deployer: str
    mintable: bool
    decimals: Optional[int] = None
    initial_supply: Optional[str] = None
    gas_used: Optional[str] = None
    block_number: Optional[int] = None

    _KEYS = {
        "contract_address": "contractAddress",
        "transaction_hash": "transactionHash",
        "initial_supply": "initialSupply",
        "gas_used": "gasUsed",
        "block_number": "blockNumber",
    }


@dataclass(slots=True)
class NFTMintResult(_Record):
    transaction_hash: str
    to: str
    token_id: str
    token_uri: Optional[str] = None
    gas_used: Optional[str] = None
    block_number: Optional[int] = None
    status: str = TX_CONFIRMED

    _KEYS = {
        "transaction_hash": "transactionHash",
        "token_id": "tokenId",
        "token_uri": "tokenURI",
        "gas_used": "gasUsed",
        "block_number": "blockNumber",
    }
