"""
Async JSON-RPC client for a Rootstock node.

Each public method maps to the handful of ``eth_*`` calls a wallet library
would issue for the same operation. Transport and node errors are mapped to
internal exceptions that the tool layer turns into user-facing messages.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.models import (
    TX_CONFIRMED,
    TX_FAILED,
    TX_PENDING,
    BlockInfo,
    DeploymentResult,
    GasEstimate,
    NetworkInfo,
    NFTInfo,
    NFTMintResult,
    TokenBalance,
    TokenInfo,
    TransactionResponse,
)
from rootstock_mcp.rootstock_api.abi import (
    AbiError,
    Fragment,
    decode_raw,
    decode_result,
    default_fragment,
    encode_call,
    encode_constructor,
    find_function,
    normalize_abi,
)
from rootstock_mcp.rootstock_api.contracts import (
    ERC20_FRAGMENTS,
    ERC721_FRAGMENTS,
    MINTABLE_ERC20_FRAGMENTS,
    MINTABLE_ERC721_FRAGMENTS,
    load_artifact,
)
from rootstock_mcp.rootstock_api.units import (
    format_ether,
    format_units,
    from_quantity,
    parse_ether,
    parse_units,
    to_quantity,
)

logger = logging.getLogger(__name__)


class RootstockApiError(Exception):
    """Base exception for Rootstock node errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class NodeUnreachableError(RootstockApiError):
    """Raised when the node cannot be reached."""


class UnauthorizedError(RootstockApiError):
    """Raised when the RPC endpoint rejects the request due to missing auth."""


class RpcError(RootstockApiError):
    """Raised for JSON-RPC errors without a more specific mapping."""


class ContractExecutionError(RootstockApiError):
    """Raised when a call or transaction reverts."""


class InsufficientFundsError(RootstockApiError):
    """Raised when the sender cannot cover value plus gas."""


class NonceError(RootstockApiError):
    """Raised when the node rejects a transaction nonce."""


class TransactionNotFoundError(RootstockApiError):
    """Raised when a transaction hash is unknown to the node."""


class BlockNotFoundError(RootstockApiError):
    """Raised when a block does not exist."""


class TransactionTimeoutError(RootstockApiError):
    """Raised when a receipt does not appear before the configured timeout."""


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text, 16) if text.lower().startswith("0x") else int(text)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


def _receipt_status(receipt: Optional[Dict[str, Any]]) -> str:
    if not receipt:
        return TX_PENDING
    return TX_CONFIRMED if from_quantity(receipt.get("status")) == 1 else TX_FAILED


def _stringify_quantity(value: Any) -> Optional[str]:
    parsed = from_quantity(value)
    return None if parsed is None else str(parsed)


@dataclass(slots=True)
class _NodeEntry:
    url: str
    last_failure: Optional[float] = None


class NodePool:
    """Primary-first failover across several RPC endpoints."""

    def __init__(self, urls: List[str], *, cooldown_seconds: float = 30.0) -> None:
        self._entries: List[_NodeEntry] = [_NodeEntry(url=url) for url in urls]
        self._cooldown_seconds = cooldown_seconds

    def _in_cooldown(self, entry: _NodeEntry) -> bool:
        if entry.last_failure is None:
            return False
        return (time.monotonic() - entry.last_failure) < self._cooldown_seconds

    def candidates(self) -> List[str]:
        """Return endpoints to try in priority order, skipping ones in cooldown."""
        urls = [entry.url for entry in self._entries if not self._in_cooldown(entry)]
        if not urls and self._entries:
            urls.append(self._entries[0].url)
        return urls

    def report_failure(self, url: str) -> None:
        for entry in self._entries:
            if entry.url == url:
                entry.last_failure = time.monotonic()
                break

    def report_success(self, url: str) -> None:
        for entry in self._entries:
            if entry.url == url:
                entry.last_failure = None
                break


class RootstockClient:
    """Async client for the Rootstock JSON-RPC surface used by the tools."""

    def __init__(
        self,
        config: RootstockConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._node_pool = self._build_node_pool()
        self._ids = itertools.count(1)
        self._chain_id: Optional[int] = None

    def _build_node_pool(self) -> Optional[NodePool]:
        ordered: List[str] = []
        seen: set[str] = set()
        for url in [self.config.rpc_url, *self.config.fallback_rpc_urls]:
            url = _normalize_url(url or "")
            if not url or url in seen:
                continue
            ordered.append(url)
            seen.add(url)
        if len(ordered) <= 1:
            return None
        return NodePool(ordered, cooldown_seconds=self.config.fallback_cooldown_seconds)

    @property
    def currency_symbol(self) -> str:
        return self.config.currency_symbol or "ETH"

    @property
    def explorer_url(self) -> str:
        return _normalize_url(self.config.explorer_url or "https://etherscan.io")

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers={"Content-Type": "application/json"},
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _map_error(self, code: Optional[int], message: Optional[str]) -> RootstockApiError:
        text = (message or "").strip() or "RPC error"
        lowered = text.lower()
        if "revert" in lowered:
            return ContractExecutionError(text, code=code)
        if "insufficient funds" in lowered or "insufficient balance" in lowered:
            return InsufficientFundsError(text, code=code)
        if "nonce" in lowered:
            return NonceError(text, code=code)
        if code == -32601:
            return RootstockApiError("RPC method not supported", code=code)
        return RpcError(text, code=code)

    def _process_response(self, response: httpx.Response) -> Any:
        if response.status_code in {401, 403}:
            raise UnauthorizedError("Unauthorized by RPC endpoint.", status_code=response.status_code)
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            error = data["error"]
            code = error.get("code") if isinstance(error.get("code"), int) else None
            message = error.get("message") if isinstance(error.get("message"), str) else None
            raise self._map_error(code, message)

        if response.status_code >= 400:
            raise RootstockApiError(
                f"RPC request failed (HTTP {response.status_code})", status_code=response.status_code
            )
        if not isinstance(data, dict) or "result" not in data:
            raise RootstockApiError("Unexpected response from node.", status_code=response.status_code)
        return data["result"]

    async def _rpc(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": list(params or [])}
        client = await self._get_client()
        if self._node_pool is None:
            url = _normalize_url(self.config.rpc_url)
            try:
                response = await client.post(url, json=payload)
            except httpx.RequestError as exc:
                logger.warning("Rootstock node unreachable for %s", method)
                raise NodeUnreachableError("Node unreachable") from exc
            return self._process_response(response)

        last_exc: Optional[Exception] = None
        for url in self._node_pool.candidates():
            try:
                response = await client.post(url, json=payload)
                result = self._process_response(response)
            except (httpx.RequestError, NodeUnreachableError) as exc:
                logger.warning("Rootstock node unreachable for %s via %s", method, url)
                self._node_pool.report_failure(url)
                last_exc = exc
                continue
            except RootstockApiError as exc:
                if exc.status_code is not None and exc.status_code >= 500:
                    logger.warning("Rootstock node returned HTTP %s for %s via %s", exc.status_code, method, url)
                    self._node_pool.report_failure(url)
                    last_exc = exc
                    continue
                self._node_pool.report_success(url)
                raise
            self._node_pool.report_success(url)
            return result

        raise NodeUnreachableError("Node unreachable") from last_exc

    # ------------------------------------------------------------------
    # Chain reads
    # ------------------------------------------------------------------

    async def get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = from_quantity(await self._rpc("eth_chainId"), self.config.chain_id)
        return self._chain_id

    async def get_block_number(self) -> int:
        return from_quantity(await self._rpc("eth_blockNumber"), 0)

    async def get_gas_price(self) -> int:
        return from_quantity(await self._rpc("eth_gasPrice"), 0)

    async def get_balance_wei(self, address: str) -> int:
        result = await self._rpc("eth_getBalance", [to_checksum_address(address), "latest"])
        return from_quantity(result, 0)

    async def get_balance(self, address: str) -> str:
        """Native balance formatted in whole units (e.g. ``"0.05"``)."""
        return format_ether(await self.get_balance_wei(address))

    async def _eth_call(self, to: str, data: str) -> str:
        return await self._rpc("eth_call", [{"to": to_checksum_address(to), "data": data}, "latest"])

    async def _call_view(self, address: str, fragments: List[Fragment], name: str, args: Sequence[Any] = ()) -> Any:
        fragment = find_function(fragments, name, len(args))
        values = decode_raw(fragment, await self._eth_call(address, encode_call(fragment, args)))
        return values[0] if values else None

    async def get_token_balance(self, address: str, token_address: str) -> TokenBalance:
        balance, decimals, symbol, name = await asyncio.gather(
            self._call_view(token_address, ERC20_FRAGMENTS, "balanceOf", [address]),
            self._call_view(token_address, ERC20_FRAGMENTS, "decimals"),
            self._call_view(token_address, ERC20_FRAGMENTS, "symbol"),
            self._call_view(token_address, ERC20_FRAGMENTS, "name"),
        )
        return TokenBalance(
            token_address=to_checksum_address(token_address),
            balance=format_units(balance, decimals),
            decimals=int(decimals),
            symbol=symbol,
            name=name,
        )

    async def get_transaction(self, tx_hash: str) -> TransactionResponse:
        tx, receipt = await asyncio.gather(
            self._rpc("eth_getTransactionByHash", [tx_hash]),
            self._rpc("eth_getTransactionReceipt", [tx_hash]),
        )
        if not tx:
            raise TransactionNotFoundError("Transaction not found")
        return TransactionResponse(
            hash=tx.get("hash") or tx_hash,
            from_address=to_checksum_address(tx["from"]) if tx.get("from") else "",
            to=to_checksum_address(tx["to"]) if tx.get("to") else "",
            value=format_ether(from_quantity(tx.get("value"), 0)),
            gas_used=_stringify_quantity(receipt.get("gasUsed")) if receipt else None,
            gas_price=_stringify_quantity(tx.get("gasPrice")),
            block_number=from_quantity(receipt.get("blockNumber")) if receipt else None,
            block_hash=receipt.get("blockHash") if receipt else None,
            status=_receipt_status(receipt),
        )

    async def get_block(self, block_number: Optional[int] = None, block_hash: Optional[str] = None) -> BlockInfo:
        """Fetch a block by hash, number, or the latest block when neither is given."""
        if block_hash:
            block = await self._rpc("eth_getBlockByHash", [block_hash, False])
        elif block_number is not None:
            block = await self._rpc("eth_getBlockByNumber", [to_quantity(block_number), False])
        else:
            block = await self._rpc("eth_getBlockByNumber", ["latest", False])
        if not block:
            raise BlockNotFoundError("Block not found")
        return BlockInfo(
            number=from_quantity(block.get("number"), 0),
            hash=block.get("hash") or "",
            parent_hash=block.get("parentHash") or "",
            timestamp=from_quantity(block.get("timestamp"), 0),
            gas_limit=str(from_quantity(block.get("gasLimit"), 0)),
            gas_used=str(from_quantity(block.get("gasUsed"), 0)),
            miner=block.get("miner") or "",
            size=from_quantity(block.get("size"), 0),
            transaction_count=len(block.get("transactions") or []),
            difficulty=_stringify_quantity(block.get("difficulty")),
            total_difficulty=_stringify_quantity(block.get("totalDifficulty")),
        )

    async def get_network_info(self) -> NetworkInfo:
        """Network status; never raises, reporting ``is_connected=False`` instead."""
        try:
            chain_id, block_number, gas_price = await asyncio.gather(
                self.get_chain_id(), self.get_block_number(), self.get_gas_price()
            )
        except Exception as exc:
            logger.warning("Network info unavailable: %s", exc)
            return NetworkInfo(
                chain_id=self.config.chain_id or 0,
                network_name=self.config.network_name or "Unknown",
                block_number=0,
                gas_price="0",
                is_connected=False,
            )
        return NetworkInfo(
            chain_id=chain_id,
            network_name=self.config.network_name or "Unknown",
            block_number=block_number,
            gas_price=str(gas_price),
            is_connected=True,
        )

    async def estimate_gas(self, to: str, value: Optional[str] = None, data: Optional[str] = None) -> GasEstimate:
        tx = {
            "to": to_checksum_address(to),
            "value": to_quantity(parse_ether(value) if value else 0),
            "data": data or "0x",
        }
        raw_limit, gas_price = await asyncio.gather(self._rpc("eth_estimateGas", [tx]), self.get_gas_price())
        gas_limit = from_quantity(raw_limit, 0)
        return GasEstimate(
            gas_limit=str(gas_limit),
            gas_price=str(gas_price),
            estimated_cost=format_ether(gas_limit * gas_price),
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def wait_for_receipt(self, tx_hash: str) -> Dict[str, Any]:
        deadline = time.monotonic() + self.config.receipt_timeout
        while True:
            receipt = await self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                return receipt
            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(f"Timed out waiting for receipt of {tx_hash}")
            await asyncio.sleep(self.config.receipt_poll_interval)

    async def _send(
        self,
        account: LocalAccount,
        *,
        to: Optional[str] = None,
        value: int = 0,
        data: Optional[str] = None,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> Tuple[str, int, Dict[str, Any]]:
        """Sign a legacy transaction, broadcast it and wait for its receipt."""
        sender = account.address
        call: Dict[str, Any] = {"from": sender, "value": to_quantity(value), "data": data or "0x"}
        if to:
            call["to"] = to_checksum_address(to)

        explicit_limit = _optional_int(gas_limit)
        explicit_price = _optional_int(gas_price)
        nonce_raw, chain_id = await asyncio.gather(
            self._rpc("eth_getTransactionCount", [sender, "pending"]),
            self.get_chain_id(),
        )
        price = explicit_price if explicit_price is not None else await self.get_gas_price()
        limit = explicit_limit
        if limit is None:
            limit = from_quantity(await self._rpc("eth_estimateGas", [call]), 0)

        tx: Dict[str, Any] = {
            "nonce": from_quantity(nonce_raw, 0),
            "gasPrice": price,
            "gas": limit,
            "value": value,
            "data": data or "0x",
            "chainId": chain_id,
        }
        if to:
            tx["to"] = call["to"]

        signed = account.sign_transaction(tx)
        tx_hash = await self._rpc("eth_sendRawTransaction", ["0x" + bytes(signed.raw_transaction).hex()])
        logger.info("Broadcast transaction %s from %s", tx_hash, sender)
        receipt = await self.wait_for_receipt(tx_hash)
        return tx_hash, price, receipt

    def _tx_response(
        self,
        tx_hash: str,
        *,
        sender: str,
        to: str,
        value: str,
        gas_price: int,
        receipt: Dict[str, Any],
    ) -> TransactionResponse:
        return TransactionResponse(
            hash=tx_hash,
            from_address=sender,
            to=to,
            value=value,
            gas_used=_stringify_quantity(receipt.get("gasUsed")),
            gas_price=str(gas_price),
            block_number=from_quantity(receipt.get("blockNumber")),
            block_hash=receipt.get("blockHash"),
            status=_receipt_status(receipt),
        )

    async def send_transaction(
        self,
        account: LocalAccount,
        to: str,
        amount: str,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> TransactionResponse:
        value = parse_ether(amount)
        tx_hash, price, receipt = await self._send(
            account, to=to, value=value, gas_limit=gas_limit, gas_price=gas_price
        )
        return self._tx_response(
            tx_hash,
            sender=account.address,
            to=to_checksum_address(to),
            value=format_ether(value),
            gas_price=price,
            receipt=receipt,
        )

    async def send_token_transaction(
        self,
        account: LocalAccount,
        token_address: str,
        to: str,
        amount: str,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> TransactionResponse:
        decimals = await self._call_view(token_address, ERC20_FRAGMENTS, "decimals")
        data = encode_call(find_function(ERC20_FRAGMENTS, "transfer", 2), [to, parse_units(amount, decimals)])
        tx_hash, price, receipt = await self._send(
            account, to=token_address, data=data, gas_limit=gas_limit, gas_price=gas_price
        )
        return self._tx_response(
            tx_hash,
            sender=account.address,
            to=to_checksum_address(to),
            value=amount,
            gas_price=price,
            receipt=receipt,
        )

    # ------------------------------------------------------------------
    # Generic contracts
    # ------------------------------------------------------------------

    def _resolve_fragment(self, method_name: str, parameters: Sequence[Any], abi: Any, *, read_only: bool) -> Fragment:
        if abi:
            return find_function(normalize_abi(abi), method_name, len(parameters))
        return default_fragment(method_name, len(parameters), read_only=read_only)

    async def call_contract(
        self,
        contract_address: str,
        method_name: str,
        parameters: Optional[Sequence[Any]] = None,
        abi: Any = None,
    ) -> Dict[str, Any]:
        parameters = list(parameters or [])
        fragment = self._resolve_fragment(method_name, parameters, abi, read_only=True)
        raw = await self._eth_call(contract_address, encode_call(fragment, parameters))
        return {"result": decode_result(fragment, raw)}

    async def send_contract_transaction(
        self,
        account: LocalAccount,
        contract_address: str,
        method_name: str,
        parameters: Optional[Sequence[Any]] = None,
        abi: Any = None,
        value: Optional[str] = None,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> TransactionResponse:
        parameters = list(parameters or [])
        fragment = self._resolve_fragment(method_name, parameters, abi, read_only=False)
        wei = parse_ether(value) if value else 0
        tx_hash, price, receipt = await self._send(
            account,
            to=contract_address,
            value=wei,
            data=encode_call(fragment, parameters),
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
        return self._tx_response(
            tx_hash,
            sender=account.address,
            to=to_checksum_address(contract_address),
            value=value or "0",
            gas_price=price,
            receipt=receipt,
        )

    # ------------------------------------------------------------------
    # Token templates
    # ------------------------------------------------------------------

    async def _ensure_funded(self, address: str) -> None:
        balance = await self.get_balance_wei(address)
        logger.debug("Deployer %s balance: %s %s", address, format_ether(balance), self.currency_symbol)
        if balance == 0:
            raise InsufficientFundsError(
                f"Wallet has no funds for deployment. Please fund the wallet: {address}"
            )

    async def _deploy(
        self,
        account: LocalAccount,
        kind: str,
        mintable: bool,
        args: Sequence[Any],
        gas_limit: Any,
        gas_price: Any,
    ) -> Tuple[str, str, Dict[str, Any]]:
        await self._ensure_funded(account.address)
        artifact = load_artifact(kind, mintable, artifacts_dir=self.config.artifacts_dir)
        data = encode_constructor(artifact.abi, artifact.bytecode, args)
        logger.info("Deploying %s from %s", artifact.name, account.address)
        tx_hash, _price, receipt = await self._send(account, data=data, gas_limit=gas_limit, gas_price=gas_price)
        contract_address = receipt.get("contractAddress")
        if _receipt_status(receipt) != TX_CONFIRMED or not contract_address:
            raise ContractExecutionError(f"Contract deployment failed (transaction {tx_hash})")
        contract_address = to_checksum_address(contract_address)
        logger.info("Deployed %s at %s", artifact.name, contract_address)
        return contract_address, tx_hash, receipt

    async def deploy_erc20_token(
        self,
        account: LocalAccount,
        name: str,
        symbol: str,
        decimals: int = 18,
        initial_supply: str = "0",
        mintable: bool = False,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> DeploymentResult:
        # The template mints initial_supply raw units; it does not scale by decimals.
        supply = _optional_int(initial_supply) or 0
        contract_address, tx_hash, receipt = await self._deploy(
            account, "erc20", mintable, [name, symbol, supply, int(decimals)], gas_limit, gas_price
        )
        return DeploymentResult(
            contract_address=contract_address,
            transaction_hash=tx_hash,
            name=name,
            symbol=symbol,
            deployer=account.address,
            mintable=bool(mintable),
            decimals=int(decimals),
            initial_supply=str(initial_supply),
            gas_used=_stringify_quantity(receipt.get("gasUsed")),
            block_number=from_quantity(receipt.get("blockNumber")),
        )

    async def get_token_info(self, token_address: str) -> TokenInfo:
        name, symbol, decimals, total_supply = await asyncio.gather(
            self._call_view(token_address, ERC20_FRAGMENTS, "name"),
            self._call_view(token_address, ERC20_FRAGMENTS, "symbol"),
            self._call_view(token_address, ERC20_FRAGMENTS, "decimals"),
            self._call_view(token_address, ERC20_FRAGMENTS, "totalSupply"),
        )
        owner: Optional[str] = None
        try:
            owner = await self._call_view(token_address, MINTABLE_ERC20_FRAGMENTS, "owner")
        except (RootstockApiError, AbiError):
            logger.debug("Token %s exposes no owner()", token_address)
        return TokenInfo(
            address=to_checksum_address(token_address),
            name=name,
            symbol=symbol,
            decimals=int(decimals),
            total_supply=format_units(total_supply, decimals),
            owner=owner,
        )

    async def mint_tokens(
        self,
        account: LocalAccount,
        token_address: str,
        to: str,
        amount: str,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> TransactionResponse:
        decimals = await self._call_view(token_address, MINTABLE_ERC20_FRAGMENTS, "decimals")
        data = encode_call(
            find_function(MINTABLE_ERC20_FRAGMENTS, "mint", 2), [to, parse_units(amount, decimals)]
        )
        tx_hash, price, receipt = await self._send(
            account, to=token_address, data=data, gas_limit=gas_limit, gas_price=gas_price
        )
        return self._tx_response(
            tx_hash,
            sender=account.address,
            to=to_checksum_address(token_address),
            value=amount,
            gas_price=price,
            receipt=receipt,
        )

    async def deploy_erc721_token(
        self,
        account: LocalAccount,
        name: str,
        symbol: str,
        mintable: bool = False,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> DeploymentResult:
        contract_address, tx_hash, receipt = await self._deploy(
            account, "erc721", mintable, [name, symbol], gas_limit, gas_price
        )
        return DeploymentResult(
            contract_address=contract_address,
            transaction_hash=tx_hash,
            name=name,
            symbol=symbol,
            deployer=account.address,
            mintable=bool(mintable),
            gas_used=_stringify_quantity(receipt.get("gasUsed")),
            block_number=from_quantity(receipt.get("blockNumber")),
        )

    async def get_nft_info(self, token_address: str, token_id: Optional[str] = None) -> NFTInfo:
        name, symbol, total_supply = await asyncio.gather(
            self._call_view(token_address, ERC721_FRAGMENTS, "name"),
            self._call_view(token_address, ERC721_FRAGMENTS, "symbol"),
            self._call_view(token_address, ERC721_FRAGMENTS, "totalSupply"),
        )
        info = NFTInfo(
            address=to_checksum_address(token_address),
            name=name,
            symbol=symbol,
            total_supply=str(total_supply),
            token_id=str(token_id) if token_id not in (None, "") else None,
        )
        if info.token_id is None:
            return info
        try:
            token_uri, owner = await asyncio.gather(
                self._call_view(token_address, ERC721_FRAGMENTS, "tokenURI", [info.token_id]),
                self._call_view(token_address, ERC721_FRAGMENTS, "ownerOf", [info.token_id]),
            )
        except (RootstockApiError, AbiError) as exc:
            logger.warning("Could not get token-specific info for token %s: %s", info.token_id, exc)
            return info
        info.token_uri = token_uri
        info.owner = owner
        return info

    async def mint_nft(
        self,
        account: LocalAccount,
        token_address: str,
        to: str,
        token_id: str,
        token_uri: str = "",
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> NFTMintResult:
        data = encode_call(
            find_function(MINTABLE_ERC721_FRAGMENTS, "mint", 3), [to, str(token_id), token_uri or ""]
        )
        tx_hash, _price, receipt = await self._send(
            account, to=token_address, data=data, gas_limit=gas_limit, gas_price=gas_price
        )
        return NFTMintResult(
            transaction_hash=tx_hash,
            to=to_checksum_address(to),
            token_id=str(token_id),
            token_uri=token_uri or None,
            gas_used=_stringify_quantity(receipt.get("gasUsed")),
            block_number=from_quantity(receipt.get("blockNumber")),
            status=_receipt_status(receipt),
        )

    async def transfer_nft(
        self,
        account: LocalAccount,
        token_address: str,
        from_address: str,
        to: str,
        token_id: str,
        gas_limit: Any = None,
        gas_price: Any = None,
    ) -> TransactionResponse:
        data = encode_call(
            find_function(ERC721_FRAGMENTS, "transferFrom", 3), [from_address, to, str(token_id)]
        )
        tx_hash, price, receipt = await self._send(
            account, to=token_address, data=data, gas_limit=gas_limit, gas_price=gas_price
        )
        return self._tx_response(
            tx_hash,
            sender=to_checksum_address(from_address),
            to=to_checksum_address(to),
            value="0",
            gas_price=price,
            receipt=receipt,
        )


default_client = RootstockClient()
