import httpx
import pytest
from eth_abi import encode

from rootstock_mcp.config import RootstockConfig
from rootstock_mcp.rootstock_api.client import (
    BlockNotFoundError,
    ContractExecutionError,
    InsufficientFundsError,
    NodePool,
    NodeUnreachableError,
    NonceError,
    RootstockApiError,
    RootstockClient,
    RpcError,
    TransactionNotFoundError,
    UnauthorizedError,
)

from conftest import DummyResponse, FakeRpcClient, OTHER_ADDRESS, TEST_ADDRESS, TOKEN_ADDRESS, TX_HASH


def make_config(**overrides):
    values = dict(
        rpc_url="http://node.test",
        fallback_rpc_urls=[],
        private_keys=[],
        addresses=[],
        chain_id=31,
        network_name="Rootstock Testnet",
        explorer_url="https://explorer.testnet.rootstock.io/",
        currency_symbol="tRBTC",
    )
    values.update(overrides)
    return RootstockConfig(**values)


def rpc_error(code, message):
    return DummyResponse(200, {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}})


def word(types, values):
    return "0x" + encode(types, values).hex()


def erc20_responder(values):
    def handler(params):
        selector = params[0]["data"][:10]
        if selector not in values:
            return rpc_error(3, "execution reverted")
        return values[selector]

    return handler


TOKEN_VIEWS = {
    "0x70a08231": word(["uint256"], [1_234_500]),  # balanceOf
    "0x313ce567": word(["uint8"], [4]),  # decimals
    "0x95d89b41": word(["string"], ["TST"]),  # symbol
    "0x06fdde03": word(["string"], ["Test Token"]),  # name
    "0x18160ddd": word(["uint256"], [10_000_000]),  # totalSupply
}


@pytest.mark.asyncio
async def test_rpc_payload_shape():
    fake = FakeRpcClient({"eth_blockNumber": "0x10"})
    client = RootstockClient(make_config(), async_client=fake)
    assert await client.get_block_number() == 16
    assert fake.calls == [{"url": "http://node.test", "method": "eth_blockNumber", "params": []}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response,exc_type,message",
    [
        (DummyResponse(401), UnauthorizedError, "Unauthorized by RPC endpoint."),
        (DummyResponse(403, {"error": "forbidden"}), UnauthorizedError, "Unauthorized by RPC endpoint."),
        (DummyResponse(503), RootstockApiError, "RPC request failed (HTTP 503)"),
        (
            DummyResponse(500, {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "execution reverted"}}),
            ContractExecutionError,
            "execution reverted",
        ),
        (DummyResponse(404), RootstockApiError, "RPC request failed (HTTP 404)"),
        (DummyResponse(200, {"jsonrpc": "2.0", "id": 1}), RootstockApiError, "Unexpected response from node."),
        (rpc_error(-32000, "execution reverted: paused"), ContractExecutionError, "execution reverted: paused"),
        (rpc_error(-32010, "insufficient funds for gas * price + value"), InsufficientFundsError, None),
        (rpc_error(-32010, "nonce too low"), NonceError, "nonce too low"),
        (rpc_error(-32601, "the method foo does not exist"), RootstockApiError, "RPC method not supported"),
        (rpc_error(-32602, "invalid argument 0"), RpcError, "invalid argument 0"),
    ],
)
async def test_error_mapping(response, exc_type, message):
    client = RootstockClient(make_config(), async_client=FakeRpcClient({"eth_gasPrice": response}))
    with pytest.raises(exc_type) as excinfo:
        await client.get_gas_price()
    if message is not None:
        assert str(excinfo.value) == message


@pytest.mark.asyncio
async def test_transport_error_maps_to_unreachable():
    class FailingClient:
        async def post(self, url, json=None):
            raise httpx.ConnectError("connection refused")

    client = RootstockClient(make_config(), async_client=FailingClient())
    with pytest.raises(NodeUnreachableError, match="Node unreachable"):
        await client.get_chain_id()


@pytest.mark.asyncio
async def test_chain_id_is_cached():
    fake = FakeRpcClient({"eth_chainId": "0x1e"})
    client = RootstockClient(make_config(), async_client=fake)
    assert await client.get_chain_id() == 30
    assert await client.get_chain_id() == 30
    assert fake.methods() == ["eth_chainId"]


@pytest.mark.asyncio
async def test_get_balance_formats_ether():
    fake = FakeRpcClient({"eth_getBalance": hex(1_500_000_000_000_000_000)})
    client = RootstockClient(make_config(), async_client=fake)
    assert await client.get_balance(TEST_ADDRESS.lower()) == "1.5"
    assert fake.calls[0]["params"] == [TEST_ADDRESS, "latest"]


@pytest.mark.asyncio
async def test_get_token_balance_uses_token_decimals():
    fake = FakeRpcClient({"eth_call": erc20_responder(TOKEN_VIEWS)})
    client = RootstockClient(make_config(), async_client=fake)
    balance = await client.get_token_balance(OTHER_ADDRESS, TOKEN_ADDRESS.lower())
    assert balance.to_dict() == {
        "tokenAddress": TOKEN_ADDRESS,
        "balance": "123.45",
        "decimals": 4,
        "symbol": "TST",
        "name": "Test Token",
    }


@pytest.mark.asyncio
async def test_get_token_info_without_owner():
    fake = FakeRpcClient({"eth_call": erc20_responder(TOKEN_VIEWS)})
    client = RootstockClient(make_config(), async_client=fake)
    info = await client.get_token_info(TOKEN_ADDRESS)
    assert info.total_supply == "1000.0"
    assert info.owner is None


@pytest.mark.asyncio
async def test_get_token_info_with_owner():
    views = dict(TOKEN_VIEWS)
    views["0x8da5cb5b"] = word(["address"], [TEST_ADDRESS])  # owner
    client = RootstockClient(make_config(), async_client=FakeRpcClient({"eth_call": erc20_responder(views)}))
    info = await client.get_token_info(TOKEN_ADDRESS)
    assert info.owner == TEST_ADDRESS


@pytest.mark.asyncio
async def test_get_transaction_pending_and_confirmed():
    tx = {
        "hash": TX_HASH,
        "from": TEST_ADDRESS.lower(),
        "to": OTHER_ADDRESS.lower(),
        "value": hex(10**17),
        "gasPrice": hex(60_000_000),
    }
    fake = FakeRpcClient({"eth_getTransactionByHash": tx, "eth_getTransactionReceipt": None})
    client = RootstockClient(make_config(), async_client=fake)
    pending = await client.get_transaction(TX_HASH)
    assert pending.status == "pending"
    assert pending.to_dict() == {
        "hash": TX_HASH,
        "from": TEST_ADDRESS,
        "to": OTHER_ADDRESS,
        "value": "0.1",
        "gasPrice": "60000000",
        "status": "pending",
    }

    fake.handlers["eth_getTransactionReceipt"] = {
        "status": "0x0",
        "gasUsed": "0x5208",
        "blockNumber": "0x64",
        "blockHash": "0x" + "cd" * 32,
    }
    failed = await client.get_transaction(TX_HASH)
    assert failed.status == "failed"
    assert failed.gas_used == "21000"
    assert failed.block_number == 100


@pytest.mark.asyncio
async def test_get_transaction_not_found():
    fake = FakeRpcClient({"eth_getTransactionByHash": None, "eth_getTransactionReceipt": None})
    client = RootstockClient(make_config(), async_client=fake)
    with pytest.raises(TransactionNotFoundError, match="Transaction not found"):
        await client.get_transaction(TX_HASH)


BLOCK = {
    "number": "0x64",
    "hash": "0x" + "11" * 32,
    "parentHash": "0x" + "22" * 32,
    "timestamp": "0x6553f100",
    "gasLimit": "0x67c280",
    "gasUsed": "0x5208",
    "miner": "0x" + "33" * 20,
    "size": "0x400",
    "difficulty": "0x10",
    "transactions": [TX_HASH],
}


@pytest.mark.asyncio
async def test_get_block_selectors():
    fake = FakeRpcClient({"eth_getBlockByNumber": BLOCK, "eth_getBlockByHash": BLOCK})
    client = RootstockClient(make_config(), async_client=fake)

    latest = await client.get_block()
    assert latest.number == 100
    assert latest.transaction_count == 1
    assert latest.difficulty == "16"
    assert latest.total_difficulty is None

    await client.get_block(block_number=100)
    await client.get_block(block_hash=BLOCK["hash"])
    assert [call["params"] for call in fake.calls] == [
        ["latest", False],
        ["0x64", False],
        [BLOCK["hash"], False],
    ]


@pytest.mark.asyncio
async def test_get_block_not_found():
    client = RootstockClient(make_config(), async_client=FakeRpcClient({"eth_getBlockByNumber": None}))
    with pytest.raises(BlockNotFoundError):
        await client.get_block(block_number=10**9)


@pytest.mark.asyncio
async def test_network_info_connected():
    fake = FakeRpcClient({"eth_chainId": "0x1f", "eth_blockNumber": "0x100", "eth_gasPrice": "0x3938700"})
    client = RootstockClient(make_config(), async_client=fake)
    info = await client.get_network_info()
    assert info.to_dict() == {
        "chainId": 31,
        "networkName": "Rootstock Testnet",
        "blockNumber": 256,
        "gasPrice": "60000000",
        "isConnected": True,
    }


@pytest.mark.asyncio
async def test_network_info_degrades_when_node_down():
    class FailingClient:
        async def post(self, url, json=None):
            raise httpx.ConnectTimeout("timed out")

    client = RootstockClient(make_config(chain_id=30, network_name="Rootstock Mainnet"), async_client=FailingClient())
    info = await client.get_network_info()
    assert info.is_connected is False
    assert info.chain_id == 30
    assert info.network_name == "Rootstock Mainnet"
    assert info.block_number == 0
    assert info.gas_price == "0"


@pytest.mark.asyncio
async def test_estimate_gas_cost():
    fake = FakeRpcClient({"eth_estimateGas": "0x5208", "eth_gasPrice": hex(60_000_000)})
    client = RootstockClient(make_config(), async_client=fake)
    estimate = await client.estimate_gas(OTHER_ADDRESS, value="0.5")
    assert estimate.to_dict() == {
        "gasLimit": "21000",
        "gasPrice": "60000000",
        "estimatedCost": "0.00000126",
    }
    call = next(c for c in fake.calls if c["method"] == "eth_estimateGas")
    assert call["params"] == [{"to": OTHER_ADDRESS, "value": hex(5 * 10**17), "data": "0x"}]


@pytest.mark.asyncio
async def test_call_contract_without_abi_defaults_to_uint256():
    fake = FakeRpcClient({"eth_call": word(["uint256"], [42])})
    client = RootstockClient(make_config(), async_client=fake)
    result = await client.call_contract(TOKEN_ADDRESS, "getValue", ["7"])
    assert result == {"result": "42"}


@pytest.mark.asyncio
async def test_call_contract_with_fragment_abi():
    fake = FakeRpcClient({"eth_call": word(["string", "bool"], ["ready", True])})
    client = RootstockClient(make_config(), async_client=fake)
    result = await client.call_contract(
        TOKEN_ADDRESS, "status", [], abi=["function status() view returns (string, bool)"]
    )
    assert result == {"result": ["ready", True]}


def test_explorer_links_strip_trailing_slash():
    client = RootstockClient(make_config(), async_client=FakeRpcClient())
    assert client.tx_url(TX_HASH) == f"https://explorer.testnet.rootstock.io/tx/{TX_HASH}"
    assert client.address_url(TEST_ADDRESS) == f"https://explorer.testnet.rootstock.io/address/{TEST_ADDRESS}"
    assert client.currency_symbol == "tRBTC"


def test_node_pool_cooldown_order():
    pool = NodePool(["http://a", "http://b"], cooldown_seconds=60)
    assert pool.candidates() == ["http://a", "http://b"]
    pool.report_failure("http://a")
    assert pool.candidates() == ["http://b"]
    pool.report_failure("http://b")
    # Everything cooling down: fall back to the primary
    assert pool.candidates() == ["http://a"]
    pool.report_success("http://a")
    assert pool.candidates() == ["http://a"]


def test_single_url_has_no_pool():
    client = RootstockClient(make_config(fallback_rpc_urls=["http://node.test/"]), async_client=FakeRpcClient())
    assert client._node_pool is None


@pytest.mark.asyncio
async def test_server_error_is_not_reported_as_unreachable():
    client = RootstockClient(make_config(), async_client=FakeRpcClient({"eth_gasPrice": DummyResponse(502)}))
    with pytest.raises(RootstockApiError) as excinfo:
        await client.get_gas_price()
    assert not isinstance(excinfo.value, NodeUnreachableError)
    assert excinfo.value.status_code == 502
