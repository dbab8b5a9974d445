import pytest

from rootstock_mcp.metrics import default_metrics
from rootstock_mcp.models import BlockInfo, GasEstimate, NetworkInfo, TransactionResponse
from rootstock_mcp.rootstock_api.client import (
    BlockNotFoundError,
    InsufficientFundsError,
    TransactionNotFoundError,
)
from rootstock_mcp.tools.network import get_block, get_network_info
from rootstock_mcp.tools.transactions import estimate_gas, get_transaction, send_transaction
from rootstock_mcp.wallets import WalletManager

from conftest import BAD_CHECKSUM_ADDRESS, OTHER_ADDRESS, TEST_ADDRESS, TEST_PRIVATE_KEY, TOKEN_ADDRESS, TX_HASH


class ExplorerStub:
    currency_symbol = "tRBTC"

    def tx_url(self, tx_hash):
        return f"https://explorer.test/tx/{tx_hash}"

    def address_url(self, address):
        return f"https://explorer.test/address/{address}"


def funded_wallets():
    manager = WalletManager()
    manager.import_wallet(private_key=TEST_PRIVATE_KEY)
    return manager


def tx_response(status="confirmed", value="0.1"):
    return TransactionResponse(
        hash=TX_HASH,
        from_address=TEST_ADDRESS,
        to=OTHER_ADDRESS,
        value=value,
        gas_used="21000",
        gas_price="60000000",
        block_number=10,
        status=status,
    )


@pytest.mark.asyncio
async def test_send_transaction_validation_skips_calls():
    class FailClient(ExplorerStub):
        async def send_transaction(self, *_args, **_kwargs):
            pytest.fail("send_transaction should not be called")

    wallets = funded_wallets()
    assert await send_transaction("bad", "1", client=FailClient(), wallets=wallets) == {
        "error": "Failed to send transaction: Invalid recipient address."
    }
    assert await send_transaction(BAD_CHECKSUM_ADDRESS, "0.1", client=FailClient(), wallets=wallets) == {
        "error": "Failed to send transaction: Invalid recipient address."
    }
    assert await send_transaction(OTHER_ADDRESS, "-1", client=FailClient(), wallets=wallets) == {
        "error": "Failed to send transaction: Invalid amount."
    }
    assert await send_transaction(OTHER_ADDRESS, "0.0000000000000000001", client=FailClient(), wallets=wallets) == {
        "error": "Failed to send transaction: Invalid amount."
    }
    assert await send_transaction(OTHER_ADDRESS, "1", gas_limit="abc", client=FailClient(), wallets=wallets) == {
        "error": "Failed to send transaction: Invalid gas limit."
    }
    result = await send_transaction(OTHER_ADDRESS, "1", client=FailClient(), wallets=WalletManager())
    assert "No wallet configured" in result["error"]


@pytest.mark.asyncio
async def test_send_native_transaction_records_metric():
    class StubClient(ExplorerStub):
        async def send_transaction(self, account, to, amount, gas_limit=None, gas_price=None):
            assert account.address == TEST_ADDRESS
            assert (to, amount, gas_limit) == (OTHER_ADDRESS, "0.1", "21000")
            return tx_response()

    result = await send_transaction(OTHER_ADDRESS, "0.1", gas_limit="21000", client=StubClient(), wallets=funded_wallets())
    assert result["hash"] == TX_HASH
    assert result["status"] == "confirmed"
    assert result["symbol"] == "tRBTC"
    assert result["explorerUrl"] == f"https://explorer.test/tx/{TX_HASH}"
    assert default_metrics.snapshot()["transactions"] == {"confirmed": 1}


@pytest.mark.asyncio
async def test_send_token_transaction_routes_to_token_transfer():
    class StubClient(ExplorerStub):
        async def send_token_transaction(self, account, token_address, to, amount, gas_limit=None, gas_price=None):
            assert token_address == TOKEN_ADDRESS
            return tx_response(value=amount)

    result = await send_transaction(
        OTHER_ADDRESS, "250.123456789012345678901", token_address=TOKEN_ADDRESS, client=StubClient(), wallets=funded_wallets()
    )
    # Token precision is checked against the token's own decimals by the client
    assert result["value"] == "250.123456789012345678901"
    assert result["tokenAddress"] == TOKEN_ADDRESS
    assert "symbol" not in result


@pytest.mark.asyncio
async def test_send_transaction_maps_node_errors():
    class StubClient(ExplorerStub):
        async def send_transaction(self, *_args, **_kwargs):
            raise InsufficientFundsError("insufficient funds for gas * price + value")

    result = await send_transaction(OTHER_ADDRESS, "100", client=StubClient(), wallets=funded_wallets())
    assert result == {"error": "Failed to send transaction: insufficient funds for gas * price + value"}
    assert default_metrics.snapshot()["transactions"] == {}


@pytest.mark.asyncio
async def test_get_transaction():
    class StubClient(ExplorerStub):
        async def get_transaction(self, tx_hash):
            if tx_hash != TX_HASH:
                raise TransactionNotFoundError("Transaction not found")
            return tx_response(status="pending")

    assert await get_transaction("0x1234", client=StubClient()) == {
        "error": "Failed to get transaction: Invalid transaction hash."
    }
    result = await get_transaction(f" {TX_HASH} ", client=StubClient())
    assert result["status"] == "pending"
    assert result["symbol"] == "tRBTC"
    assert result["from"] == TEST_ADDRESS
    missing = await get_transaction("0x" + "00" * 32, client=StubClient())
    assert missing == {"error": "Failed to get transaction: Transaction not found"}


@pytest.mark.asyncio
async def test_estimate_gas():
    class StubClient(ExplorerStub):
        async def estimate_gas(self, to, value=None, data=None):
            assert (value, data) == ("0.5", None)
            return GasEstimate(gas_limit="21000", gas_price="60000000", estimated_cost="0.00000126")

    result = await estimate_gas(OTHER_ADDRESS, value="0.5", data="", client=StubClient())
    assert result == {
        "gasLimit": "21000",
        "gasPrice": "60000000",
        "estimatedCost": "0.00000126",
        "symbol": "tRBTC",
    }
    assert (await estimate_gas(OTHER_ADDRESS, data="0xabc", client=StubClient()))["error"].endswith(
        "Data must be 0x-prefixed hex."
    )


@pytest.mark.asyncio
async def test_get_block_by_number_and_hash():
    calls = []

    class StubClient:
        async def get_block(self, block_number=None, block_hash=None):
            calls.append((block_number, block_hash))
            return BlockInfo(
                number=100,
                hash="0x" + "11" * 32,
                parent_hash="0x" + "22" * 32,
                timestamp=1_700_000_000,
                gas_limit="6800000",
                gas_used="21000",
                miner="0x" + "33" * 20,
                size=1024,
                transaction_count=1,
            )

    result = await get_block(block_number="100", client=StubClient())
    assert result["number"] == 100
    assert result["timestampIso"] == "2023-11-14T22:13:20.000Z"
    assert result["transactionCount"] == 1
    await get_block(block_hash="0x" + "11" * 32, client=StubClient())
    await get_block(client=StubClient())
    assert calls == [(100, None), (None, "0x" + "11" * 32), (None, None)]

    assert await get_block(block_number="-1", client=StubClient()) == {"error": "Failed to get block: Invalid block number."}
    assert await get_block(block_hash="0x12", client=StubClient()) == {"error": "Failed to get block: Invalid block hash."}


@pytest.mark.asyncio
async def test_get_block_not_found():
    class StubClient:
        async def get_block(self, **_kwargs):
            raise BlockNotFoundError("Block not found")

    assert await get_block(block_number=99999999, client=StubClient()) == {"error": "Failed to get block: Block not found"}


@pytest.mark.asyncio
async def test_get_network_info_adds_symbol():
    class StubClient(ExplorerStub):
        async def get_network_info(self):
            return NetworkInfo(chain_id=31, network_name="Rootstock Testnet", block_number=0, gas_price="0", is_connected=False)

    result = await get_network_info(client=StubClient())
    assert result == {
        "chainId": 31,
        "networkName": "Rootstock Testnet",
        "blockNumber": 0,
        "gasPrice": "0",
        "isConnected": False,
        "symbol": "tRBTC",
    }
