import pytest

from rootstock_mcp.models import NetworkInfo, TokenBalance
from rootstock_mcp.rootstock_api.client import NodeUnreachableError, UnauthorizedError, RpcError
from rootstock_mcp.tools.account import get_balance, get_native_balance, validate_address
from rootstock_mcp.wallets import WalletManager

from conftest import BAD_CHECKSUM_ADDRESS, OTHER_ADDRESS, TEST_ADDRESS, TEST_PRIVATE_KEY, TOKEN_ADDRESS


def test_validate_address_format():
    assert validate_address(TEST_ADDRESS.lower()) == {"isValid": True, "address": TEST_ADDRESS}
    assert validate_address("bad") == {"isValid": False}


def test_validate_address_enforces_checksum_on_mixed_case():
    assert validate_address(TEST_ADDRESS) == {"isValid": True, "address": TEST_ADDRESS}
    assert validate_address("0x" + TEST_ADDRESS[2:].upper()) == {"isValid": True, "address": TEST_ADDRESS}
    assert validate_address(BAD_CHECKSUM_ADDRESS) == {"isValid": False}


@pytest.mark.asyncio
async def test_get_balance_invalid_address_skips_calls():
    class FailClient:
        async def get_balance(self, *_args, **_kwargs):
            pytest.fail("get_balance should not be called for invalid address")

    result = await get_balance("bad", client=FailClient())
    assert result == {"error": "Failed to get balance: Invalid address."}
    result = await get_balance(TEST_ADDRESS, token_address="0x123", client=FailClient())
    assert result == {"error": "Failed to get balance: Invalid token address."}


@pytest.mark.asyncio
async def test_get_native_balance_happy_path():
    class StubClient:
        currency_symbol = "tRBTC"

        async def get_balance(self, address):
            return "0.05"

    result = await get_balance(TEST_ADDRESS.lower(), client=StubClient())
    assert result == {"address": TEST_ADDRESS, "balance": "0.05", "symbol": "tRBTC"}


@pytest.mark.asyncio
async def test_get_token_balance_happy_path():
    class StubClient:
        currency_symbol = "tRBTC"

        async def get_token_balance(self, address, token_address):
            return TokenBalance(token_address=TOKEN_ADDRESS, balance="12.5", decimals=18, symbol="TST", name="Test")

    result = await get_balance(TEST_ADDRESS, token_address=TOKEN_ADDRESS, client=StubClient())
    assert result["balance"] == "12.5"
    assert result["tokenAddress"] == TOKEN_ADDRESS
    assert result["address"] == TEST_ADDRESS
    assert result["symbol"] == "TST"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc,message",
    [
        (NodeUnreachableError("connect failed"), "Failed to get balance: Node unreachable"),
        (UnauthorizedError("401"), "Failed to get balance: Unauthorized by RPC endpoint."),
        (RpcError("header not found"), "Failed to get balance: header not found"),
    ],
)
async def test_get_balance_error_mapping(exc, message):
    class StubClient:
        currency_symbol = "tRBTC"

        async def get_balance(self, *_args, **_kwargs):
            raise exc

    assert await get_balance(TEST_ADDRESS, client=StubClient()) == {"error": message}


@pytest.mark.asyncio
async def test_get_balance_unexpected_error_is_generic():
    class StubClient:
        async def get_balance(self, *_args, **_kwargs):
            raise RuntimeError("secret internals")

    assert await get_balance(TEST_ADDRESS, client=StubClient()) == {"error": "Failed to get balance: unexpected error."}


@pytest.mark.asyncio
async def test_get_native_balance_defaults_to_current_wallet():
    class StubClient:
        currency_symbol = "tRBTC"

        def __init__(self):
            self.addresses = []

        async def get_balance(self, address):
            self.addresses.append(address)
            return "1.0"

        async def get_network_info(self):
            return NetworkInfo(chain_id=31, network_name="Rootstock Testnet", block_number=500, gas_price="60000000", is_connected=True)

    manager = WalletManager()
    result = await get_native_balance(client=StubClient(), wallets=manager)
    assert "No wallet configured" in result["error"]

    manager.import_wallet(private_key=TEST_PRIVATE_KEY)
    stub = StubClient()
    result = await get_native_balance(client=stub, wallets=manager)
    assert stub.addresses == [TEST_ADDRESS]
    assert result == {
        "address": TEST_ADDRESS,
        "balance": "1.0",
        "symbol": "tRBTC",
        "networkName": "Rootstock Testnet",
        "chainId": 31,
        "blockNumber": 500,
    }

    explicit = await get_native_balance(OTHER_ADDRESS, client=StubClient(), wallets=manager)
    assert explicit["address"] == OTHER_ADDRESS
