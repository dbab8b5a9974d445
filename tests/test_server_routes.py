import pytest
from fastapi.testclient import TestClient

from rootstock_mcp import server as srv
from rootstock_mcp.rate_limiter import PerKeyRateLimiter
from rootstock_mcp.server import app

from conftest import TEST_ADDRESS, TEST_PRIVATE_KEY, TOKEN_ADDRESS, TX_HASH


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(srv, "rate_limiter", PerKeyRateLimiter(rate_per_sec=1000))
    return TestClient(app)


def test_health_route(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json().get("status") == "ok"
    assert "X-Request-ID" in resp.headers


def test_validate_address_route(client):
    resp = client.get(f"/tools/validate_address/{TEST_ADDRESS.lower()}")
    assert resp.json() == {"isValid": True, "address": TEST_ADDRESS}
    assert client.get("/tools/validate_address/bad").json() == {"isValid": False}


def test_network_info_route(monkeypatch, client):
    async def fake_network_info():
        return {"chainId": 31, "networkName": "Rootstock Testnet", "blockNumber": 1, "gasPrice": "1", "isConnected": True}

    monkeypatch.setattr(srv, "get_network_info", fake_network_info)
    resp = client.get("/tools/network_info")
    assert resp.status_code == 200
    assert resp.json()["chainId"] == 31


def test_balance_route_passes_token_query(monkeypatch, client):
    seen = {}

    async def fake_balance(address, token_address=None):
        seen.update(address=address, token_address=token_address)
        return {"address": address, "balance": "1.0"}

    monkeypatch.setattr(srv, "get_balance", fake_balance)
    client.get(f"/tools/balance/{TEST_ADDRESS}", params={"tokenAddress": TOKEN_ADDRESS})
    assert seen == {"address": TEST_ADDRESS, "token_address": TOKEN_ADDRESS}


def test_balance_route_rejects_invalid_address(client):
    assert client.get("/tools/balance/bad").json() == {"error": "Failed to get balance: Invalid address."}


def test_block_route(monkeypatch, client):
    seen = []

    async def fake_block(block_number=None, block_hash=None):
        seen.append((block_number, block_hash))
        return {"number": block_number or 0}

    monkeypatch.setattr(srv, "get_block", fake_block)
    assert client.get("/tools/block", params={"number": 5}).json() == {"number": 5}
    client.get("/tools/block")
    assert seen == [(5, None), (None, None)]
    assert client.get("/tools/block", params={"number": -1}).status_code == 422


def test_transaction_and_estimate_routes_validate_first(client):
    assert client.get("/tools/transaction/0x1234").json() == {
        "error": "Failed to get transaction: Invalid transaction hash."
    }
    assert client.get("/tools/estimate_gas", params={"to": "bad"}).json() == {
        "error": "Failed to estimate gas: Invalid recipient address."
    }
    assert client.get("/tools/estimate_gas").status_code == 422


def test_token_and_nft_routes(monkeypatch, client):
    async def fake_token_info(address):
        return {"address": address, "symbol": "TST"}

    async def fake_nft_info(address, token_id=None):
        return {"address": address, "tokenId": token_id}

    monkeypatch.setattr(srv, "get_token_info", fake_token_info)
    monkeypatch.setattr(srv, "get_nft_info", fake_nft_info)
    assert client.get(f"/tools/token_info/{TOKEN_ADDRESS}").json()["symbol"] == "TST"
    assert client.get(f"/tools/nft_info/{TOKEN_ADDRESS}", params={"tokenId": "3"}).json()["tokenId"] == "3"


def test_wallets_route_never_returns_keys(client):
    from rootstock_mcp.wallets import default_wallet_manager

    default_wallet_manager.import_wallet(private_key=TEST_PRIVATE_KEY)
    body = client.get("/tools/wallets").json()
    assert body["count"] == 1
    assert TEST_PRIVATE_KEY[2:] not in str(body)


def test_route_tool_errors_are_counted(monkeypatch, client):
    async def fake_transaction(tx_hash):
        return {"error": "Failed to get transaction: Transaction not found"}

    monkeypatch.setattr(srv, "get_transaction", fake_transaction)
    client.get(f"/tools/transaction/{TX_HASH}")
    snapshot = client.get("/metrics").json()
    assert snapshot["tool_error"] == {"get_transaction": 1}


def test_rate_limit_response(monkeypatch, client):
    class DenyLimiter:
        async def allow(self, _tool):
            return False

    monkeypatch.setattr(srv, "rate_limiter", DenyLimiter())
    resp = client.get("/tools/network_info")
    assert resp.status_code == 429
    assert resp.json() == {"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}}

    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": "list_wallets", "arguments": {}}},
    )
    assert resp.status_code == 429
