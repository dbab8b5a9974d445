import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from rootstock_mcp.metrics import default_metrics  # noqa: E402
from rootstock_mcp.wallets import default_wallet_manager  # noqa: E402

# Hardhat/anvil development key #0; public test vector, never funded on mainnet.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
# Same address with the case of its first letter flipped, so the EIP-55 checksum fails.
BAD_CHECKSUM_ADDRESS = "0xF39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TX_HASH = "0x" + "ab" * 32


class DummyResponse:
    def __init__(self, status_code: int, json_data=None):
        self.status_code = status_code
        self._json = json_data

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json


class FakeRpcClient:
    """Stands in for httpx.AsyncClient; answers JSON-RPC posts from a handler map."""

    def __init__(self, handlers=None):
        self.handlers = dict(handlers or {})
        self.calls = []

    async def post(self, url, json=None, **_kwargs):
        self.calls.append({"url": url, "method": json["method"], "params": json["params"]})
        if json["method"] not in self.handlers:
            return DummyResponse(200, {"jsonrpc": "2.0", "id": json["id"], "error": {"code": -32601, "message": "method not found"}})
        handler = self.handlers[json["method"]]
        if callable(handler):
            handler = handler(json["params"])
        if isinstance(handler, DummyResponse):
            return handler
        return DummyResponse(200, {"jsonrpc": "2.0", "id": json["id"], "result": handler})

    def methods(self):
        return [call["method"] for call in self.calls]

    async def aclose(self):
        return None


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()


@pytest.fixture(autouse=True)
def reset_wallets():
    default_wallet_manager.clear()
    yield
    default_wallet_manager.clear()
