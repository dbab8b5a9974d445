"""Minimal read-only sanity checks against a live Rootstock node."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from rootstock_mcp.rootstock_api import default_client  # noqa: E402
from rootstock_mcp.tools import (  # noqa: E402
    get_balance,
    get_block,
    get_network_info,
    get_token_info,
    list_wallets,
    validate_address,
)

# Zero address by default; override with a funded testnet address.
SAMPLE_ADDRESS = os.getenv("ROOTSTOCK_SAMPLE_ADDRESS", "0x0000000000000000000000000000000000000000")
# Optional ERC20 contract for a token info lookup.
SAMPLE_TOKEN = os.getenv("ROOTSTOCK_SAMPLE_TOKEN")


async def main() -> None:
    try:
        print("Network info:", await get_network_info())
        print("Latest block:", await get_block())
        print("Validate address:", validate_address(SAMPLE_ADDRESS))
        print("Balance:", await get_balance(SAMPLE_ADDRESS))
        print("Wallets:", list_wallets())
        if SAMPLE_TOKEN:
            print("Token info:", await get_token_info(SAMPLE_TOKEN))
    finally:
        await default_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
