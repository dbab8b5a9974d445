"""Block and network status tools."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rootstock_mcp.rootstock_api import default_client
from rootstock_mcp.tools.common import EXPECTED_ERRORS, failure
from rootstock_mcp.tools.validators import is_valid_hash, parse_optional_int

logger = logging.getLogger(__name__)


def _iso_timestamp(seconds: int) -> str:
    moment = datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


async def get_block(
    block_number: Optional[Any] = None,
    block_hash: Optional[str] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    """
    Fetch a block by hash or number; the latest block when neither is given.

    Returns:
        Block summary dict or an error dict.
    """
    if block_hash:
        if not is_valid_hash(block_hash):
            return {"error": "Failed to get block: Invalid block hash."}
        number = None
    elif block_number is not None and block_number != "":
        number = parse_optional_int(block_number)
        if number is None or number < 0:
            return {"error": "Failed to get block: Invalid block number."}
    else:
        number = None

    try:
        block = await client.get_block(block_number=number, block_hash=block_hash.strip() if block_hash else None)
    except EXPECTED_ERRORS as exc:
        return failure("Failed to get block", exc)
    except Exception:
        logger.exception("Unexpected error fetching block")
        return {"error": "Failed to get block: unexpected error."}

    result = block.to_dict()
    result["timestampIso"] = _iso_timestamp(block.timestamp)
    return result


async def get_network_info(*, client=default_client) -> Dict[str, Any]:
    """Chain id, latest block and gas price; reports ``isConnected: false`` when the node is down."""
    try:
        info = await client.get_network_info()
    except Exception:
        logger.exception("Unexpected error fetching network info")
        return {"error": "Failed to get network info: unexpected error."}
    result = info.to_dict()
    result["symbol"] = client.currency_symbol
    return result
