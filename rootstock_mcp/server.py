"""FastAPI application wiring Rootstock MCP tools to HTTP routes."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from rootstock_mcp import formatting, mcp
from rootstock_mcp.config import default_config
from rootstock_mcp.metrics import default_metrics
from rootstock_mcp.rate_limiter import PerKeyRateLimiter
from rootstock_mcp.rootstock_api import default_client
from rootstock_mcp.tools import (
    estimate_gas,
    get_balance,
    get_block,
    get_network_info,
    get_nft_info,
    get_token_info,
    get_transaction,
    list_wallets,
    validate_address,
)

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging() -> None:
    level = getattr(logging, default_config.log_level.upper(), logging.INFO)
    if default_config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


configure_logging()
rate_limiter = PerKeyRateLimiter(
    rate_per_sec=default_config.rate_limit_qps,
    per_tool=default_config.per_tool_rate_limits,
)
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "rootstock-mcp-server"
MCP_SERVER_VERSION = APP_VERSION
UNKNOWN_TOOL_KEY = "call_tool"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    yield
    # Shutdown
    await default_client.aclose()


app = FastAPI(
    title="Rootstock MCP Server",
    description="Wallet, transfer, token and contract tools on Rootstock for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_tool_result(tool_name: str, result: Dict[str, Any], request_id: Optional[str] = None) -> None:
    if isinstance(result, dict) and result.get("error"):
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True)


async def _enforce_rate_limit(tool_name: str) -> Optional[JSONResponse]:
    allowed = await rate_limiter.allow(tool_name)
    if not allowed:
        logger.warning("tool=%s outcome=rate_limited", tool_name, extra={"tool": tool_name})
        default_metrics.incr_rate_limited()
        # Return a JSON-RPC style error envelope for MCP clients.
        return JSONResponse(
            status_code=429,
            content={"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}},
        )
    return None


def _tool_response(request: Request, tool_name: str, result: Any) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    _log_tool_result(tool_name, result if isinstance(result, dict) else {}, request_id)
    return JSONResponse(content=result)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/tools/network_info")
async def network_info(request: Request) -> JSONResponse:
    """Proxy for get_network_info tool."""
    limited = await _enforce_rate_limit("get_network_info")
    if limited:
        return limited
    return _tool_response(request, "get_network_info", await get_network_info())


@app.get("/tools/balance/{address}")
async def balance(address: str, request: Request, tokenAddress: str | None = Query(None)) -> JSONResponse:
    """Proxy for get_balance tool."""
    limited = await _enforce_rate_limit("get_balance")
    if limited:
        return limited
    return _tool_response(request, "get_balance", await get_balance(address, token_address=tokenAddress))


@app.get("/tools/validate_address/{address}")
async def validate_address_route(address: str, request: Request) -> JSONResponse:
    """Proxy for validate_address utility."""
    limited = await _enforce_rate_limit("validate_address")
    if limited:
        return limited
    return _tool_response(request, "validate_address", validate_address(address))


@app.get("/tools/block")
async def block(
    request: Request,
    number: int | None = Query(None, ge=0),
    hash: str | None = Query(None),
) -> JSONResponse:
    """Proxy for get_block tool; latest block when no selector is given."""
    limited = await _enforce_rate_limit("get_block")
    if limited:
        return limited
    return _tool_response(request, "get_block", await get_block(block_number=number, block_hash=hash))


@app.get("/tools/transaction/{tx_hash}")
async def transaction(tx_hash: str, request: Request) -> JSONResponse:
    """Proxy for get_transaction tool."""
    limited = await _enforce_rate_limit("get_transaction")
    if limited:
        return limited
    return _tool_response(request, "get_transaction", await get_transaction(tx_hash))


@app.get("/tools/estimate_gas")
async def estimate_gas_route(
    request: Request,
    to: str = Query(...),
    value: str | None = Query(None),
    data: str | None = Query(None),
) -> JSONResponse:
    """Proxy for estimate_gas tool."""
    limited = await _enforce_rate_limit("estimate_gas")
    if limited:
        return limited
    return _tool_response(request, "estimate_gas", await estimate_gas(to, value=value, data=data))


@app.get("/tools/token_info/{address}")
async def token_info(address: str, request: Request) -> JSONResponse:
    """Proxy for get_token_info tool."""
    limited = await _enforce_rate_limit("get_token_info")
    if limited:
        return limited
    return _tool_response(request, "get_token_info", await get_token_info(address))


@app.get("/tools/nft_info/{address}")
async def nft_info(address: str, request: Request, tokenId: str | None = Query(None)) -> JSONResponse:
    """Proxy for get_nft_info tool."""
    limited = await _enforce_rate_limit("get_nft_info")
    if limited:
        return limited
    return _tool_response(request, "get_nft_info", await get_nft_info(address, token_id=tokenId))


@app.get("/tools/wallets")
async def wallets(request: Request) -> JSONResponse:
    """Proxy for list_wallets tool (addresses and public keys only)."""
    limited = await _enforce_rate_limit("list_wallets")
    if limited:
        return limited
    return _tool_response(request, "list_wallets", list_wallets())


@app.post("/mcp")
async def mcp_gateway(request: Request) -> JSONResponse:
    """
    Minimal JSON-RPC gateway for MCP integrations.

    Supported methods:
      - initialize
      - list_tools / tools/list
      - call_tool / tools/call
      - notifications/initialized
    """
    request_id = getattr(request.state, "request_id", None)
    start_time = time.time()

    def _respond(payload: Dict[str, Any], status_code: int = 200, *, outcome: str, method_label: Optional[str] = None, tool_label: Optional[str] = None, error_code: Optional[int] = None) -> JSONResponse:
        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            "mcp outcome=%s method=%s tool=%s id=%s status=%s duration_ms=%.2f error_code=%s",
            outcome,
            method_label,
            tool_label,
            payload.get("id"),
            status_code,
            duration_ms,
            error_code,
            extra={"request_id": request_id, "tool": tool_label, "error": error_code},
        )
        return JSONResponse(status_code=status_code, content=payload)

    try:
        body = await request.json()
    except Exception:
        payload = _jsonrpc_error_payload(None, -32700, "Parse error", request_id=request_id)
        return _respond(payload, status_code=400, outcome="error", method_label=None, error_code=-32700)

    if not isinstance(body, dict):
        payload = _jsonrpc_error_payload(None, -32600, "Invalid request", request_id=request_id)
        return _respond(payload, status_code=400, outcome="error", method_label=None, error_code=-32600)

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params", request_id=request_id)
        return _respond(payload, outcome="error", method_label=method, error_code=-32602)

    if not method or not isinstance(method, str):
        payload = _jsonrpc_error_payload(rpc_id, -32600, "Invalid request", request_id=request_id)
        return _respond(payload, outcome="error", method_label=None, error_code=-32600)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params", request_id=request_id)
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)

        logger.debug(
            "mcp initialize requested protocol=%s request_id=%s",
            protocol_version,
            request_id,
            extra={"request_id": request_id},
        )
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
        }
        return _respond(
            _jsonrpc_success_payload(rpc_id, result, request_id=request_id),
            outcome="success",
            method_label=method,
        )

    if method in ("list_tools", "tools/list"):
        limited = await _enforce_rate_limit("list_tools")
        if limited:
            return limited
        result = {"tools": mcp.list_tools()}
        return _respond(
            _jsonrpc_success_payload(rpc_id, result, request_id=request_id),
            outcome="success",
            method_label=method,
        )

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params", request_id=request_id)
            return _respond(
                payload,
                outcome="error",
                method_label=method,
                tool_label=None,
                error_code=-32602,
            )
        if not isinstance(tool_params, dict):
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params", request_id=request_id)
            return _respond(payload, outcome="error", method_label=method, tool_label=tool_name, error_code=-32602)
        # Unregistered names share one bucket and one metrics key.
        tool_key = tool_name if tool_name in mcp.TOOL_REGISTRY else UNKNOWN_TOOL_KEY
        limited = await _enforce_rate_limit(tool_key)
        if limited:
            return limited
        result = await mcp.call_tool(tool_name, tool_params)
        _log_tool_result(tool_key, result if isinstance(result, dict) else {}, request_id)
        wrapped = _wrap_tool_result(tool_name, result)
        return _respond(
            _jsonrpc_success_payload(rpc_id, wrapped, request_id=request_id),
            outcome="success",
            method_label=method,
            tool_label=tool_name,
        )

    if method in ("notifications/initialized", "initialized"):
        # Notifications should not return a JSON-RPC response body.
        logger.debug(
            "mcp initialized notification received request_id=%s",
            request_id,
            extra={"request_id": request_id},
        )
        return Response(status_code=204)

    payload = _jsonrpc_error_payload(rpc_id, -32601, "Method not found", request_id=request_id)
    return _respond(payload, outcome="error", method_label=method, error_code=-32601)


# Run with: uvicorn rootstock_mcp.server:app --reload


def _jsonrpc_success_payload(rpc_id: Any, result: Any, request_id: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"jsonrpc": "2.0", "id": rpc_id, "result": result}
    if request_id:
        payload["requestId"] = request_id
    return payload


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str, request_id: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}
    if request_id:
        payload["requestId"] = request_id
    return payload


def _wrap_tool_result(tool_name: str, result: Any) -> Dict[str, Any]:
    """
    Shape tool outputs into MCP-friendly content array.
    """
    # Tool-level errors are returned in-band with isError flag.
    if isinstance(result, dict) and "error" in result:
        message = result.get("error") or "Error"
        wrapped = {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}
        # Preserve structured error details for capable clients.
        wrapped["structuredContent"] = result
        return wrapped

    # Plain string results are returned directly as text.
    if isinstance(result, str):
        return {"content": [{"type": "text", "text": result}]}

    text_repr = formatting.render(tool_name, result)
    if text_repr is None:
        try:
            text_repr = json.dumps(result, ensure_ascii=True)
        except (TypeError, ValueError):
            text_repr = str(result)
    wrapped_result: Dict[str, Any] = {
        "content": [{"type": "text", "text": text_repr}],
        "structuredContent": result,
    }
    return wrapped_result
