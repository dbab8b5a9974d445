"""JSON-RPC client wrappers for a Rootstock node."""

from .client import (
    BlockNotFoundError,
    ContractExecutionError,
    InsufficientFundsError,
    NodeUnreachableError,
    NonceError,
    RootstockApiError,
    RootstockClient,
    RpcError,
    TransactionNotFoundError,
    TransactionTimeoutError,
    UnauthorizedError,
    default_client,
)

__all__ = [
    "RootstockClient",
    "RootstockApiError",
    "NodeUnreachableError",
    "UnauthorizedError",
    "RpcError",
    "ContractExecutionError",
    "InsufficientFundsError",
    "NonceError",
    "TransactionNotFoundError",
    "BlockNotFoundError",
    "TransactionTimeoutError",
    "default_client",
]
