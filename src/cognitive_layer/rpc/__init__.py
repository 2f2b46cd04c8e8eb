"""JSON-RPC 2.0 surface for the classifier, rule book and error taxonomy."""

from __future__ import annotations

from cognitive_layer.rpc.types import (
    JSON,
    RpcError,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    VALIDATION_ERROR,
    NOT_FOUND_ERROR,
    CONFIGURATION_ERROR,
    DOMAIN_ERROR,
    jsonrpc_error,
    jsonrpc_result,
    readline,
    write,
)

from cognitive_layer.rpc.router import (
    RpcContext,
    register,
    dispatch,
    get_handler,
    list_methods,
    register_handlers,
)

__all__ = [
    # Types
    "JSON",
    "RpcError",
    # Error codes
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "VALIDATION_ERROR",
    "NOT_FOUND_ERROR",
    "CONFIGURATION_ERROR",
    "DOMAIN_ERROR",
    # Utilities
    "jsonrpc_error",
    "jsonrpc_result",
    "readline",
    "write",
    # Router
    "RpcContext",
    "register",
    "dispatch",
    "get_handler",
    "list_methods",
    "register_handlers",
]
