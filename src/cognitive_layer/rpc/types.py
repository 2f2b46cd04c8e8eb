"""JSON-RPC 2.0 types, error codes and stdio framing."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

from cognitive_layer.errors import (
    CONFIGURATION_ERROR_CODE,
    DOMAIN_ERROR_CODE,
    NOT_FOUND_ERROR_CODE,
    VALIDATION_ERROR_CODE,
)

JSON = dict[str, Any]

# Standard JSON-RPC codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Domain codes (server error range)
VALIDATION_ERROR = VALIDATION_ERROR_CODE
NOT_FOUND_ERROR = NOT_FOUND_ERROR_CODE
CONFIGURATION_ERROR = CONFIGURATION_ERROR_CODE
DOMAIN_ERROR = DOMAIN_ERROR_CODE


class RpcError(RuntimeError):
    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def jsonrpc_error(*, req_id: Any, code: int, message: str, data: Any | None = None) -> JSON:
    err: JSON = {"code": code, "message": message}
    if data is not None:
        err["data"] = data
    return {"jsonrpc": "2.0", "id": req_id, "error": err}


def jsonrpc_result(*, req_id: Any, result: Any) -> JSON:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def readline(stream: TextIO | None = None) -> str | None:
    line = (stream or sys.stdin).readline()
    if not line:
        return None
    return line


def write(obj: Any, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    try:
        out.write(json.dumps(obj, ensure_ascii=False) + "\n")
        out.flush()
    except BrokenPipeError:
        # Client closed the pipe. Treat as a clean shutdown.
        raise SystemExit(0) from None
