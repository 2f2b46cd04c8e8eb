"""Line-delimited JSON-RPC 2.0 server over stdio.

One request object per line on stdin, one response per line on stdout.
Logs go to stderr so they never interleave with protocol frames.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any, TextIO

from .rpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    RpcContext,
    RpcError,
    dispatch,
    jsonrpc_error,
    jsonrpc_result,
    readline,
    register_handlers,
    write,
)
from .rules import default_rulebook
from .settings import settings

logger = logging.getLogger(__name__)


def handle_jsonrpc_request(ctx: RpcContext, req: Any) -> dict[str, Any] | None:
    """Handle one decoded request; None means no response (notification)."""
    if not isinstance(req, dict):
        return jsonrpc_error(req_id=None, code=INVALID_REQUEST, message="request must be an object")

    method = req.get("method")
    req_id = req.get("id")
    params = req.get("params")

    # Notifications can omit id; ignore.
    if req_id is None:
        return None

    if not isinstance(method, str) or not method:
        return jsonrpc_error(req_id=req_id, code=INVALID_REQUEST, message="method is required")

    correlation_id = uuid.uuid4().hex[:12]
    if method != "ping":
        logger.debug("RPC request [%s] method=%s req_id=%s", correlation_id, method, req_id)

    try:
        result = dispatch(method, params, ctx)
    except RpcError as exc:
        logger.debug("RPC error [%s] code=%s message=%s", correlation_id, exc.code, exc.message)
        return jsonrpc_error(req_id=req_id, code=exc.code, message=exc.message, data=exc.data)
    except Exception:
        # dispatch() wraps handler failures; this guards the framing itself.
        logger.exception("RPC request [%s] failed outside dispatch", correlation_id)
        return jsonrpc_error(req_id=req_id, code=INTERNAL_ERROR, message="Internal error")

    return jsonrpc_result(req_id=req_id, result=result)


def handle_line(ctx: RpcContext, line: str) -> dict[str, Any] | None:
    line = line.strip()
    if not line:
        return None
    try:
        req = json.loads(line)
    except json.JSONDecodeError as exc:
        logger.warning("Unparseable request line: %s", exc)
        return jsonrpc_error(req_id=None, code=PARSE_ERROR, message="Parse error")
    return handle_jsonrpc_request(ctx, req)


def run_stdio_server(stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    """Serve requests until stdin closes."""
    register_handlers()
    ctx = RpcContext(rulebook=default_rulebook())

    while True:
        line = readline(stdin)
        if line is None:
            return
        resp = handle_line(ctx, line)
        if resp is not None:
            write(resp, stdout)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()
    run_stdio_server()


if __name__ == "__main__":
    main()
