"""RPC method router.

Maps JSON-RPC method names to handler functions and translates domain
errors into JSON-RPC error codes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from cognitive_layer.classifier import ContextClassifier
from cognitive_layer.errors import CognitiveLayerError, get_error_code, record_error
from cognitive_layer.rpc.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, JSON, RpcError
from cognitive_layer.rules import RuleBook

logger = logging.getLogger(__name__)


@dataclass
class RpcContext:
    """Shared collaborators handed to handlers that ask for them."""

    classifier: ContextClassifier = field(default_factory=ContextClassifier)
    rulebook: RuleBook = field(default_factory=RuleBook)


# Handler registry: method name -> (handler_func, needs_context)
_HANDLERS: dict[str, tuple[Callable[..., Any], bool]] = {}


def register(method: str, *, needs_context: bool = False) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to register an RPC handler.

    Usage:
        @register("classify", needs_context=True)
        def handle_classify(ctx: RpcContext, *, text: str) -> dict:
            ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        _HANDLERS[method] = (func, needs_context)
        return func

    return decorator


def get_handler(method: str) -> tuple[Callable[..., Any], bool] | None:
    """Get handler for a method, or None if not found."""
    return _HANDLERS.get(method)


def list_methods() -> list[str]:
    """List all registered method names."""
    return sorted(_HANDLERS.keys())


def dispatch(method: str, params: JSON | None, ctx: RpcContext) -> Any:
    """Dispatch a method call to its handler.

    Args:
        method: The JSON-RPC method name.
        params: The method parameters (may be None).
        ctx: Shared context for handlers that need it.

    Returns:
        The handler's result.

    Raises:
        RpcError: If the method is unknown, params don't fit, or the handler fails.
    """
    handler_info = get_handler(method)
    if handler_info is None:
        raise RpcError(METHOD_NOT_FOUND, f"Method not found: {method}")

    if params is not None and not isinstance(params, dict):
        raise RpcError(INVALID_PARAMS, "params must be an object")

    handler, needs_context = handler_info
    kwargs = params or {}

    try:
        if needs_context:
            return handler(ctx, **kwargs)
        return handler(**kwargs)

    except RpcError:
        raise

    except CognitiveLayerError as e:
        logger.warning("%s in %s: %s", type(e).__name__, method, e.message)
        raise RpcError(
            get_error_code(e),
            e.message,
            data=e.to_dict() if e.context else None,
        ) from e

    except TypeError as e:
        # Parameter mismatch - likely missing or unexpected param
        raise RpcError(INVALID_PARAMS, f"Invalid parameters for {method}: {e}") from e

    except Exception as e:
        # Log unexpected errors but don't expose details
        logger.exception("Unexpected error in %s", method)
        record_error(source="rpc", operation=method, exc=e, context={"params": sorted(kwargs)})
        raise RpcError(INTERNAL_ERROR, "Internal error") from e


def register_handlers() -> None:
    """Import all handler modules to register their handlers.

    Call this once at startup to populate the handler registry.
    """
    from cognitive_layer.rpc import handlers as _  # noqa: F401

    logger.debug("Registered %d RPC handlers", len(_HANDLERS))
