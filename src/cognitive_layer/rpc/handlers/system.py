"""System handlers.

Liveness and introspection.
"""

from __future__ import annotations

from typing import Any

from cognitive_layer.rpc.router import list_methods, register


@register("ping")
def handle_ping() -> dict[str, Any]:
    return {"ok": True}


@register("methods/list")
def handle_methods_list() -> dict[str, Any]:
    """List registered method names."""
    return {"methods": list_methods()}
