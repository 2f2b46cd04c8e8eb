"""RPC handler modules. Importing this package registers every handler."""

from __future__ import annotations

from cognitive_layer.rpc.handlers import classification, system  # noqa: F401
