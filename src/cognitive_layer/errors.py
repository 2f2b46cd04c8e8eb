"""Error hierarchy and error event recording.

All domain errors derive from CognitiveLayerError so callers (and the
JSON-RPC surface) can treat them uniformly:

- ValidationError / InvalidInput: bad caller input (empty request text)
- ConfigurationError: bad settings or rule file
- NotFoundError: unknown rule id or similar lookups

record_error() stores a metadata-only summary of an exception in the
JSONL event log, deduplicating identical errors for a short window.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

logger = logging.getLogger(__name__)

# Field names whose values never go into error context.
_SENSITIVE_FIELDS = {"password", "token", "secret", "api_key", "credential"}

# Thread-safe storage for deduplication of recent errors
_RECENT_SIGNATURES: dict[str, datetime] = {}
_SIGNATURES_LOCK = threading.Lock()


class CognitiveLayerError(Exception):
    """Base class for all cognitive layer errors."""

    error_type = "cognitive_layer"

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.error_type,
            "message": self.message,
            "recoverable": self.recoverable,
            **self.context,
        }


class ValidationError(CognitiveLayerError):
    """Caller supplied a value that fails validation."""

    error_type = "validation"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        constraint: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if field is not None:
            ctx["field"] = field
        if constraint is not None:
            ctx["constraint"] = constraint
        if value is not None and (field or "").lower() not in _SENSITIVE_FIELDS:
            ctx["value"] = value
        super().__init__(message, recoverable=False, context=ctx)
        self.field = field
        self.constraint = constraint


class InvalidInput(ValidationError):
    """Request text is empty or absent."""

    error_type = "invalid_input"


class ConfigurationError(CognitiveLayerError):
    """Settings or rule files are malformed."""

    error_type = "configuration"

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if config_key is not None:
            ctx["config_key"] = config_key
        super().__init__(message, recoverable=False, context=ctx)
        self.config_key = config_key


class NotFoundError(CognitiveLayerError):
    """A named resource does not exist."""

    error_type = "not_found"

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        ctx: dict[str, Any] = {}
        if resource_type is not None:
            ctx["resource_type"] = resource_type
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message, recoverable=False, context=ctx)
        self.resource_type = resource_type
        self.resource_id = resource_id


# JSON-RPC error codes for domain errors (server error range).
VALIDATION_ERROR_CODE = -32000
NOT_FOUND_ERROR_CODE = -32003
CONFIGURATION_ERROR_CODE = -32030
DOMAIN_ERROR_CODE = -32099


def get_error_code(exc: CognitiveLayerError) -> int:
    """Map a domain error to its JSON-RPC error code."""
    if isinstance(exc, ValidationError):
        return VALIDATION_ERROR_CODE
    if isinstance(exc, NotFoundError):
        return NOT_FOUND_ERROR_CODE
    if isinstance(exc, ConfigurationError):
        return CONFIGURATION_ERROR_CODE
    return DOMAIN_ERROR_CODE


@dataclass
class ErrorResponse:
    """Uniform error payload for callers that don't want exceptions."""

    error_type: str
    message: str
    recoverable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "type": self.error_type,
                "message": self.message,
                "recoverable": self.recoverable,
                "details": self.details,
            }
        }


def error_response(exc: BaseException) -> ErrorResponse:
    """Convert any exception into an ErrorResponse."""
    if isinstance(exc, CognitiveLayerError):
        return ErrorResponse(
            error_type=exc.error_type,
            message=exc.message,
            recoverable=exc.recoverable,
            details=dict(exc.context),
        )
    return ErrorResponse(error_type="internal", message=f"{type(exc).__name__}: {exc}")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _error_signature(*, operation: str, exc: BaseException) -> str:
    material = f"{operation}|{type(exc).__name__}|{str(exc)}".encode("utf-8", errors="replace")
    return hashlib.sha256(material).hexdigest()


def record_error(
    *,
    source: str,
    operation: str,
    exc: BaseException,
    context: dict[str, Any] | None = None,
    dedupe_window_seconds: int = 60,
    include_traceback: bool = True,
) -> str | None:
    """Record an error as a local event.

    - Appends a metadata-only error summary to the JSONL event log.
    - Optionally deduplicates repeated identical errors for a short window.

    Returns the stored event id, or None when deduplicated or the write failed.
    """

    signature = _error_signature(operation=operation, exc=exc)
    now = _utcnow()

    if dedupe_window_seconds > 0:
        cutoff = now - timedelta(seconds=dedupe_window_seconds)
        with _SIGNATURES_LOCK:
            last_seen = _RECENT_SIGNATURES.get(signature)
            if last_seen is not None and last_seen >= cutoff:
                return None
            _RECENT_SIGNATURES[signature] = now
            stale = [k for k, v in _RECENT_SIGNATURES.items() if v < cutoff]
            for k in stale:
                del _RECENT_SIGNATURES[k]

    tb_text: str | None = None
    if include_traceback:
        tb_text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        # Keep the payload bounded.
        if len(tb_text) > 10_000:
            tb_text = tb_text[-10_000:]

    payload: dict[str, Any] = {
        "kind": "error",
        "signature": signature,
        "operation": operation,
        "error_type": type(exc).__name__,
        "message": str(exc),
        "context": context or {},
        "traceback": tb_text,
    }

    # Imported lazily: storage depends on settings, which imports this module.
    from .models import Event
    from .storage import append_event

    try:
        return append_event(
            Event(source=source, ts=now, payload_metadata=payload, note=f"{operation}: {type(exc).__name__}")
        )
    except (OSError, TypeError, ValueError) as write_exc:
        logger.warning("Failed to record error event: %s: %s", type(write_exc).__name__, write_exc)
        return None
