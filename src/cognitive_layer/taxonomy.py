"""Error taxonomy.

Sorts error text (or an exception) into a category with a severity, so an
assistant can decide whether to retry, fall back, or take special care.
Categories are checked in order; the first with a matching pattern wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidInput
from .models import Layer

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    SECURITY = "security"
    DATA_LOSS = "data_loss"
    CONFIGURATION = "configuration"
    DEPENDENCY = "dependency"
    NETWORK = "network"
    PERMISSION = "permission"
    SYNTAX = "syntax"
    TYPE = "type"
    PERFORMANCE = "performance"
    RUNTIME = "runtime"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ErrorClassification:
    category: ErrorCategory
    severity: Severity
    retryable: bool
    suggested_layer: Layer
    matched: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "suggested_layer": self.suggested_layer.value,
            "matched": self.matched,
        }


# Ordered: earlier categories win when several patterns appear.
ERROR_PATTERNS: dict[ErrorCategory, tuple[str, ...]] = {
    ErrorCategory.SECURITY: (
        "injection", "xss", "csrf", "credential", "leaked", "exposed secret",
        "certificate verify failed", "unauthorized access",
    ),
    ErrorCategory.DATA_LOSS: (
        "data loss", "corrupt", "truncated", "deleted", "dropped table",
        "lost update", "inconsistent state",
    ),
    ErrorCategory.CONFIGURATION: (
        "config", "environment variable", "not configured", "missing setting",
        "invalid option", ".env", "customizing",
    ),
    ErrorCategory.DEPENDENCY: (
        "modulenotfounderror", "no module named", "importerror", "cannot find module",
        "package not found", "version conflict", "unresolved dependency",
    ),
    ErrorCategory.NETWORK: (
        "timeout", "timed out", "connection refused", "connection reset",
        "econnrefused", "dns", "503", "502", "unreachable", "rfc_communication_failure",
    ),
    ErrorCategory.PERMISSION: (
        "permission denied", "permissionerror", "forbidden", "403", "not authorized",
        "access denied", "eacces", "authority check",
    ),
    ErrorCategory.SYNTAX: (
        "syntaxerror", "syntax error", "unexpected token", "parse error",
        "indentationerror", "unterminated",
    ),
    ErrorCategory.TYPE: (
        "typeerror", "type error", "is not assignable", "attributeerror",
        "undefined is not", "cannot read propert", "null pointer", "nonetype",
        "cx_sy_conversion",
    ),
    ErrorCategory.PERFORMANCE: (
        "out of memory", "memoryerror", "too slow", "time_out", "time limit exceeded",
        "rate limit", "429", "deadlock",
    ),
    ErrorCategory.RUNTIME: (
        "exception", "error", "traceback", "failed", "crash", "short dump", "panic",
    ),
}

_SEVERITY: dict[ErrorCategory, Severity] = {
    ErrorCategory.SECURITY: Severity.CRITICAL,
    ErrorCategory.DATA_LOSS: Severity.CRITICAL,
    ErrorCategory.CONFIGURATION: Severity.MEDIUM,
    ErrorCategory.DEPENDENCY: Severity.MEDIUM,
    ErrorCategory.NETWORK: Severity.MEDIUM,
    ErrorCategory.PERMISSION: Severity.HIGH,
    ErrorCategory.SYNTAX: Severity.LOW,
    ErrorCategory.TYPE: Severity.LOW,
    ErrorCategory.PERFORMANCE: Severity.HIGH,
    ErrorCategory.RUNTIME: Severity.MEDIUM,
    ErrorCategory.UNKNOWN: Severity.MEDIUM,
}

_RETRYABLE = {ErrorCategory.NETWORK, ErrorCategory.PERFORMANCE}


def _layer_for(severity: Severity) -> Layer:
    if severity is Severity.CRITICAL:
        return Layer.FALLBACK
    if severity is Severity.HIGH:
        return Layer.SPECIAL_CARE
    return Layer.OPERATIONAL


def classify_error(error: str | BaseException | None) -> ErrorClassification:
    """Classify error text or an exception.

    Exceptions are described as "<TypeName>: <message>" so the type name
    takes part in matching.

    Raises:
        InvalidInput: If there is no text to classify, or it is not a string.
    """
    if isinstance(error, BaseException):
        text = f"{type(error).__name__}: {error}"
    elif error is None or isinstance(error, str):
        text = error or ""
    else:
        raise InvalidInput(
            "Error text must be a string",
            field="text",
            constraint="string",
            value=type(error).__name__,
        )
    if not text.strip():
        raise InvalidInput("Error text must not be empty", field="text", constraint="non_empty")

    lowered = text.lower()
    category = ErrorCategory.UNKNOWN
    matched: str | None = None
    for candidate, patterns in ERROR_PATTERNS.items():
        hit = next((p for p in patterns if p in lowered), None)
        if hit is not None:
            category, matched = candidate, hit
            break

    severity = _SEVERITY[category]
    logger.debug("Error classified as %s (%s) via %r", category.value, severity.value, matched)
    return ErrorClassification(
        category=category,
        severity=severity,
        retryable=category in _RETRYABLE,
        suggested_layer=_layer_for(severity),
        matched=matched,
    )
