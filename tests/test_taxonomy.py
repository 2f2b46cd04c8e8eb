"""Tests for the error taxonomy."""

from __future__ import annotations

import pytest

from cognitive_layer import ErrorCategory, InvalidInput, Layer, Severity, classify_error


@pytest.mark.parametrize(
    ("text", "category"),
    [
        ("ModuleNotFoundError: No module named 'requests'", ErrorCategory.DEPENDENCY),
        ("SyntaxError: invalid syntax", ErrorCategory.SYNTAX),
        ("TypeError: 'NoneType' object is not subscriptable", ErrorCategory.TYPE),
        ("requests.exceptions.ConnectTimeout: timed out", ErrorCategory.NETWORK),
        ("PermissionError: [Errno 13] Permission denied: '/etc/hosts'", ErrorCategory.PERMISSION),
        ("MemoryError: out of memory", ErrorCategory.PERFORMANCE),
        ("possible SQL injection in search parameter", ErrorCategory.SECURITY),
        ("rows were deleted before the backup finished", ErrorCategory.DATA_LOSS),
        ("DATABASE_URL environment variable is not set", ErrorCategory.CONFIGURATION),
        ("ABAP short dump in report ZSALES", ErrorCategory.RUNTIME),
        ("it just stopped", ErrorCategory.UNKNOWN),
    ],
)
def test_categories(text: str, category: ErrorCategory) -> None:
    assert classify_error(text).category is category


def test_exception_type_name_takes_part() -> None:
    result = classify_error(PermissionError("nope"))
    assert result.category is ErrorCategory.PERMISSION
    assert result.matched == "permissionerror"


def test_security_is_critical_and_falls_back() -> None:
    result = classify_error("API credential leaked in logs")
    assert result.severity is Severity.CRITICAL
    assert result.suggested_layer is Layer.FALLBACK
    assert result.retryable is False


def test_network_is_retryable() -> None:
    result = classify_error("connection refused by upstream")
    assert result.retryable is True
    assert result.suggested_layer is Layer.OPERATIONAL


def test_permission_needs_special_care() -> None:
    assert classify_error("403 Forbidden").suggested_layer is Layer.SPECIAL_CARE


def test_unknown_has_no_match() -> None:
    result = classify_error("it just stopped")
    assert result.matched is None
    assert result.severity is Severity.MEDIUM


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_rejected(text: str | None) -> None:
    with pytest.raises(InvalidInput):
        classify_error(text)


def test_to_dict() -> None:
    data = classify_error("SyntaxError: unexpected token").to_dict()
    assert data == {
        "category": "syntax",
        "severity": "low",
        "retryable": False,
        "suggested_layer": "operational",
        "matched": "syntaxerror",
    }
