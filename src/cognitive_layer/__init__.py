"""Cognitive Layer - request classification and guideline rule selection.

Classifies an assistant's incoming request by execution mode, target
domain and complexity, derives the operating layer from risk and the
user's cognitive state, and selects the guideline rules that apply.

Usage:
    from cognitive_layer import classify, RuleBook

    result = classify("refactor the ABAP architecture", risk_level="production")
    rules = RuleBook().select(result)
"""

from .classifier import ContextClassifier, build_request, classify
from .errors import (
    CognitiveLayerError,
    ConfigurationError,
    ErrorResponse,
    InvalidInput,
    NotFoundError,
    ValidationError,
    error_response,
    get_error_code,
    record_error,
)
from .layers import derive_layer
from .models import (
    AvailabilityTime,
    ClassificationOverrides,
    ClassificationRequest,
    ClassificationResult,
    CognitiveState,
    Complexity,
    Domain,
    Layer,
    Mode,
    RiskLevel,
)
from .rules import BUILTIN_RULES, Rule, RuleBook, default_rulebook, load_rules
from .taxonomy import ErrorCategory, ErrorClassification, Severity, classify_error

__all__ = [
    # Classification
    "classify",
    "build_request",
    "ContextClassifier",
    "derive_layer",
    # Models
    "Mode",
    "Domain",
    "Complexity",
    "Layer",
    "CognitiveState",
    "RiskLevel",
    "AvailabilityTime",
    "ClassificationOverrides",
    "ClassificationRequest",
    "ClassificationResult",
    # Rules
    "Rule",
    "RuleBook",
    "BUILTIN_RULES",
    "default_rulebook",
    "load_rules",
    # Error taxonomy
    "ErrorCategory",
    "ErrorClassification",
    "Severity",
    "classify_error",
    # Errors
    "CognitiveLayerError",
    "ValidationError",
    "InvalidInput",
    "ConfigurationError",
    "NotFoundError",
    "ErrorResponse",
    "error_response",
    "get_error_code",
    "record_error",
]
