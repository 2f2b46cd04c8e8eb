"""Context classification for incoming requests.

Maps free-text requests onto mode, domain and complexity with ordered
keyword tables, then derives the operating layer. Callers may pin any
axis (layer included) through overrides; pinned axes skip detection.

Classification is deterministic and side-effect free apart from debug
logging, so a single classifier can be shared between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from .errors import InvalidInput, ValidationError
from .layers import derive_layer
from .models import (
    AvailabilityTime,
    ClassificationOverrides,
    ClassificationRequest,
    ClassificationResult,
    CognitiveState,
    Complexity,
    Domain,
    Mode,
    RiskLevel,
)
from .settings import settings
from .triggers import (
    COMPLEXITY_TRIGGERS,
    DOMAIN_TRIGGERS,
    MODE_TRIGGERS,
    KeywordSet,
    first_match,
)

logger = logging.getLogger(__name__)

DEFAULT_MODE = Mode.EXECUTE
DEFAULT_DOMAIN = Domain.WEB
DEFAULT_COMPLEXITY = Complexity.SIMPLE

OverridesLike = ClassificationOverrides | Mapping[str, Any] | None


class ContextClassifier:
    """Classify requests with keyword tables.

    The tables default to the module constants in `triggers`; pass
    replacements to tune detection without touching layer rules.
    """

    def __init__(
        self,
        mode_triggers: tuple[KeywordSet[Mode], ...] = MODE_TRIGGERS,
        domain_triggers: tuple[KeywordSet[Domain], ...] = DOMAIN_TRIGGERS,
        complexity_triggers: tuple[KeywordSet[Complexity], ...] = COMPLEXITY_TRIGGERS,
    ) -> None:
        self.mode_triggers = mode_triggers
        self.domain_triggers = domain_triggers
        self.complexity_triggers = complexity_triggers

    def classify(
        self,
        text: str | None,
        overrides: OverridesLike = None,
        cognitive_state: CognitiveState | str | None = None,
        risk_level: RiskLevel | str | None = None,
        availability: AvailabilityTime | str | None = None,
    ) -> ClassificationResult:
        """Classify a request.

        Args:
            text: Request text. Must contain something besides whitespace.
            overrides: Partial result; any field set wins over detection.
            cognitive_state: Caller's cognitive state (defaults from settings).
            risk_level: Risk of the target environment (defaults from settings).
            availability: Time available for the task (defaults from settings).

        Returns:
            ClassificationResult with the four axes and match details.

        Raises:
            InvalidInput: If text is None or blank.
            ValidationError: If an override or state value is not recognised.
        """
        request = build_request(
            text,
            overrides=overrides,
            cognitive_state=cognitive_state,
            risk_level=risk_level,
            availability=availability,
        )
        return self.classify_request(request)

    def classify_request(self, request: ClassificationRequest) -> ClassificationResult:
        if not request.text or not request.text.strip():
            raise InvalidInput("Request text must not be empty", field="text", constraint="non_empty")

        lowered = request.text.lower()
        pinned = request.overrides.present()
        matched: dict[str, str] = {}

        mode = pinned.get("mode") or self._detect("mode", self.mode_triggers, lowered, DEFAULT_MODE, matched)
        domain = pinned.get("domain") or self._detect(
            "domain", self.domain_triggers, lowered, DEFAULT_DOMAIN, matched
        )
        complexity = pinned.get("complexity") or self._detect(
            "complexity", self.complexity_triggers, lowered, DEFAULT_COMPLEXITY, matched
        )

        cognitive_state = request.cognitive_state or settings.default_cognitive_state
        risk_level = request.risk_level or settings.default_risk_level
        availability = request.availability or settings.default_availability

        layer = pinned.get("layer") or derive_layer(
            mode, domain, complexity, cognitive_state, risk_level, availability
        )

        result = ClassificationResult(
            mode=mode,
            domain=domain,
            complexity=complexity,
            layer=layer,
            matched=matched,
            overridden=frozenset(pinned),
        )
        logger.debug(
            "Classified request: mode=%s domain=%s complexity=%s layer=%s matched=%s overridden=%s",
            mode.value,
            domain.value,
            complexity.value,
            layer.value,
            matched,
            sorted(pinned),
        )
        return result

    @staticmethod
    def _detect(axis, sets, lowered, default, matched):
        hit = first_match(sets, lowered)
        if hit is None:
            return default
        value, keyword = hit
        matched[axis] = keyword
        return value


def build_request(
    text: str | None,
    *,
    overrides: OverridesLike = None,
    cognitive_state: CognitiveState | str | None = None,
    risk_level: RiskLevel | str | None = None,
    availability: AvailabilityTime | str | None = None,
) -> ClassificationRequest:
    """Validate raw inputs into a ClassificationRequest."""
    if text is None or not isinstance(text, str) or not text.strip():
        raise InvalidInput("Request text must not be empty", field="text", constraint="non_empty")

    try:
        if overrides is None:
            parsed_overrides = ClassificationOverrides()
        elif isinstance(overrides, ClassificationOverrides):
            parsed_overrides = overrides
        elif not isinstance(overrides, Mapping):
            raise ValidationError(
                "Overrides must be an object",
                field="overrides",
                constraint="mapping",
                value=type(overrides).__name__,
            )
        else:
            parsed_overrides = ClassificationOverrides.model_validate(dict(overrides))

        return ClassificationRequest(
            text=text,
            overrides=parsed_overrides,
            cognitive_state=cognitive_state,
            risk_level=risk_level,
            availability=availability,
        )
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field_name = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ValidationError(
            f"Invalid classification input: {first.get('msg', 'invalid value')}",
            field=field_name,
            constraint=first.get("type"),
        ) from exc


_default_classifier = ContextClassifier()


def classify(
    text: str | None,
    overrides: OverridesLike = None,
    cognitive_state: CognitiveState | str | None = None,
    risk_level: RiskLevel | str | None = None,
    availability: AvailabilityTime | str | None = None,
) -> ClassificationResult:
    """Classify a request with the built-in trigger tables."""
    return _default_classifier.classify(
        text,
        overrides=overrides,
        cognitive_state=cognitive_state,
        risk_level=risk_level,
        availability=availability,
    )
