"""Layer derivation.

The layer is a pure function of the classified request and the caller's
situation. Precedence, first rule wins:

1. FALLBACK      critical risk, or low cognitive state
2. SPECIAL_CARE  critical complexity, or production risk on enterprise systems
3. STRATEGIC     complex work with high availability and high cognitive state
4. OPERATIONAL   everything else
"""

from __future__ import annotations

from .models import (
    AvailabilityTime,
    CognitiveState,
    Complexity,
    Domain,
    Layer,
    Mode,
    RiskLevel,
)


def derive_layer(
    mode: Mode,
    domain: Domain,
    complexity: Complexity,
    cognitive_state: CognitiveState,
    risk_level: RiskLevel,
    availability: AvailabilityTime,
) -> Layer:
    """Pick the operating layer for a classified request.

    Mode does not currently influence the outcome; it is accepted so the
    signature covers the full classification.
    """
    if risk_level is RiskLevel.CRITICAL or cognitive_state is CognitiveState.LOW:
        return Layer.FALLBACK

    if complexity is Complexity.CRITICAL:
        return Layer.SPECIAL_CARE
    if domain is Domain.ENTERPRISE and risk_level is RiskLevel.PRODUCTION:
        return Layer.SPECIAL_CARE

    if (
        complexity is Complexity.COMPLEX
        and availability is AvailabilityTime.HIGH
        and cognitive_state is CognitiveState.HIGH
    ):
        return Layer.STRATEGIC

    return Layer.OPERATIONAL
