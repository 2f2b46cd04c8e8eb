"""Data models for request classification.

Every request is classified along three detected axes and one derived one:
- Mode: execute | think
- Domain: web | mobile | script | enterprise
- Complexity: simple | complex | critical
- Layer: operational | strategic | fallback | special_care (derived)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Mode(str, Enum):
    """Execution posture."""
    EXECUTE = "execute"  # Act directly
    THINK = "think"      # Analyze before acting


class Domain(str, Enum):
    """Target technology context."""
    WEB = "web"
    MOBILE = "mobile"
    SCRIPT = "script"
    ENTERPRISE = "enterprise"  # SAP/ABAP and similar ERP stacks


class Complexity(str, Enum):
    SIMPLE = "simple"
    COMPLEX = "complex"
    CRITICAL = "critical"


class Layer(str, Enum):
    """Operating posture derived from risk and cognitive state."""
    OPERATIONAL = "operational"
    STRATEGIC = "strategic"
    FALLBACK = "fallback"
    SPECIAL_CARE = "special_care"


class CognitiveState(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(str, Enum):
    ROUTINE = "routine"
    PRODUCTION = "production"
    CRITICAL = "critical"


class AvailabilityTime(str, Enum):
    """How much time the user has for the task."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _lower_enum_value(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, Enum):
        return value.strip().lower()
    return value


class ClassificationOverrides(BaseModel):
    """Partial result supplied by the caller; present fields skip detection."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Mode | None = None
    domain: Domain | None = None
    complexity: Complexity | None = None
    layer: Layer | None = None

    @field_validator("mode", "domain", "complexity", "layer", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        return _lower_enum_value(value)

    def present(self) -> dict[str, Enum]:
        """Fields the caller actually set."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class ClassificationRequest(BaseModel):
    """One classify call's inputs. Text is validated by the classifier."""

    model_config = ConfigDict(frozen=True)

    text: str
    overrides: ClassificationOverrides = Field(default_factory=ClassificationOverrides)
    cognitive_state: CognitiveState | None = None
    risk_level: RiskLevel | None = None
    availability: AvailabilityTime | None = None

    @field_validator("cognitive_state", "risk_level", "availability", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        return _lower_enum_value(value)


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying a request."""
    mode: Mode
    domain: Domain
    complexity: Complexity
    layer: Layer
    # Axis name -> keyword that fired; read-only, left out of the hash
    matched: Mapping[str, str] = field(default_factory=dict, hash=False)
    # Axes taken from caller overrides
    overridden: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "matched", MappingProxyType(dict(self.matched)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "domain": self.domain.value,
            "complexity": self.complexity.value,
            "layer": self.layer.value,
            "matched": dict(self.matched),
            "overridden": sorted(self.overridden),
        }


class Event(BaseModel):
    source: str = Field(..., description="Event origin (e.g., classifier, rpc)")
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC))
    payload_metadata: dict[str, Any] | None = Field(
        default=None, description="Metadata only; no request bodies."
    )
    note: str | None = Field(default=None, description="Optional human-readable note.")
