from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar

from .errors import ConfigurationError
from .models import AvailabilityTime, CognitiveState, RiskLevel

_E = TypeVar("_E", bound=Enum)

_PREFIX = "COGNITIVE_LAYER_"


def _env(name: str) -> str | None:
    value = os.environ.get(_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_enum(name: str, enum_cls: type[_E], default: _E) -> _E:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return enum_cls(raw.lower())
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"{_PREFIX}{name}={raw!r} is not one of: {allowed}",
            config_key=_PREFIX + name,
        ) from exc


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment.

    Defaults for cognitive state, risk level and availability apply when a
    classify call leaves them unset.
    """

    data_dir: Path
    rules_path: Path | None
    default_cognitive_state: CognitiveState
    default_risk_level: RiskLevel
    default_availability: AvailabilityTime
    log_level: str

    @property
    def events_path(self) -> Path:
        return self.data_dir / "events.jsonl"

    @classmethod
    def from_env(cls) -> Settings:
        data_dir_raw = _env("DATA_DIR")
        rules_raw = _env("RULES_PATH")
        return cls(
            data_dir=Path(data_dir_raw).expanduser() if data_dir_raw else Path.home() / ".cognitive-layer",
            rules_path=Path(rules_raw).expanduser() if rules_raw else None,
            default_cognitive_state=_env_enum("COGNITIVE_STATE", CognitiveState, CognitiveState.HIGH),
            default_risk_level=_env_enum("RISK_LEVEL", RiskLevel, RiskLevel.ROUTINE),
            default_availability=_env_enum("AVAILABILITY", AvailabilityTime, AvailabilityTime.HIGH),
            log_level=(_env("LOG_LEVEL") or "WARNING").upper(),
        )


settings = Settings.from_env()
