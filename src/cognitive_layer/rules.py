"""Guideline rule selection.

A Rule carries a piece of behavioural guidance plus the classification
values it applies to. Empty match sets are wildcards. RuleBook.select()
returns every rule matching a ClassificationResult, highest priority first.

Rules come from the built-in set below and, optionally, a JSON file:

    {"rules": [{"id": "team-naming", "title": "...", "guidance": "...",
                "priority": 60, "domains": ["enterprise"]}]}

A file rule whose id matches a built-in replaces it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError, NotFoundError
from .models import ClassificationResult, Complexity, Domain, Layer, Mode, _lower_enum_value
from .settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    id: str
    title: str
    guidance: str
    priority: int = 0
    modes: frozenset[Mode] = frozenset()
    domains: frozenset[Domain] = frozenset()
    complexities: frozenset[Complexity] = frozenset()
    layers: frozenset[Layer] = frozenset()

    def applies_to(self, result: ClassificationResult) -> bool:
        return (
            (not self.modes or result.mode in self.modes)
            and (not self.domains or result.domain in self.domains)
            and (not self.complexities or result.complexity in self.complexities)
            and (not self.layers or result.layer in self.layers)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "guidance": self.guidance,
            "priority": self.priority,
            "modes": sorted(m.value for m in self.modes),
            "domains": sorted(d.value for d in self.domains),
            "complexities": sorted(c.value for c in self.complexities),
            "layers": sorted(lyr.value for lyr in self.layers),
        }


class RuleSpec(BaseModel):
    """One rule as written in a rule file."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    guidance: str = Field(..., min_length=1)
    priority: int = 0
    modes: list[Mode] = Field(default_factory=list)
    domains: list[Domain] = Field(default_factory=list)
    complexities: list[Complexity] = Field(default_factory=list)
    layers: list[Layer] = Field(default_factory=list)

    @field_validator("modes", "domains", "complexities", "layers", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_lower_enum_value(item) for item in value]
        return value

    def to_rule(self) -> Rule:
        return Rule(
            id=self.id,
            title=self.title,
            guidance=self.guidance,
            priority=self.priority,
            modes=frozenset(self.modes),
            domains=frozenset(self.domains),
            complexities=frozenset(self.complexities),
            layers=frozenset(self.layers),
        )


class RuleFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rules: list[RuleSpec] = Field(default_factory=list)


BUILTIN_RULES: tuple[Rule, ...] = (
    Rule(
        id="fallback-minimal-change",
        title="Fallback: smallest safe change",
        guidance=(
            "Make the smallest change that resolves the request. Avoid refactors, "
            "confirm before anything irreversible, and state what was left out."
        ),
        priority=100,
        layers=frozenset({Layer.FALLBACK}),
    ),
    Rule(
        id="special-care-checklist",
        title="Special care checklist",
        guidance=(
            "List affected systems, back up or snapshot state first, describe the "
            "rollback path, and get explicit approval before executing."
        ),
        priority=90,
        layers=frozenset({Layer.SPECIAL_CARE}),
    ),
    Rule(
        id="strategic-plan-first",
        title="Strategic: plan before code",
        guidance=(
            "Outline options with trade-offs, agree on one, then split the work "
            "into reviewable steps."
        ),
        priority=70,
        layers=frozenset({Layer.STRATEGIC}),
    ),
    Rule(
        id="think-first",
        title="Analyze before acting",
        guidance="Restate the problem, surface assumptions and constraints, then recommend.",
        priority=60,
        modes=frozenset({Mode.THINK}),
    ),
    Rule(
        id="execute-directly",
        title="Execute directly",
        guidance="Act on the request without a preamble; report what changed.",
        priority=50,
        modes=frozenset({Mode.EXECUTE}),
        layers=frozenset({Layer.OPERATIONAL}),
    ),
    Rule(
        id="enterprise-naming",
        title="ABAP naming conventions",
        guidance=(
            "Keep custom objects in the customer namespace (Z* or Y*). Prefix "
            "locals lv_/ls_/lt_, importing parameters iv_/is_/it_, exporting "
            "ev_/es_/et_, and classes ZCL_. Never modify standard objects."
        ),
        priority=40,
        domains=frozenset({Domain.ENTERPRISE}),
    ),
    Rule(
        id="web-conventions",
        title="Web conventions",
        guidance=(
            "Use TypeScript with strict types, camelCase for values, PascalCase "
            "for components and types, and keep components free of data fetching."
        ),
        priority=40,
        domains=frozenset({Domain.WEB}),
    ),
    Rule(
        id="mobile-conventions",
        title="Mobile platform conventions",
        guidance="Follow platform guidelines for navigation and permissions; test on both platforms.",
        priority=40,
        domains=frozenset({Domain.MOBILE}),
    ),
    Rule(
        id="script-safety",
        title="Script safety",
        guidance=(
            "Start shell scripts with `set -euo pipefail`, quote every expansion, "
            "and support a dry-run flag for destructive steps."
        ),
        priority=40,
        domains=frozenset({Domain.SCRIPT}),
    ),
    Rule(
        id="documentation-template",
        title="Document complex changes",
        guidance=(
            "Record purpose, design, interfaces, risks and test plan for the change "
            "using the standard documentation template."
        ),
        priority=30,
        complexities=frozenset({Complexity.COMPLEX, Complexity.CRITICAL}),
    ),
)


class RuleBook:
    """An indexed collection of rules."""

    def __init__(self, rules: Iterable[Rule] = BUILTIN_RULES) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self._rules[rule.id] = rule

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    @property
    def rules(self) -> list[Rule]:
        return sorted(self._rules.values(), key=_sort_key)

    def get(self, rule_id: str) -> Rule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise NotFoundError(
                f"Unknown rule: {rule_id}", resource_type="rule", resource_id=rule_id
            ) from None

    def merged(self, rules: Iterable[Rule]) -> RuleBook:
        """Return a new book with `rules` added, replacing same-id rules."""
        book = RuleBook(self._rules.values())
        for rule in rules:
            if rule.id in book._rules:
                logger.debug("Rule %s replaced by loaded definition", rule.id)
            book._rules[rule.id] = rule
        return book

    def select(self, result: ClassificationResult) -> list[Rule]:
        """Rules applying to a classification, highest priority first."""
        return [rule for rule in self.rules if rule.applies_to(result)]


def _sort_key(rule: Rule) -> tuple[int, str]:
    return (-rule.priority, rule.id)


def load_rules(path: Path) -> list[Rule]:
    """Read and validate a JSON rule file.

    Raises:
        ConfigurationError: If the file is missing, not JSON, or fails validation.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read rule file {path}: {exc}", config_key="rules_path"
        ) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Rule file {path} is not valid JSON: {exc}", config_key="rules_path"
        ) from exc

    try:
        parsed = RuleFile.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            f"Rule file {path} failed validation: {exc.error_count()} error(s)",
            config_key="rules_path",
            context={"errors": [e.get("msg", "") for e in exc.errors()][:5]},
        ) from exc

    rules = [spec.to_rule() for spec in parsed.rules]
    logger.debug("Loaded %d rule(s) from %s", len(rules), path)
    return rules


def default_rulebook() -> RuleBook:
    """Built-in rules merged with the configured rule file, if any."""
    book = RuleBook()
    if settings.rules_path is not None:
        book = book.merged(load_rules(settings.rules_path))
    return book
