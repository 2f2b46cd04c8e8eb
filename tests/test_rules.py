"""Tests for guideline rule selection."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from cognitive_layer import (
    BUILTIN_RULES,
    ConfigurationError,
    NotFoundError,
    Rule,
    RuleBook,
    classify,
    load_rules,
)
from cognitive_layer.models import ClassificationResult, Complexity, Domain, Layer, Mode


def _result(**kwargs) -> ClassificationResult:
    defaults = dict(
        mode=Mode.EXECUTE,
        domain=Domain.WEB,
        complexity=Complexity.SIMPLE,
        layer=Layer.OPERATIONAL,
    )
    defaults.update(kwargs)
    return ClassificationResult(**defaults)


def _ids(rules: list[Rule]) -> list[str]:
    return [r.id for r in rules]


class TestRuleBookSelect:
    def test_simple_web_request(self) -> None:
        selected = _ids(RuleBook().select(_result()))
        assert selected == ["execute-directly", "web-conventions"]

    def test_fallback_comes_first(self) -> None:
        selected = _ids(RuleBook().select(_result(layer=Layer.FALLBACK, domain=Domain.SCRIPT)))
        assert selected[0] == "fallback-minimal-change"
        assert "script-safety" in selected
        # execute-directly is limited to the operational layer
        assert "execute-directly" not in selected

    def test_enterprise_special_care(self) -> None:
        result = classify("add a field to the ABAP report", risk_level="production")
        selected = _ids(RuleBook().select(result))
        assert selected == ["special-care-checklist", "enterprise-naming"]

    def test_strategic_think(self) -> None:
        result = classify("design the architecture of the checkout frontend")
        selected = _ids(RuleBook().select(result))
        assert selected == [
            "strategic-plan-first",
            "think-first",
            "web-conventions",
            "documentation-template",
        ]

    def test_order_is_priority_then_id(self) -> None:
        rules = [
            Rule(id="b", title="B", guidance="b", priority=1),
            Rule(id="a", title="A", guidance="a", priority=1),
            Rule(id="c", title="C", guidance="c", priority=5),
        ]
        assert _ids(RuleBook(rules).select(_result())) == ["c", "a", "b"]

    def test_wildcard_rule_always_applies(self) -> None:
        book = RuleBook([Rule(id="always", title="Always", guidance="x")])
        assert _ids(book.select(_result(mode=Mode.THINK, layer=Layer.FALLBACK))) == ["always"]


class TestRuleBookLookup:
    def test_get_known(self) -> None:
        assert RuleBook().get("script-safety").domains == frozenset({Domain.SCRIPT})

    def test_get_unknown(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            RuleBook().get("nope")
        assert exc_info.value.context == {"resource_type": "rule", "resource_id": "nope"}

    def test_builtins_loaded(self) -> None:
        book = RuleBook()
        assert len(book) == len(BUILTIN_RULES)
        assert "think-first" in book

    def test_merged_replaces_same_id(self) -> None:
        custom = Rule(id="web-conventions", title="Team web", guidance="Use our lint config.")
        book = RuleBook().merged([custom])
        assert book.get("web-conventions").guidance == "Use our lint config."
        assert len(book) == len(BUILTIN_RULES)
        # original untouched
        assert RuleBook().get("web-conventions").title == "Web conventions"

    def test_rule_to_dict(self) -> None:
        data = RuleBook().get("documentation-template").to_dict()
        assert data["complexities"] == ["complex", "critical"]
        assert data["modes"] == []


class TestLoadRules:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                {
                    "rules": [
                        {
                            "id": "transport-review",
                            "title": "Transport review",
                            "guidance": "Attach the transport request to the change ticket.",
                            "priority": 95,
                            "domains": ["enterprise"],
                            "layers": ["special_care"],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )

        rules = load_rules(path)
        assert len(rules) == 1
        assert rules[0].domains == frozenset({Domain.ENTERPRISE})

        book = RuleBook().merged(rules)
        result = classify("add a field to the ABAP report", risk_level="production")
        assert _ids(book.select(result))[0] == "transport-review"

    def test_enum_values_are_case_insensitive(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                {
                    "rules": [
                        {
                            "id": "loud",
                            "title": "Loud",
                            "guidance": "g",
                            "modes": ["Think"],
                            "domains": ["ENTERPRISE"],
                            "layers": [" Special_Care "],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        (rule,) = load_rules(path)
        assert rule.modes == frozenset({Mode.THINK})
        assert rule.domains == frozenset({Domain.ENTERPRISE})
        assert rule.layers == frozenset({Layer.SPECIAL_CARE})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_rules(tmp_path / "absent.json")
        assert exc_info.value.config_key == "rules_path"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_rules(path)

    def test_schema_violation(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps({"rules": [{"id": "x", "title": "X", "guidance": "g", "domains": ["desktop"]}]}),
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError) as exc_info:
            load_rules(path)
        assert exc_info.value.context["errors"]


def test_default_rulebook_uses_configured_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import cognitive_layer.rules as rules_mod

    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps({"rules": [{"id": "extra", "title": "Extra", "guidance": "g"}]}),
        encoding="utf-8",
    )
    monkeypatch.setattr(rules_mod, "settings", replace(rules_mod.settings, rules_path=path))

    book = rules_mod.default_rulebook()
    assert "extra" in book
    assert len(book) == len(BUILTIN_RULES) + 1
