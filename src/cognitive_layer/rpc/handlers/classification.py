"""Classification handlers.

Request classification, rule selection and error taxonomy.
"""

from __future__ import annotations

from typing import Any

from cognitive_layer.rpc.router import RpcContext, register
from cognitive_layer.taxonomy import classify_error


@register("classify", needs_context=True)
def handle_classify(
    ctx: RpcContext,
    *,
    text: str | None = None,
    overrides: dict[str, Any] | None = None,
    cognitive_state: str | None = None,
    risk_level: str | None = None,
    availability: str | None = None,
) -> dict[str, Any]:
    """Classify a request into mode, domain, complexity and layer."""
    result = ctx.classifier.classify(
        text,
        overrides=overrides,
        cognitive_state=cognitive_state,
        risk_level=risk_level,
        availability=availability,
    )
    return result.to_dict()


@register("rules/select", needs_context=True)
def handle_rules_select(
    ctx: RpcContext,
    *,
    text: str | None = None,
    overrides: dict[str, Any] | None = None,
    cognitive_state: str | None = None,
    risk_level: str | None = None,
    availability: str | None = None,
) -> dict[str, Any]:
    """Classify a request and return the guideline rules that apply."""
    result = ctx.classifier.classify(
        text,
        overrides=overrides,
        cognitive_state=cognitive_state,
        risk_level=risk_level,
        availability=availability,
    )
    return {
        "classification": result.to_dict(),
        "rules": [rule.to_dict() for rule in ctx.rulebook.select(result)],
    }


@register("rules/get", needs_context=True)
def handle_rules_get(ctx: RpcContext, *, rule_id: str) -> dict[str, Any]:
    return ctx.rulebook.get(rule_id).to_dict()


@register("errors/classify")
def handle_errors_classify(*, text: str | None = None) -> dict[str, Any]:
    """Classify error text into the error taxonomy."""
    return classify_error(text).to_dict()
