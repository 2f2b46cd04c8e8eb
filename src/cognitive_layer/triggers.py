"""Keyword trigger tables for the detected classification axes.

Each axis is an ordered tuple of KeywordSets; the first set with a hit wins.
`terms` match anywhere in the lower-cased text, `words` only on word
boundaries (used for short tokens like "ui" or "sh" that would otherwise
fire inside unrelated words).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from .models import Complexity, Domain, Mode

_V = TypeVar("_V", bound=Enum)


@dataclass(frozen=True)
class KeywordSet(Generic[_V]):
    """Trigger keywords that select one value of an axis."""
    value: _V
    terms: tuple[str, ...] = ()
    words: tuple[str, ...] = ()
    _word_re: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.words:
            alternatives = "|".join(re.escape(w) for w in sorted(self.words, key=len, reverse=True))
            pattern = re.compile(rf"(?<![a-z0-9])(?:{alternatives})(?![a-z0-9])")
            object.__setattr__(self, "_word_re", pattern)

    def match(self, lowered: str) -> str | None:
        """Return the first keyword found in already lower-cased text."""
        for term in self.terms:
            if term in lowered:
                return term
        if self._word_re is not None:
            m = self._word_re.search(lowered)
            if m:
                return m.group(0)
        return None


def first_match(sets: tuple[KeywordSet[_V], ...], lowered: str) -> tuple[_V, str] | None:
    """Scan sets in order; return (value, keyword) for the first hit."""
    for kw_set in sets:
        hit = kw_set.match(lowered)
        if hit is not None:
            return kw_set.value, hit
    return None


MODE_TRIGGERS: tuple[KeywordSet[Mode], ...] = (
    KeywordSet(
        Mode.THINK,
        terms=(
            "architecture", "architect", "design", "analyze", "analyse", "analysis",
            "strategy", "strategic",
            "trade-off", "tradeoff", "evaluate", "compare", "pros and cons",
            "best approach", "explain why", "root cause",
            "investigate", "brainstorm", "think through", "review the",
        ),
        words=("plan", "why", "should we", "should i"),
    ),
    KeywordSet(
        Mode.EXECUTE,
        terms=("implement", "fix", "create", "generate", "write", "update", "rename", "delete"),
        words=("add", "run", "do", "make", "build"),
    ),
)

DOMAIN_TRIGGERS: tuple[KeywordSet[Domain], ...] = (
    KeywordSet(
        Domain.ENTERPRISE,
        terms=(
            "abap", "bapi", "odata", "fiori", "s/4", "s4hana", "netweaver",
            "idoc", "smartform", "transport request", "enterprise",
        ),
        words=("sap", "rfc", "cds", "bw", "badi", "alv", "erp", "hana", "se80", "se38", "sm30"),
    ),
    KeywordSet(
        Domain.MOBILE,
        terms=(
            "android", "react native", "flutter", "swiftui", "kotlin", "xcode",
            "mobile", "app store", "play store",
        ),
        words=("ios", "swift", "apk", "ipa", "expo"),
    ),
    KeywordSet(
        Domain.SCRIPT,
        terms=("bash", "shell", "powershell", "zsh", "automation", "command line", "makefile", "ansible"),
        words=("script", "scripts", "scripting", "cron", "crontab", "sh", "cli", "awk", "sed", "ps1"),
    ),
    KeywordSet(
        Domain.WEB,
        terms=(
            "vue", "angular", "svelte", "next.js", "typescript", "javascript",
            "html", "css", "frontend", "front-end", "backend", "browser", "endpoint",
            "website",
        ),
        words=("react", "reactjs", "api", "rest", "ui", "dom", "http", "web"),
    ),
)

COMPLEXITY_TRIGGERS: tuple[KeywordSet[Complexity], ...] = (
    KeywordSet(
        Complexity.CRITICAL,
        terms=(
            "production", "outage", "incident", "hotfix", "data loss", "security",
            "vulnerab", "payment", "go-live", "go live", "rollback", "migration",
            "urgent", "emergency", "breach", "is down",
        ),
        words=("prod", "p1", "sev1"),
    ),
    KeywordSet(
        Complexity.COMPLEX,
        terms=(
            "architecture", "refactor", "integration", "performance", "concurren",
            "distributed", "multi-", "redesign", "scalab", "framework", "across the",
            "end-to-end", "end to end", "pipeline",
        ),
    ),
    KeywordSet(
        Complexity.SIMPLE,
        terms=("typo", "rename", "format", "small", "quick", "simple", "minor", "comment"),
    ),
)
