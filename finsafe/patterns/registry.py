"""
Pattern Registry — the engine's only configuration.

Three declarative tables drive detection:
  1. Patterns:        named scam archetypes with keywords, explanation, tips
  2. Category groups: bare keyword lists that add to the score only
  3. Special phrases: high-signal phrases bound to a pattern key

The registry is append-only. Patterns can be added at startup (from code
or a JSON file) but never replaced or removed, so a key always means the
same thing for the lifetime of the process.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

SEVERITIES = ("low", "medium", "high")


def _check_keywords(owner: str, keywords: Iterable[str]) -> tuple[str, ...]:
    """Return keywords as a tuple, rejecting blank or space-padded entries."""
    keywords = tuple(keywords)
    for keyword in keywords:
        # "" matches every text; a leading space makes the partial first word ""
        if not keyword.strip() or keyword != keyword.strip():
            raise ValueError(f"{owner} has invalid keyword {keyword!r}")
    return keywords


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Pattern:
    """A named scam archetype."""
    key: str                        # e.g. "fake_loan_offer"
    name: str                       # e.g. "Fake Loan Offer"
    keywords: tuple[str, ...]       # single words or multi-word phrases
    explanation: str
    safety_tips: tuple[str, ...] = ()
    severity: str = "medium"        # "low" | "medium" | "high"

    def __post_init__(self):
        if not self.key:
            raise ValueError("Pattern key must not be empty")
        if self.severity not in SEVERITIES:
            raise ValueError(
                f"Pattern {self.key!r} has invalid severity {self.severity!r}"
            )
        # Accept lists from JSON / callers, store tuples
        object.__setattr__(self, "keywords",
                           _check_keywords(f"Pattern {self.key!r}", self.keywords))
        object.__setattr__(self, "safety_tips", tuple(self.safety_tips))

    @classmethod
    def from_dict(cls, data: dict) -> "Pattern":
        return cls(
            key=data["key"],
            name=data.get("name") or data["key"].replace("_", " ").title(),
            keywords=data.get("keywords", ()),
            explanation=data.get("explanation", ""),
            safety_tips=data.get("safety_tips", data.get("safetyTips", ())),
            severity=data.get("severity", "medium"),
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "keywords": list(self.keywords),
            "explanation": self.explanation,
            "safety_tips": list(self.safety_tips),
            "severity": self.severity,
        }


@dataclass(frozen=True)
class CategoryGroup:
    """Secondary keywords that raise the score without their own explanation."""
    label: str                      # merge key, e.g. "urgency"
    name: str                       # display name, e.g. "Urgency Language"
    keywords: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "keywords",
                           _check_keywords(f"Category {self.label!r}", self.keywords))


@dataclass(frozen=True)
class SpecialPhrase:
    """A known high-signal phrase with a fixed score contribution."""
    phrase: str
    score: int
    pattern: str                    # pattern key the score is attributed to
    name: str = ""                  # display name when the key is not registered

    def __post_init__(self):
        _check_keywords(f"Phrase for {self.pattern!r}", (self.phrase,))


# ============================================================
# REGISTRY
# ============================================================

class Registry:
    """
    Ordered, append-only mapping of pattern key -> Pattern.

    Iteration order is registration order; the scorer relies on it to
    produce match records in a stable order.
    """

    def __init__(self, patterns: Iterable[Pattern] = ()):
        self._patterns: dict[str, Pattern] = {}
        for pattern in patterns:
            self.register(pattern)

    def register(self, pattern: Pattern) -> Pattern:
        if pattern.key in self._patterns:
            raise ValueError(f"Pattern already registered: {pattern.key!r}")
        self._patterns[pattern.key] = pattern
        return pattern

    def extend(self, patterns: Iterable[Pattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def get(self, key: str) -> Optional[Pattern]:
        return self._patterns.get(key)

    def keys(self) -> list[str]:
        return list(self._patterns)

    def __contains__(self, key: object) -> bool:
        return key in self._patterns

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns.values())

    def __len__(self) -> int:
        return len(self._patterns)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "Registry":
        """Build a registry from a JSON file holding a list of pattern objects."""
        return cls(read_patterns_file(path))


def read_patterns_file(path: Union[str, Path]) -> list[Pattern]:
    """
    Read pattern definitions from JSON.

    Accepts either a list of pattern objects or {"patterns": [...]}.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("patterns", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of patterns")
    return [Pattern.from_dict(item) for item in raw]


def load_extra_patterns(registry: Registry, path: Union[str, Path]) -> int:
    """Register every pattern from a JSON file. Returns how many were added."""
    patterns = read_patterns_file(path)
    registry.extend(patterns)
    return len(patterns)
