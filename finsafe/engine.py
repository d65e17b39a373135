"""
Scam Signal Engine — deterministic risk scoring.

Turns a short message into an Assessment:
  1. Registry patterns   (+15 exact keyword, +8 partial multi-word keyword)
  2. Category keywords   (+8 each, attributed to the category's own record)
  3. Special phrases     (fixed score, merged into the named pattern's record)
  4. Structural signals  (+40 for links, +25 for Indian mobile numbers)
  5. Classification      (total score -> one of five verdict tiers)

The engine holds no mutable state. The tables it reads are frozen at
construction, so one instance is shared by every request. Nothing is
printed: pass a ``trace`` callable to observe individual matches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from finsafe.aggregator import aggregate
from finsafe.detectors import (
    LINK_SIGNAL,
    PHONE_SIGNAL,
    extract_phone_numbers,
    extract_urls,
)
from finsafe.patterns import (
    CATEGORY_KEYWORDS,
    SPECIAL_PHRASES,
    CategoryGroup,
    Registry,
    SpecialPhrase,
    default_registry,
)

# --- Engine Version (stamped on every check result) ---
ENGINE_VERSION = "1.0.0"

EXACT_KEYWORD_SCORE = 15
PARTIAL_KEYWORD_SCORE = 8
CATEGORY_KEYWORD_SCORE = 8

GENERIC_PHRASE_TIP = "Be extremely cautious with messages containing this phrase"

Tracer = Callable[[str, dict], None]


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class MatchRecord:
    """Everything one pattern, category or signal contributed to a check."""
    key: str                  # merge key: pattern key, category label or signal key
    pattern: str              # display name
    score: int
    keywords: list[str]
    explanation: str
    safety_tips: list[str]
    severity: str             # "low" | "medium" | "high"
    source: str               # "pattern" | "category" | "phrase" | "structural"

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "score": self.score,
            "keywords": list(self.keywords),
            "explanation": self.explanation,
            "safetyTips": list(self.safety_tips),
            "severity": self.severity,
        }


@dataclass(frozen=True)
class Verdict:
    verdict: str
    verdict_text: str
    badge_class: str


@dataclass
class Assessment:
    """Result of one engine analysis."""
    verdict: str
    verdict_text: str
    badge_class: str
    total_score: int
    matches: list[MatchRecord]
    detected_patterns: list[str]
    explanation: str
    safety_tips: list[str]
    engine_version: str = ENGINE_VERSION

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict,
            "verdictText": self.verdict_text,
            "badgeClass": self.badge_class,
            "totalScore": self.total_score,
            "matches": [m.to_dict() for m in self.matches],
            "detectedPatterns": list(self.detected_patterns),
            "explanation": self.explanation,
            "safetyTips": list(self.safety_tips),
        }


# ============================================================
# CLASSIFIER
# ============================================================

# Inclusive lower bounds, highest first. First match wins.
VERDICT_TIERS: tuple[tuple[int, Verdict], ...] = (
    (40, Verdict(
        "HIGH RISK SCAM",
        "⚠️ DANGER! This message shows multiple signs of being a dangerous financial scam",
        "danger",
    )),
    (25, Verdict(
        "SUSPICIOUS",
        "⚠️ This message contains several warning signs of potential fraud",
        "warning",
    )),
    (15, Verdict(
        "CAUTION ADVISED",
        "⚠️ This message shows some scam indicators - proceed with caution",
        "caution",
    )),
    (5, Verdict(
        "LOW RISK",
        "This message has minor risk indicators",
        "safe",
    )),
)

SAFE_VERDICT = Verdict(
    "POSSIBLY SAFE",
    "No obvious scam patterns detected, but remain vigilant",
    "safe",
)


def classify(total_score: int) -> Verdict:
    """Map a total score to its verdict tier. Defined for every integer."""
    for threshold, verdict in VERDICT_TIERS:
        if total_score >= threshold:
            return verdict
    return SAFE_VERDICT


# ============================================================
# THE ENGINE
# ============================================================

class ScamEngine:
    """
    Rule-based scam scorer. Deterministic, offline, zero API cost.

    Args:
        registry: Pattern registry. Defaults to the built-in patterns.
        categories: Category keyword groups.
        phrases: Special-phrase rules.
        trace: Optional hook called as trace(event, data) for every
            contributing signal. Defaults to no output at all.
    """

    def __init__(
        self,
        registry: Optional[Registry] = None,
        categories: Iterable[CategoryGroup] = CATEGORY_KEYWORDS,
        phrases: Iterable[SpecialPhrase] = SPECIAL_PHRASES,
        trace: Optional[Tracer] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.categories = tuple(categories)
        self.phrases = tuple(phrases)
        self._trace = trace

    def _emit(self, event: str, **data) -> None:
        if self._trace is not None:
            self._trace(event, data)

    def score(self, text: str) -> tuple[list[MatchRecord], int]:
        """
        Run every rule over text.

        Returns:
            (matches, total_score) with at most one record per merge key,
            in the order the records were first created.
        """
        lowered = text.lower()
        records: dict[str, MatchRecord] = {}

        # --- Phase 1: Registry patterns ---
        for pattern in self.registry:
            pattern_score = 0
            matched: list[str] = []
            for keyword in pattern.keywords:
                keyword_lower = keyword.lower()
                if keyword_lower in lowered:
                    pattern_score += EXACT_KEYWORD_SCORE
                    matched.append(keyword)
                    self._emit("keyword_match", pattern=pattern.key, keyword=keyword,
                               score=EXACT_KEYWORD_SCORE)
                elif " " in keyword_lower and keyword_lower.split(" ")[0] in lowered:
                    # First word alone: truncated or reworded trigger phrase
                    pattern_score += PARTIAL_KEYWORD_SCORE
                    matched.append(f"{keyword} (partial)")
                    self._emit("partial_match", pattern=pattern.key, keyword=keyword,
                               score=PARTIAL_KEYWORD_SCORE)

            if matched:
                self._merge(records, MatchRecord(
                    key=pattern.key,
                    pattern=pattern.name,
                    score=pattern_score,
                    keywords=matched,
                    explanation=pattern.explanation,
                    safety_tips=list(pattern.safety_tips),
                    severity=pattern.severity,
                    source="pattern",
                ))

        # --- Phase 2: Category keywords ---
        for group in self.categories:
            group_score = 0
            matched = []
            for word in group.keywords:
                if word.lower() in lowered:
                    group_score += CATEGORY_KEYWORD_SCORE
                    matched.append(f"{word} ({group.label})")
                    self._emit("category_match", pattern=group.label, keyword=word,
                               score=CATEGORY_KEYWORD_SCORE)
            if matched:
                self._merge(records, MatchRecord(
                    key=group.label,
                    pattern=group.name,
                    score=group_score,
                    keywords=matched,
                    explanation="",
                    safety_tips=[],
                    severity="low",
                    source="category",
                ))

        # --- Phase 3: Special phrases ---
        for rule in self.phrases:
            if rule.phrase.lower() not in lowered:
                continue
            self._emit("phrase_match", pattern=rule.pattern, keyword=rule.phrase,
                       score=rule.score)
            registered = self.registry.get(rule.pattern)
            self._merge(records, MatchRecord(
                key=rule.pattern,
                pattern=registered.name if registered else (rule.name or rule.pattern),
                score=rule.score,
                keywords=[rule.phrase],
                explanation=f'Detected common scam phrase: "{rule.phrase}"',
                safety_tips=[GENERIC_PHRASE_TIP],
                severity="high",
                source="phrase",
            ))

        # --- Phase 4: Structural signals (original text) ---
        for signal, found in (
            (LINK_SIGNAL, extract_urls(text)),
            (PHONE_SIGNAL, extract_phone_numbers(text)),
        ):
            if not found:
                continue
            self._emit("structural_match", pattern=signal["key"], keyword=", ".join(found),
                       score=signal["score"])
            self._merge(records, MatchRecord(
                key=signal["key"],
                pattern=signal["name"],
                score=signal["score"],
                keywords=list(found),
                explanation=signal["explanation"],
                safety_tips=list(signal["safety_tips"]),
                severity=signal["severity"],
                source="structural",
            ))

        matches = list(records.values())
        total_score = sum(m.score for m in matches)
        self._emit("scored", total_score=total_score, matches_count=len(matches))
        return matches, total_score

    @staticmethod
    def _merge(records: dict[str, MatchRecord], incoming: MatchRecord) -> None:
        """Add incoming into the record sharing its key, or store it as new."""
        existing = records.get(incoming.key)
        if existing is None:
            records[incoming.key] = incoming
            return
        existing.score += incoming.score
        existing.keywords.extend(incoming.keywords)

    def analyze(self, text: str) -> Assessment:
        """Score, classify and summarise text."""
        matches, total_score = self.score(text)
        verdict = classify(total_score)
        explanation, tips = aggregate(matches)

        detected: list[str] = []
        for m in matches:
            if m.source != "category" and m.pattern not in detected:
                detected.append(m.pattern)

        return Assessment(
            verdict=verdict.verdict,
            verdict_text=verdict.verdict_text,
            badge_class=verdict.badge_class,
            total_score=total_score,
            matches=matches,
            detected_patterns=detected,
            explanation=explanation,
            safety_tips=tips,
        )

    def get_patterns(self) -> dict:
        """Expose the detection tables (used by GET /patterns)."""
        return {
            "patterns": [p.to_dict() for p in self.registry],
            "categories": [
                {"label": g.label, "name": g.name, "keywords": list(g.keywords)}
                for g in self.categories
            ],
            "phrases": [
                {"phrase": r.phrase, "score": r.score, "pattern": r.pattern}
                for r in self.phrases
            ],
        }


# ============================================================
# PROCESS-WIDE INSTANCE
# ============================================================

def build_engine(
    extra_patterns_path: str = "",
    trace_matches: bool = False,
) -> ScamEngine:
    """Build an engine from the built-in tables plus an optional JSON file."""
    from finsafe.patterns import load_extra_patterns

    registry = default_registry()
    if extra_patterns_path:
        load_extra_patterns(registry, extra_patterns_path)

    trace = None
    if trace_matches:
        from finsafe.logging import log_tracer
        trace = log_tracer()

    return ScamEngine(registry=registry, trace=trace)


def _default_engine() -> ScamEngine:
    from finsafe.config import settings
    return build_engine(settings.EXTRA_PATTERNS_PATH, settings.TRACE_MATCHES)


scam_engine = _default_engine()


def analyze(text: str) -> Assessment:
    """Analyze text with the process-wide engine."""
    return scam_engine.analyze(text)
