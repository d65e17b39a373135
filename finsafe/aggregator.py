"""
Explanation & Tip Aggregator

Reduces the engine's match records into one explanation string and a
short, deduplicated list of safety tips for display. Separated from
engine.py for single-responsibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from finsafe.engine import MatchRecord

MAX_TIPS = 6

NO_MATCH_EXPLANATION = (
    "No known scam patterns were found in this message. Scammers constantly "
    "change their wording, so stay alert."
)

GENERIC_SAFETY_TIPS: tuple[str, ...] = (
    "Verify the sender's identity through official channels",
    "Never share OTP, PIN, or password with anyone",
    "Contact the organization directly using contact info from their official website",
    "Look for spelling and grammar errors which are common in scams",
)


def _norm(text: str) -> str:
    return text.strip().lower()


def aggregate_explanation(matches: Sequence["MatchRecord"]) -> str:
    """Join record explanations in order, skipping blanks and repeats."""
    if not matches:
        return NO_MATCH_EXPLANATION

    seen: set[str] = set()
    parts: list[str] = []
    for m in matches:
        key = _norm(m.explanation)
        if not key or key in seen:
            continue
        seen.add(key)
        parts.append(m.explanation.strip())
    if not parts:
        # Only score-only records (category keywords) matched
        names = ", ".join(m.pattern for m in matches)
        return f"Message uses language common in scams ({names})."
    return " ".join(parts)


def aggregate_tips(matches: Sequence["MatchRecord"], limit: int = MAX_TIPS) -> list[str]:
    """Flatten record tips in order, case-insensitively unique, capped at limit."""
    if not matches:
        return list(GENERIC_SAFETY_TIPS)

    seen: set[str] = set()
    tips: list[str] = []
    for m in matches:
        for tip in m.safety_tips:
            key = _norm(tip)
            if not key or key in seen:
                continue
            seen.add(key)
            tips.append(tip.strip())
            if len(tips) >= limit:
                return tips
    return tips or list(GENERIC_SAFETY_TIPS[:limit])


def aggregate(matches: Sequence["MatchRecord"]) -> tuple[str, list[str]]:
    """Return (explanation, safety_tips) for a list of match records."""
    return aggregate_explanation(matches), aggregate_tips(matches)
