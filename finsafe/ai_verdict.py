"""
AI Verdict — generative-model peer of the scoring engine.

Asks the LLM for a free-text analysis with "Explanation" and
"Safety Tips" sections, then extracts a verdict record with the same
shape as the engine's Assessment (verdict, verdictText, badgeClass,
explanation, safetyTips). The extraction is best-effort: the model's
wording decides the verdict, so this is never the only opinion shown.
"""

from __future__ import annotations

import re

from finsafe.llm import LLMProvider

ANALYSIS_PROMPT = """Analyze the following message for potential financial scams. Provide your analysis in EXACTLY this format:

Explanation
[Your explanation here. Explain why this message is or isn't a scam. Mention specific red flags or safe indicators. Keep it concise but informative.]

Safety Tips
[Provide 4-5 actionable safety tips. Each tip should be on a new line starting with "- ". Make them practical and specific for Indian students.]

The message to analyze: "{message}"

Important: Follow the format exactly as shown above with "Explanation" and "Safety Tips" headings."""

DEFAULT_AI_TIPS: tuple[str, ...] = (
    "Verify the sender's identity through official channels",
    "Look for spelling and grammar errors which are common in scams",
    "Check if the offer seems too good to be true (it probably is)",
    "Contact the organization directly using contact info from their official website",
    "Never share OTP, PIN, or password with anyone",
)

_RISK_WORDS = ("scam", "fraud", "suspicious", "dangerous", "malicious")
_CERTAINTY_WORDS = ("likely", "probably", "high risk")

_EXPLANATION_HEADING = re.compile(r"^explanation\s*\**\s*:?\s*\**\s*", re.IGNORECASE)
_HEADING_MARKUP = re.compile(r"^[#*\s]+")
# "- tip", "• tip", "* tip" or "1. tip"; "**Safety Tips**" is bold, not a bullet
_LIST_ITEM = re.compile(r"^(?:[-•]\s*|\*\s+|\d+\.\s*)")


def _verdict_from_explanation(explanation: str) -> dict:
    lowered = explanation.lower()
    if any(w in lowered for w in _RISK_WORDS):
        if any(w in lowered for w in _CERTAINTY_WORDS):
            return {
                "verdict": "Likely Scam",
                "badgeClass": "danger",
                "verdictText": "⚠️ DANGER! This message shows strong signs of being a financial scam",
            }
        return {
            "verdict": "Suspicious",
            "badgeClass": "warning",
            "verdictText": "⚠️ This message contains suspicious elements - proceed with caution",
        }
    return {
        "verdict": "Possibly Safe",
        "badgeClass": "safe",
        "verdictText": "This message appears to be safe",
    }


def parse_ai_response(text: str) -> dict:
    """
    Extract explanation, safety tips and a verdict from model output.

    Headings are matched case-insensitively at the start of a line. Tips
    are bullet ("-", "•", "*") or numbered ("1.") lines inside the
    "Safety Tips" section. Missing tips fall back to DEFAULT_AI_TIPS.
    """
    explanation_parts: list[str] = []
    tips: list[str] = []
    section = None

    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped:
            continue

        item = _LIST_ITEM.match(stripped)
        if not item:
            # "## Explanation" and "**Safety Tips**" count as headings too
            heading = _HEADING_MARKUP.sub("", stripped)
            lowered = heading.lower()
            if lowered.startswith("explanation"):
                section = "explanation"
                remainder = _EXPLANATION_HEADING.sub("", heading)
                if remainder:
                    explanation_parts.append(remainder)
                continue
            if lowered.startswith("safety tips"):
                section = "tips"
                continue

        if section == "explanation":
            explanation_parts.append(stripped)
        elif section == "tips" and item:
            tips.append(stripped[item.end():].strip())

    explanation = " ".join(explanation_parts).strip()
    if not tips:
        tips = list(DEFAULT_AI_TIPS)

    return {
        **_verdict_from_explanation(explanation),
        "explanation": explanation,
        "safetyTips": tips,
    }


async def ai_verdict(message: str, llm: LLMProvider, temperature: float = 0.4) -> dict:
    """Ask the LLM to analyse message and parse its answer. Provider errors propagate."""
    reply = await llm.generate(
        ANALYSIS_PROMPT.format(message=message),
        temperature=temperature,
    )
    return parse_ai_response(reply)
