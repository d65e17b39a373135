"""
Structural Detectors

Regex signals that do not depend on the keyword registry. Both run over
the original (not lower-cased) text and never raise: text without a
match simply yields an empty list.
"""

from __future__ import annotations

import re

# http:// or https:// followed by any run of non-whitespace
URL_PATTERN = re.compile(r"https?://[^\s]+")

# Indian mobile number: optional +91 (with optional - or space), then
# a leading 7/8/9 and nine more digits
PHONE_PATTERN = re.compile(r"(?:\+91[\-\s]?)?[789]\d{9}")


def extract_urls(text: str) -> list[str]:
    """Return every http(s) URL in text, in order of appearance."""
    if not text:
        return []
    return URL_PATTERN.findall(text)


def extract_phone_numbers(text: str) -> list[str]:
    """Return every Indian-format mobile number in text, prefix included."""
    if not text:
        return []
    return PHONE_PATTERN.findall(text)


# ============================================================
# CANONICAL RECORDS
# ============================================================

LINK_SIGNAL = {
    "key": "suspicious_link_detected",
    "name": "Suspicious Link Detected",
    "score": 40,
    "severity": "high",
    "explanation": (
        "Message contains clickable links. Scammers often use shortened or "
        "fake URLs to trick users into visiting malicious websites."
    ),
    "safety_tips": (
        "Never click on links in unsolicited messages",
        "Hover over links to see the actual URL before clicking",
        "Use URL scanners like VirusTotal to check suspicious links",
        "Type website addresses directly into your browser instead of clicking links",
    ),
}

PHONE_SIGNAL = {
    "key": "phone_number_request",
    "name": "Phone Number Request",
    "score": 25,
    "severity": "medium",
    "explanation": (
        "Message contains phone numbers. Scammers often ask you to call a "
        "number to share personal information or make payments."
    ),
    "safety_tips": (
        "Never call numbers provided in unsolicited messages",
        "Verify any contact information through official websites",
        "Use official customer service numbers from bank websites",
    ),
}
