"""
API Schemas — Request and Response Models

Pydantic models for the FinSafe API. JSON field names are camelCase
(verdictText, safetyTips...) to match what the web client reads; Python
attribute names stay snake_case.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finsafe.config import settings


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# SCAM CHECK
# ============================================================

class ScamCheckRequest(BaseModel):
    """POST /scam-check request body."""
    message: str = Field("", max_length=settings.MAX_MESSAGE_CHARS,
                         description="The SMS or chat message to check.")
    mode: str = Field("local", pattern="^(local|ai|full)$",
                      description="Check mode: local (offline engine), ai (Gemini), or full (both).")

    model_config = {"json_schema_extra": {"examples": [
        {"message": "Your instant loan of Rs 50,000 is pre-approved. Click here: http://bit.ly/xyz", "mode": "local"},
    ]}}


class MatchResponse(CamelModel):
    pattern: str
    score: int
    keywords: list[str]
    explanation: str = ""
    safety_tips: list[str] = []
    severity: str


class AIVerdictResponse(CamelModel):
    verdict: str
    verdict_text: str
    badge_class: str
    explanation: str
    safety_tips: list[str]


class ScamCheckResponse(CamelModel):
    """POST /scam-check response body."""
    verdict: str
    verdict_text: str
    badge_class: str
    explanation: str
    safety_tips: list[str]
    total_score: Optional[int] = None
    matches: Optional[list[MatchResponse]] = None
    detected_patterns: Optional[list[str]] = None
    ai: Optional[AIVerdictResponse] = None
    check_mode: str
    source: str
    engine_version: str
    cached: bool = False


# ============================================================
# CHAT
# ============================================================

class ChatRequest(BaseModel):
    """POST /chat request body."""
    message: str = Field("", max_length=settings.MAX_MESSAGE_CHARS)


class ChatResponse(BaseModel):
    reply: str


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    engine_version: str
    llm_provider: str
    patterns: int
    cache: dict
