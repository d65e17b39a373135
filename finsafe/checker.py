"""
Checker — Scam Check Orchestrator

Coordinates the three check modes:
  - local:  Scoring engine only. Offline, deterministic, instant.
  - ai:     LLM verdict only. Best-effort, may fail.
  - full:   Engine verdict plus the AI opinion when available. Any
            provider failure or timeout falls back to the engine alone.

Provider errors never escape check_local or check_full. check_ai reports
them as an "error" field so the API can decide what to return.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from finsafe.ai_verdict import ai_verdict
from finsafe.config import settings
from finsafe.engine import ENGINE_VERSION, ScamEngine, scam_engine
from finsafe.llm import LLMProvider

logger = logging.getLogger(__name__)


def check_local(text: str, engine: Optional[ScamEngine] = None) -> dict:
    """Deterministic check with the scoring engine."""
    assessment = (engine or scam_engine).analyze(text)
    return _build_result(assessment.to_dict(), check_mode="local", source="local")


async def _ask_ai(text: str, llm: LLMProvider, timeout: Optional[float]) -> dict:
    timeout = settings.AI_TIMEOUT_SECONDS if timeout is None else timeout
    return await asyncio.wait_for(ai_verdict(text, llm), timeout=timeout)


async def check_ai(
    text: str,
    llm: LLMProvider,
    timeout: Optional[float] = None,
) -> dict:
    """LLM-only check. Failures are returned, not raised."""
    try:
        verdict = await _ask_ai(text, llm, timeout)
    except asyncio.TimeoutError:
        logger.warning("AI verdict timed out", extra={"check_mode": "ai"})
        return {"error": "AI analysis timed out", "checkMode": "ai", "source": "error"}
    except Exception as e:
        logger.warning(
            "AI verdict failed: %s", e,
            extra={"check_mode": "ai", "error_type": type(e).__name__},
        )
        return {"error": str(e), "checkMode": "ai", "source": "error"}

    return _build_result(verdict, check_mode="ai", source=llm.name)


async def check_full(
    text: str,
    llm: LLMProvider,
    engine: Optional[ScamEngine] = None,
    timeout: Optional[float] = None,
) -> dict:
    """
    Engine verdict with the AI opinion attached.

    The engine always decides verdict and score. When the provider answers,
    its verdict record is attached under "ai"; otherwise "ai" is None and
    the source reads "local_fallback".
    """
    assessment = (engine or scam_engine).analyze(text)

    ai = None
    try:
        ai = await _ask_ai(text, llm, timeout)
    except asyncio.TimeoutError:
        logger.warning("AI verdict timed out, using local engine only",
                       extra={"check_mode": "full"})
    except Exception as e:
        logger.warning(
            "AI verdict failed, using local engine only: %s", e,
            extra={"check_mode": "full", "error_type": type(e).__name__},
        )

    result = _build_result(
        assessment.to_dict(),
        check_mode="full",
        source=f"{llm.name}+local" if ai else "local_fallback",
    )
    result["ai"] = ai
    return result


def _build_result(payload: dict, check_mode: str, source: str) -> dict:
    return {
        **payload,
        "checkMode": check_mode,
        "source": source,
        "engineVersion": ENGINE_VERSION,
    }
