"""
FinSafe — Scam Message Checker for Students

A deterministic, offline scam-signal engine with an optional
Gemini-backed second opinion.

Public API:
  - scam_engine:  Process-wide rule-based engine (deterministic, zero API cost)
  - ScamEngine:   Engine class, for custom registries or a trace hook
  - analyze:      Text -> Assessment with the process-wide engine
  - classify:     Total score -> Verdict tier
  - aggregate:    Match records -> (explanation, safety tips)
  - check_local / check_ai / check_full: orchestrated checks with AI fallback
  - Registry / Pattern: data-driven pattern tables
  - LLMProvider:  Abstract LLM interface for provider swapping

Usage:
    from finsafe import analyze
    assessment = analyze("Your KYC has expired, click here to update")
    print(assessment.verdict, assessment.total_score)
"""

__version__ = "1.0.0"

from finsafe.engine import (
    scam_engine,
    ScamEngine,
    Assessment,
    MatchRecord,
    Verdict,
    ENGINE_VERSION,
    analyze,
    classify,
)
from finsafe.aggregator import aggregate
from finsafe.checker import check_local, check_ai, check_full
from finsafe.patterns import Pattern, Registry, CategoryGroup, SpecialPhrase
from finsafe.llm import LLMProvider
from finsafe.llm.factory import get_provider

__all__ = [
    "scam_engine",
    "ScamEngine",
    "Assessment",
    "MatchRecord",
    "Verdict",
    "ENGINE_VERSION",
    "analyze",
    "classify",
    "aggregate",
    "check_local",
    "check_ai",
    "check_full",
    "Pattern",
    "Registry",
    "CategoryGroup",
    "SpecialPhrase",
    "LLMProvider",
    "get_provider",
]
