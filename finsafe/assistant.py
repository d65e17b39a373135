"""
Finance Assistant — single-turn Q&A for students.

A thin layer over the LLM provider with a fixed persona. Unlike scam
checks there is no deterministic fallback: callers surface the error.
"""

from __future__ import annotations

from finsafe.llm import LLMProvider

SYSTEM_INSTRUCTION = (
    "You are FinSafe AI, a financial safety assistant for Indian students."
)


async def ask(message: str, llm: LLMProvider) -> dict:
    """Answer one finance question. Returns {"reply": text}."""
    reply = await llm.generate(
        message,
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=0.7,
    )
    return {"reply": reply.strip()}
