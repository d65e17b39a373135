"""
Gemini Provider — Google Gemini API implementation.

Uses the google.genai SDK. The client is created on first use, so the
app (and the offline engine) loads without an API key.

- Retries transient errors (rate limits, 5xx, timeouts) with exponential backoff
- Circuit breaker: after repeated failures, fail fast for a cool-down period
  so callers drop straight to the deterministic engine
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from google import genai
from google.genai import types

from finsafe.config import settings
from finsafe.llm import LLMProvider

logger = logging.getLogger("finsafe.llm.gemini")

_TRANSIENT_MARKERS = (
    "429", "500", "503", "rate", "quota", "timeout", "deadline",
    "connection", "unavailable", "overloaded",
)


class CircuitOpenError(Exception):
    """Raised instead of calling the API while the breaker is open."""


class CircuitBreaker:
    """closed -> open after N consecutive failures -> half-open after a cool-down."""

    def __init__(self, failure_threshold: int = 3, recovery_timeout: float = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._failures = 0
        self._opened_at: float = 0
        self._state = "closed"

    @property
    def state(self) -> str:
        if self._state == "open" and (
            time.monotonic() - self._opened_at >= self.recovery_timeout
        ):
            self._state = "half-open"
        return self._state

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    def record_success(self) -> None:
        self._failures = 0
        self._state = "closed"

    def record_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold or self._state == "half-open":
            self._state = "open"
            self._opened_at = time.monotonic()
            logger.warning(
                "Circuit breaker open after %d consecutive Gemini failures; "
                "AI verdicts disabled for %ds",
                self._failures, self.recovery_timeout,
            )


def _is_transient(err: Exception) -> bool:
    message = str(err).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class GeminiProvider(LLMProvider):
    """Google Gemini provider with retry and circuit breaker."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 3,
    ):
        self._api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self._model = model or settings.GEMINI_MODEL
        self._max_retries = max_retries
        self._client: Optional[genai.Client] = None
        self.circuit_breaker = CircuitBreaker()

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError(
                    "GEMINI_API_KEY not set. Get one from "
                    "https://aistudio.google.com/apikey"
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        if self.circuit_breaker.is_open:
            raise CircuitOpenError(
                "Gemini circuit breaker is open. Falling back to the local engine."
            )

        client = self._get_client()
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
        )

        try:
            return await self._generate_with_retry(client, prompt, config)
        except asyncio.CancelledError:
            # Caller gave up (asyncio.wait_for timeout); count it as a failure
            self.circuit_breaker.record_failure()
            raise

    async def _generate_with_retry(self, client, prompt: str, config) -> str:
        for attempt in range(self._max_retries):
            try:
                response = await client.aio.models.generate_content(
                    model=self._model,
                    contents=prompt,
                    config=config,
                )
            except Exception as e:
                if _is_transient(e) and attempt < self._max_retries - 1:
                    logger.info(
                        "Transient Gemini error (attempt %d/%d): %s",
                        attempt + 1, self._max_retries, e,
                    )
                    await asyncio.sleep(2 ** attempt)
                    continue
                self.circuit_breaker.record_failure()
                raise
            self.circuit_breaker.record_success()
            return response.text or ""

        # Unreachable: the final attempt either returns or raises
        raise RuntimeError("Gemini retry loop exited without a result")
