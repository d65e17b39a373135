"""
Tests for rate limiting, logging, caching and the LLM provider plumbing.
"""

import asyncio
import time
from contextlib import suppress
from types import SimpleNamespace
from unittest.mock import patch

import pytest


class TestRateLimiter:
    """Rate limiting tests."""

    @pytest.fixture(autouse=True)
    def _enabled(self, monkeypatch):
        from finsafe import rate_limit
        monkeypatch.setattr(rate_limit, "RATE_LIMIT_ENABLED", True)

    def test_under_limit_passes(self):
        from finsafe.rate_limit import check_rate_limit, RateLimits, _windows, _lock

        with _lock:
            _windows.pop("10.0.0.1", None)

        # Should not raise
        check_rate_limit("10.0.0.1", RateLimits(per_minute=10, per_hour=100))

    def test_over_minute_limit_raises(self):
        from fastapi import HTTPException
        from finsafe.rate_limit import check_rate_limit, RateLimits, RateWindow, _windows, _lock

        with _lock:
            window = RateWindow()
            now = time.time()
            window.timestamps = [now - i for i in range(10)]
            _windows["10.0.0.2"] = window

        with pytest.raises(HTTPException) as exc_info:
            check_rate_limit("10.0.0.2", RateLimits(per_minute=10, per_hour=1000))
        assert exc_info.value.status_code == 429
        assert "Retry-After" in exc_info.value.headers

    def test_over_hour_limit_raises(self):
        from fastapi import HTTPException
        from finsafe.rate_limit import check_rate_limit, RateLimits, RateWindow, _windows, _lock

        with _lock:
            window = RateWindow()
            now = time.time()
            window.timestamps = [now - 120 - i for i in range(5)]
            _windows["10.0.0.3"] = window

        with pytest.raises(HTTPException) as exc_info:
            check_rate_limit("10.0.0.3", RateLimits(per_minute=100, per_hour=5))
        assert exc_info.value.headers["Retry-After"] == "3600"

    def test_unknown_client_skips(self):
        from finsafe.rate_limit import check_rate_limit
        # No client address, nothing to key on
        check_rate_limit(None)

    def test_disabled_skips(self, monkeypatch):
        from finsafe import rate_limit
        from finsafe.rate_limit import check_rate_limit, RateLimits, _windows, _lock

        monkeypatch.setattr(rate_limit, "RATE_LIMIT_ENABLED", False)
        for _ in range(3):
            check_rate_limit("10.0.0.4", RateLimits(per_minute=1, per_hour=1))
        with _lock:
            assert "10.0.0.4" not in _windows

    def test_hour_budget_counts_requests_older_than_a_minute(self):
        from fastapi import HTTPException
        from finsafe.rate_limit import check_rate_limit, RateLimits, _windows, _lock

        with _lock:
            _windows.pop("10.0.0.5", None)

        limits = RateLimits(per_minute=10, per_hour=3)
        start = time.time()
        with patch("finsafe.rate_limit.time.time", return_value=start - 600):
            check_rate_limit("10.0.0.5", limits)
        with patch("finsafe.rate_limit.time.time", return_value=start - 300):
            check_rate_limit("10.0.0.5", limits)
        check_rate_limit("10.0.0.5", limits)

        with pytest.raises(HTTPException) as exc_info:
            check_rate_limit("10.0.0.5", limits)
        assert "per hour" in exc_info.value.detail

    def test_window_pruned_to_one_hour(self):
        from finsafe.rate_limit import check_rate_limit, RateLimits, RateWindow, _windows, _lock

        now = time.time()
        with _lock:
            window = RateWindow()
            window.timestamps = [now - 7000, now - 1800]
            _windows["10.0.0.7"] = window

        check_rate_limit("10.0.0.7", RateLimits(per_minute=10, per_hour=10))

        with _lock:
            kept = _windows["10.0.0.7"].timestamps
        assert len(kept) == 2
        assert kept[0] == now - 1800

    def test_cleanup_stale(self):
        from finsafe.rate_limit import cleanup_stale_windows, RateWindow, _windows, _lock

        with _lock:
            stale_window = RateWindow()
            stale_window.timestamps = [time.time() - 10000]
            _windows["10.0.0.6"] = stale_window

        removed = cleanup_stale_windows(max_age=100)

        assert removed >= 1
        with _lock:
            assert "10.0.0.6" not in _windows

    @pytest.mark.asyncio
    async def test_app_sweeper_drops_idle_clients(self, monkeypatch):
        import api.main
        from finsafe.rate_limit import RateWindow, _windows, _lock

        with _lock:
            idle = RateWindow()
            idle.timestamps = [time.time() - 10000]
            _windows["10.0.0.8"] = idle

        monkeypatch.setattr(api.main, "_RATE_WINDOW_SWEEP", 0)
        sweeper = asyncio.create_task(api.main._sweep_rate_windows())
        await asyncio.sleep(0.01)
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper

        with _lock:
            assert "10.0.0.8" not in _windows


class TestLogging:
    """Structured logging tests."""

    def _record(self, msg="Test message"):
        import logging
        return logging.LogRecord(
            name="finsafe.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_json_formatter(self):
        import json
        from finsafe.logging import JSONFormatter

        parsed = json.loads(JSONFormatter().format(self._record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "finsafe.test"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        import json
        from finsafe.logging import JSONFormatter

        record = self._record("Check done")
        record.total_score = 72
        record.verdict = "HIGH RISK SCAM"
        record.check_mode = "full"
        record.unrelated = "dropped"
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["total_score"] == 72
        assert parsed["verdict"] == "HIGH RISK SCAM"
        assert parsed["check_mode"] == "full"
        assert "unrelated" not in parsed

    def test_get_logger(self):
        from finsafe.logging import get_logger
        log = get_logger("checker")
        assert log.name == "finsafe.checker"

    def test_log_tracer_forwards_events(self, caplog):
        import logging
        from finsafe.engine import ScamEngine
        from finsafe.logging import log_tracer

        logger = logging.getLogger("finsafe.test_trace")
        engine = ScamEngine(trace=log_tracer(logger))
        with caplog.at_level(logging.DEBUG, logger="finsafe.test_trace"):
            engine.analyze("Get an instant loan")

        events = [r.event for r in caplog.records if r.name == "finsafe.test_trace"]
        assert "keyword_match" in events
        assert events[-1] == "scored"

    def test_log_tracer_silent_above_level(self, caplog):
        import logging
        from finsafe.engine import ScamEngine
        from finsafe.logging import log_tracer

        logger = logging.getLogger("finsafe.test_quiet")
        engine = ScamEngine(trace=log_tracer(logger))
        with caplog.at_level(logging.INFO, logger="finsafe.test_quiet"):
            engine.analyze("Get an instant loan")

        assert not [r for r in caplog.records if r.name == "finsafe.test_quiet"]


class TestCheckCache:
    """TTL cache tests."""

    RESULT = {"verdict": "Likely Scam", "source": "mock", "checkMode": "ai"}

    @pytest.mark.asyncio
    async def test_miss_then_hit(self):
        from finsafe.cache import CheckCache

        cache = CheckCache()
        assert await cache.get("hello", "ai") is None
        await cache.put("hello", "ai", self.RESULT)
        hit = await cache.get("hello", "ai")
        assert hit == {**self.RESULT, "cached": True}
        assert "cached" not in self.RESULT
        assert cache.stats == {"entries": 1, "hits": 1, "misses": 1, "hit_rate": 0.5}

    @pytest.mark.asyncio
    async def test_mode_is_part_of_key(self):
        from finsafe.cache import CheckCache

        cache = CheckCache()
        await cache.put("hello", "ai", self.RESULT)
        assert await cache.get("hello", "full") is None

    @pytest.mark.asyncio
    async def test_expired_entry_dropped(self):
        from finsafe.cache import CheckCache

        cache = CheckCache(ttl_seconds=0.01)
        await cache.put("hello", "ai", self.RESULT)
        await asyncio.sleep(0.05)
        assert await cache.get("hello", "ai") is None
        assert cache.stats["entries"] == 0

    @pytest.mark.asyncio
    async def test_oldest_evicted(self):
        from finsafe.cache import CheckCache

        cache = CheckCache(max_entries=2)
        await cache.put("one", "ai", self.RESULT)
        await cache.put("two", "ai", self.RESULT)
        await cache.put("three", "ai", self.RESULT)
        assert await cache.get("one", "ai") is None
        assert await cache.get("three", "ai") is not None

    @pytest.mark.asyncio
    async def test_clear(self):
        from finsafe.cache import CheckCache

        cache = CheckCache()
        await cache.put("hello", "ai", self.RESULT)
        await cache.clear()
        assert cache.stats["entries"] == 0
        assert cache.stats["hit_rate"] == 0.0


class TestCircuitBreaker:
    """Gemini circuit breaker state transitions."""

    def test_opens_after_threshold(self):
        from finsafe.llm.gemini import CircuitBreaker

        breaker = CircuitBreaker(failure_threshold=3)
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.state == "closed"
        breaker.record_failure()
        assert breaker.is_open

    def test_half_open_after_recovery(self):
        from finsafe.llm.gemini import CircuitBreaker

        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        breaker.record_failure()
        assert breaker.state == "half-open"
        assert not breaker.is_open

    def test_success_closes(self):
        from finsafe.llm.gemini import CircuitBreaker

        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        breaker.record_failure()
        breaker.record_success()
        assert breaker.state == "closed"

    @pytest.mark.asyncio
    async def test_open_breaker_fails_fast(self):
        from finsafe.llm.gemini import CircuitOpenError, GeminiProvider

        provider = GeminiProvider(api_key="test-key")
        provider.circuit_breaker._state = "open"
        provider.circuit_breaker._opened_at = time.monotonic()
        with pytest.raises(CircuitOpenError):
            await provider.generate("hello")

    @pytest.mark.asyncio
    async def test_timeouts_open_breaker(self):
        from finsafe.checker import check_ai
        from finsafe.llm.gemini import CircuitBreaker, GeminiProvider

        async def hang(**kwargs):
            await asyncio.sleep(5)

        provider = GeminiProvider(api_key="test-key")
        provider._client = SimpleNamespace(
            aio=SimpleNamespace(models=SimpleNamespace(generate_content=hang))
        )
        provider.circuit_breaker = CircuitBreaker(failure_threshold=2)

        for _ in range(2):
            result = await check_ai("Win a prize", provider, timeout=0.05)
            assert result["source"] == "error"

        assert provider.circuit_breaker.is_open


class TestProviders:
    """Provider construction."""

    def test_factory_gemini(self):
        from finsafe.llm.factory import get_provider
        provider = get_provider("gemini")
        assert provider.name == "gemini"

    def test_factory_unknown(self):
        from finsafe.llm.factory import get_provider
        with pytest.raises(ValueError):
            get_provider("openai")

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        from finsafe.llm.gemini import GeminiProvider

        provider = GeminiProvider(api_key="")
        with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
            await provider.generate("hello")
