"""
FinSafe API — Main Application

POST /scam-check  — Check a message for scam signals (local, ai, or full)
POST /chat        — Ask the FinSafe finance assistant
GET  /patterns    — List every detection pattern, category and phrase
GET  /health      — Health check
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from finsafe import __version__
from finsafe.assistant import ask
from finsafe.cache import check_cache
from finsafe.checker import check_ai, check_full, check_local
from finsafe.config import settings
from finsafe.engine import ENGINE_VERSION, scam_engine
from finsafe.llm.factory import get_provider
from finsafe.logging import get_logger, setup_logging
from finsafe.rate_limit import check_rate_limit, cleanup_stale_windows
from finsafe.schemas.check import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ScamCheckRequest,
    ScamCheckResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

# Idle rate-limit windows are dropped on this interval (seconds)
_RATE_WINDOW_SWEEP = 600


async def _sweep_rate_windows():
    while True:
        await asyncio.sleep(_RATE_WINDOW_SWEEP)
        removed = cleanup_stale_windows()
        if removed:
            logger.debug("Dropped %d idle rate-limit windows", removed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if not settings.GEMINI_API_KEY:
        logger.warning(
            "GEMINI_API_KEY not set; ai/full checks will fall back to the local engine"
        )
    logger.info("FinSafe API starting",
                extra={"engine_version": ENGINE_VERSION})
    sweeper = asyncio.create_task(_sweep_rate_windows())
    yield
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    logger.info("FinSafe API shutting down")


app = FastAPI(
    title="FinSafe API",
    description="Scam message checker and finance assistant for students",
    version=f"{__version__} (engine {ENGINE_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


@app.get("/", include_in_schema=False)
async def root():
    return JSONResponse({"message": "FinSafe API", "docs": "/docs"})


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Return a structured error without leaking internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error. The request could not be completed."},
    )


# Lazy LLM provider
_llm = None


def _get_llm():
    global _llm
    if _llm is None:
        _llm = get_provider(settings.LLM_PROVIDER)
    return _llm


def _client_id(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _require_message(message: str) -> str:
    if not message or not message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    return message


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Errors are returned as {"error": ...} to match the web client."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# ============================================================
# ROUTES
# ============================================================

@app.post("/scam-check", response_model=ScamCheckResponse)
async def scam_check(body: ScamCheckRequest, request: Request):
    """Check a message for scam signals."""
    check_rate_limit(_client_id(request))
    message = _require_message(body.message)
    start = time.time()

    if body.mode == "local":
        result = check_local(message)
    else:
        cached = await check_cache.get(message, body.mode)
        if cached:
            return cached

        if body.mode == "ai":
            result = await check_ai(message, llm=_get_llm())
            if "error" in result:
                logger.error(
                    "AI provider error during scam check",
                    extra={"error": result["error"], "check_mode": body.mode},
                )
                raise HTTPException(502, "Failed to analyze message")
        else:
            result = await check_full(message, llm=_get_llm())

        if result["source"] != "local_fallback":
            await check_cache.put(message, body.mode, result)

    duration = int((time.time() - start) * 1000)
    logger.info(
        f"Scam check complete: verdict={result['verdict']} mode={body.mode}",
        extra={
            "verdict": result["verdict"],
            "total_score": result.get("totalScore"),
            "matches_count": len(result.get("matches") or []),
            "check_mode": body.mode,
            "source": result["source"],
            "duration_ms": duration,
        },
    )
    return result


@app.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, request: Request):
    """Answer a finance question with the FinSafe assistant."""
    check_rate_limit(_client_id(request))
    message = _require_message(body.message)

    try:
        return await ask(message, llm=_get_llm())
    except Exception as e:
        logger.error(
            "AI provider error during chat",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        raise HTTPException(502, "AI error")


@app.get("/patterns")
async def get_patterns():
    """Return the engine's detection tables."""
    tables = scam_engine.get_patterns()
    return {
        "engine_version": ENGINE_VERSION,
        "total_patterns": len(tables["patterns"]),
        "total_categories": len(tables["categories"]),
        "total_phrases": len(tables["phrases"]),
        **tables,
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "engine_version": ENGINE_VERSION,
        "llm_provider": settings.LLM_PROVIDER,
        "patterns": len(scam_engine.registry),
        "cache": check_cache.stats,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-FinSafe-Version"] = __version__
    response.headers["X-Engine-Version"] = ENGINE_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 1_048_576  # 1 MB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject request bodies over 1 MB, by header or by actual size."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > _MAX_BODY_BYTES:
        return JSONResponse(status_code=413, content={"error": "Request body too large."})

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(status_code=413, content={"error": "Request body too large."})

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


def run():
    """Serve the API with uvicorn on FINSAFE_HOST:FINSAFE_PORT."""
    import uvicorn
    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
