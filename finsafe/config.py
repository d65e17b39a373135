"""
FinSafe Configuration

Central settings loaded from environment variables (.env supported).
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- LLM Provider ---
    LLM_PROVIDER: str = os.getenv("FINSAFE_LLM_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    AI_TIMEOUT_SECONDS: float = float(os.getenv("FINSAFE_AI_TIMEOUT", "20"))

    # --- Engine ---
    EXTRA_PATTERNS_PATH: str = os.getenv("FINSAFE_EXTRA_PATTERNS", "")
    TRACE_MATCHES: bool = _env_flag("FINSAFE_TRACE_MATCHES")
    MAX_MESSAGE_CHARS: int = int(os.getenv("FINSAFE_MAX_MESSAGE_CHARS", "5000"))

    # --- Server ---
    HOST: str = os.getenv("FINSAFE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("FINSAFE_PORT", "3000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("FINSAFE_CORS_ORIGINS", "*")


settings = Settings()
