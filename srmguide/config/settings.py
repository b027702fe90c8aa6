"""
SRM Guide - Centralized Configuration
======================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GEMINI_API_KEY`` is typed as ``SecretStr`` and is **optional**.  A
  missing key is a normal state: the assistant reports itself unavailable
  and the rest of the site keeps working.  The raw value is never exposed
  in repr, logs, or tracebacks.
- ``MONGO_URI`` is also ``SecretStr`` — connection strings contain
  credentials and must never leak into logs.

Retry Policy
------------
``AI_MAX_ATTEMPTS`` and ``AI_RETRY_BASE_DELAY_MS`` drive the exponential
backoff applied to transient upstream failures (6 attempts, 2s base →
2s, 4s, 8s, 16s, 32s).  ``AI_REQUEST_DEADLINE_SECONDS`` bounds one whole
``generate_response`` call, retries included.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).

    Attributes
    ----------
    GEMINI_API_KEY : SecretStr | None
        API key for Google AI Studio (Gemini).  Optional; read by the
        configuration gate.  Access the raw value with
        ``settings.GEMINI_API_KEY.get_secret_value()``.
    LLM_MODEL : str
        Model identifier for the response-generation LLM.
    LLM_TEMPERATURE : float
        Sampling temperature for assistant replies.
    LLM_TIMEOUT_SECONDS : float
        Transport timeout for a single upstream call.
    AI_MAX_ATTEMPTS : int
        Total attempts (first call + retries) for transient failures.
    AI_RETRY_BASE_DELAY_MS : int
        Backoff base; delay before attempt *k+1* is ``base * 2**(k-1)``.
    AI_REQUEST_DEADLINE_SECONDS : float | None
        Overall deadline for one request.  ``None`` disables it.
    MONGO_URI : SecretStr
        MongoDB connection string for the Q&A board.
    MONGO_DB_NAME : str
        MongoDB database name.
    SEARCH_REMOTE_LIMIT : int
        Page size for the record-store leg of site search.
    SEARCH_RESULTS_LIMIT : int
        Maximum merged search results returned.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"

    # ── API Keys (optional — gate decides availability) ───────────────
    GEMINI_API_KEY: SecretStr | None = None

    # ── Model Configuration ────────────────────────────────────────────
    LLM_MODEL: str = "gemini-1.5-flash"
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = 30.0

    # ── Retry Policy ───────────────────────────────────────────────────
    AI_MAX_ATTEMPTS: int = 6
    AI_RETRY_BASE_DELAY_MS: int = 2000
    AI_REQUEST_DEADLINE_SECONDS: float | None = 120.0

    # ── MongoDB ────────────────────────────────────────────────────────
    MONGO_URI: SecretStr = SecretStr("mongodb://localhost:27017")
    MONGO_DB_NAME: str = "srmguide"

    # ── Search ─────────────────────────────────────────────────────────
    SEARCH_REMOTE_LIMIT: int = 10
    SEARCH_RESULTS_LIMIT: int = 8

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0.0–2.0, got {v}")
        return v


    @field_validator("AI_MAX_ATTEMPTS")
    @classmethod
    def _attempts_range(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError(f"AI_MAX_ATTEMPTS must be 1–10, got {v}")
        return v


    @field_validator("AI_RETRY_BASE_DELAY_MS")
    @classmethod
    def _delay_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"AI_RETRY_BASE_DELAY_MS must be ≥ 0, got {v}")
        return v


    @field_validator("LLM_TIMEOUT_SECONDS", "AI_REQUEST_DEADLINE_SECONDS")
    @classmethod
    def _positive_seconds(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"timeouts must be > 0 seconds, got {v}")
        return v


    @field_validator("SEARCH_REMOTE_LIMIT", "SEARCH_RESULTS_LIMIT")
    @classmethod
    def _limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"search limits must be ≥ 1, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from srmguide.config.settings import settings
settings = Settings()
