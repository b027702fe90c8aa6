"""
SRM Guide - Configuration Gate
===============================
Decides, from ``settings.GEMINI_API_KEY``, whether the AI backend is
usable at all.  Pure functions, no state: the key is re-read on every
check.

A missing key is an expected state, not a failure — the chat page falls
back to pointing students at the FAQ.  Unedited template values from an
example env file are treated exactly like a missing key.

Usage:
    from srmguide.src.core.config_gate import is_ai_available
    if not is_ai_available():
        ...
"""

from __future__ import annotations

from dataclasses import dataclass

from srmguide.config.settings import Settings, settings

# Template values shipped in example env files; never real credentials.
PLACEHOLDER_KEYS: frozenset[str] = frozenset({"your_gemini_api_key_here", "your_actual_gemini_api_key_here"})


@dataclass(frozen=True, slots=True)
class ApiKeyStatus:
    configured: bool
    is_empty: bool
    is_default: bool


def _raw_key(config: Settings | None) -> str:
    cfg = config or settings
    if cfg.GEMINI_API_KEY is None:
        return ""
    return cfg.GEMINI_API_KEY.get_secret_value().strip()


def is_ai_available(config: Settings | None = None) -> bool:
    """Return True when a non-placeholder Gemini key is configured."""
    key = _raw_key(config)
    return bool(key) and key not in PLACEHOLDER_KEYS


def api_key_status(config: Settings | None = None) -> ApiKeyStatus:
    """Break the gate decision down for health checks and the CLI header."""
    key = _raw_key(config)
    is_default = key in PLACEHOLDER_KEYS
    return ApiKeyStatus(configured=bool(key) and not is_default, is_empty=not key, is_default=is_default)
