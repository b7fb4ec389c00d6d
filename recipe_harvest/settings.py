"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import os

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _get_float(name: str, default: float) -> float:
    raw = _get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number of seconds, got {raw!r}")


def _get_list(name: str, default: str = "") -> list[str]:
    raw = _get(name, default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # HTTP
    # Browser-like identification header; many publishers block unknown agents.
    USER_AGENT: str = _get("USER_AGENT", DEFAULT_USER_AGENT)
    # Per-request timeout in seconds
    FETCH_TIMEOUT: float = _get_float("FETCH_TIMEOUT", 20.0)

    # Listing pages harvested when `harvest` is run without arguments;
    # empty means the built-in Love & Lemons round-ups
    LISTING_URLS: list[str] = field(default_factory=lambda: _get_list("LISTING_URLS"))

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()
