"""Environment configuration.

- HINDENRANK_API_KEY: API key sent as X-API-Key (optional; comparison needs one)
- HINDENRANK_BASE_URL: API base URL override (default: production)
- HINDENRANK_TIMEOUT: request timeout in seconds (default: 30)
- LOG_LEVEL: logging level (default: INFO)

Read once on first use and kept for the life of the process.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .core.clients.hindenrank import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def load_settings() -> Settings:
    """Build settings from the current environment. Blank values count as unset."""
    timeout_raw = _env("HINDENRANK_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError:
        raise ValueError(f"HINDENRANK_TIMEOUT must be a number of seconds, got '{timeout_raw}'") from None

    return Settings(
        api_key=_env("HINDENRANK_API_KEY"),
        base_url=_env("HINDENRANK_BASE_URL") or DEFAULT_BASE_URL,
        timeout=timeout,
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
