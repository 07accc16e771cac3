"""
Environment-backed settings.

Everything is read through small helpers so that values can be overridden in
tests with `monkeypatch.setenv` / `patch.dict(os.environ, ...)`.

The shared API secret is fetched once per process and cached. Call
`reset_cache()` after changing the environment (tests) to force a re-read.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def api_secret() -> str:
    """
    Return the shared bearer secret.

    `API_SECRET_FILE` (a mounted secret) wins over `API_SECRET`.
    """
    secret_file = os.environ.get("API_SECRET_FILE", "").strip()
    if secret_file:
        secret = Path(secret_file).read_text(encoding="utf-8").strip()
    else:
        secret = os.environ.get("API_SECRET", "").strip()

    if not secret:
        raise RuntimeError("API_SECRET or API_SECRET_FILE must be set.")
    return secret


def reset_cache() -> None:
    api_secret.cache_clear()


def db_pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(1, _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
