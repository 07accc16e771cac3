"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Caller-supplied values usually arrive as strings (query string, path
segments) or loosely typed JSON. `run()` prepares the statement first, asks
PostgreSQL which type it inferred for every placeholder and converts the
values to match before binding.
"""

from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi.encoders import jsonable_encoder

from . import config

_pool: asyncpg.Pool | None = None

_INT_TYPES = {"int2", "int4", "int8", "oid"}
_FLOAT_TYPES = {"float4", "float8"}
_TEXT_TYPES = {"text", "varchar", "bpchar", "name", "citext"}
_JSON_TYPES = {"json", "jsonb"}
_TRUE_VALUES = {"true", "t", "1", "yes", "y", "on"}
_FALSE_VALUES = {"false", "f", "0", "no", "n", "off"}


@dataclass(frozen=True)
class StatementResult:
    rows: list[dict[str, Any]]
    status: str


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=config.db_pool_min_size(),
        max_size=config.db_pool_max_size(),
        command_timeout=config.db_command_timeout(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _bytea_hex(value: bytes) -> str:
    # Same text form PostgreSQL uses for bytea output.
    return "\\x" + value.hex()


def jsonable(payload: Any) -> Any:
    """
    Make query results JSON-safe (datetimes, Decimals, UUIDs, bytea).

    Raises ValueError for column types with no JSON form.
    """
    return jsonable_encoder(payload, custom_encoder={bytes: _bytea_hex})


def _parse_iso(raw: str) -> str:
    value = raw.strip()
    # datetime.fromisoformat only accepts "Z" from Python 3.11 on.
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return value


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {raw!r}")


def coerce_value(value: Any, type_name: str) -> Any:
    """
    Convert `value` so asyncpg can encode it as PostgreSQL type `type_name`.

    Values that already fit, and types we know nothing about, pass through
    untouched; asyncpg raises its own error if they are still wrong.
    """
    if value is None:
        return None

    if type_name in _JSON_TYPES:
        # Strings are taken as JSON text already.
        return value if isinstance(value, str) else json.dumps(value)

    if type_name in _TEXT_TYPES:
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value if isinstance(value, str) else str(value)

    if isinstance(value, bool):
        if type_name in _INT_TYPES:
            return int(value)
        return value

    if isinstance(value, str):
        if type_name in _INT_TYPES:
            return int(value.strip())
        if type_name in _FLOAT_TYPES:
            return float(value.strip())
        if type_name == "numeric":
            return Decimal(value.strip())
        if type_name == "bool":
            return _parse_bool(value)
        if type_name == "uuid":
            return uuid.UUID(value.strip())
        if type_name == "date":
            return date.fromisoformat(value.strip())
        if type_name in {"timestamp", "timestamptz"}:
            return datetime.fromisoformat(_parse_iso(value))
        if type_name in {"time", "timetz"}:
            return time.fromisoformat(_parse_iso(value))
        return value

    if isinstance(value, (int, float)):
        if type_name in _FLOAT_TYPES:
            return float(value)
        if type_name == "numeric":
            return Decimal(str(value))
        if type_name in _INT_TYPES and isinstance(value, float) and value.is_integer():
            return int(value)

    return value


def coerce_params(params: Sequence[Any], type_names: Sequence[str]) -> list[Any]:
    if len(params) != len(type_names):
        raise ValueError(
            f"statement expects {len(type_names)} parameter(s), got {len(params)}"
        )
    return [coerce_value(value, type_name) for value, type_name in zip(params, type_names)]


async def run(sql: str, params: Sequence[Any] = ()) -> StatementResult:
    """
    Prepare `sql`, bind `params` positionally and return rows plus the
    command tag (e.g. "INSERT 0 1").
    """
    async with pool().acquire() as conn:
        statement = await conn.prepare(sql)
        type_names = [t.name for t in statement.get_parameters()]
        args = coerce_params(params, type_names)
        records = await statement.fetch(*args)
        status = statement.get_statusmsg() or ""
    return StatementResult(rows=[_record_to_dict(r) for r in records], status=status)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None
