"""
Raw SQL passthrough.

Anyone holding the API secret can run any single statement here. This is an
operator escape hatch, not a tenant-facing API.
"""

from __future__ import annotations

import logging
from typing import Any

from core import db
from core.errors import ValidationError

logger = logging.getLogger(__name__)


def _statement_keyword(query: str) -> str:
    parts = query.split(None, 1)
    return parts[0].upper() if parts else ""


def validate_request(body: Any) -> tuple[str, list[Any]]:
    if not isinstance(body, dict):
        raise ValidationError("Query is required")

    query = body.get("query")
    if not query or not isinstance(query, str) or not query.strip():
        raise ValidationError("Query is required")

    params = body.get("params")
    if params is None:
        params = []
    if not isinstance(params, list):
        raise ValidationError("Params must be an array")
    return query, params


async def execute(query: str, params: list[Any]) -> dict[str, Any]:
    """
    Run the statement and return the JSON-ready `{success, results, meta}` body.
    """
    logger.info("raw_query keyword=%s params=%s", _statement_keyword(query), len(params))
    result = await db.run(query, params)
    return db.jsonable(
        {
            "success": True,
            "results": result.rows,
            "meta": {"status": result.status, "rows": len(result.rows)},
        }
    )
