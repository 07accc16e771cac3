"""
Executes resolved statements and shapes the HTTP result.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import HTTPException, status

from core import db
from core.errors import ExecutionError, NotFoundError

from . import statements

logger = logging.getLogger(__name__)


def _shape(kind: str, rows: list[dict[str, Any]]) -> tuple[int, Any]:
    if kind == "list":
        return status.HTTP_200_OK, rows

    if not rows:
        raise NotFoundError()
    row = rows[0]

    if kind == "create":
        return status.HTTP_201_CREATED, row
    if kind == "delete":
        return status.HTTP_200_OK, {"message": "Resource deleted", "data": row}
    return status.HTTP_200_OK, row


async def handle(
    method: str,
    table: str,
    row_id: str | None = None,
    directives: Iterable[tuple[str, str]] = (),
    body: Any = None,
) -> tuple[int, Any]:
    """
    Return `(status_code, json_content)` for one `/rest/...` request.
    """
    statement = statements.resolve(method, table, row_id, directives, body)

    try:
        result = await db.run(statement.sql, statement.params)
        logger.debug(
            "rest_statement kind=%s table=%s rows=%s", statement.kind, table, len(result.rows)
        )
        status_code, payload = _shape(statement.kind, result.rows)
        return status_code, db.jsonable(payload)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("rest_statement_failed kind=%s table=%s", statement.kind, table)
        raise ExecutionError(str(exc)) from exc
