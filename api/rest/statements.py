"""
Generic resource -> SQL resolution.

`resolve()` turns an HTTP method, a table name, an optional row id, the query
string directives and an optional JSON body into a single parameterized
statement. It does no I/O; `rest/service.py` executes what it returns.

Only identifiers (table, column and sort names) are ever written into the SQL
text, and only after they pass `quote_identifier`. Every value goes into
`Statement.params` and is bound as `$n`.

Query string directives:
- `sort_by=<column>` / `order=asc|desc`
- `limit=<n>` / `offset=<n>` (offset is only applied together with limit)
- an empty `order`, `limit` or `offset` counts as absent
- any other key is an equality filter: `<key> = $n`, ANDed together
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

from core.errors import MethodNotAllowedError, ValidationError

StatementKind = Literal["list", "get", "create", "update", "delete"]

RESERVED_KEYS = frozenset({"sort_by", "order", "limit", "offset"})

# PostgreSQL truncates identifiers at 63 bytes.
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")
_ORDER_VALUES = {"asc": "ASC", "desc": "DESC"}


@dataclass(frozen=True)
class Statement:
    kind: StatementKind
    sql: str
    params: tuple[Any, ...] = ()


def quote_identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise ValidationError(f"Invalid identifier: {name}")
    return f'"{name}"'


def _first_wins(directives: Iterable[tuple[str, str]]) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in directives:
        out.setdefault(key, value)
    return out


def _non_negative_int(name: str, raw: str) -> int:
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"{name} must be a non-negative integer") from None
    if value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return value


def _require_fields(body: Any, message: str) -> Mapping[str, Any]:
    if not isinstance(body, Mapping) or not body:
        raise ValidationError(message)
    return body


def build_list(table: str, directives: Iterable[tuple[str, str]]) -> Statement:
    """
    SELECT with equality filters, optional ORDER BY and LIMIT/OFFSET.
    """
    quoted_table = quote_identifier(table)
    directive_map = _first_wins(directives)

    params: list[Any] = []
    conditions: list[str] = []
    for key, value in directive_map.items():
        if key in RESERVED_KEYS:
            continue
        params.append(value)
        conditions.append(f"{quote_identifier(key)} = ${len(params)}")

    sql = f"SELECT * FROM {quoted_table}"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    sort_by = directive_map.get("sort_by")
    if sort_by:
        sql += f" ORDER BY {quote_identifier(sort_by)}"
        order = directive_map.get("order")
        if order:
            direction = _ORDER_VALUES.get(order.strip().lower())
            if direction is None:
                raise ValidationError("Invalid order: must be asc or desc")
            sql += f" {direction}"

    limit = directive_map.get("limit")
    if limit:
        params.append(_non_negative_int("limit", limit))
        sql += f" LIMIT ${len(params)}"
        offset = directive_map.get("offset")
        if offset:
            params.append(_non_negative_int("offset", offset))
            sql += f" OFFSET ${len(params)}"

    return Statement(kind="list", sql=sql, params=tuple(params))


def build_get(table: str, row_id: str) -> Statement:
    return Statement(
        kind="get",
        sql=f'SELECT * FROM {quote_identifier(table)} WHERE "id" = $1',
        params=(row_id,),
    )


def build_create(table: str, body: Any) -> Statement:
    fields = _require_fields(body, "Request body must be a non-empty JSON object")
    quoted_table = quote_identifier(table)
    columns = [quote_identifier(key) for key in fields]
    placeholders = [f"${i}" for i in range(1, len(columns) + 1)]
    sql = (
        f"INSERT INTO {quoted_table} ({', '.join(columns)}) "
        f"VALUES ({', '.join(placeholders)}) RETURNING *"
    )
    return Statement(kind="create", sql=sql, params=tuple(fields.values()))


def build_update(table: str, row_id: str, body: Any) -> Statement:
    fields = _require_fields(body, "No fields to update")
    quoted_table = quote_identifier(table)
    assignments = [
        f"{quote_identifier(key)} = ${i}" for i, key in enumerate(fields, start=1)
    ]
    sql = (
        f"UPDATE {quoted_table} SET {', '.join(assignments)} "
        f'WHERE "id" = ${len(assignments) + 1} RETURNING *'
    )
    return Statement(kind="update", sql=sql, params=(*fields.values(), row_id))


def build_delete(table: str, row_id: str) -> Statement:
    return Statement(
        kind="delete",
        sql=f'DELETE FROM {quote_identifier(table)} WHERE "id" = $1 RETURNING *',
        params=(row_id,),
    )


def resolve(
    method: str,
    table: str,
    row_id: str | None = None,
    directives: Iterable[tuple[str, str]] = (),
    body: Any = None,
) -> Statement:
    """
    Pick the statement for `method` on `/rest/<table>[/<row_id>]`.

    Raises ValidationError for bad identifiers/directives/bodies and
    MethodNotAllowedError for verb/path combinations with no meaning.
    """
    verb = method.upper()
    if verb == "GET":
        if row_id is None:
            return build_list(table, directives)
        return build_get(table, row_id)
    if verb == "POST" and row_id is None:
        return build_create(table, body)
    if verb == "PATCH" and row_id is not None:
        return build_update(table, row_id, body)
    if verb == "DELETE" and row_id is not None:
        return build_delete(table, row_id)
    raise MethodNotAllowedError()
