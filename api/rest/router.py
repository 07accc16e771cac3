"""
Generic CRUD endpoints over any table.

    GET    /rest/<table>?<filters>&sort_by=&order=&limit=&offset=
    GET    /rest/<table>/<id>
    POST   /rest/<table>
    PATCH  /rest/<table>/<id>
    DELETE /rest/<table>/<id>

A trailing slash is accepted on both paths.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from auth import dependencies as auth_dependencies
from core.errors import NotFoundError, ValidationError

from . import service

router = APIRouter(dependencies=[Depends(auth_dependencies.require_token)])


async def _read_body(request: Request) -> Any:
    if request.method not in {"POST", "PATCH"}:
        return None
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid JSON body") from None


async def _dispatch(request: Request, table: str, row_id: str | None) -> JSONResponse:
    body = await _read_body(request)
    status_code, content = await service.handle(
        request.method,
        table,
        row_id,
        request.query_params.multi_items(),
        body,
    )
    return JSONResponse(status_code=status_code, content=content)


@router.api_route("/rest/{table}", methods=auth_dependencies.ALL_METHODS)
@router.api_route("/rest/{table}/", methods=auth_dependencies.ALL_METHODS, include_in_schema=False)
async def collection(table: str, request: Request) -> JSONResponse:
    return await _dispatch(request, table, None)


@router.api_route("/rest/{table}/{row_id}", methods=auth_dependencies.ALL_METHODS)
@router.api_route("/rest/{table}/{row_id}/", methods=auth_dependencies.ALL_METHODS, include_in_schema=False)
async def item(table: str, row_id: str, request: Request) -> JSONResponse:
    return await _dispatch(request, table, row_id)


@router.api_route("/rest/{path:path}", methods=auth_dependencies.ALL_METHODS, include_in_schema=False)
async def unknown(path: str) -> None:
    # Still behind the token gate: unauthenticated callers see 401, not 404.
    raise NotFoundError()
