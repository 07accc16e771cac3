"""
Raw query endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from auth import dependencies as auth_dependencies
from core.errors import ExecutionError, MethodNotAllowedError

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route(
    "/query",
    methods=auth_dependencies.ALL_METHODS,
    dependencies=[Depends(auth_dependencies.require_token)],
)
async def run_query(request: Request) -> JSONResponse:
    """
    POST body: {"query": "<sql>", "params": [...]}; `params` is optional.
    """
    if request.method != "POST":
        raise MethodNotAllowedError()
    try:
        body = await request.json()
        query, params = service.validate_request(body)
        content = await service.execute(query, params)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("raw_query_failed")
        raise ExecutionError(str(exc)) from exc
    return JSONResponse(content=content)
