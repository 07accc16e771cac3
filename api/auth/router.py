"""
Auth API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from core.errors import ExecutionError

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/rest/auth/login", response_model=schemas.LoginResponse)
async def login(request: Request) -> schemas.LoginResponse:
    """
    Exchange email/password for the API bearer token. Not behind the token gate.
    """
    try:
        body = await request.json()
        payload = schemas.LoginRequest.model_validate(body)
        return await service.login(payload)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("login_error")
        raise ExecutionError(str(exc)) from exc
