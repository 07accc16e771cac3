"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Header

from core import config
from core.errors import AuthError

from . import security

# Gated routes accept every verb so the token check runs before any 405.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


async def require_token(authorization: str | None = Header(default=None)) -> None:
    """
    Token gate: the Authorization header must carry the shared secret.

    A missing header and a wrong token are indistinguishable to the caller.
    """
    if authorization is None:
        raise AuthError()

    token = security.token_from_header(authorization)
    if not security.token_matches(token, config.api_secret()):
        raise AuthError()
