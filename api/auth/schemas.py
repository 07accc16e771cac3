"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LoginRequest(BaseModel):
    # Presence is checked by the service so that a missing field maps to 400,
    # not FastAPI's 422.
    email: Any = None
    password: Any = None


class LoginUser(BaseModel):
    id: Any
    email: str


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
