"""
API error taxonomy.

Every error leaves the API as `{"error": "<message>"}` with the matching
status code. The classes are plain `HTTPException`s so they can be raised
from any layer and rendered by one handler (see `main.py`).
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(HTTPException):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            status_code=self.status_code_default,
            detail=message or self.message_default,
        )


class AuthError(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Unauthorized"


class ValidationError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Bad request"


class CredentialError(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Invalid credentials"


class NotFoundError(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND
    message_default = "Not found"


class MethodNotAllowedError(ApiError):
    status_code_default = status.HTTP_405_METHOD_NOT_ALLOWED
    message_default = "Method not allowed"


class ExecutionError(ApiError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Query execution failed"


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )
