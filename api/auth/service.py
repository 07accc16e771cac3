"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core import config
from core.errors import CredentialError, ValidationError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    """
    Check an email/password pair and hand back the shared API secret.

    Unknown email and wrong password produce the same error so callers
    cannot probe which accounts exist.
    """
    if not payload.email or not payload.password:
        raise ValidationError("Email and password required")

    email = str(payload.email)
    user_row = await repository.get_user_by_email(email)
    if user_row is None:
        logger.info("login_failed reason=unknown_email")
        raise CredentialError()

    is_valid = security.verify_password(str(payload.password), str(user_row.get("password_hash") or ""))
    if not is_valid:
        logger.info("login_failed reason=bad_password user_id=%s", user_row["id"])
        raise CredentialError()

    logger.info("login_ok user_id=%s", user_row["id"])
    return schemas.LoginResponse(
        token=config.api_secret(),
        user=schemas.LoginUser(id=user_row["id"], email=str(user_row["email"])),
    )
