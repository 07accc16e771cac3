"""
Auth security helpers.

- bcrypt password hashing/verification (the credential verifier)
- shared-secret token matching (the token gate's comparison)
"""

from __future__ import annotations

import secrets

import bcrypt


class AuthSecurityError(RuntimeError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def token_from_header(authorization: str) -> str:
    """
    `Bearer <token>` and a bare `<token>` are both accepted.
    """
    if authorization.startswith("Bearer "):
        return authorization[len("Bearer "):]
    return authorization


def token_matches(token: str, secret: str) -> bool:
    # Constant-time; an empty secret never matches.
    if not secret:
        return False
    return secrets.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))
