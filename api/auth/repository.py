"""
Auth persistence helpers.

The API only reads users; `auth/create_user.py` seeds them.
"""

from __future__ import annotations

from core import db


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash
        FROM users
        WHERE email = $1
        LIMIT 1
        """,
        email,
    )


async def create_user(*, email: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO users (email, password_hash)
        VALUES ($1, $2)
        RETURNING id, email
        """,
        email,
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row
