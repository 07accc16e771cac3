"""
Create a login user (there is no registration endpoint). Run from `api/`:
  python -m auth.create_user EMAIL PASSWORD
Needs DATABASE_URL.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from core import db

from . import repository, security


async def _create(email: str, password: str) -> int:
    await db.init_pool()
    try:
        if await repository.get_user_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        password_hash = security.hash_password(password)
        row = await repository.create_user(email=email, password_hash=password_hash)
    finally:
        await db.close_pool()
    print(f"Created user '{row['email']}' with id {row['id']}.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user that can log in via /rest/auth/login.")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email:
        print("Email is required.", file=sys.stderr)
        return 1
    try:
        return asyncio.run(_create(email, args.password))
    except security.AuthSecurityError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
