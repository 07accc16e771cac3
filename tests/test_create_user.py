"""Seeding command for login users."""

import unittest
from unittest.mock import AsyncMock, patch

from auth import create_user, security


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.get_user = AsyncMock(return_value=None)
        self.insert = AsyncMock(return_value={"id": 3, "email": "ops@example.com"})
        patchers = [
            patch("core.db.init_pool", AsyncMock()),
            patch("core.db.close_pool", AsyncMock()),
            patch("auth.repository.get_user_by_email", self.get_user),
            patch("auth.repository.create_user", self.insert),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_inserts_bcrypt_hash(self) -> None:
        code = create_user.main(["ops@example.com", "hunter22"])
        self.assertEqual(code, 0)
        self.insert.assert_awaited_once()
        kwargs = self.insert.await_args.kwargs
        self.assertEqual(kwargs["email"], "ops@example.com")
        self.assertTrue(security.verify_password("hunter22", kwargs["password_hash"]))

    def test_existing_user_is_refused(self) -> None:
        self.get_user.return_value = {"id": 1, "email": "ops@example.com", "password_hash": "x"}
        self.assertEqual(create_user.main(["ops@example.com", "hunter22"]), 1)
        self.insert.assert_not_awaited()

    def test_empty_password_is_refused(self) -> None:
        self.assertEqual(create_user.main(["ops@example.com", ""]), 1)
        self.insert.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
