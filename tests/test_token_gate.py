"""Token gate: every /rest/* route (except login) and /query require the shared secret."""

import unittest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from auth import security
from conftest import TEST_SECRET
from core.db import StatementResult
from main import app

UNAUTHORIZED = {"error": "Unauthorized"}


class TestTokenMatching(unittest.TestCase):
    def test_bearer_prefix_is_stripped(self) -> None:
        self.assertEqual(security.token_from_header("Bearer abc"), "abc")

    def test_raw_header_is_used_as_is(self) -> None:
        self.assertEqual(security.token_from_header("abc"), "abc")
        self.assertEqual(security.token_from_header("bearer abc"), "bearer abc")

    def test_exact_match_only(self) -> None:
        self.assertTrue(security.token_matches("s3cret", "s3cret"))
        self.assertFalse(security.token_matches("s3cret ", "s3cret"))
        self.assertFalse(security.token_matches("", ""))


class TestGateOverHttp(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.run = AsyncMock(return_value=StatementResult(rows=[{"id": 1}], status="SELECT 1"))
        patcher = patch("core.db.run", self.run)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _requests(self):
        return [
            ("GET", "/rest/users", None),
            ("GET", "/rest/users/1", None),
            ("POST", "/rest/users", {"name": "John"}),
            ("PATCH", "/rest/users/1", {"age": 31}),
            ("DELETE", "/rest/users/1", None),
            ("GET", "/rest/orders?limit=5", None),
            ("GET", "/rest/a/b/c", None),
            ("POST", "/query", {"query": "SELECT 1"}),
        ]

    def test_missing_header_is_rejected(self) -> None:
        for method, url, body in self._requests():
            with self.subTest(method=method, url=url):
                resp = self.client.request(method, url, json=body)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json(), UNAUTHORIZED)
        self.run.assert_not_awaited()

    def test_wrong_token_is_rejected(self) -> None:
        headers_list = [
            {"Authorization": "Bearer wrong"},
            {"Authorization": "wrong"},
            {"Authorization": f"Token {TEST_SECRET}"},
            {"Authorization": f"bearer {TEST_SECRET}"},
            {"Authorization": ""},
        ]
        for headers in headers_list:
            for method, url, body in self._requests():
                with self.subTest(headers=headers, method=method, url=url):
                    resp = self.client.request(method, url, json=body, headers=headers)
                    self.assertEqual(resp.status_code, 401)
                    self.assertEqual(resp.json(), UNAUTHORIZED)
        self.run.assert_not_awaited()

    def test_bearer_and_bare_token_are_accepted(self) -> None:
        for value in (f"Bearer {TEST_SECRET}", TEST_SECRET):
            with self.subTest(header=value):
                resp = self.client.get("/rest/users", headers={"Authorization": value})
                self.assertEqual(resp.status_code, 200)

    def test_unknown_rest_path_is_404_after_auth(self) -> None:
        resp = self.client.get("/rest/a/b/c", headers={"Authorization": f"Bearer {TEST_SECRET}"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Not found"})

    def test_every_verb_is_gated(self) -> None:
        for method in ("HEAD", "OPTIONS", "TRACE", "PUT", "GET"):
            for url in ("/rest/users", "/rest/users/1", "/rest/users/", "/rest/a/b/c", "/query"):
                with self.subTest(method=method, url=url):
                    resp = self.client.request(method, url)
                    self.assertEqual(resp.status_code, 401)
                    if method != "HEAD":
                        self.assertEqual(resp.json(), UNAUTHORIZED)
        self.run.assert_not_awaited()

    def test_unsupported_verbs_are_405_once_authenticated(self) -> None:
        headers = {"Authorization": f"Bearer {TEST_SECRET}"}
        for method, url in (("OPTIONS", "/rest/users"), ("TRACE", "/rest/users/1"), ("GET", "/query")):
            with self.subTest(method=method, url=url):
                resp = self.client.request(method, url, headers=headers)
                self.assertEqual(resp.status_code, 405)
                self.assertEqual(resp.json(), {"error": "Method not allowed"})
        resp = self.client.head("/rest/users", headers=headers)
        self.assertEqual(resp.status_code, 405)
        self.run.assert_not_awaited()

    def test_login_and_health_bypass_the_gate(self) -> None:
        resp = self.client.post("/rest/auth/login", json={})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
