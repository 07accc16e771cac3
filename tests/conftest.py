import pytest

from core import config

TEST_SECRET = "test-secret-token"


@pytest.fixture(autouse=True)
def api_secret(monkeypatch):
    monkeypatch.delenv("API_SECRET_FILE", raising=False)
    monkeypatch.setenv("API_SECRET", TEST_SECRET)
    config.reset_cache()
    yield TEST_SECRET
    config.reset_cache()
