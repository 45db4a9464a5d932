import pytest
from fastapi.testclient import TestClient

from taskapi.core.config import get_settings
from taskapi.db.engine import dispose_engines

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """A TestClient backed by a fresh SQLite file per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.sqlite'}")
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()

    from taskapi.main import app

    with TestClient(app) as c:
        yield c

    dispose_engines()
    get_settings.cache_clear()


def register(client, username, email, password="secret123", role=None):
    body = {"username": username, "email": email, "password": password}
    if role is not None:
        body["role"] = role
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client, email, password="secret123"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def admin(client):
    user = register(client, "admin", "admin@example.com", role="admin")
    return user, login(client, "admin@example.com")


@pytest.fixture
def alice(client):
    user = register(client, "alice", "alice@example.com")
    return user, login(client, "alice@example.com")


@pytest.fixture
def bob(client):
    user = register(client, "bob", "bob@example.com")
    return user, login(client, "bob@example.com")
