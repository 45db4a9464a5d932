import pytest
from pydantic import ValidationError

from conftest import login, register
from scripts.create_admin import create_admin


def test_create_admin_then_login(client):
    user_id = create_admin("root", "root@example.com", "secret123")
    headers = login(client, "root@example.com")

    resp = client.get("/api/users/", headers=headers)
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [user_id]


def test_create_admin_promotes_existing_user(client):
    user = register(client, "alice", "alice@example.com")
    assert create_admin("alice", "alice@example.com", "ignored1") == user["id"]

    headers = login(client, "alice@example.com")
    assert client.get("/api/users/", headers=headers).status_code == 200


def test_create_admin_validates_input(client):
    with pytest.raises(ValidationError):
        create_admin("x", "not-an-email", "1")
