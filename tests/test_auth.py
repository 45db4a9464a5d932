import jwt

from conftest import TEST_SECRET, login, register


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_register_returns_user_without_password(client):
    user = register(client, "alice", "Alice@Example.com")
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["is_admin"] is False
    assert "password" not in user
    assert "password_hash" not in user


def test_register_admin_role(client):
    user = register(client, "boss", "boss@example.com", role="admin")
    assert user["is_admin"] is True


def test_register_duplicate_email(client):
    register(client, "alice", "alice@example.com")
    resp = client.post(
        "/api/auth/register",
        json={"username": "alice2", "email": "alice@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists"


def test_register_validation_errors_are_400(client):
    cases = [
        {"username": "al", "email": "a@example.com", "password": "secret123"},
        {"username": "not-alnum", "email": "a@example.com", "password": "secret123"},
        {"username": "alice", "email": "not-an-email", "password": "secret123"},
        {"username": "alice", "email": "a@example.com", "password": "1234"},
        {"username": "alice", "email": "a@example.com", "password": "secret123", "role": "root"},
    ]
    for body in cases:
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 400, body
        assert resp.json()["detail"]


def test_login_issues_token_with_claims(client):
    user = register(client, "alice", "alice@example.com")
    resp = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["is_admin"] is False
    assert data["token_type"] == "bearer"

    claims = jwt.decode(data["token"], TEST_SECRET, algorithms=["HS256"])
    assert claims["sub"] == user["id"]
    assert claims["is_admin"] is False
    assert claims["exp"] - claims["iat"] == 3600


def test_login_unknown_user(client):
    resp = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User not found"


def test_login_wrong_password(client):
    register(client, "alice", "alice@example.com")
    resp = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials"


def test_logout(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully"}


def test_protected_route_requires_token(client):
    resp = client.get("/api/tasks/")
    assert resp.status_code == 401
    assert resp.json()["detail"]["message"] == "Access denied."
    assert resp.headers["www-authenticate"] == "Bearer"


def test_protected_route_rejects_bad_token(client):
    resp = client.get("/api/tasks/", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["details"].startswith("Invalid token")


def test_protected_route_rejects_token_for_missing_user(client):
    token = jwt.encode(
        {"sub": "00000000-0000-0000-0000-000000000000", "exp": 4102444800},
        TEST_SECRET,
        algorithm="HS256",
    )
    resp = client.get("/api/tasks/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["details"] == "User not found."


def test_expired_token_is_rejected(client):
    user = register(client, "alice", "alice@example.com")
    token = jwt.encode({"sub": user["id"], "exp": 1}, TEST_SECRET, algorithm="HS256")
    resp = client.get("/api/tasks/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["details"] == "Token has expired."


def test_login_headers_work(client):
    register(client, "alice", "alice@example.com")
    headers = login(client, "alice@example.com")
    assert client.get("/api/tasks/", headers=headers).status_code == 200
