from fastapi.testclient import TestClient

ALICE = {"fullName": "Alice Liddell", "email": "Alice@Example.com", "password": "wonderland"}


def _register(client: TestClient, payload: dict[str, str] = ALICE):
    return client.post("/api/auth/register", json=payload)


def _login(client: TestClient, email: str = "alice@example.com", password: str = "wonderland"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_health_is_public(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_register_returns_public_profile(client):
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["name"] == "Alice Liddell"
    assert "createdAt" in body["user"]
    assert "password_hash" not in body["user"]
    assert "set-cookie" not in response.headers


def test_register_duplicate_email(client):
    _register(client)

    response = _register(client, {**ALICE, "email": "ALICE@example.com"})

    assert response.status_code == 409
    assert response.json()["type"] == "conflict"


def test_register_validation(client):
    short_password = _register(client, {**ALICE, "password": "12345"})
    bad_email = _register(client, {**ALICE, "email": "not-an-email"})
    missing_name = client.post("/api/auth/register", json={"email": "x@example.com", "password": "secret1"})

    assert short_password.status_code == 400
    assert bad_email.status_code == 400
    assert bad_email.json()["message"] == "Invalid email address"
    assert missing_name.status_code == 400
    assert missing_name.json()["type"] == "validation_error"


def test_login_sets_session_cookie(client):
    _register(client)

    response = _login(client)

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@example.com"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("auth-token=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=86400" in set_cookie
    assert "Path=/" in set_cookie
    assert "SameSite=strict" in set_cookie
    assert "; Secure" not in set_cookie


def test_login_failures_are_indistinguishable(client):
    _register(client)

    wrong_password = _login(client, password="looking-glass")
    unknown_email = _login(client, email="nobody@example.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "message": "Invalid email or password",
        "type": "authentication_error",
    }


def test_session_lifecycle(client):
    _register(client)
    assert client.get("/api/auth/verify").status_code == 401

    _login(client)

    verified = client.get("/api/auth/verify")
    assert verified.status_code == 200
    assert verified.json()["user"]["email"] == "alice@example.com"

    session_user = client.get("/api/auth/user")
    assert session_user.status_code == 200
    assert session_user.json()["user"]["id"] == verified.json()["user"]["id"]

    logout = client.post("/api/auth/logout")
    assert logout.status_code == 200
    assert logout.json() == {"message": "Logout successful"}
    assert "Max-Age=0" in logout.headers["set-cookie"]

    assert client.get("/api/auth/verify").status_code == 401
    assert client.get("/api/auth/user").status_code == 401


def test_logout_without_session_succeeds(client):
    assert client.post("/api/auth/logout").status_code == 200


def test_session_user_requires_cookie_even_with_identity_headers(client):
    registered = _register(client).json()["user"]

    response = client.get(
        "/api/auth/user", headers={"x-user-id": registered["id"], "x-user-email": registered["email"]}
    )

    assert response.status_code == 401


def test_verify_ignores_identity_headers(client):
    registered = _register(client).json()["user"]

    response = client.get(
        "/api/auth/verify", headers={"x-user-id": registered["id"], "x-user-email": registered["email"]}
    )

    assert response.status_code == 401


def test_forged_cookie_is_rejected(client):
    _register(client)

    response = client.get("/api/auth/verify", headers={"cookie": "auth-token=eyJhbGciOiJIUzI1NiJ9.e30.forged"})

    assert response.status_code == 401
    assert response.json()["type"] == "authentication_error"


def test_protected_api_without_cookie_is_denied_by_gatekeeper(client):
    response = client.get("/api/workspaces")

    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required", "type": "authentication_error"}


def test_session_user_with_non_ascii_email(client):
    _register(client, {"fullName": "Jörg Müller", "email": "jörg@example.com", "password": "kartoffel"})
    _login(client, email="jörg@example.com", password="kartoffel")

    response = client.get("/api/auth/user")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "jörg@example.com"
    assert response.json()["user"]["name"] == "Jörg Müller"
