from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from agora.auth import verify_token
from agora.models.user import User


def _register(client: TestClient, **overrides):
    payload = {"username": "dana", "email": "Dana@Example.com", "password": "secret1"}
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_returns_token_for_new_user(client: TestClient, db: Session) -> None:
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "dana"
    assert verify_token(body["token"]) == body["userId"]

    user = db.query(User).filter_by(id=body["userId"]).one()
    assert user.email == "dana@example.com"
    assert user.hashed_password != "secret1"


def test_register_rejects_duplicate_email_or_username(client: TestClient, alice: User) -> None:
    by_email = _register(client, username="someone", email="alice@example.com")
    by_username = _register(client, username="alice", email="other@example.com")

    for response in (by_email, by_username):
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email or username."


def test_register_field_rules(client: TestClient) -> None:
    short_name = _register(client, username="ab")
    bad_email = _register(client, email="not-an-email")
    short_password = _register(client, password="12345")

    assert short_name.status_code == 400
    assert short_name.json()["message"] == "Username must be a string with at least 3 characters."
    assert bad_email.status_code == 400
    assert bad_email.json()["message"] == "Valid email is required."
    assert short_password.status_code == 400
    assert short_password.json()["message"] == "Password must be at least 6 characters long."


def test_register_missing_field_is_422(client: TestClient) -> None:
    response = client.post("/api/auth/register", json={"username": "dana"})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_login_with_valid_credentials(
    client: TestClient, alice: User, test_password: str
) -> None:
    response = client.post(
        "/api/auth/login", json={"email": "ALICE@example.com", "password": test_password}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == alice.id
    assert body["username"] == "alice"
    assert verify_token(body["token"]) == alice.id


def test_login_failures_share_one_message(client: TestClient, alice: User) -> None:
    wrong_password = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "password123"}
    )

    for response in (wrong_password, unknown_email):
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials."


def test_logout_acknowledges(client: TestClient) -> None:
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully. Please clear your token."}


def test_protected_route_requires_token(client: TestClient) -> None:
    missing = client.get("/api/contacts")
    invalid = client.get("/api/contacts", headers={"Authorization": "Bearer nope"})

    assert missing.status_code == 401
    assert missing.json()["message"] == "No token, authorization denied."
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Token is not valid."
