"""
Tests for authentication endpoints and the bearer token gate.

This module contains tests for signup, password and federated signin,
token verification and the protected-route dependency.
"""

from datetime import timedelta

import pytest
from jose import jwt
from sqlalchemy import func, select

from vibelytics.config import settings
from vibelytics.core.exceptions import ConfigurationError
from vibelytics.models.user import User
from vibelytics.services import mood_journal
from vibelytics.utils.dates import utcnow
from vibelytics.utils.security import (
    TokenStatus,
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def count_users(sync_db) -> int:
    return sync_db.execute(select(func.count()).select_from(User)).scalar_one()


class TestSignup:
    """Test POST /api/signup."""

    def test_signup_creates_user(self, client):
        response = client.post(
            "/api/signup",
            json={"name": "Jane", "email": "Jane@Example.com", "password": "hunter22"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "User created successfully"
        assert data["token"]
        assert data["user"]["name"] == "Jane"
        assert data["user"]["email"] == "jane@example.com"
        assert "password" not in data["user"]
        assert "hashedPassword" not in data["user"]

        verification = verify_token(data["token"])
        assert verification.is_valid
        assert verification.user_id == data["user"]["id"]

    def test_signup_duplicate_email(self, client, registered_user, sync_db):
        response = client.post(
            "/api/signup",
            json={"name": "Other", "email": "TEST@example.com", "password": "another-pass"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "User with this email already exists"
        assert count_users(sync_db) == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "a@example.com", "password": "pw123456"},
            {"name": "A", "password": "pw123456"},
            {"name": "A", "email": "a@example.com"},
            {"name": "A", "email": "not-an-email", "password": "pw123456"},
        ],
    )
    def test_signup_missing_or_invalid_fields(self, client, payload):
        response = client.post("/api/signup", json=payload)
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("Invalid or missing fields")
        assert "error" in data


class TestSignin:
    """Test POST /api/signin with email and password."""

    def test_signin_success(self, client, registered_user):
        response = client.post(
            "/api/signin",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Sign in successful"
        assert data["user"]["id"] == registered_user["user"]["id"]
        assert verify_token(data["token"]).user_id == registered_user["user"]["id"]

    def test_signin_email_is_case_insensitive(self, client, registered_user):
        response = client.post(
            "/api/signin",
            json={"email": " Test@Example.COM ", "password": "testpassword123"},
        )
        assert response.status_code == 200

    def test_signin_wrong_password(self, client, registered_user):
        response = client.post(
            "/api/signin",
            json={"email": "test@example.com", "password": "wrong-password"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_signin_unknown_email_is_indistinguishable(self, client, registered_user):
        wrong_password = client.post(
            "/api/signin",
            json={"email": "test@example.com", "password": "wrong-password"},
        )
        unknown_email = client.post(
            "/api/signin",
            json={"email": "nobody@example.com", "password": "whatever"},
        )
        assert unknown_email.status_code == 401
        assert unknown_email.json() == wrong_password.json()

    def test_signin_without_credentials(self, client):
        response = client.post("/api/signin", json={"email": "test@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide email and password"


class TestFederatedSignin:
    """Test POST /api/signin with a Google ID token."""

    def test_first_signin_creates_account(self, client, identity_verifier, sync_db):
        response = client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["name"] == "Alice"

        stored = sync_db.execute(select(User)).scalars().one()
        assert stored.google_id == "google-sub-alice"
        assert stored.hashed_password is None

    def test_repeat_signin_returns_same_account(self, client, identity_verifier, sync_db):
        first = client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        second = client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        assert first.json()["user"]["id"] == second.json()["user"]["id"]
        assert count_users(sync_db) == 1

    def test_signin_links_existing_email(self, client, identity_verifier, sync_db):
        signup = client.post(
            "/api/signup",
            json={"name": "Alice Local", "email": "alice@example.com", "password": "pw-alice"},
        )
        response = client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == signup.json()["user"]["id"]

        stored = sync_db.execute(select(User)).scalars().one()
        assert stored.google_id == "google-sub-alice"
        assert stored.hashed_password is not None

    def test_password_signin_rejected_for_federated_only_account(self, client, identity_verifier):
        client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        response = client.post(
            "/api/signin",
            json={"email": "alice@example.com", "password": "anything"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_rejected_federated_token(self, client, identity_verifier, sync_db):
        response = client.post("/api/signin", json={"federatedToken": "forged"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid federated token"
        assert count_users(sync_db) == 0


class TestTokens:
    """Test token issue and verification."""

    def test_token_round_trip(self):
        token = create_access_token(42)
        verification = verify_token(token)
        assert verification.status is TokenStatus.VALID
        assert verification.user_id == 42

    def test_expired_token(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-5))
        verification = verify_token(token)
        assert verification.status is TokenStatus.EXPIRED
        assert verification.user_id is None

    def test_tampered_token(self):
        token = create_access_token(42)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        assert verify_token(tampered).status is TokenStatus.MALFORMED

    def test_token_signed_with_other_secret(self):
        token = jwt.encode(
            {"sub": "42", "exp": utcnow() + timedelta(hours=1)},
            "some-other-secret",
            algorithm="HS256",
        )
        assert verify_token(token).status is TokenStatus.MALFORMED

    def test_token_with_non_numeric_subject(self):
        token = jwt.encode(
            {"sub": "not-a-number", "exp": utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm="HS256",
        )
        assert verify_token(token).status is TokenStatus.MALFORMED

    def test_garbage_token(self):
        assert verify_token("not-a-token").status is TokenStatus.MALFORMED

    def test_missing_secret_is_configuration_error(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        with pytest.raises(ConfigurationError):
            create_access_token(42)
        with pytest.raises(ConfigurationError):
            verify_token("anything")

    def test_missing_secret_on_protected_route(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        response = client.get("/api/user/me", headers=auth_headers)
        assert response.status_code == 500
        assert response.json()["message"] == "Server configuration error"


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash("s3cret")
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_no_hash_never_matches(self):
        assert not verify_password("s3cret", None)


class TestProtectedRoutes:
    """Test the bearer token gate on protected routes."""

    def test_get_me(self, client, registered_user, auth_headers):
        response = client.get("/api/user/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"] == registered_user["user"]

    def test_missing_header_never_reaches_handler(self, client, monkeypatch):
        calls = []

        async def spy(*args, **kwargs):
            calls.append((args, kwargs))

        monkeypatch.setattr(mood_journal, "get_latest_mood", spy)

        response = client.get("/api/mood/today")
        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "No token provided"
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert calls == []

    @pytest.mark.parametrize(
        "header",
        ["Basic dXNlcjpwYXNz", "Bearer", "bearer abc.def.ghi", "Bearer a b"],
    )
    def test_malformed_authorization_header(self, client, header):
        response = client.get("/api/user/me", headers={"Authorization": header})
        assert response.status_code == 401
        assert response.json()["message"] == "No token provided"

    def test_invalid_token(self, client):
        response = client.get("/api/user/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_expired_token(self, client, registered_user):
        token = create_access_token(
            registered_user["user"]["id"], expires_delta=timedelta(seconds=-5)
        )
        response = client.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_token_for_missing_user(self, client):
        token = create_access_token(9999)
        response = client.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "User not found"

    def test_error_detail_hidden_in_production(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = client.get("/api/user/me")
        assert response.status_code == 401
        assert "error" not in response.json()

    def test_error_detail_shown_outside_production(self, client):
        response = client.get("/api/user/me")
        assert response.json()["error"]["expectedFormat"] == "Bearer <token>"


class TestMissingSecretWritesNothing:
    """Without JWT_SECRET, account endpoints fail before touching the database."""

    def test_signup_without_secret(self, client, sync_db, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        response = client.post(
            "/api/signup",
            json={"name": "Jane", "email": "jane@example.com", "password": "hunter22"},
        )
        assert response.status_code == 500
        assert response.json()["message"] == "Server configuration error"
        assert count_users(sync_db) == 0

    def test_signup_retry_after_secret_is_set(self, client, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        client.post(
            "/api/signup",
            json={"name": "Jane", "email": "jane@example.com", "password": "hunter22"},
        )
        monkeypatch.undo()

        response = client.post(
            "/api/signup",
            json={"name": "Jane", "email": "jane@example.com", "password": "hunter22"},
        )
        assert response.status_code == 201

    def test_federated_signin_without_secret(self, client, identity_verifier, sync_db, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        response = client.post("/api/signin", json={"federatedToken": "google-token-alice"})
        assert response.status_code == 500
        assert count_users(sync_db) == 0


class TestPasswordLength:
    """bcrypt only looks at the first 72 bytes of a password."""

    def test_72_bytes_of_multibyte_characters_accepted(self, client):
        password = "é" * 36
        response = client.post(
            "/api/signup",
            json={"name": "Zoé", "email": "zoe@example.com", "password": password},
        )
        assert response.status_code == 201

        response = client.post(
            "/api/signin", json={"email": "zoe@example.com", "password": password}
        )
        assert response.status_code == 200

    def test_more_than_72_bytes_rejected(self, client, sync_db):
        response = client.post(
            "/api/signup",
            json={"name": "Zoé", "email": "zoe@example.com", "password": "é" * 37},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or missing fields: password"
        assert count_users(sync_db) == 0

    def test_72_ascii_characters_accepted(self, client):
        response = client.post(
            "/api/signup",
            json={"name": "Max", "email": "max@example.com", "password": "x" * 72},
        )
        assert response.status_code == 201
