"""Tests for the /auth endpoints and token handling."""

from datetime import timedelta

import pytest
from jose import JWTError

from chatapp.core.security import (
    create_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from conftest import DEFAULT_PASSWORD, auth_headers, make_user


class TestSignup:
    def test_signup_creates_user_and_sets_cookie(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"fullName": "Ada Lovelace", "email": "Ada@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["displayName"] == "Ada Lovelace"
        assert body["email"] == "ada@example.com"
        assert body["token"]
        assert "jwt" in response.cookies

    def test_duplicate_email(self, client, alice):
        response = client.post(
            "/api/auth/signup",
            json={"fullName": "Alice Again", "email": "alice@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already exists"

    @pytest.mark.parametrize(
        "payload",
        [
            {"fullName": "Ada", "email": "ada@example.com", "password": "123"},
            {"fullName": "   ", "email": "ada@example.com", "password": "secret123"},
            {"fullName": "Ada", "email": "not-an-email", "password": "secret123"},
        ],
    )
    def test_invalid_signup_payload(self, client, payload):
        response = client.post("/api/auth/signup", json=payload)

        assert response.status_code == 422


class TestLogin:
    def test_login_returns_token(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == str(alice.id)
        assert body["token"]

    def test_wrong_password(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_email(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 400

    def test_inactive_user(self, client, db):
        make_user(db, "Dormant Dan", "dan@example.com", is_active=False)

        response = client.post(
            "/api/auth/login",
            json={"email": "dan@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 403

    def test_login_records_last_login(self, client, db, alice):
        client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )

        db.refresh(alice)
        assert alice.last_login is not None


class TestCheckAndLogout:
    def test_check_with_bearer_token(self, client, alice):
        response = client.get("/api/auth/check", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"
        assert "token" not in response.json()

    def test_check_with_cookie(self, client, alice):
        client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )

        response = client.get("/api/auth/check")

        assert response.status_code == 200
        assert response.json()["id"] == str(alice.id)

    def test_check_without_token(self, client):
        response = client.get("/api/auth/check")

        assert response.status_code == 401

    def test_logout_clears_cookie(self, client, alice):
        client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )

        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert client.get("/api/auth/check").status_code == 401


class TestSecurity:
    def test_password_hash_round_trip(self):
        hashed = get_password_hash("secret123")

        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_token_type_is_enforced(self):
        token = create_token("user-1", timedelta(minutes=5), token_type="refresh")

        with pytest.raises(JWTError):
            decode_token(token, expected_type="access")

    def test_expired_token_is_rejected(self):
        token = create_token("user-1", timedelta(minutes=-5), token_type="access")

        with pytest.raises(JWTError):
            decode_token(token, expected_type="access")
