"""
Tests for authentication API endpoints.
"""

import pytest
from datetime import datetime, timedelta

from fintrack.db.models import User, RefreshToken
from fintrack.auth.jwt import create_access_token, decode_token
from fintrack.auth.password import hash_password, verify_password
from fintrack.auth.tokens import hash_token

# Database setup is handled by conftest.py


class TestRegister:
    """Test registration endpoint."""

    def test_register_success(self, client, db_session):
        response = client.post(
            "/api/auth/register",
            json={"name": "Jamie", "email": "Jamie@Example.com", "password": "secret123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "jamie@example.com"
        assert data["user"]["name"] == "Jamie"
        assert data["token_type"] == "bearer"
        assert "access_token" in response.cookies

        user = db_session.query(User).filter(User.email == "jamie@example.com").first()
        assert user is not None
        assert user.hashed_password != "secret123"
        assert verify_password("secret123", user.hashed_password)

    def test_register_duplicate_email(self, client, test_user):
        response = client.post(
            "/api/auth/register",
            json={"name": "Again", "email": "TEST@example.com", "password": "secret123"},
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "A", "email": "not-an-email", "password": "secret123"},
            {"name": "A", "email": "a@example.com", "password": "123"},
            {"name": "", "email": "a@example.com", "password": "secret123"},
            {"email": "a@example.com", "password": "secret123"},
        ],
    )
    def test_register_invalid(self, client, payload):
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 422

    def test_register_password_too_long(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Long", "email": "long@example.com", "password": "x" * 80},
        )
        assert response.status_code == 422

    def test_register_password_limit_counts_bytes(self, client):
        """Multi-byte characters count toward bcrypt's byte limit."""
        response = client.post(
            "/api/auth/register",
            json={"name": "Long", "email": "long@example.com", "password": "é" * 40},
        )
        assert response.status_code == 422

    def test_register_password_at_limit(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Max", "email": "max@example.com", "password": "x" * 72},
        )
        assert response.status_code == 201

    def test_registered_token_works(self, client):
        tokens = client.post(
            "/api/auth/register",
            json={"name": "Sam", "email": "sam@example.com", "password": "secret123"},
        ).json()

        response = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {tokens['access_token']}"},
        )
        assert response.status_code == 200
        assert response.json()["email"] == "sam@example.com"


class TestLogin:
    """Test login endpoint."""

    def test_login_success(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["user"]["email"] == "test@example.com"

    def test_login_sets_cookies(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert "access_token" in response.cookies
        assert "refresh_token" in response.cookies

    def test_login_stores_refresh_hash(self, client, test_user, db_session):
        data = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        ).json()

        stored = db_session.query(RefreshToken).filter(
            RefreshToken.user_id == test_user.id
        ).all()
        assert [t.token_hash for t in stored] == [hash_token(data["refresh_token"])]

    def test_login_case_insensitive_email(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "Test@Example.COM", "password": "testpassword123"},
        )
        assert response.status_code == 200

    def test_login_invalid_email(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "wrong@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 401
        assert "Invalid email or password" in response.json()["detail"]

    def test_login_invalid_password(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )
        assert response.status_code == 401

    def test_login_password_too_long(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "x" * 80},
        )
        assert response.status_code == 401

    def test_verify_password_too_long(self):
        assert verify_password("x" * 80, hash_password("testpassword123")) is False

    def test_login_inactive_user(self, client, db_session):
        db_session.add(User(
            email="inactive@example.com",
            name="Inactive",
            hashed_password=hash_password("testpassword123"),
            is_active=False,
        ))
        db_session.commit()

        response = client.post(
            "/api/auth/login",
            json={"email": "inactive@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 403


class TestCurrentUser:
    """Test token handling on protected routes."""

    def test_me_with_bearer(self, authenticated_client):
        response = authenticated_client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["name"] == "Test User"

    def test_me_with_cookie(self, client, test_user):
        client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        response = client.get("/api/auth/me")
        assert response.status_code == 200

    def test_me_unauthenticated(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_me_invalid_token(self, client):
        response = client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_me_expired_token(self, client, test_user):
        token = create_access_token({"sub": test_user.id}, timedelta(seconds=-1))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_refresh_token_not_accepted_as_access(self, client, test_user):
        data = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        ).json()
        client.cookies.clear()

        response = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {data['refresh_token']}"},
        )
        assert response.status_code == 401


class TestRefresh:
    """Test token refresh."""

    def login(self, client):
        data = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        ).json()
        client.cookies.clear()
        return data

    def test_refresh_from_body(self, client, test_user):
        tokens = self.login(client)

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["refresh_token"] != tokens["refresh_token"]
        assert decode_token(data["access_token"])["sub"] == test_user.id

    def test_refresh_rotates_token(self, client, test_user):
        tokens = self.login(client)
        client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        client.cookies.clear()

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401

    def test_refresh_from_cookie(self, client, test_user):
        client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        response = client.post("/api/auth/refresh")
        assert response.status_code == 200

    def test_refresh_missing(self, client):
        response = client.post("/api/auth/refresh")
        assert response.status_code == 401

    def test_refresh_with_access_token(self, client, test_user):
        tokens = self.login(client)
        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        assert response.status_code == 401

    def test_refresh_expired_record(self, client, test_user, db_session):
        tokens = self.login(client)
        db_session.query(RefreshToken).update(
            {"expires_at": datetime.utcnow() - timedelta(minutes=1)}
        )
        db_session.commit()

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401


class TestLogout:
    """Test logout."""

    def test_logout_revokes_refresh_token(self, client, test_user):
        tokens = client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        ).json()

        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        client.cookies.clear()

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401

    def test_logout_requires_auth(self, client):
        response = client.post("/api/auth/logout")
        assert response.status_code == 401
