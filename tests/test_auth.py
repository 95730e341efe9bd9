"""
Tests for Authentication

- Registration: POST /api/v1/auth/register
- Login: POST /api/v1/auth/login
- Bearer token verification on protected endpoints
"""

from datetime import timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from cocktail_api.exceptions import AuthError, ConflictError, ValidationError
from cocktail_api.models import User
from cocktail_api.services import auth
from cocktail_api.services.security import create_access_token, decode_token, verify_password
from cocktail_api.utils.ids import new_id

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"


def register(client: TestClient, username: str, email: str, password: str = "password1"):
    return client.post(
        REGISTER_URL,
        json={"username": username, "email": email, "password": password},
    )


class TestRegistration:
    """Tests for POST /api/v1/auth/register"""

    def test_register_success(self, client: TestClient, db_session: Session):
        response = register(client, "alice", "alice@example.com")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {"message": "Registration successful."}

        user = db_session.execute(select(User).where(User.username == "alice")).scalar_one()
        assert user.email == "alice@example.com"
        assert user.hashed_password != "password1"
        assert verify_password("password1", user.hashed_password)

    def test_register_does_not_issue_token(self, client: TestClient):
        response = register(client, "alice", "alice@example.com")
        assert "token" not in response.json()

    def test_email_is_trimmed_and_lowercased(self, client: TestClient, db_session: Session):
        register(client, "alice", "  Alice@Example.COM ")

        user = db_session.execute(select(User)).scalar_one()
        assert user.email == "alice@example.com"

    def test_username_casing_is_preserved(self, client: TestClient, db_session: Session):
        register(client, "Alice", "alice@example.com")

        user = db_session.execute(select(User)).scalar_one()
        assert user.username == "Alice"
        assert user.username_lower == "alice"

    def test_duplicate_username_any_casing(self, client: TestClient):
        register(client, "alice", "alice@example.com")

        response = register(client, "Alice", "other@example.com", "password2")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Username is already taken."

    def test_duplicate_email_any_casing(self, client: TestClient):
        register(client, "alice", "alice@example.com")

        response = register(client, "alice2", "ALICE@example.com")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Email is already registered."

    def test_invalid_email(self, client: TestClient):
        response = register(client, "alice", "not-an-email")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["detail"] == "Invalid data"
        assert [e["field"] for e in body["errors"]] == ["email"]

    @pytest.mark.parametrize("username", ["al", "a" * 31, "   "])
    def test_username_length(self, client: TestClient, username: str):
        response = register(client, username, "alice@example.com")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "username"

    @pytest.mark.parametrize("password", ["short", "p" * 129])
    def test_password_length(self, client: TestClient, password: str):
        response = register(client, "alice", "alice@example.com", password)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "password"

    def test_missing_fields(self, client: TestClient):
        response = client.post(REGISTER_URL, json={"username": "alice"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"email", "password"}

    def test_nothing_written_on_validation_error(self, client: TestClient, db_session: Session):
        register(client, "al", "alice@example.com")
        assert db_session.execute(select(User)).first() is None


class TestRegisterService:
    """Tests for auth.register() called directly."""

    def test_returns_user(self, db_session: Session):
        user = auth.register(db_session, " alice ", "alice@example.com", "password1")

        assert user.id
        assert user.username == "alice"

    def test_conflict_is_case_insensitive(self, db_session: Session):
        auth.register(db_session, "alice", "alice@example.com", "password1")

        with pytest.raises(ConflictError):
            auth.register(db_session, "ALICE", "x@example.com", "password1")

    def test_collects_all_field_errors(self, db_session: Session):
        with pytest.raises(ValidationError) as exc_info:
            auth.register(db_session, "a", "bad", "short")

        fields = [e.field for e in exc_info.value.errors]
        assert fields == ["username", "email", "password"]


class TestConcurrentRegistration:
    """
    An account committed by another request after the duplicate check but
    before our insert must come back as a conflict, not a server error.
    """

    def test_lost_insert_race_becomes_conflict(self, file_engine, monkeypatch):
        Sessions = sessionmaker(bind=file_engine, autoflush=False)
        original_hash = auth.hash_password

        def hash_then_race(password):
            with Sessions() as other:
                other.add(User(
                    username="Alice",
                    email="alice@example.com",
                    hashed_password=original_hash(password),
                ))
                other.commit()
            return original_hash(password)

        monkeypatch.setattr(auth, "hash_password", hash_then_race)

        with Sessions() as db:
            with pytest.raises(ConflictError) as exc_info:
                auth.register(db, "alice", "alice@example.com", "password1")
            assert exc_info.value.message == "Email or username is already registered."

        with Sessions() as check:
            users = check.execute(select(User)).scalars().all()
            assert [u.username for u in users] == ["Alice"]


class TestLogin:
    """Tests for POST /api/v1/auth/login"""

    def test_login_success(self, client: TestClient, alice: User):
        response = client.post(LOGIN_URL, json={"username": "alice", "password": "password1"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 7 * 24 * 60 * 60
        assert data["user"] == {
            "id": alice.id,
            "username": "alice",
            "email": "alice@example.com",
        }
        assert decode_token(data["token"])["sub"] == alice.id

    def test_login_username_is_case_insensitive(self, client: TestClient, alice: User):
        response = client.post(LOGIN_URL, json={"username": "ALICE", "password": "password1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["username"] == "alice"

    def test_wrong_password(self, client: TestClient, alice: User):
        response = client.post(LOGIN_URL, json={"username": "alice", "password": "wrongpw"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Invalid credentials."}

    def test_unknown_user_looks_like_wrong_password(self, client: TestClient, alice: User):
        wrong_password = client.post(
            LOGIN_URL, json={"username": "alice", "password": "wrongpw"}
        )
        unknown_user = client.post(
            LOGIN_URL, json={"username": "nobody", "password": "wrongpw"}
        )

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert (
            wrong_password.headers["www-authenticate"]
            == unknown_user.headers["www-authenticate"]
            == "Bearer"
        )

    def test_register_then_login(self, client: TestClient):
        """alice registers, fails with a wrong password, then logs in."""
        assert register(client, "alice", "alice@example.com").status_code == 201
        assert register(client, "Alice", "other@example.com", "password2").status_code == 409

        failed = client.post(LOGIN_URL, json={"username": "alice", "password": "wrongpw"})
        assert failed.status_code == 401

        response = client.post(LOGIN_URL, json={"username": "alice", "password": "password1"})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["username"] == "alice"
        assert user["email"] == "alice@example.com"
        assert user["id"]


class TestVerify:
    """Tests for auth.verify()"""

    def test_valid_token(self):
        user_id = new_id()
        assert auth.verify(f"Bearer {create_access_token(user_id)}") == user_id

    def test_scheme_is_case_insensitive(self):
        user_id = new_id()
        assert auth.verify(f"bearer {create_access_token(user_id)}") == user_id

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Token abc", "Bearer a b"])
    def test_missing_or_malformed_header(self, header):
        with pytest.raises(AuthError) as exc_info:
            auth.verify(header)
        assert exc_info.value.message == auth.MISSING_TOKEN

    def test_invalid_token(self):
        with pytest.raises(AuthError) as exc_info:
            auth.verify("Bearer not-a-jwt")
        assert exc_info.value.message == auth.INVALID_TOKEN

    def test_expired_token(self):
        token = create_access_token(new_id(), expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthError):
            auth.verify(f"Bearer {token}")

    def test_subject_must_be_an_id(self):
        token = create_access_token("not-an-id")
        with pytest.raises(AuthError):
            auth.verify(f"Bearer {token}")


class TestProtectedEndpoints:
    def test_missing_token(self, client: TestClient, alice: User):
        response = client.get(f"/api/v1/users/{alice.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Access denied. No token provided."}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token(self, client: TestClient, alice: User):
        response = client.get(
            f"/api/v1/users/{alice.id}",
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Invalid token."}
