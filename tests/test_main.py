"""
Tests for application-level endpoints and error responses.
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from cocktail_api import database, main
from cocktail_api.main import create_app, format_error_location
from cocktail_api.models import Favorite


class TestHealthEndpoints:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["rate_limiting"]["enabled"] is False

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["docs"] == "/docs"


class TestErrorResponses:
    def test_invalid_json_body(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Invalid data"
        assert response.json()["errors"]

    def test_error_location_format(self):
        assert format_error_location(("body", "favorites", 2)) == "favorites[2]"
        assert format_error_location(("body", "user", "email")) == "user.email"
        assert format_error_location(("path", "user_id")) == "user_id"
        assert format_error_location(("body",)) == "body"


class TestUnhandledErrors:
    def test_details_stay_out_of_the_response_in_debug_mode(self, monkeypatch):
        monkeypatch.setattr(main.settings, "debug", True)
        app = create_app()

        @app.get("/explode")
        def explode():
            raise RuntimeError("connection to db.internal:5432 refused")

        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/explode")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "An internal error occurred."}
        assert "db.internal" not in response.text


class TestSchema:
    def test_create_tables(self, tmp_path, monkeypatch):
        engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
        monkeypatch.setattr(database, "engine", engine)

        database.create_tables()

        assert set(inspect(engine).get_table_names()) == {
            "users",
            "cocktails",
            "cocktail_ratings",
            "user_favorites",
        }
        engine.dispose()

    def test_favorite_cocktail_id_comment_matches_migration(self):
        column = Favorite.__table__.c.cocktail_id
        assert column.comment == "Cocktail id (not enforced as a foreign key)"
        assert not column.foreign_keys
