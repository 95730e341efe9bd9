"""
Tests for Favorites

- PUT /api/v1/users/{user_id}/favorites (replace)
- PATCH /api/v1/users/{user_id}/favorites (toggle)
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from cocktail_api.exceptions import NotFoundError, ValidationError
from cocktail_api.models import Cocktail, Favorite, User
from cocktail_api.services import favorites
from cocktail_api.services.favorites import FavoriteAction
from cocktail_api.utils.ids import new_id

from tests.conftest import auth_header


def favorites_url(user_id: str) -> str:
    return f"/api/v1/users/{user_id}/favorites"


class TestReplaceFavorites:
    """Tests for PUT /api/v1/users/{user_id}/favorites"""

    def test_replace(self, client: TestClient, alice: User, alice_headers, mojito: Cocktail):
        response = client.put(
            favorites_url(alice.id),
            json={"favorites": [mojito.id]},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"favorites": [mojito.id]}

    def test_duplicates_removed_order_kept(self, client: TestClient, alice: User, alice_headers):
        a, b = new_id(), new_id()
        response = client.put(
            favorites_url(alice.id),
            json={"favorites": [b, a, b]},
            headers=alice_headers,
        )

        assert response.json() == {"favorites": [b, a]}

    def test_replace_overwrites_previous(self, client: TestClient, alice: User, alice_headers):
        a, b = new_id(), new_id()
        client.put(favorites_url(alice.id), json={"favorites": [a, b]}, headers=alice_headers)

        response = client.put(
            favorites_url(alice.id), json={"favorites": [b]}, headers=alice_headers
        )

        assert response.json() == {"favorites": [b]}

    def test_replace_with_same_ids(self, client: TestClient, alice: User, alice_headers):
        a = new_id()
        client.put(favorites_url(alice.id), json={"favorites": [a]}, headers=alice_headers)

        response = client.put(
            favorites_url(alice.id), json={"favorites": [a]}, headers=alice_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"favorites": [a]}

    def test_clear(self, client: TestClient, alice: User, alice_headers):
        client.put(favorites_url(alice.id), json={"favorites": [new_id()]}, headers=alice_headers)

        response = client.put(favorites_url(alice.id), json={"favorites": []}, headers=alice_headers)

        assert response.json() == {"favorites": []}

    def test_malformed_id_rejects_whole_request(
        self, client: TestClient, db_session: Session, alice: User, alice_headers
    ):
        response = client.put(
            favorites_url(alice.id),
            json={"favorites": [new_id(), "not-an-id"]},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "favorites[1]"
        assert db_session.execute(select(func.count()).select_from(Favorite)).scalar_one() == 0

    def test_other_users_favorites_forbidden(
        self, client: TestClient, alice: User, bob_headers
    ):
        response = client.put(
            favorites_url(alice.id), json={"favorites": []}, headers=bob_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_requires_authentication(self, client: TestClient, alice: User):
        response = client.put(favorites_url(alice.id), json={"favorites": []})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestToggleFavorite:
    """Tests for PATCH /api/v1/users/{user_id}/favorites"""

    def test_toggle_on_and_off(self, client: TestClient, alice: User, alice_headers, mojito):
        url = favorites_url(alice.id)

        first = client.patch(url, json={"cocktail_id": mojito.id}, headers=alice_headers)
        assert first.json() == {"favorites": [mojito.id]}

        second = client.patch(url, json={"cocktail_id": mojito.id}, headers=alice_headers)
        assert second.json() == {"favorites": []}

    def test_explicit_add_is_idempotent(self, client: TestClient, alice: User, alice_headers):
        url = favorites_url(alice.id)
        cocktail_id = new_id()

        for _ in range(2):
            response = client.patch(
                url, json={"cocktail_id": cocktail_id, "action": "add"}, headers=alice_headers
            )

        assert response.json() == {"favorites": [cocktail_id]}

    def test_explicit_remove_when_absent(self, client: TestClient, alice: User, alice_headers):
        response = client.patch(
            favorites_url(alice.id),
            json={"cocktail_id": new_id(), "action": "remove"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"favorites": []}

    def test_unknown_action(self, client: TestClient, alice: User, alice_headers):
        response = client.patch(
            favorites_url(alice.id),
            json={"cocktail_id": new_id(), "action": "flip"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "action"

    def test_malformed_cocktail_id(self, client: TestClient, alice: User, alice_headers):
        response = client.patch(
            favorites_url(alice.id), json={"cocktail_id": "42"}, headers=alice_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"][0]["field"] == "cocktail_id"

    def test_other_user_forbidden(self, client: TestClient, alice: User, bob_headers):
        response = client.patch(
            favorites_url(alice.id), json={"cocktail_id": new_id()}, headers=bob_headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_malformed_user_id(self, client: TestClient, alice_headers):
        response = client.patch(
            favorites_url("me"), json={"cocktail_id": new_id()}, headers=alice_headers
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_account_no_longer_exists(self, client: TestClient):
        ghost = User(id=new_id(), username="ghost", email="g@example.com", hashed_password="x")
        response = client.patch(
            favorites_url(ghost.id), json={"cocktail_id": new_id()}, headers=auth_header(ghost)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "User not found."}


class TestFavoritesService:
    """Tests for the favorites service called directly."""

    def test_toggle_twice_restores_state(self, db_session: Session, alice: User):
        start = favorites.replace_favorites(db_session, alice.id, [new_id(), new_id()])
        cocktail_id = new_id()

        favorites.toggle_favorite(db_session, alice.id, cocktail_id)
        result = favorites.toggle_favorite(db_session, alice.id, cocktail_id)

        assert result == start

    def test_favorites_are_weak_references(self, db_session: Session, alice: User):
        """Ids are not checked against the catalog."""
        missing = new_id()
        assert favorites.toggle_favorite(db_session, alice.id, missing) == [missing]

    def test_ids_are_lowercased(self, db_session: Session, alice: User):
        cocktail_id = new_id()
        result = favorites.toggle_favorite(
            db_session, alice.id, cocktail_id.upper(), FavoriteAction.ADD
        )
        assert result == [cocktail_id]

    def test_action_accepts_plain_strings(self, db_session: Session, alice: User):
        cocktail_id = new_id()
        favorites.toggle_favorite(db_session, alice.id, cocktail_id, "add")
        assert favorites.toggle_favorite(db_session, alice.id, cocktail_id, "add") == [cocktail_id]

    def test_invalid_action(self, db_session: Session, alice: User):
        with pytest.raises(ValidationError):
            favorites.toggle_favorite(db_session, alice.id, new_id(), "flip")

    def test_replace_rejects_string(self, db_session: Session, alice: User):
        with pytest.raises(ValidationError):
            favorites.replace_favorites(db_session, alice.id, new_id())

    def test_unknown_user(self, db_session: Session):
        with pytest.raises(NotFoundError):
            favorites.replace_favorites(db_session, new_id(), [])


class TestConcurrentToggle:
    """
    A favorite committed by another request between our read and our write
    must be absorbed: the add succeeds and the link exists once.
    """

    def test_lost_add_race_keeps_one_link(self, file_engine, monkeypatch):
        Sessions = sessionmaker(bind=file_engine, autoflush=False)

        with Sessions() as setup:
            user = User(username="alice", email="alice@example.com", hashed_password="x")
            setup.add(user)
            setup.commit()
            user_id = user.id
        cocktail_id = new_id()

        original_lookup = favorites.get_user_or_404

        def lookup_then_race(db, uid, field="user_id"):
            loaded = original_lookup(db, uid, field)
            with Sessions() as other:
                other.add(Favorite(user_id=user_id, cocktail_id=cocktail_id))
                other.commit()
            return loaded

        monkeypatch.setattr(favorites, "get_user_or_404", lookup_then_race)

        with Sessions() as db:
            result = favorites.toggle_favorite(db, user_id, cocktail_id, FavoriteAction.ADD)
            assert result == [cocktail_id]

        with Sessions() as check:
            links = check.execute(select(Favorite)).scalars().all()
            assert [(link.user_id, link.cocktail_id) for link in links] == [(user_id, cocktail_id)]
