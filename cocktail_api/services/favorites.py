"""
Favorites Service

Maintains which cocktails a user has marked as favorite.

Favorites are weak references: ids are checked for well-formedness only,
not for the existence of the cocktail.

Concurrency:
============
toggle_favorite() reads the current membership and then writes. Two
concurrent adds of the same cocktail are absorbed by the unique
(user_id, cocktail_id) constraint; concurrent opposite toggles are
last-write-wins.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cocktail_api.exceptions import FieldError, ValidationError
from cocktail_api.models import Favorite
from cocktail_api.services.lookups import get_user_or_404
from cocktail_api.utils.ids import ensure_valid_id, is_valid_id

logger = logging.getLogger(__name__)


class FavoriteAction(str, Enum):
    """Explicit toggle direction. When omitted, the direction is inferred."""

    ADD = "add"
    REMOVE = "remove"


def _validate_ids(cocktail_ids: Iterable[object]) -> list[str]:
    """Validate every id, then de-duplicate keeping the first occurrence."""
    if isinstance(cocktail_ids, (str, bytes)):
        raise ValidationError.for_field("favorites", "favorites must be an array")

    ids = list(cocktail_ids)
    errors = [
        FieldError(f"favorites[{index}]", "favorites must contain valid cocktail ids")
        for index, value in enumerate(ids)
        if not is_valid_id(value)
    ]
    if errors:
        raise ValidationError(errors)

    return list(dict.fromkeys(value.lower() for value in ids))


def replace_favorites(
    db: Session,
    user_id: str,
    cocktail_ids: Iterable[str],
) -> list[str]:
    """
    Replace the user's whole favorites set.

    Returns:
        The new favorites, de-duplicated, in the given order

    Raises:
        ValidationError: Any malformed id (nothing is written)
        NotFoundError: User does not exist
    """
    ids = _validate_ids(cocktail_ids)
    user = get_user_or_404(db, user_id)

    user.favorite_links.clear()
    # Deletes must reach the database before re-inserting the same ids
    db.flush()
    user.favorite_links.extend(Favorite(cocktail_id=cocktail_id) for cocktail_id in ids)
    db.commit()

    db.refresh(user)
    logger.info(f"Favorites replaced for user {user.id}: {len(ids)} cocktails")
    return user.favorites


def toggle_favorite(
    db: Session,
    user_id: str,
    cocktail_id: str,
    action: FavoriteAction | None = None,
) -> list[str]:
    """
    Add or remove one cocktail from the user's favorites.

    Without an action, the cocktail is added when absent and removed when
    present, so two calls in a row restore the original state.

    Returns:
        The resulting favorites

    Raises:
        ValidationError: Malformed cocktail id or unknown action
        NotFoundError: User does not exist
    """
    cocktail_id = ensure_valid_id(cocktail_id, "cocktail_id")
    if action is not None:
        try:
            action = FavoriteAction(action)
        except ValueError:
            raise ValidationError.for_field("action", "action must be 'add' or 'remove'")

    user = get_user_or_404(db, user_id)
    link = next(
        (link for link in user.favorite_links if link.cocktail_id == cocktail_id),
        None,
    )

    if action is None:
        action = FavoriteAction.REMOVE if link is not None else FavoriteAction.ADD

    if action is FavoriteAction.ADD and link is None:
        user.favorite_links.append(Favorite(cocktail_id=cocktail_id))
    elif action is FavoriteAction.REMOVE and link is not None:
        user.favorite_links.remove(link)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request already added this cocktail
        db.rollback()

    db.refresh(user)
    logger.info(f"Favorite {action.value}: user={user.id} cocktail={cocktail_id}")
    return user.favorites
