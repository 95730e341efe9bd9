"""
Entity Lookups

Shared "get or raise" helpers used by the services. Each one validates the
caller-supplied id before touching the database.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from cocktail_api.exceptions import NotFoundError
from cocktail_api.models import Cocktail, User
from cocktail_api.utils.ids import ensure_valid_id


def get_cocktail_or_404(
    db: Session,
    cocktail_id: str,
    field: str = "cocktail_id",
) -> Cocktail:
    """
    Get a cocktail by id with its ratings loaded.

    Raises:
        ValidationError: Malformed id
        NotFoundError: No cocktail with this id
    """
    cocktail_id = ensure_valid_id(cocktail_id, field)
    stmt = (
        select(Cocktail)
        .options(selectinload(Cocktail.ratings))
        .where(Cocktail.id == cocktail_id)
    )
    cocktail = db.execute(stmt).scalar_one_or_none()

    if cocktail is None:
        raise NotFoundError("Cocktail not found.")
    return cocktail


def get_user_or_404(db: Session, user_id: str, field: str = "user_id") -> User:
    """
    Get a user by id with favorite links loaded.

    Raises:
        ValidationError: Malformed id
        NotFoundError: No user with this id
    """
    user_id = ensure_valid_id(user_id, field)
    stmt = (
        select(User)
        .options(selectinload(User.favorite_links))
        .where(User.id == user_id)
    )
    user = db.execute(stmt).scalar_one_or_none()

    if user is None:
        raise NotFoundError("User not found.")
    return user
