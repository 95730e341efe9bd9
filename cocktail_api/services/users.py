"""
Users Service

Profile reads and the user's personal ingredient list.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from cocktail_api.exceptions import FieldError, ValidationError
from cocktail_api.models import Cocktail, User
from cocktail_api.services.lookups import get_user_or_404

logger = logging.getLogger(__name__)

INGREDIENT_MAX_LENGTH = 64


@dataclass(frozen=True)
class UserProfile:
    user: User
    favorite_cocktails: list[Cocktail]


def clean_ingredient_list(values: Iterable[object], field: str = "ingredients") -> list[str]:
    """
    Trim entries, drop blanks and reject anything that is not a short string.

    Raises:
        ValidationError: Non-string entry or entry over 64 characters
    """
    if isinstance(values, (str, bytes)):
        raise ValidationError.for_field(field, f"{field} must be an array")

    cleaned: list[str] = []
    errors: list[FieldError] = []
    for index, value in enumerate(values):
        if not isinstance(value, str):
            errors.append(FieldError(f"{field}[{index}]", "must be a string"))
            continue
        value = value.strip()
        if len(value) > INGREDIENT_MAX_LENGTH:
            errors.append(FieldError(
                f"{field}[{index}]",
                f"must be at most {INGREDIENT_MAX_LENGTH} characters",
            ))
        elif value:
            cleaned.append(value)

    if errors:
        raise ValidationError(errors)
    return cleaned


def load_cocktails(db: Session, cocktail_ids: list[str]) -> list[Cocktail]:
    """Load cocktails by id in the given order, skipping ids that do not exist."""
    if not cocktail_ids:
        return []

    stmt = (
        select(Cocktail)
        .options(selectinload(Cocktail.ratings))
        .where(Cocktail.id.in_(cocktail_ids))
    )
    by_id = {cocktail.id: cocktail for cocktail in db.execute(stmt).scalars()}
    return [by_id[cocktail_id] for cocktail_id in cocktail_ids if cocktail_id in by_id]


def get_user_profile(db: Session, user_id: str) -> UserProfile:
    """
    Get a user with their favorite cocktails resolved.

    Favorites pointing at cocktails that no longer exist are skipped in
    favorite_cocktails but still listed in user.favorites.

    Raises:
        ValidationError: Malformed user id
        NotFoundError: User does not exist
    """
    user = get_user_or_404(db, user_id)
    return UserProfile(user=user, favorite_cocktails=load_cocktails(db, user.favorites))


def update_ingredients(db: Session, user_id: str, ingredients: Iterable[object]) -> list[str]:
    """
    Replace the user's ingredient list.

    Entries are trimmed, blanks dropped and duplicates removed (first
    occurrence kept).

    Raises:
        ValidationError: Invalid entries
        NotFoundError: User does not exist
    """
    cleaned = list(dict.fromkeys(clean_ingredient_list(ingredients)))
    user = get_user_or_404(db, user_id)

    user.ingredients = cleaned
    db.commit()
    db.refresh(user)

    logger.info(f"Ingredients updated for user {user.id}: {len(cleaned)} items")
    return list(user.ingredients)
