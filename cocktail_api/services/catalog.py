"""
Catalog Service

Creating and reading cocktails.

Ingredients Input:
==================
Clients send ingredients in one of two shapes:
- a structured list of strings (JSON bodies, scripts, tests)
- a serialized JSON array inside a multipart form field

parse_ingredients() is the single step that resolves both into a list.
A serialized value that is not a JSON array of strings becomes an empty
list; that is the only leniency, everything else is validated.

Image Rollback:
===============
create_cocktail() writes the image before inserting the row. If the row
cannot be committed, for whatever reason, the image file is deleted before
the error propagates.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from cocktail_api.config import get_settings
from cocktail_api.exceptions import ConflictError, FieldError, ValidationError
from cocktail_api.models import Cocktail
from cocktail_api.services.lookups import get_cocktail_or_404
from cocktail_api.services.ratings import RatingSummary, resolve_usernames, summarize_ratings
from cocktail_api.services.uploads import ImageStorage, StoredImage
from cocktail_api.services.users import clean_ingredient_list

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
INSTRUCTIONS_MAX_LENGTH = 4000
NAME_TAKEN = "This cocktail name is already taken."


@dataclass(frozen=True)
class SerializedIngredients:
    """Ingredients as JSON array text, as sent in multipart forms."""

    text: str | None


IngredientsInput = Sequence[str] | SerializedIngredients


@dataclass(frozen=True)
class ImageUpload:
    """Raw bytes of an uploaded picture and its declared content type."""

    data: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class CocktailDetail:
    cocktail: Cocktail
    ratings: RatingSummary


def parse_ingredients(raw: IngredientsInput | None) -> list[str]:
    """
    Resolve either ingredients shape into a clean list of strings.

    Raises:
        ValidationError: An entry is longer than 64 characters (or, for
            structured input, not a string)
    """
    if raw is None:
        return []

    if isinstance(raw, SerializedIngredients):
        if not raw.text or not raw.text.strip():
            return []
        try:
            decoded = json.loads(raw.text)
        except ValueError:
            logger.info("Ignoring malformed ingredients payload")
            return []
        if not isinstance(decoded, list) or not all(isinstance(i, str) for i in decoded):
            logger.info("Ignoring ingredients payload that is not a list of strings")
            return []
        raw = decoded

    return clean_ingredient_list(raw)


def cocktail_name_key(name: str, case_sensitive: bool | None = None) -> str:
    """Key used by the unique constraint on cocktail names."""
    if case_sensitive is None:
        case_sensitive = get_settings().cocktail_name_case_sensitive
    return name if case_sensitive else name.casefold()


def _validate_fields(name: object, instructions: object) -> tuple[str, str]:
    errors: list[FieldError] = []

    name = name.strip() if isinstance(name, str) else ""
    if not name:
        errors.append(FieldError("name", "name is required"))
    elif not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        errors.append(FieldError(
            "name",
            f"name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters long",
        ))

    if instructions is None:
        instructions = ""
    elif not isinstance(instructions, str):
        errors.append(FieldError("instructions", "instructions must be a string"))
        instructions = ""
    instructions = instructions.strip()
    if len(instructions) > INSTRUCTIONS_MAX_LENGTH:
        errors.append(FieldError(
            "instructions",
            f"instructions must be at most {INSTRUCTIONS_MAX_LENGTH} characters",
        ))

    if errors:
        raise ValidationError(errors)
    return name, instructions


def create_cocktail(
    db: Session,
    name: str,
    instructions: str | None = None,
    alcoholic: bool = False,
    ingredients: IngredientsInput | None = None,
    image: ImageUpload | None = None,
    storage: ImageStorage | None = None,
    case_sensitive: bool | None = None,
) -> Cocktail:
    """
    Create a cocktail, optionally with a picture.

    Order of operations:
    1. Validate name, instructions and ingredients
    2. Reject a name that is already taken
    3. Validate and store the image (if any)
    4. Insert the row; on any failure delete the stored image

    Raises:
        ValidationError: Invalid fields or image
        ConflictError: Name already taken (pre-check or unique constraint)
    """
    name, instructions = _validate_fields(name, instructions)
    ingredient_list = parse_ingredients(ingredients)
    name_key = cocktail_name_key(name, case_sensitive)

    if image is not None and storage is None:
        raise ValueError("An image storage is required to store an image")

    existing = db.execute(
        select(Cocktail.id).where(Cocktail.name_key == name_key)
    ).first()
    if existing is not None:
        raise ConflictError(NAME_TAKEN)

    stored: StoredImage | None = None
    if image is not None:
        stored = storage.save(image.data, image.content_type)

    cocktail = Cocktail(
        name=name,
        name_key=name_key,
        instructions=instructions,
        ingredients=ingredient_list,
        alcoholic=bool(alcoholic),
        image=stored.url if stored else None,
    )

    try:
        db.add(cocktail)
        db.commit()
    except IntegrityError:
        db.rollback()
        _discard_image(storage, stored)
        raise ConflictError(NAME_TAKEN)
    except Exception:
        db.rollback()
        _discard_image(storage, stored)
        raise

    db.refresh(cocktail)
    logger.info(f"Cocktail created: {cocktail.name} ({cocktail.id})")
    return cocktail


def _discard_image(storage: ImageStorage | None, stored: StoredImage | None) -> None:
    if storage is not None and stored is not None:
        logger.warning(f"Rolling back image {stored.filename} after failed insert")
        storage.delete(stored)


def list_cocktails(db: Session) -> list[Cocktail]:
    """All cocktails with their ratings loaded, oldest first."""
    stmt = (
        select(Cocktail)
        .options(selectinload(Cocktail.ratings))
        .order_by(Cocktail.created_at, Cocktail.name)
    )
    return list(db.execute(stmt).scalars().all())


def get_cocktail(db: Session, cocktail_id: str) -> CocktailDetail:
    """
    One cocktail with its rating summary (rater usernames resolved).

    Raises:
        ValidationError: Malformed id
        NotFoundError: Cocktail does not exist
    """
    cocktail = get_cocktail_or_404(db, cocktail_id, field="id")
    usernames = resolve_usernames(db, (r.user_id for r in cocktail.ratings))
    return CocktailDetail(cocktail=cocktail, ratings=summarize_ratings(cocktail.ratings, usernames))
