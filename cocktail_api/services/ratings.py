"""
Ratings Service

Rating aggregation and the one-rating-per-user rule for cocktails.

Averages are never stored: every read derives them from the current
rating rows, so partial updates cannot make a cached aggregate drift.

Concurrency:
============
rate() is read-then-write. Two requests from the same user for the same
cocktail can race; the unique (cocktail_id, user_id) constraint guarantees
that the loser of an insert race re-applies its write as an update instead
of creating a second row. The last write wins.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cocktail_api.exceptions import ValidationError
from cocktail_api.models import CocktailRating, User
from cocktail_api.services.lookups import get_cocktail_or_404
from cocktail_api.utils.ids import ensure_valid_id

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5
COMMENT_MAX_LENGTH = 500
ANONYMOUS = "Anonymous"


@dataclass(frozen=True)
class Review:
    user: str
    score: int
    comment: str | None
    created_at: datetime


@dataclass(frozen=True)
class RatingSummary:
    average: float
    count: int
    reviews: list[Review] = field(default_factory=list)


def average_score(scores: Iterable[int]) -> float:
    """
    Mean of the scores rounded half-up to one decimal, 0 when empty.

    Example:
        >>> average_score([4, 5, 5])
        4.7
        >>> average_score([])
        0.0
    """
    scores = list(scores)
    if not scores:
        return 0.0

    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def resolve_usernames(db: Session, user_ids: Iterable[str]) -> dict[str, str]:
    """Map user ids to usernames in one query. Unknown ids are left out."""
    ids = set(user_ids)
    if not ids:
        return {}

    stmt = select(User.id, User.username).where(User.id.in_(ids))
    return {user_id: username for user_id, username in db.execute(stmt).all()}


def summarize_ratings(
    ratings: Sequence[CocktailRating],
    usernames: Mapping[str, str],
) -> RatingSummary:
    """Build the public rating view; unresolved raters show as Anonymous."""
    reviews = [
        Review(
            user=usernames.get(rating.user_id, ANONYMOUS),
            score=rating.score,
            comment=rating.comment,
            created_at=rating.created_at,
        )
        for rating in ratings
    ]
    return RatingSummary(
        average=average_score(rating.score for rating in ratings),
        count=len(ratings),
        reviews=reviews,
    )


def get_ratings(db: Session, cocktail_id: str) -> RatingSummary:
    """
    Get the average, count and reviews of a cocktail.

    Raises:
        ValidationError: Malformed cocktail id
        NotFoundError: Cocktail does not exist
    """
    cocktail = get_cocktail_or_404(db, cocktail_id)
    usernames = resolve_usernames(db, (r.user_id for r in cocktail.ratings))
    return summarize_ratings(cocktail.ratings, usernames)


def validate_score(score: object) -> int:
    # bool is an int subclass; True must not count as a 1-star rating
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError.for_field(
            "score", "score must be an integer between 1 and 5"
        )
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError.for_field(
            "score", "score must be an integer between 1 and 5"
        )
    return score


def normalize_comment(comment: object) -> str | None:
    if comment is None:
        return None
    if not isinstance(comment, str):
        raise ValidationError.for_field("comment", "comment must be a string")

    comment = comment.strip()
    if len(comment) > COMMENT_MAX_LENGTH:
        raise ValidationError.for_field(
            "comment", f"comment must be at most {COMMENT_MAX_LENGTH} characters"
        )
    return comment or None


def _find_rating(db: Session, cocktail_id: str, user_id: str) -> CocktailRating | None:
    stmt = select(CocktailRating).where(
        CocktailRating.cocktail_id == cocktail_id,
        CocktailRating.user_id == user_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def rate(
    db: Session,
    cocktail_id: str,
    user_id: str,
    score: int,
    comment: str | None = None,
) -> CocktailRating:
    """
    Create or replace a user's rating of a cocktail.

    If the user already rated the cocktail, its score and comment are
    replaced in place (the rating keeps its position); otherwise a new
    rating is appended. Calling it twice with the same arguments leaves
    the same stored state.

    Raises:
        ValidationError: Score not an integer 1-5, comment too long,
            or malformed ids
        NotFoundError: Cocktail does not exist
    """
    score = validate_score(score)
    comment = normalize_comment(comment)
    user_id = ensure_valid_id(user_id, "user_id")
    cocktail = get_cocktail_or_404(db, cocktail_id)

    rating = next((r for r in cocktail.ratings if r.user_id == user_id), None)
    if rating is not None:
        rating.score = score
        rating.comment = comment
    else:
        rating = CocktailRating(user_id=user_id, score=score, comment=comment)
        cocktail.ratings.append(rating)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted this user's rating first
        db.rollback()
        rating = _find_rating(db, cocktail.id, user_id)
        if rating is None:
            raise
        rating.score = score
        rating.comment = comment
        db.commit()

    db.refresh(rating)
    logger.info(f"Rating saved: cocktail={cocktail.id} user={user_id} score={score}")
    return rating
