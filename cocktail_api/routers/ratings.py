"""
Ratings Router

Endpoints:
- GET /ratings/{cocktail_id} - Average, count and reviews of a cocktail
- POST /ratings/{cocktail_id} - Rate a cocktail (authenticated)

Business Rules:
- One rating per user per cocktail; rating again replaces the previous
  score and comment
"""

from fastapi import APIRouter, Request

from cocktail_api.config import get_settings
from cocktail_api.dependencies import CurrentUser, DbSession
from cocktail_api.schemas.rating import RatingCreate, RatingSummaryResponse
from cocktail_api.schemas.user import MessageResponse
from cocktail_api.services import ratings
from cocktail_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/ratings",
    tags=["Ratings"],
    responses={
        404: {"description": "Cocktail not found"},
    },
)


@router.get(
    "/{cocktail_id}",
    response_model=RatingSummaryResponse,
    summary="Get cocktail ratings",
    description="Average score (one decimal, 0 when unrated), count and reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_ratings(
    request: Request,
    cocktail_id: str,
    db: DbSession,
) -> RatingSummaryResponse:
    return RatingSummaryResponse.from_summary(ratings.get_ratings(db, cocktail_id))


@router.post(
    "/{cocktail_id}",
    response_model=MessageResponse,
    summary="Rate a cocktail",
    description="Give 1-5 stars and an optional comment. Requires authentication.",
)
@limiter.limit(settings.rate_limit_write)
def rate_cocktail(
    request: Request,
    cocktail_id: str,
    payload: RatingCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    ratings.rate(db, cocktail_id, current_user.id, payload.score, payload.comment)
    return MessageResponse(message="Rating saved successfully.")
