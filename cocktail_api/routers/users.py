"""
Users Router

Owner-only endpoints: every route requires a bearer token whose user id
matches {user_id}; anyone else gets 403.

Endpoints:
- GET /users/{user_id} - Profile with favorites and ingredients
- PUT /users/{user_id}/favorites - Replace the whole favorites list
- PATCH /users/{user_id}/favorites - Toggle one favorite
- PATCH /users/{user_id}/ingredients - Replace the ingredient list
"""

from fastapi import APIRouter, Request

from cocktail_api.config import get_settings
from cocktail_api.dependencies import DbSession, SelfUserId
from cocktail_api.schemas.cocktail import CocktailResponse
from cocktail_api.schemas.user import (
    FavoriteToggleRequest,
    FavoritesReplaceRequest,
    FavoritesResponse,
    IngredientsResponse,
    IngredientsUpdateRequest,
    UserProfileResponse,
)
from cocktail_api.services import favorites, users
from cocktail_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not your account"},
        404: {"description": "User not found"},
    },
)


@router.get(
    "/{user_id}",
    response_model=UserProfileResponse,
    summary="Get your profile",
)
@limiter.limit(settings.rate_limit_default)
def get_profile(
    request: Request,
    owner_id: SelfUserId,
    db: DbSession,
) -> UserProfileResponse:
    profile = users.get_user_profile(db, owner_id)
    user = profile.user
    return UserProfileResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        favorites=user.favorites,
        favorite_cocktails=[
            CocktailResponse.from_cocktail(c) for c in profile.favorite_cocktails
        ],
        ingredients=list(user.ingredients or []),
        created_at=user.created_at,
    )


@router.put(
    "/{user_id}/favorites",
    response_model=FavoritesResponse,
    summary="Replace favorites",
    description="Replace the whole list. Duplicates are removed, order is kept.",
)
@limiter.limit(settings.rate_limit_write)
def replace_favorites(
    request: Request,
    owner_id: SelfUserId,
    payload: FavoritesReplaceRequest,
    db: DbSession,
) -> FavoritesResponse:
    return FavoritesResponse(
        favorites=favorites.replace_favorites(db, owner_id, payload.favorites)
    )


@router.patch(
    "/{user_id}/favorites",
    response_model=FavoritesResponse,
    summary="Toggle a favorite",
    description=(
        "Add the cocktail if it is not a favorite, remove it if it is. "
        "Pass action='add' or action='remove' to force a direction."
    ),
)
@limiter.limit(settings.rate_limit_write)
def toggle_favorite(
    request: Request,
    owner_id: SelfUserId,
    payload: FavoriteToggleRequest,
    db: DbSession,
) -> FavoritesResponse:
    return FavoritesResponse(
        favorites=favorites.toggle_favorite(db, owner_id, payload.cocktail_id, payload.action)
    )


@router.patch(
    "/{user_id}/ingredients",
    response_model=IngredientsResponse,
    summary="Update your ingredients",
    description="Entries are trimmed; blanks and duplicates are dropped.",
)
@limiter.limit(settings.rate_limit_write)
def update_ingredients(
    request: Request,
    owner_id: SelfUserId,
    payload: IngredientsUpdateRequest,
    db: DbSession,
) -> IngredientsResponse:
    return IngredientsResponse(
        ingredients=users.update_ingredients(db, owner_id, payload.ingredients)
    )
