"""
Pydantic Schemas Package

Request/response models for the HTTP layer. They are kept separate from
the SQLAlchemy models so that internal columns (password hashes, lookup
keys such as username_lower and name_key) never leak into responses.
"""

from cocktail_api.schemas.cocktail import CocktailDetailResponse, CocktailResponse
from cocktail_api.schemas.rating import (
    RatingCreate,
    RatingSummaryResponse,
    ReviewResponse,
)
from cocktail_api.schemas.user import (
    FavoriteToggleRequest,
    FavoritesReplaceRequest,
    FavoritesResponse,
    IngredientsResponse,
    IngredientsUpdateRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserProfileResponse,
    UserSummary,
)

__all__ = [
    # Cocktail schemas
    "CocktailResponse",
    "CocktailDetailResponse",
    # Rating schemas
    "RatingCreate",
    "RatingSummaryResponse",
    "ReviewResponse",
    # User schemas
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "UserSummary",
    "UserProfileResponse",
    "FavoritesReplaceRequest",
    "FavoriteToggleRequest",
    "FavoritesResponse",
    "IngredientsUpdateRequest",
    "IngredientsResponse",
]
