"""
User Pydantic Schemas

Request and response shapes for authentication and the user's own data
(profile, favorites, ingredients).

Schemas:
- RegisterRequest / LoginRequest: Credentials
- LoginResponse: Bearer token plus the public user summary
- UserProfileResponse: The caller's profile (never the password hash)
- Favorites* / Ingredients*: Bodies and responses of the user sub-resources

Length rules (username 3-30, password 8-128, ingredient entries up to 64)
are enforced by the services so the same rules apply outside HTTP.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from cocktail_api.schemas.cocktail import CocktailResponse
from cocktail_api.services.favorites import FavoriteAction


class RegisterRequest(BaseModel):
    """
    Example request body:
    {
        "username": "alice",
        "email": "alice@example.com",
        "password": "password1"
    }
    """

    username: str = Field(
        ...,
        description="Display name, 3-30 characters, unique ignoring case",
        examples=["alice"],
    )

    email: EmailStr = Field(
        ...,
        description="Email address, stored lowercased",
        examples=["alice@example.com"],
    )

    password: str = Field(
        ...,
        description="Password, 8-128 characters",
        examples=["password1"],
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., description="Username (case-insensitive)", examples=["alice"])
    password: str = Field(..., description="Password", examples=["password1"])


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    """Public identity returned with a login token."""

    id: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """
    Response for successful login.

    Example:
    {
        "token": "eyJhbGciOiJIUzI1NiIs...",
        "token_type": "bearer",
        "expires_in": 604800,
        "user": {"id": "...", "username": "alice", "email": "alice@example.com"}
    }
    """

    token: str = Field(..., description="JWT bearer token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserSummary


class UserProfileResponse(BaseModel):
    """
    The caller's own profile.

    favorites lists every stored id; favorite_cocktails only the ones that
    still exist in the catalog.
    """

    id: str
    username: str
    email: str
    favorites: list[str] = Field(default_factory=list)
    favorite_cocktails: list[CocktailResponse] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    created_at: datetime


class FavoritesReplaceRequest(BaseModel):
    favorites: list[str] = Field(
        ...,
        description="Complete list of favorite cocktail ids",
    )


class FavoriteToggleRequest(BaseModel):
    """
    Toggle one favorite.

    Without "action" the cocktail is added if absent and removed if present.
    """

    cocktail_id: str = Field(..., description="Cocktail id to add or remove")
    action: FavoriteAction | None = Field(
        default=None,
        description="Force 'add' or 'remove' instead of toggling",
    )


class FavoritesResponse(BaseModel):
    favorites: list[str]


class IngredientsUpdateRequest(BaseModel):
    ingredients: list[str] = Field(
        ...,
        description="Ingredients the user has at home, each at most 64 characters",
        examples=[["gin", "tonic", "lime"]],
    )


class IngredientsResponse(BaseModel):
    ingredients: list[str]
