"""
Cocktail Pydantic Schemas

Cocktails are created from a multipart form (so that an image can be
attached), which is why there is no CocktailCreate body schema: the router
declares the form fields and the catalog service validates them.

Schemas:
- CocktailResponse: A cocktail with its derived rating figures
- CocktailDetailResponse: A cocktail plus its reviews
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cocktail_api.models import Cocktail
from cocktail_api.schemas.rating import ReviewResponse
from cocktail_api.services.catalog import CocktailDetail
from cocktail_api.services.ratings import average_score


class CocktailResponse(BaseModel):
    """
    Schema for cocktail responses.

    average_rating and ratings_count are computed from the current ratings
    on every read; they are not stored columns.
    """

    id: str = Field(..., description="Unique cocktail identifier")
    name: str = Field(..., description="Cocktail name", examples=["Mojito"])
    instructions: str = Field(default="", description="Preparation steps")
    ingredients: list[str] = Field(
        default_factory=list,
        description="Ingredient names",
        examples=[["white rum", "lime", "mint", "sugar", "soda water"]],
    )
    alcoholic: bool = Field(default=False, description="Contains alcohol")
    image: str | None = Field(default=None, description="Public URL of the picture")

    average_rating: float = Field(default=0, description="Average score, 0 when unrated")
    ratings_count: int = Field(default=0, description="Number of ratings")

    created_at: datetime = Field(..., description="When the cocktail was added")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_cocktail(cls, cocktail: Cocktail) -> "CocktailResponse":
        return cls(
            id=cocktail.id,
            name=cocktail.name,
            instructions=cocktail.instructions,
            ingredients=list(cocktail.ingredients or []),
            alcoholic=cocktail.alcoholic,
            image=cocktail.image,
            average_rating=average_score(r.score for r in cocktail.ratings),
            ratings_count=len(cocktail.ratings),
            created_at=cocktail.created_at,
        )


class CocktailDetailResponse(CocktailResponse):
    reviews: list[ReviewResponse] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: CocktailDetail) -> "CocktailDetailResponse":
        base = CocktailResponse.from_cocktail(detail.cocktail)
        return cls(
            **base.model_dump(),
            reviews=[ReviewResponse.model_validate(r) for r in detail.ratings.reviews],
        )
