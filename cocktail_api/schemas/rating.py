"""
Rating Pydantic Schemas

Schemas:
- RatingCreate: Body of POST /ratings/{cocktail_id}
- ReviewResponse: One rating as shown to readers (rater's username, not id)
- RatingSummaryResponse: Average, count and reviews of a cocktail

Business Rules:
- Score is an integer from 1 to 5; floats, strings and booleans are refused
- One rating per user per cocktail; rating again replaces the old one
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cocktail_api.services.ratings import RatingSummary


class RatingCreate(BaseModel):
    """
    Example request body:
    {
        "score": 4,
        "comment": "Fresh and not too sweet"
    }
    """

    score: int = Field(
        ...,
        ge=1,
        le=5,
        strict=True,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        description="Optional comment, at most 500 characters after trimming",
        examples=["Fresh and not too sweet"],
    )


class ReviewResponse(BaseModel):
    user: str = Field(..., description="Username of the rater, or 'Anonymous'")
    score: int = Field(..., description="Stars given, 1-5")
    comment: str | None = Field(default=None, description="Rater's comment")
    created_at: datetime = Field(..., description="When the rating was first saved")

    model_config = ConfigDict(from_attributes=True)


class RatingSummaryResponse(BaseModel):
    """
    Aggregated ratings of one cocktail.

    The average is rounded half-up to one decimal and is 0 without ratings.
    """

    average: float = Field(..., description="Average score", examples=[4.5])
    count: int = Field(..., description="Number of ratings", examples=[2])
    reviews: list[ReviewResponse] = Field(default_factory=list)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "average": 3.5,
                "count": 2,
                "reviews": [
                    {
                        "user": "alice",
                        "score": 2,
                        "comment": None,
                        "created_at": "2024-01-15T10:30:00Z",
                    },
                    {
                        "user": "bob",
                        "score": 5,
                        "comment": "Perfect on a hot day",
                        "created_at": "2024-01-16T18:02:00Z",
                    },
                ],
            }
        },
    )

    @classmethod
    def from_summary(cls, summary: RatingSummary) -> "RatingSummaryResponse":
        return cls.model_validate(summary)
