"""
Cocktail Rating Model

A user's 1-5 star rating of a cocktail, with an optional comment.

Business Rules:
- One rating per user per cocktail (unique constraint). Rating again
  replaces the score and comment of the existing row, so the rating keeps
  its original position in the cocktail's list.
- Score must be 1-5
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cocktail_api.database import Base


class CocktailRating(Base):
    """
    Rating model, owned by a Cocktail.

    Attributes:
        id: Surrogate key, also gives insertion order
        cocktail_id: Owning cocktail
        user_id: Rater
        score: 1-5 stars
        comment: Optional text (max 500 chars)
        created_at: When the rating was first given
        updated_at: When the rating was last replaced
    """

    __tablename__ = "cocktail_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    cocktail_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("cocktails.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )
    comment: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    cocktail = relationship("Cocktail", back_populates="ratings")

    __table_args__ = (
        UniqueConstraint("cocktail_id", "user_id", name="uq_rating_cocktail_user"),
        CheckConstraint("score >= 1 AND score <= 5", name="ck_rating_score_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<CocktailRating(cocktail_id={self.cocktail_id}, "
            f"user_id={self.user_id}, score={self.score})>"
        )
