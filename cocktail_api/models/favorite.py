"""
Favorite Model

Links a user to a cocktail they marked as favorite.

The cocktail side is a weak reference: cocktail_id is a plain column with
no foreign key, so a favorite survives even if the cocktail it points to
does not exist. Read paths skip ids that cannot be resolved.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cocktail_api.database import Base


class Favorite(Base):
    """
    Favorite link between a user and a cocktail id.

    Attributes:
        id: Surrogate key, also gives insertion order
        user_id: Owning user
        cocktail_id: Favorited cocktail id (weak reference)
        created_at: When the cocktail was added
    """

    __tablename__ = "user_favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cocktail_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="Cocktail id (not enforced as a foreign key)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user = relationship("User", back_populates="favorite_links")

    __table_args__ = (
        # A cocktail appears at most once in a user's favorites
        UniqueConstraint("user_id", "cocktail_id", name="uq_favorite_user_cocktail"),
    )

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, cocktail_id={self.cocktail_id})>"
