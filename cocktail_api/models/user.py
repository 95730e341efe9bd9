"""
Registered account.

username keeps the casing the person typed; username_lower carries the
unique index so "Alice" and "alice" cannot both register. Favorites live in
their own table (see models/favorite.py) and are exposed here as an ordered
list of cocktail ids.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from cocktail_api.database import Base
from cocktail_api.utils.ids import new_id

if TYPE_CHECKING:
    from cocktail_api.models.favorite import Favorite


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------
    username: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Display username (case preserved)",
    )
    username_lower: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        index=True,
        nullable=False,
        comment="Lowercased username for case-insensitive uniqueness and login",
    )
    email: Mapped[str] = mapped_column(
        String(254),
        unique=True,
        index=True,
        nullable=False,
        comment="Lowercased email address",
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    # -------------------------------------------------------------------------
    # Bar inventory
    # -------------------------------------------------------------------------
    ingredients: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Ingredients the user has at home",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    favorite_links: Mapped[list["Favorite"]] = relationship(
        "Favorite",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Favorite.id",
    )

    @validates("username")
    def _sync_username_lower(self, key: str, value: str) -> str:
        self.username_lower = value.strip().lower()
        return value

    @property
    def favorites(self) -> list[str]:
        """Favorite cocktail ids in the order they were added."""
        return [link.cocktail_id for link in self.favorite_links]

    def __repr__(self) -> str:
        return f"User(id='{self.id}', username='{self.username}')"
