"""
Cocktail Model

The central model of the catalog. A cocktail owns its ratings: they have
no lifecycle of their own and are deleted together with the cocktail.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cocktail_api.database import Base
from cocktail_api.utils.ids import new_id

if TYPE_CHECKING:
    from cocktail_api.models.rating import CocktailRating


class Cocktail(Base):
    """
    Cocktail model representing recipes in the catalog.

    Table: cocktails

    Fields:
    - name: Display name (2-100 chars)
    - name_key: Uniqueness key for the name. Equal to the name when names
      are case-sensitive, its casefolded form otherwise (see the
      cocktail_name_case_sensitive setting)
    - instructions: Preparation steps
    - ingredients: List of ingredient strings
    - alcoholic: Whether the drink contains alcohol
    - image: Public URL of the uploaded picture, if any

    Relationships:
    - ratings: One-to-Many, owned, kept in insertion order

    Example:
        cocktail = Cocktail(
            name="Mojito",
            name_key="Mojito",
            ingredients=["rum", "mint", "lime"],
            alcoholic=True,
        )
    """

    __tablename__ = "cocktails"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Cocktail name"
    )

    name_key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Normalized name used by the unique constraint"
    )

    instructions: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
        comment="Preparation instructions"
    )

    ingredients: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Ingredient names"
    )

    alcoholic: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    image: Mapped[str | None] = mapped_column(
        String(512),
        nullable=True,
        comment="Public URL of the cocktail picture"
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

    ratings: Mapped[list["CocktailRating"]] = relationship(
        "CocktailRating",
        back_populates="cocktail",
        cascade="all, delete-orphan",
        order_by="CocktailRating.id",
    )

    def __repr__(self) -> str:
        return f"Cocktail(id='{self.id}', name='{self.name}')"
