"""
SQLAlchemy Models Package

Model Relationships:
- Cocktail -> CocktailRating: One-to-Many, owned (ratings are deleted
  with their cocktail)
- User -> Favorite: One-to-Many; Favorite.cocktail_id is a weak reference
  to a cocktail (no foreign key)

Import all models here to:
1. Make them available as: from cocktail_api.models import Cocktail, User
2. Ensure Alembic discovers them for migrations
"""

from cocktail_api.models.user import User
from cocktail_api.models.favorite import Favorite
from cocktail_api.models.cocktail import Cocktail
from cocktail_api.models.rating import CocktailRating

__all__ = [
    "User",
    "Favorite",
    "Cocktail",
    "CocktailRating",
]
