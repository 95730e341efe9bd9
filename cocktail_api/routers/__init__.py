"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* (register, login)
- cocktails.py: /api/v1/cocktails/* (list, detail, create)
- ratings.py: /api/v1/ratings/* (summary, rate)
- users.py: /api/v1/users/* (profile, favorites, ingredients)

Each router is imported and registered in main.py.
"""

from cocktail_api.routers.auth import router as auth_router
from cocktail_api.routers.cocktails import router as cocktails_router
from cocktail_api.routers.ratings import router as ratings_router
from cocktail_api.routers.users import router as users_router

__all__ = [
    "auth_router",
    "cocktails_router",
    "ratings_router",
    "users_router",
]
