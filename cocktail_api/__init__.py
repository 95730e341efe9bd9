"""
Cocktails API Application Package

REST API for a cocktail catalog: registration/login, cocktail listing and
creation with image uploads, per-user favorites and ingredient lists, and
star ratings on cocktails.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Application error taxonomy mapped to HTTP responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (db session, auth)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (auth, ratings, favorites, catalog, uploads)
- utils/: Helper functions
"""

__version__ = "0.1.0"
