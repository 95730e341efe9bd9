"""
Cocktails API application.

create_app() wires the routers under /api/<version>, the slowapi limiter,
CORS and the /uploads static mount. Every error leaves the API as a JSON
body with a "detail" message; validation failures also carry a list of
field errors, and anything unexpected is logged and reported as a bare 500.

Run with `uvicorn cocktail_api.main:app`.
"""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cocktail_api.config import get_settings
from cocktail_api.database import create_tables
from cocktail_api.dependencies import DbSession
from cocktail_api.exceptions import AppError, FieldError, ServerError, ValidationError
from cocktail_api.routers import (
    auth_router,
    cocktails_router,
    ratings_router,
    users_router,
)
from cocktail_api.services.rate_limiter import limiter, rate_limit_exceeded_handler
from cocktail_api.services.uploads import UPLOADS_URL_PATH, get_image_storage

# =============================================================================
# Logging
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def format_error_location(loc: Sequence[str | int]) -> str:
    """
    Turn a pydantic error location into a field name.

    ("body", "favorites", 2) -> "favorites[2]"
    """
    parts = list(loc)
    if len(parts) > 1 and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]

    field = ""
    for part in parts:
        if isinstance(part, int):
            field += f"[{part}]"
        else:
            field = f"{field}.{part}" if field else str(part)
    return field


# =============================================================================
# Startup and shutdown
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(f"{settings.app_name} starting ({settings.environment}, debug={settings.debug})")

    get_image_storage().ensure_directory()

    if settings.auto_create_tables:
        logger.warning("AUTO_CREATE_TABLES is on; creating missing tables")
        create_tables()

    yield

    logger.info(f"{settings.app_name} stopped")


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="""
## Cocktails API

Browse cocktails, rate them and keep track of favorites.

### Features
- **Cocktails**: List, view and create cocktails (with a picture)
- **Ratings**: 1-5 stars plus a comment, one rating per user per cocktail
- **Users**: Favorites and the ingredients you have at home

### Authentication
Log in at `/api/v1/auth/login` and send `Authorization: Bearer <token>`.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"Server error on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_payload(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        error = ValidationError([
            FieldError(format_error_location(err.get("loc", ())), err.get("msg", "Invalid value"))
            for err in exc.errors()
        ])
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        logger.error(f"Database error: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=ServerError().to_payload())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Last resort: the details go to the log only, also in debug mode."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=ServerError().to_payload())

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(cocktails_router, prefix=api_prefix)
    app.include_router(ratings_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Uploaded Images
    # -------------------------------------------------------------------------
    app.mount(
        UPLOADS_URL_PATH,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the database answers.",
    )
    def health_check(db: DbSession) -> dict:
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as e:
            logger.error(f"Health check database error: {e}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "ok" else "degraded",
            "app": settings.app_name,
            "version": settings.api_version,
            "database": database,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Module-level app for uvicorn
# =============================================================================

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cocktail_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
