"""
SQLAlchemy 2.0 engine, session factory and declarative base.

Handlers are synchronous; FastAPI runs them in its threadpool, which keeps
bcrypt hashing off the event loop. Each request gets its own Session from
get_db(); services commit or roll back explicitly.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from cocktail_api.config import Settings, get_settings

settings = get_settings()


def build_engine(config: Settings) -> Engine:
    """
    Create the engine for config.database_url.

    SQLite is used by local runs and the test suite; it gets no sized pool
    and its connections may be shared across the handler threadpool.
    """
    if config.is_sqlite:
        return create_engine(
            config.database_url,
            connect_args={"check_same_thread": False},
            echo=config.debug,
        )

    return create_engine(
        config.database_url,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=True,
        echo=config.debug,
    )


engine = build_engine(settings)

# Services decide when to flush and commit.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base; its metadata is what Alembic autogenerates against."""


def get_db() -> Generator[Session, None, None]:
    """Yield one Session per request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create any missing tables. Deployments run `alembic upgrade head` instead."""
    # Registers every model on Base.metadata
    import cocktail_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
