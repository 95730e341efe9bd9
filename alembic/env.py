"""
Alembic migration environment for the Cocktails API.

The URL comes from DATABASE_URL via get_settings(), so alembic.ini never
holds credentials. Importing cocktail_api.models registers every table on
Base.metadata for --autogenerate.

    alembic revision --autogenerate -m "add cocktail tags"
    alembic upgrade head
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from cocktail_api.config import get_settings
from cocktail_api.database import Base
from cocktail_api.models import Cocktail, CocktailRating, Favorite, User  # noqa: F401

settings = get_settings()

config = context.config

# DATABASE_URL overrides sqlalchemy.url from alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Render the migration as SQL for a DBA to apply by hand.

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite needs batch mode for ALTER TABLE
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
