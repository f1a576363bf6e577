"""
Alembic migration environment for the bracket database.

The database URL comes from ideabracket settings (DATABASE_URL or .env),
never from alembic.ini, and autogenerate compares against the ORM models
in ideabracket.db.models.

Usage:
    alembic upgrade head                    # apply to the configured database
    alembic upgrade head --sql > out.sql    # render SQL without connecting
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from ideabracket.config import settings
from ideabracket.db.models import Base

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout instead of executing it."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to the database and apply migrations."""
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
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
