"""Alembic environment configuration."""

import sys
from pathlib import Path
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

# Add the parent directory to Python path so we can import campuscircle
sys.path.insert(0, str(Path(__file__).parent.parent))

from campuscircle.config import settings
from campuscircle.db.base import Base

# Import all models to ensure they are registered
from campuscircle.models import developer_info, post, student, user  # noqa

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata
target_metadata = Base.metadata


def sync_database_url() -> str:
    """Convert the asyncpg URL to a psycopg2 URL for synchronous migrations."""
    database_url = settings.SYNC_DATABASE_URL
    if database_url.startswith("postgresql://"):
        # asyncpg uses 'ssl=false/true/require', psycopg2 uses 'sslmode=disable/require'
        for sep in ("?", "&"):
            database_url = database_url.replace(f"{sep}ssl=false", f"{sep}sslmode=disable")
            database_url = database_url.replace(f"{sep}ssl=true", f"{sep}sslmode=require")
            database_url = database_url.replace(f"{sep}ssl=require", f"{sep}sslmode=require")
    return database_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=sync_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    config.set_main_option("sqlalchemy.url", sync_database_url())

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
