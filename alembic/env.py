"""Alembic environment for the accounts schema (users, user_profiles).

The URL comes from app settings so migrations and the API share DATABASE_URL;
Base.metadata drives autogenerate.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from app.core.config import settings

# Importing the package registers every model (User, Profile) on Base.metadata.
from app.models import Base

config = context.config
# Logging config is optional; alembic.ini in this repo defines it.
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        pass

target_metadata = Base.metadata


def get_url() -> str:
    """DATABASE_URL as validated by app.core.config (PostgreSQL only)."""
    return settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Emit the users / user_profiles DDL as SQL without connecting."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a throwaway connection (NullPool, no app pool)."""
    connectable = create_engine(get_url(), poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
