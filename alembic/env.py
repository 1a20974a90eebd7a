# alembic/env.py
from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import create_engine
from alembic import context

from microblog.core.config import settings
from microblog.db.base import Base

# registra todas las tablas en Base.metadata
from microblog.users.models import User  # noqa: F401
from microblog.profile.models import Profile  # noqa: F401
from microblog.feed.models import Post, PostLike  # noqa: F401
from microblog.follows.models import Follow  # noqa: F401

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _sync_url(url: str) -> str:
    """
    Alembic corre con motor SÍNCRONO (psycopg3):
    +asyncpg → +psycopg; sin sufijo → se agrega +psycopg.
    """
    if "+asyncpg" in url:
        return url.replace("+asyncpg", "+psycopg")
    if "+psycopg" in url:
        return url
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def run_migrations_offline():
    context.configure(
        url=_sync_url(settings.DATABASE_URL),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(_sync_url(settings.DATABASE_URL))
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
