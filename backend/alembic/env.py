"""Alembic environment for the CogniCanvas schema."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from cognicanvas.config import get_settings
from cognicanvas.db.base import Base
from cognicanvas.db import models  # noqa: F401 - registers the tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Migrations always use a sync driver: psycopg2 for PostgreSQL, pysqlite for a
# local SQLite file.
url = get_settings().database_url_sync
is_sqlite = url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL to the script output without connecting."""
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run against a live database."""
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=is_sqlite,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
