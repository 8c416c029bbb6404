"""Alembic environment for the record store.

Migrations run against the same engine the API uses, so DATABASE_URL (and
the SQLite fallback in rewardjar.database) only has to be configured once.
"""
from logging.config import fileConfig

from alembic import context

from rewardjar.database import Base, engine
from rewardjar import models  # noqa: F401 - register the records table for autogenerate

config = context.config

if config.config_file_name is not None:
    # keep the app's own loggers alive when migrations run in-process
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _configure(dialect_name: str, **kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        # SQLite cannot ALTER most columns; batch mode rebuilds the table
        render_as_batch=dialect_name == "sqlite",
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Write the DDL to the output buffer instead of executing it."""
    _configure(
        engine.dialect.name,
        url=engine.url.render_as_string(hide_password=False),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        _configure(connection.dialect.name, connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
