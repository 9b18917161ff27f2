"""Alembic environment for the shared store all four services read and write.

The URL comes from bugle.config (DATABASE_URL, postgres URLs already rewritten
for asyncpg), so migrations always target the database the services use.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import bugle.models  # noqa: F401  (registers every table on Base.metadata)
from bugle.config import get_settings
from bugle.db.base import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

DATABASE_URL = get_settings().database_url


def _configure_and_run(**configure_kw) -> None:
    context.configure(target_metadata=Base.metadata, **configure_kw)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(
            lambda sync_conn: _configure_and_run(connection=sync_conn),
        )
    await engine.dispose()


if context.is_offline_mode():
    _configure_and_run(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
