"""Startup helpers for what the engine cannot create on its own.

SQLite creates its file on first connect but not the directory holding it;
PostgreSQL needs the database itself to exist before tables can be created.
"""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url

logger = logging.getLogger(__name__)


def sqlite_file_path(database_url: str) -> Path | None:
    """Path of a file-backed SQLite database, or None for anything else."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


async def create_postgres_database(database_url: str) -> bool:
    """Create the target database through the ``postgres`` maintenance DB.

    Returns True if it had to be created.
    """
    import asyncpg

    url = make_url(database_url)
    name = url.database
    if not name:
        return False

    admin_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )
    conn = await asyncpg.connect(admin_dsn)
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", name):
            return False
        # Not allowed inside a transaction block.
        await conn.execute(f'CREATE DATABASE "{name}"')
        return True
    finally:
        await conn.close()


async def prepare_database(database_url: str) -> None:
    path = sqlite_file_path(database_url)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        return

    if make_url(database_url).get_backend_name() != "postgresql":
        return
    try:
        if await create_postgres_database(database_url):
            logger.info("Created database '%s'", make_url(database_url).database)
    except Exception as exc:
        logger.warning("Could not auto-create the database: %s", exc)
