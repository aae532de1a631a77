"""Async PostgreSQL connection pool and schema bootstrap."""

import asyncio
import json
import asyncpg
import structlog
from config.settings import settings

log = structlog.get_logger(__name__)

_pool: asyncpg.Pool | None = None
_pool_lock = asyncio.Lock()

# Parent table first; profiles references users.
SCHEMA_STATEMENTS: tuple[tuple[str, str], ...] = (
    (
        "users",
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            token TEXT,
            email TEXT,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT now()
        )
        """,
    ),
    (
        "profiles",
        """
        CREATE TABLE IF NOT EXISTS profiles (
            user_id TEXT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            profile_type TEXT,
            display_name TEXT,
            bio TEXT,
            metadata JSONB,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT now()
        )
        """,
    ),
)

# Two sessions racing on CREATE TABLE IF NOT EXISTS can still collide in the
# catalog; the loser sees one of these and the table exists either way.
_CREATE_RACE_ERRORS = (
    asyncpg.exceptions.DuplicateTableError,
    asyncpg.exceptions.UniqueViolationError,
)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Set up JSON codec so JSONB columns return dicts/lists, not strings."""
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )
    await conn.set_type_codec(
        "json", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


async def get_pool() -> asyncpg.Pool:
    """Get or create the process-wide connection pool."""
    global _pool
    if _pool is not None:
        return _pool
    async with _pool_lock:
        if _pool is None:
            _pool = await asyncpg.create_pool(
                settings.database_dsn,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                timeout=settings.db_connect_timeout,
                command_timeout=settings.db_command_timeout,
                init=_init_connection,
            )
            log.info(
                "database_pool_created",
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
            )
    return _pool


async def close_pool() -> None:
    """Close the connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        log.info("database_pool_closed")


async def ensure_schema(pool: asyncpg.Pool) -> None:
    """Create the users and profiles tables if they do not exist.

    Safe to call on every request and from concurrent requests. The acquired
    connection is released on every exit path.
    """
    async with pool.acquire() as conn:
        for table, ddl in SCHEMA_STATEMENTS:
            try:
                await conn.execute(ddl)
            except _CREATE_RACE_ERRORS as e:
                log.debug("schema_create_race", table=table, error=str(e))
