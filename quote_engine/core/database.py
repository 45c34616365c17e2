"""
Async PostgreSQL connection pool for the rules store.

This module owns the asyncpg pool shared by every coroutine that reads or
writes pricing configuration. The pool is created lazily on first use, or
explicitly by the host application at start-up via init_db().

Key Components:
- Global connection pool singleton (_pool)
- init_db(): Initialize the connection pool
- get_db_pool(): Get the pool instance (initializes if needed)
- close_db(): Gracefully close the pool at shutdown

Connection Pool Configuration (from Settings):
- min_size: db_pool_min_size
- max_size: db_pool_max_size
- command_timeout: db_command_timeout

Usage:
    await init_db()

    pool = await get_db_pool()
    async with pool.acquire() as conn:
        row = await conn.fetchrow("SELECT value FROM settings WHERE key = $1", key)

    await close_db()
"""

from typing import Optional

import asyncpg
from asyncpg import Pool

from quote_engine.core.config import get_settings


# =============================================================================
# Global Pool Singleton
# =============================================================================

# None until init_db() is called
_pool: Optional[Pool] = None


# =============================================================================
# Pool Lifecycle Functions
# =============================================================================

async def init_db() -> Pool:
    """
    Initialize the database connection pool.

    Idempotent: if the pool already exists it is returned unchanged.

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails.
        OSError: If the database host is unreachable.
        pydantic.ValidationError: If DATABASE_URL is not configured.
    """
    global _pool

    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    return _pool


async def get_db_pool() -> Pool:
    """
    Get the database connection pool, initializing if needed.

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails during lazy init.
    """
    global _pool

    if _pool is None:
        await init_db()

    assert _pool is not None, "Pool should be initialized after init_db()"

    return _pool


async def close_db() -> None:
    """
    Close the database connection pool gracefully.

    Safe to call when the pool was never initialized. After closing, the next
    get_db_pool() call creates a fresh pool.
    """
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
