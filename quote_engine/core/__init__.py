"""
Core infrastructure package for the quote estimation engine.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL connectivity via asyncpg

Re-exports key components so callers can write:

    from quote_engine.core import get_settings, get_db_pool

Usage Examples:
    # Pool lifecycle (in the host application's start-up/shutdown hooks)
    from quote_engine.core import init_db, close_db

    await init_db()
    ...
    await close_db()
"""

# =============================================================================
# Re-exports from quote_engine.core.config
# =============================================================================
from quote_engine.core.config import Settings, get_settings

# =============================================================================
# Re-exports from quote_engine.core.database
# =============================================================================
from quote_engine.core.database import init_db, close_db, get_db_pool


__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
]
