"""
Rules Configuration Cache

Keeps the effective rules configuration in memory for a bounded time so the
estimation path does not hit the database for every submission.

- get(): cached value while younger than the TTL, otherwise a reload through
  RulesStore.load() (which itself falls back to the compiled-in defaults)
- invalidate(): drop the cached value; the store calls it after every
  save/reset, so admin edits apply to the next request in this process

There is no lock: concurrent callers that find the value stale may each reload.
A reload that was already in flight when invalidate() ran still returns its
result to its caller but is not stored, so the next get() reloads.
"""

import logging
import time
from typing import Callable, Optional

from quote_engine.core.config import Settings, get_settings
from quote_engine.models.schemas import RulesConfiguration
from quote_engine.services.rules_store import RulesStore

logger = logging.getLogger(__name__)


# Five minutes
DEFAULT_TTL_SECONDS = 300


class RulesCache:
    """
    Time-bounded cache of the effective RulesConfiguration.

    Args:
        store: Store to reload from; the cache registers itself for
            invalidation on construction
        ttl_seconds: Maximum age of a cached value
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(
        self,
        store: RulesStore,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[RulesConfiguration] = None
        self._loaded_at: Optional[float] = None
        self._generation = 0
        store.register_cache(self)

    def is_fresh(self) -> bool:
        if self._value is None or self._loaded_at is None:
            return False
        return (self._clock() - self._loaded_at) < self.ttl_seconds

    async def get(self) -> RulesConfiguration:
        """Effective configuration, reloading when missing or expired."""
        if self.is_fresh():
            return self._value

        generation = self._generation
        config = await self.store.load()

        # Invalidated while loading: the result may predate the write
        if generation != self._generation:
            logger.debug("Rules cache reload raced an invalidation, not storing it")
            return config

        self._value = config
        self._loaded_at = self._clock()
        logger.debug(f"Rules cache refreshed (ttl={self.ttl_seconds}s)")
        return config

    def invalidate(self) -> None:
        """Forget the cached configuration; the next get() reloads."""
        self._generation += 1
        self._value = None
        self._loaded_at = None
        logger.debug("Rules cache invalidated")


def build_rules_cache(settings: Optional[Settings] = None) -> RulesCache:
    """
    Build the process-wide store and cache from application settings.

    Intended to be called once by the host at start-up; the returned cache is
    then injected wherever submissions are evaluated.
    """
    settings = settings or get_settings()
    store = RulesStore(
        settings_key=settings.rules_settings_key,
        history_limit=settings.rules_history_limit,
    )
    return RulesCache(store, ttl_seconds=settings.rules_cache_ttl_seconds)


__all__ = [
    "RulesCache",
    "build_rules_cache",
    "DEFAULT_TTL_SECONDS",
]
