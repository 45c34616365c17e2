"""
Rules Store Service

Durable storage for the admin-configurable pricing and scoring rules, backed by
PostgreSQL through the shared asyncpg pool.

Storage layout:
- settings[key = 'pricing_config'].value: the administrator's override, a JSONB
  document that may cover only some sections or keys
- pricing_history: one row per save/reset with before and after snapshots

Read path (load) never raises: when the pool is unavailable, no override row
exists, or the stored document is malformed or invalid, the failure is logged
and the compiled-in defaults are returned. Estimation keeps working while the
database is down.

Write path (save, update_section, reset) is strict: the merged configuration is
validated before anything is written (pydantic.ValidationError reaches the
admin caller) and database failures raise RulesPersistenceError. After a
successful write every registered RulesCache is invalidated, then the change is
appended to pricing_history on a best-effort basis.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

from asyncpg import Pool
from pydantic import BaseModel, ValidationError

from quote_engine.core.database import get_db_pool
from quote_engine.models.enums import RulesSection
from quote_engine.models.schemas import ChangeRecord, RulesConfiguration
from quote_engine.services.rules_defaults import (
    deep_merge,
    get_default_rules,
    merge_with_defaults,
)
from quote_engine.sql.rules_queries import (
    DELETE_SETTING,
    INSERT_PRICING_HISTORY,
    SELECT_PRICING_HISTORY,
    SELECT_SETTING,
    UPSERT_SETTING,
    get_schema_statements,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_SETTINGS_KEY = "pricing_config"

DEFAULT_HISTORY_LIMIT = 20

RESET_DESCRIPTION = "Reset to defaults"


# =============================================================================
# Errors
# =============================================================================


class RulesPersistenceError(Exception):
    """Raised when a save or reset cannot be written to the database."""


class InvalidatableCache(Protocol):
    """Anything the store must clear after a write (RulesCache)."""

    def invalidate(self) -> None:
        ...


# =============================================================================
# JSON Helpers
# =============================================================================


def _to_document(value: Any) -> Any:
    """Convert models (possibly nested in mappings) to plain JSON-ready data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {key: _to_document(item) for key, item in value.items()}
    return value


def _dump_json(value: Any) -> Optional[str]:
    """JSON text for a JSONB parameter; None stays SQL NULL."""
    if value is None:
        return None
    return json.dumps(_to_document(value))


def _load_json(value: Any) -> Any:
    """Decode a JSONB column; asyncpg returns JSON text unless a codec is set."""
    if isinstance(value, (str, bytes, bytearray)):
        return json.loads(value)
    return value


def _section_snapshot(config: RulesConfiguration, section: RulesSection) -> Any:
    """The part of a configuration a change record covers."""
    document = config.model_dump(mode="json")
    if section == RulesSection.ALL:
        return document
    return document[section.value]


def _row_to_change_record(row: Mapping[str, Any]) -> ChangeRecord:
    return ChangeRecord(
        id=row["id"],
        section=row["changed_section"],
        oldValue=_load_json(row["old_value"]),
        newValue=_load_json(row["new_value"]),
        description=row["description"],
        createdAt=row["created_at"],
    )


# =============================================================================
# Rules Store
# =============================================================================


class RulesStore:
    """
    Reads and writes the rules override and its change history.

    Args:
        pool: asyncpg pool to use; when None the shared pool from
            quote_engine.core.database is acquired lazily on each call
        settings_key: settings row holding the override
        history_limit: number of change records history() returns by default
    """

    def __init__(
        self,
        pool: Optional[Pool] = None,
        settings_key: str = DEFAULT_SETTINGS_KEY,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        self._pool = pool
        self.settings_key = settings_key
        self.history_limit = history_limit
        self._caches: List[InvalidatableCache] = []

    async def _get_pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return await get_db_pool()

    # -------------------------------------------------------------------------
    # Cache registration
    # -------------------------------------------------------------------------

    def register_cache(self, cache: InvalidatableCache) -> None:
        """Register a cache whose invalidate() is called after every write."""
        if cache not in self._caches:
            self._caches.append(cache)

    def _invalidate_caches(self) -> None:
        for cache in self._caches:
            cache.invalidate()

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    async def _fetch_override(self) -> Optional[Dict[str, Any]]:
        """
        Stored override document, or None when no row exists.

        Raises on database errors and on documents that are not JSON objects.
        """
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(SELECT_SETTING, self.settings_key)

        if row is None:
            return None

        override = _load_json(row["value"])
        if override is None:
            return None
        if not isinstance(override, Mapping):
            raise ValueError(
                f"Stored rules override must be a JSON object, got {type(override).__name__}"
            )
        return dict(override)

    async def load(self) -> RulesConfiguration:
        """
        Load the effective configuration: stored override merged over defaults.

        Never raises; any failure falls back to the compiled-in defaults.
        """
        try:
            override = await self._fetch_override()
        except Exception as e:
            logger.warning(f"Could not read rules override '{self.settings_key}', using defaults: {e}")
            return get_default_rules()

        if override is None:
            logger.info(f"No rules override stored under '{self.settings_key}', using defaults")
            return get_default_rules()

        try:
            config = merge_with_defaults(override)
        except ValidationError as e:
            logger.warning(f"Stored rules override is invalid, using defaults: {e}")
            return get_default_rules()

        logger.info(f"Loaded rules override '{self.settings_key}' ({len(override)} sections)")
        return config

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    async def _write(
        self,
        document: Dict[str, Any],
        section: RulesSection,
        description: Optional[str]
    ) -> RulesConfiguration:
        """Validate, upsert, invalidate caches and log the change."""
        new_config = merge_with_defaults(document)
        old_config = await self.load()

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute(UPSERT_SETTING, self.settings_key, _dump_json(document))
        except Exception as e:
            logger.error(f"Failed to save rules configuration '{self.settings_key}': {e}")
            raise RulesPersistenceError(f"Failed to save rules configuration: {e}") from e

        self._invalidate_caches()
        logger.info(f"Saved rules configuration '{self.settings_key}' (section: {section.value})")

        await self.log_change(
            section,
            _section_snapshot(old_config, section),
            _section_snapshot(new_config, section),
            description,
        )
        return new_config

    async def save(
        self,
        config: Union[RulesConfiguration, Mapping[str, Any]],
        description: Optional[str] = None
    ) -> RulesConfiguration:
        """
        Persist a full or partial configuration as the new override.

        Args:
            config: A RulesConfiguration, or a mapping of sections to override
            description: Free-text note stored in the change history

        Returns:
            The newly effective configuration

        Raises:
            pydantic.ValidationError: If the configuration merged over the
                defaults is invalid; nothing is written.
            RulesPersistenceError: If the database write fails.
        """
        document = _to_document(config)
        return await self._write(document, RulesSection.ALL, description)

    async def update_section(
        self,
        section: Union[RulesSection, str],
        value: Any,
        description: Optional[str] = None
    ) -> RulesConfiguration:
        """
        Persist an edit of one top-level section of the override.

        `value` is merged into the currently stored override for that section;
        other sections of the override are left untouched. The change history
        records only that section's before and after snapshots.

        Raises:
            pydantic.ValidationError: If the resulting configuration is invalid.
            RulesPersistenceError: If the stored override cannot be read or the
                write fails.
        """
        section = RulesSection(section)
        if section == RulesSection.ALL:
            return await self.save(value, description)

        try:
            stored = await self._fetch_override() or {}
        except Exception as e:
            logger.error(f"Failed to read rules override before updating '{section.value}': {e}")
            raise RulesPersistenceError(f"Failed to read rules configuration: {e}") from e

        document = deep_merge(stored, {section.value: _to_document(value)})
        return await self._write(document, section, description)

    async def reset(self, description: Optional[str] = None) -> RulesConfiguration:
        """
        Delete the override so the compiled-in defaults apply again.

        Returns:
            The default configuration

        Raises:
            RulesPersistenceError: If the database delete fails.
        """
        old_config = await self.load()

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute(DELETE_SETTING, self.settings_key)
        except Exception as e:
            logger.error(f"Failed to reset rules configuration '{self.settings_key}': {e}")
            raise RulesPersistenceError(f"Failed to reset rules configuration: {e}") from e

        self._invalidate_caches()
        logger.info(f"Reset rules configuration '{self.settings_key}' to defaults")

        await self.log_change(
            RulesSection.ALL,
            _section_snapshot(old_config, RulesSection.ALL),
            None,
            description or RESET_DESCRIPTION,
        )
        return get_default_rules()

    # -------------------------------------------------------------------------
    # Change history
    # -------------------------------------------------------------------------

    async def log_change(
        self,
        section: Union[RulesSection, str],
        old_value: Any,
        new_value: Any,
        description: Optional[str] = None
    ) -> bool:
        """
        Append a row to pricing_history.

        Best effort: a failure is logged and swallowed so a configuration that
        was already written is never reported as failed.

        Returns:
            True if the row was written, False otherwise.
        """
        section_name = section.value if isinstance(section, RulesSection) else str(section)

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute(
                    INSERT_PRICING_HISTORY,
                    section_name,
                    _dump_json(old_value),
                    _dump_json(new_value),
                    description,
                )
            return True
        except Exception as e:
            logger.error(f"Failed to log pricing change for '{section_name}': {e}", exc_info=True)
            return False

    async def history(self, limit: Optional[int] = None) -> List[ChangeRecord]:
        """
        Most recent change records first, at most `limit` (default
        history_limit).

        Returns an empty list when the history cannot be read.
        """
        limit = self.history_limit if limit is None else max(limit, 0)

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(SELECT_PRICING_HISTORY, limit)
            return [_row_to_change_record(row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to read pricing history: {e}")
            return []

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    async def ensure_schema(self) -> None:
        """Create the settings and pricing_history tables if they are missing."""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            for statement in get_schema_statements():
                await conn.execute(statement)
        logger.info("Rules store schema is in place")


__all__ = [
    "RulesStore",
    "RulesPersistenceError",
    "InvalidatableCache",
    "get_default_rules",
    "DEFAULT_SETTINGS_KEY",
    "DEFAULT_HISTORY_LIMIT",
]
