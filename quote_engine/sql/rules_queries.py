"""
Parameterized SQL for the rules store.

Two tables back the admin-configurable rules:

- settings: key/value rows; the pricing override lives under a single key
  (default 'pricing_config') as a JSONB document, possibly partial.
- pricing_history: append-only audit log of every save and reset.

All statements use asyncpg positional parameters ($1, $2, ...). JSONB
parameters are passed as JSON text and cast with ::jsonb.
"""

from typing import List


# =============================================================================
# Schema
# =============================================================================

CREATE_SETTINGS_TABLE = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

CREATE_PRICING_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS pricing_history (
    id BIGSERIAL PRIMARY KEY,
    changed_section TEXT NOT NULL,
    old_value JSONB,
    new_value JSONB,
    description TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

CREATE_PRICING_HISTORY_INDEX = """
CREATE INDEX IF NOT EXISTS idx_pricing_history_created_at
    ON pricing_history (created_at DESC)
"""


def get_schema_statements() -> List[str]:
    """DDL statements, in execution order, for the rules store tables."""
    return [
        CREATE_SETTINGS_TABLE,
        CREATE_PRICING_HISTORY_TABLE,
        CREATE_PRICING_HISTORY_INDEX,
    ]


# =============================================================================
# Settings Row
# =============================================================================

# $1 = key
SELECT_SETTING = """
SELECT value
FROM settings
WHERE key = $1
"""

# $1 = key, $2 = value (JSON text)
UPSERT_SETTING = """
INSERT INTO settings (key, value, updated_at)
VALUES ($1, $2::jsonb, NOW())
ON CONFLICT (key)
DO UPDATE SET
    value = EXCLUDED.value,
    updated_at = NOW()
"""

# $1 = key
DELETE_SETTING = """
DELETE FROM settings
WHERE key = $1
"""


# =============================================================================
# Pricing History
# =============================================================================

# $1 = section, $2 = old value (JSON text or NULL), $3 = new value, $4 = description
INSERT_PRICING_HISTORY = """
INSERT INTO pricing_history (changed_section, old_value, new_value, description, created_at)
VALUES ($1, $2::jsonb, $3::jsonb, $4, NOW())
"""

# $1 = limit; id breaks ties between rows written in the same transaction
SELECT_PRICING_HISTORY = """
SELECT
    id,
    changed_section,
    old_value,
    new_value,
    description,
    created_at
FROM pricing_history
ORDER BY created_at DESC, id DESC
LIMIT $1
"""


__all__ = [
    "CREATE_SETTINGS_TABLE",
    "CREATE_PRICING_HISTORY_TABLE",
    "CREATE_PRICING_HISTORY_INDEX",
    "get_schema_statements",
    "SELECT_SETTING",
    "UPSERT_SETTING",
    "DELETE_SETTING",
    "INSERT_PRICING_HISTORY",
    "SELECT_PRICING_HISTORY",
]
