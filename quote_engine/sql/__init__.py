"""
SQL Query Module for the quote engine.

Provides the parameterized statements and DDL used by the rules store
(quote_engine.services.rules_store). Re-exported here so callers can write:

    from quote_engine.sql import get_schema_statements, SELECT_SETTING
"""

from quote_engine.sql.rules_queries import (
    CREATE_SETTINGS_TABLE,
    CREATE_PRICING_HISTORY_TABLE,
    CREATE_PRICING_HISTORY_INDEX,
    get_schema_statements,
    SELECT_SETTING,
    UPSERT_SETTING,
    DELETE_SETTING,
    INSERT_PRICING_HISTORY,
    SELECT_PRICING_HISTORY,
)


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
