from __future__ import annotations

import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from journal_backend.db import get_engine

logger = logging.getLogger(__name__)

ENTRIES_TABLE = "journal_entries"
CHILD_PROFILES_TABLE = "child_profiles"
PARENT_PROFILES_TABLE = "parent_profiles"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {ENTRIES_TABLE} (
                    id TEXT PRIMARY KEY,
                    family_id TEXT NOT NULL,
                    title TEXT,
                    content TEXT NOT NULL,
                    mood TEXT,
                    child_profile_id TEXT,
                    ai_feedback TEXT,
                    has_ai_feedback INTEGER DEFAULT 0,
                    is_favorite INTEGER DEFAULT 0,
                    calm_reset_used INTEGER DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {CHILD_PROFILES_TABLE} (
                    id TEXT PRIMARY KEY,
                    family_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    date_of_birth TEXT,
                    gender TEXT,
                    developmental_stage TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {PARENT_PROFILES_TABLE} (
                    id TEXT PRIMARY KEY,
                    family_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    relationship TEXT,
                    age INTEGER,
                    parenting_style TEXT,
                    parenting_philosophy TEXT,
                    personality_traits_json TEXT,
                    parenting_goals TEXT,
                    stressors TEXT,
                    support_systems TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )

    async def ensure_column(table_name: str, column_name: str, column_ddl: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(
                    sql_text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_ddl}")
                )
        except SQLAlchemyError:
            logger.debug("Column %s.%s already present.", table_name, column_name)

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except SQLAlchemyError as exc:
            logger.warning("Failed to create index: %s", exc)

    # Entries written before quick moments existed have no entry_type.
    await ensure_column(ENTRIES_TABLE, "entry_type", "TEXT")

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{ENTRIES_TABLE}_family_created "
        f"ON {ENTRIES_TABLE} (family_id, created_at)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{ENTRIES_TABLE}_family_child "
        f"ON {ENTRIES_TABLE} (family_id, child_profile_id)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{CHILD_PROFILES_TABLE}_family "
        f"ON {CHILD_PROFILES_TABLE} (family_id, created_at)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{PARENT_PROFILES_TABLE}_family "
        f"ON {PARENT_PROFILES_TABLE} (family_id, created_at)"
    )
