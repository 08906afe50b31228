from __future__ import annotations

import json
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import text as sql_text

from journal_backend.constants import DEFAULT_ENTRY_LIST_LIMIT, DEFAULT_ENTRY_TYPE, PRIMARY_PARENT_RELATIONSHIP
from journal_backend.db import get_sessionmaker
from journal_backend.db_init import CHILD_PROFILES_TABLE, ENTRIES_TABLE, PARENT_PROFILES_TABLE
from journal_backend.stats import DatedRecord

ENTRY_SELECT_COLUMNS = [
    "id",
    "family_id",
    "title",
    "content",
    "mood",
    "entry_type",
    "child_profile_id",
    "ai_feedback",
    "has_ai_feedback",
    "is_favorite",
    "calm_reset_used",
    "created_at",
    "updated_at",
]
ENTRY_PATCH_COLUMNS = {
    "title",
    "content",
    "mood",
    "entry_type",
    "child_profile_id",
    "ai_feedback",
    "has_ai_feedback",
    "calm_reset_used",
}
ENTRY_FLAG_COLUMNS = {"has_ai_feedback", "is_favorite", "calm_reset_used"}

CHILD_SELECT_COLUMNS = [
    "id",
    "family_id",
    "name",
    "date_of_birth",
    "gender",
    "developmental_stage",
    "notes",
    "created_at",
    "updated_at",
]
CHILD_PATCH_COLUMNS = {"name", "date_of_birth", "gender", "developmental_stage", "notes"}

PARENT_SELECT_COLUMNS = [
    "id",
    "family_id",
    "name",
    "relationship",
    "age",
    "parenting_style",
    "parenting_philosophy",
    "personality_traits_json",
    "parenting_goals",
    "stressors",
    "support_systems",
    "notes",
    "created_at",
    "updated_at",
]
PARENT_PATCH_COLUMNS = {
    "name",
    "relationship",
    "age",
    "parenting_style",
    "parenting_philosophy",
    "personality_traits_json",
    "parenting_goals",
    "stressors",
    "support_systems",
    "notes",
}

# Patches never clear these; the tables declare them NOT NULL.
NOT_NULL_COLUMNS = {"content", "name"}


def _new_id() -> str:
    return uuid4().hex


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _isoformat(value):
    if value is not None and hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _normalize_entry_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    for key in ENTRY_FLAG_COLUMNS:
        payload[key] = bool(int(payload.get(key) or 0))
    payload["entry_type"] = payload.get("entry_type") or DEFAULT_ENTRY_TYPE
    for key in ("created_at", "updated_at"):
        payload[key] = _isoformat(payload.get(key))
    return payload


def _normalize_child_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    for key in ("date_of_birth", "created_at", "updated_at"):
        payload[key] = _isoformat(payload.get(key))
    return payload


def _normalize_parent_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    raw_traits = payload.pop("personality_traits_json", None)
    payload["personality_traits"] = json.loads(raw_traits) if raw_traits else []
    for key in ("created_at", "updated_at"):
        payload[key] = _isoformat(payload.get(key))
    return payload


def _clean_patch(patch: dict, allowed: set[str]) -> dict:
    clean = {}
    for key, value in (patch or {}).items():
        if key not in allowed:
            continue
        if value is None and key in NOT_NULL_COLUMNS:
            continue
        if isinstance(value, bool):
            value = int(value)
        elif isinstance(value, date):
            value = value.isoformat()
        clean[key] = value
    return clean


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _entry_list_query(
    family_id: str,
    limit: int = DEFAULT_ENTRY_LIST_LIMIT,
    search: str | None = None,
    child_id: str | None = None,
) -> tuple[str, dict]:
    clauses = ["family_id = :family_id"]
    params: dict = {"family_id": family_id, "limit": int(limit)}
    if child_id and child_id.strip():
        clauses.append("child_profile_id = :child_id")
        params["child_id"] = child_id.strip()
    if search and search.strip():
        clauses.append(
            "(LOWER(COALESCE(title, '')) LIKE :term ESCAPE '\\' "
            "OR LOWER(content) LIKE :term ESCAPE '\\' "
            "OR LOWER(COALESCE(mood, '')) LIKE :term ESCAPE '\\')"
        )
        params["term"] = f"%{_escape_like(search.strip().lower())}%"
    query = (
        f"SELECT {', '.join(ENTRY_SELECT_COLUMNS)} FROM {ENTRIES_TABLE} "
        f"WHERE {' AND '.join(clauses)} "
        "ORDER BY created_at DESC, id DESC LIMIT :limit"
    )
    return query, params


async def list_entries(
    family_id: str,
    limit: int = DEFAULT_ENTRY_LIST_LIMIT,
    search: str | None = None,
    child_id: str | None = None,
) -> list[dict]:
    query, params = _entry_list_query(family_id, limit, search, child_id)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(sql_text(query), params)).mappings().all()
    return [_normalize_entry_row(row) for row in rows]


async def get_entry(family_id: str, entry_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(ENTRY_SELECT_COLUMNS)} FROM {ENTRIES_TABLE} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {"family_id": family_id, "id": entry_id},
        )).mappings().fetchone()
    return _normalize_entry_row(row)


async def create_entry(family_id: str, payload: dict) -> dict:
    now_iso = _utcnow_iso()
    record = {
        "id": _new_id(),
        "family_id": family_id,
        "title": payload.get("title"),
        "content": payload["content"],
        "mood": payload.get("mood"),
        "entry_type": payload.get("entry_type") or DEFAULT_ENTRY_TYPE,
        "child_profile_id": payload.get("child_profile_id"),
        "ai_feedback": None,
        "has_ai_feedback": 0,
        "is_favorite": 0,
        "calm_reset_used": int(bool(payload.get("calm_reset_used"))),
        "created_at": now_iso,
        "updated_at": now_iso,
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {ENTRIES_TABLE} ({', '.join(ENTRY_SELECT_COLUMNS)})
                VALUES ({', '.join(f':{col}' for col in ENTRY_SELECT_COLUMNS)})
                """
            ),
            record,
        )
        await session.commit()
    return _normalize_entry_row(record)


async def _update_entry_columns(family_id: str, entry_id: str, clean: dict) -> dict:
    clean = dict(clean)
    clean["updated_at"] = _utcnow_iso()
    assignments = ", ".join(f"{col} = :{col}" for col in clean)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"UPDATE {ENTRIES_TABLE} SET {assignments} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {**clean, "family_id": family_id, "id": entry_id},
        )
        await session.commit()
    if not result.rowcount:
        return {}
    return await get_entry(family_id, entry_id)


async def update_entry(family_id: str, entry_id: str, patch: dict) -> dict:
    clean = _clean_patch(patch, ENTRY_PATCH_COLUMNS)
    if not clean:
        return await get_entry(family_id, entry_id)
    return await _update_entry_columns(family_id, entry_id, clean)


async def set_entry_favorite(family_id: str, entry_id: str, is_favorite: bool) -> dict:
    return await _update_entry_columns(family_id, entry_id, {"is_favorite": int(bool(is_favorite))})


async def delete_entry(family_id: str, entry_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {ENTRIES_TABLE} WHERE family_id = :family_id AND id = :id"),
            {"family_id": family_id, "id": entry_id},
        )
        await session.commit()
    return bool(result.rowcount)


async def list_stat_records(family_id: str) -> list[DatedRecord]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT id, created_at, mood, entry_type
                FROM {ENTRIES_TABLE}
                WHERE family_id = :family_id
                ORDER BY created_at, id
                """
            ),
            {"family_id": family_id},
        )).mappings().all()
    return [DatedRecord.from_row(row) for row in rows]


async def list_child_profiles(family_id: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"SELECT {', '.join(CHILD_SELECT_COLUMNS)} FROM {CHILD_PROFILES_TABLE} "
                "WHERE family_id = :family_id ORDER BY created_at, id"
            ),
            {"family_id": family_id},
        )).mappings().all()
    return [_normalize_child_row(row) for row in rows]


async def get_child_profile(family_id: str, child_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(CHILD_SELECT_COLUMNS)} FROM {CHILD_PROFILES_TABLE} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {"family_id": family_id, "id": child_id},
        )).mappings().fetchone()
    return _normalize_child_row(row)


async def create_child_profile(family_id: str, payload: dict) -> dict:
    clean = _clean_patch(payload, CHILD_PATCH_COLUMNS)
    now_iso = _utcnow_iso()
    record = {
        "id": _new_id(),
        "family_id": family_id,
        "name": clean.get("name"),
        "date_of_birth": clean.get("date_of_birth"),
        "gender": clean.get("gender"),
        "developmental_stage": clean.get("developmental_stage"),
        "notes": clean.get("notes"),
        "created_at": now_iso,
        "updated_at": now_iso,
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {CHILD_PROFILES_TABLE} ({', '.join(CHILD_SELECT_COLUMNS)})
                VALUES ({', '.join(f':{col}' for col in CHILD_SELECT_COLUMNS)})
                """
            ),
            record,
        )
        await session.commit()
    return _normalize_child_row(record)


async def update_child_profile(family_id: str, child_id: str, patch: dict) -> dict:
    clean = _clean_patch(patch, CHILD_PATCH_COLUMNS)
    if not clean:
        return await get_child_profile(family_id, child_id)
    clean["updated_at"] = _utcnow_iso()
    assignments = ", ".join(f"{col} = :{col}" for col in clean)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"UPDATE {CHILD_PROFILES_TABLE} SET {assignments} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {**clean, "family_id": family_id, "id": child_id},
        )
        await session.commit()
    if not result.rowcount:
        return {}
    return await get_child_profile(family_id, child_id)


async def delete_child_profile(family_id: str, child_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"UPDATE {ENTRIES_TABLE} SET child_profile_id = NULL "
                "WHERE family_id = :family_id AND child_profile_id = :child_id"
            ),
            {"family_id": family_id, "child_id": child_id},
        )
        result = await session.execute(
            sql_text(f"DELETE FROM {CHILD_PROFILES_TABLE} WHERE family_id = :family_id AND id = :id"),
            {"family_id": family_id, "id": child_id},
        )
        await session.commit()
    return bool(result.rowcount)


def _clean_parent_patch(patch: dict) -> dict:
    patch = dict(patch or {})
    if "personality_traits" in patch:
        traits = patch.pop("personality_traits")
        patch["personality_traits_json"] = json.dumps(traits, ensure_ascii=False) if traits is not None else None
    return _clean_patch(patch, PARENT_PATCH_COLUMNS)


async def list_parent_profiles(family_id: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"SELECT {', '.join(PARENT_SELECT_COLUMNS)} FROM {PARENT_PROFILES_TABLE} "
                "WHERE family_id = :family_id ORDER BY created_at, id"
            ),
            {"family_id": family_id},
        )).mappings().all()
    return [_normalize_parent_row(row) for row in rows]


async def get_parent_profile(family_id: str, parent_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(PARENT_SELECT_COLUMNS)} FROM {PARENT_PROFILES_TABLE} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {"family_id": family_id, "id": parent_id},
        )).mappings().fetchone()
    return _normalize_parent_row(row)


async def get_primary_parent_profile(family_id: str) -> dict:
    """Return the family's primary parent, else its oldest profile."""
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"""
                SELECT {', '.join(PARENT_SELECT_COLUMNS)} FROM {PARENT_PROFILES_TABLE}
                WHERE family_id = :family_id
                ORDER BY CASE WHEN relationship = :primary THEN 0 ELSE 1 END, created_at, id
                LIMIT 1
                """
            ),
            {"family_id": family_id, "primary": PRIMARY_PARENT_RELATIONSHIP},
        )).mappings().fetchone()
    return _normalize_parent_row(row)


async def create_parent_profile(family_id: str, payload: dict) -> dict:
    clean = _clean_parent_patch(payload)
    now_iso = _utcnow_iso()
    record = {col: clean.get(col) for col in PARENT_PATCH_COLUMNS}
    record.update({"id": _new_id(), "family_id": family_id, "created_at": now_iso, "updated_at": now_iso})
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {PARENT_PROFILES_TABLE} ({', '.join(PARENT_SELECT_COLUMNS)})
                VALUES ({', '.join(f':{col}' for col in PARENT_SELECT_COLUMNS)})
                """
            ),
            record,
        )
        await session.commit()
    return _normalize_parent_row(record)


async def update_parent_profile(family_id: str, parent_id: str, patch: dict) -> dict:
    clean = _clean_parent_patch(patch)
    if not clean:
        return await get_parent_profile(family_id, parent_id)
    clean["updated_at"] = _utcnow_iso()
    assignments = ", ".join(f"{col} = :{col}" for col in clean)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"UPDATE {PARENT_PROFILES_TABLE} SET {assignments} "
                "WHERE family_id = :family_id AND id = :id"
            ),
            {**clean, "family_id": family_id, "id": parent_id},
        )
        await session.commit()
    if not result.rowcount:
        return {}
    return await get_parent_profile(family_id, parent_id)
