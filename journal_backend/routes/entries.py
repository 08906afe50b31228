from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from journal_backend.auth import require_family_id
from journal_backend.constants import DEFAULT_ENTRY_LIST_LIMIT, MAX_ENTRY_LIST_LIMIT
from journal_backend.schemas import FavoritePayload, ItemsResponse, JournalEntryCreate, JournalEntryPatch
from journal_backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


async def _ensure_child_in_family(family_id: str, child_id: str | None) -> None:
    if not child_id:
        return
    child = await repositories.get_child_profile(family_id, child_id)
    if not child:
        raise HTTPException(status_code=400, detail="Unknown child profile")


@router.get("/v1/journal-entries", response_model=ItemsResponse)
async def list_entries(
    limit: int = Query(DEFAULT_ENTRY_LIST_LIMIT, ge=1, le=MAX_ENTRY_LIST_LIMIT),
    search: str | None = Query(None),
    child_id: str | None = Query(None),
    family_id: str = Depends(require_family_id),
):
    items = await repositories.list_entries(family_id, limit=limit, search=search, child_id=child_id)
    return {"items": items}


@router.post("/v1/journal-entries")
async def create_entry(payload: JournalEntryCreate, family_id: str = Depends(require_family_id)):
    await _ensure_child_in_family(family_id, payload.child_profile_id)
    record = await repositories.create_entry(family_id, payload.model_dump())
    logger.info("Created %s entry %s for family %s", record["entry_type"], record["id"], family_id)
    return record


@router.get("/v1/journal-entries/{entry_id}")
async def get_entry(entry_id: str, family_id: str = Depends(require_family_id)):
    record = await repositories.get_entry(family_id, entry_id)
    if not record:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return record


@router.patch("/v1/journal-entries/{entry_id}")
async def patch_entry(entry_id: str, patch: JournalEntryPatch, family_id: str = Depends(require_family_id)):
    data = patch.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="No changes provided")
    await _ensure_child_in_family(family_id, data.get("child_profile_id"))
    record = await repositories.update_entry(family_id, entry_id, data)
    if not record:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return record


@router.patch("/v1/journal-entries/{entry_id}/favorite")
async def set_favorite(entry_id: str, payload: FavoritePayload, family_id: str = Depends(require_family_id)):
    record = await repositories.set_entry_favorite(family_id, entry_id, payload.is_favorite)
    if not record:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return record


@router.delete("/v1/journal-entries/{entry_id}")
async def delete_entry(entry_id: str, family_id: str = Depends(require_family_id)):
    deleted = await repositories.delete_entry(family_id, entry_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    logger.info("Deleted entry %s for family %s", entry_id, family_id)
    return {"ok": True}
