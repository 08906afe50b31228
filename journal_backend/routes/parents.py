from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from journal_backend.auth import require_family_id
from journal_backend.schemas import ItemsResponse, ParentProfileCreate, ParentProfilePatch
from journal_backend import repositories

router = APIRouter()


@router.get("/v1/parent-profiles", response_model=ItemsResponse)
async def list_parent_profiles(family_id: str = Depends(require_family_id)):
    items = await repositories.list_parent_profiles(family_id)
    return {"items": items}


@router.post("/v1/parent-profiles")
async def create_parent_profile(payload: ParentProfileCreate, family_id: str = Depends(require_family_id)):
    return await repositories.create_parent_profile(family_id, payload.model_dump())


@router.get("/v1/parent-profile")
async def get_primary_parent_profile(family_id: str = Depends(require_family_id)):
    record = await repositories.get_primary_parent_profile(family_id)
    if not record:
        raise HTTPException(status_code=404, detail="Parent profile not found")
    return record


@router.get("/v1/parent-profiles/{parent_id}")
async def get_parent_profile(parent_id: str, family_id: str = Depends(require_family_id)):
    record = await repositories.get_parent_profile(family_id, parent_id)
    if not record:
        raise HTTPException(status_code=404, detail="Parent profile not found")
    return record


@router.patch("/v1/parent-profiles/{parent_id}")
async def patch_parent_profile(parent_id: str, patch: ParentProfilePatch, family_id: str = Depends(require_family_id)):
    data = patch.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="No changes provided")
    record = await repositories.update_parent_profile(family_id, parent_id, data)
    if not record:
        raise HTTPException(status_code=404, detail="Parent profile not found")
    return record
