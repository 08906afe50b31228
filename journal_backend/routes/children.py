from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from journal_backend.auth import require_family_id
from journal_backend.schemas import ChildProfileCreate, ChildProfilePatch, ItemsResponse
from journal_backend import repositories

router = APIRouter()


@router.get("/v1/child-profiles", response_model=ItemsResponse)
async def list_child_profiles(family_id: str = Depends(require_family_id)):
    items = await repositories.list_child_profiles(family_id)
    return {"items": items}


@router.post("/v1/child-profiles")
async def create_child_profile(payload: ChildProfileCreate, family_id: str = Depends(require_family_id)):
    return await repositories.create_child_profile(family_id, payload.model_dump())


@router.get("/v1/child-profiles/{child_id}")
async def get_child_profile(child_id: str, family_id: str = Depends(require_family_id)):
    record = await repositories.get_child_profile(family_id, child_id)
    if not record:
        raise HTTPException(status_code=404, detail="Child profile not found")
    return record


@router.patch("/v1/child-profiles/{child_id}")
async def patch_child_profile(child_id: str, patch: ChildProfilePatch, family_id: str = Depends(require_family_id)):
    data = patch.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="No changes provided")
    record = await repositories.update_child_profile(family_id, child_id, data)
    if not record:
        raise HTTPException(status_code=404, detail="Child profile not found")
    return record


@router.delete("/v1/child-profiles/{child_id}")
async def delete_child_profile(child_id: str, family_id: str = Depends(require_family_id)):
    deleted = await repositories.delete_child_profile(family_id, child_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Child profile not found")
    return {"ok": True}
