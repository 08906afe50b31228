from __future__ import annotations

from fastapi import Header, HTTPException

from journal_backend.settings import get_settings


async def require_family_id(
    x_family_id: str | None = Header(default=None, alias="X-Family-Id"),
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> str:
    settings = get_settings()
    if not x_backend_token or x_backend_token != settings.backend_session_secret:
        raise HTTPException(status_code=401, detail="Invalid backend token")
    family_id = (x_family_id or "").strip()
    if not family_id:
        raise HTTPException(status_code=401, detail="Missing family id")
    if settings.allowed_family_ids and family_id not in settings.allowed_family_ids:
        raise HTTPException(status_code=403, detail="Family not allowed")
    return family_id
