from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from journal_backend.auth import require_family_id
from journal_backend.checkin import average_score, checkin_content, mood_for_score, round_score
from journal_backend.schemas import DailyCheckin
from journal_backend.settings import get_settings
from journal_backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/daily-checkin")
async def submit_daily_checkin(payload: DailyCheckin, family_id: str = Depends(require_family_id)):
    answers = payload.answers()
    if not answers:
        raise HTTPException(status_code=400, detail="Check-in has no answers")
    score = average_score(answers)
    mood = mood_for_score(score)
    today = datetime.now(get_settings().stats_tzinfo()).date()
    entry = await repositories.create_entry(
        family_id,
        {
            "title": f"Daily Check-In - {today.isoformat()}",
            "content": checkin_content(answers),
            "mood": mood,
        },
    )
    logger.info("Saved daily check-in %s for family %s (%s)", entry["id"], family_id, mood)
    return {"entry": entry, "mood": mood, "average_score": round_score(score)}
