from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from journal_backend.auth import require_family_id
from journal_backend import repositories
from journal_backend.schemas import JournalStatsResponse, MoodAnalyticsResponse
from journal_backend.settings import get_settings
from journal_backend.stats import compute_journal_stats, compute_mood_analytics

router = APIRouter()


@router.get("/v1/journal-stats", response_model=JournalStatsResponse)
async def journal_stats(family_id: str = Depends(require_family_id)):
    settings = get_settings()
    records = await repositories.list_stat_records(family_id)
    stats = compute_journal_stats(records, tz=settings.stats_tzinfo())
    return asdict(stats)


@router.get("/v1/mood-analytics", response_model=MoodAnalyticsResponse)
async def mood_analytics(family_id: str = Depends(require_family_id)):
    settings = get_settings()
    records = await repositories.list_stat_records(family_id)
    analytics = compute_mood_analytics(
        records,
        tz=settings.stats_tzinfo(),
        positive_moods=settings.positive_moods,
    )
    return asdict(analytics)
