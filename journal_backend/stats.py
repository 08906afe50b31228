"""Journal statistics and mood analytics over an already-scoped record list.

Day bucketing works on wall-clock datetimes: naive timestamps are used as
they are, aware ones are moved into ``tz`` (when given) and stripped of
their tzinfo. Nothing here touches the database or the request.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Iterable, Mapping, NamedTuple

from journal_backend.constants import (
    DEFAULT_ENTRY_TYPE,
    ENTRY_TYPE_SHARED_JOURNEY,
    ENTRY_TYPES,
    MOOD_TREND_WINDOW_DAYS,
    POSITIVE_MOOD_MARKERS,
    WEEK_WINDOW_DAYS,
)

logger = logging.getLogger(__name__)


class MalformedInputError(ValueError):
    def __init__(self, record_id: Any, message: str):
        super().__init__(f"Record {record_id!r}: {message}")
        self.record_id = record_id


@dataclass(frozen=True)
class DatedRecord:
    id: str
    created_at: Any
    mood: str | None = None
    entry_type: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DatedRecord":
        return cls(
            id=str(row.get("id") or ""),
            created_at=row.get("created_at"),
            mood=row.get("mood"),
            entry_type=row.get("entry_type"),
        )


@dataclass(frozen=True)
class JournalStats:
    total_entries: int = 0
    week_entries: int = 0
    longest_streak: int = 0
    week_shared_journeys: int = 0
    week_quick_moments: int = 0


@dataclass(frozen=True)
class MoodShare:
    mood: str
    count: int
    percentage: int


@dataclass(frozen=True)
class MoodTrendPoint:
    date: str
    mood: str
    count: int


@dataclass(frozen=True)
class MoodStreak:
    current_mood: str | None = None
    streak_days: int = 0


@dataclass(frozen=True)
class MoodAnalytics:
    mood_distribution: list[MoodShare] = field(default_factory=list)
    mood_trends: list[MoodTrendPoint] = field(default_factory=list)
    weekly_mood_average: int = 0
    mood_streak: MoodStreak = field(default_factory=MoodStreak)


class _Stamped(NamedTuple):
    at: datetime
    day: date
    record_id: str
    mood: str | None
    entry_type: str


def _parse_timestamp(value: Any, record_id: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise MalformedInputError(record_id, f"unparseable created_at {value!r}") from exc
    raise MalformedInputError(record_id, f"unparseable created_at {value!r}")


def _to_wall_clock(value: datetime, tz: tzinfo | None) -> datetime:
    if value.tzinfo is None:
        return value
    if tz is not None:
        value = value.astimezone(tz)
    return value.replace(tzinfo=None)


def _resolve_now(now: datetime | None, tz: tzinfo | None) -> datetime:
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now()
    return _to_wall_clock(now, tz)


def _normalize_mood(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    mood = value.strip()
    return mood or None


def _normalize_entry_type(value: Any, record_id: Any) -> str:
    entry_type = str(value).strip() if value is not None else ""
    if not entry_type:
        return DEFAULT_ENTRY_TYPE
    if entry_type not in ENTRY_TYPES:
        raise MalformedInputError(record_id, f"unknown entry_type {value!r}")
    return entry_type


def _stamp(records: Iterable[DatedRecord], tz: tzinfo | None) -> list[_Stamped]:
    stamped = []
    for record in records:
        at = _to_wall_clock(_parse_timestamp(record.created_at, record.id), tz)
        stamped.append(
            _Stamped(
                at=at,
                day=at.date(),
                record_id=str(record.id),
                mood=_normalize_mood(record.mood),
                entry_type=_normalize_entry_type(record.entry_type, record.id),
            )
        )
    stamped.sort(key=lambda item: (item.at, item.record_id))
    return stamped


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def longest_day_streak(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days in ``days``."""
    ordered = sorted(set(days))
    if not ordered:
        return 0
    longest = 1
    current = 1
    for previous, day in zip(ordered, ordered[1:]):
        if (day - previous).days == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
    return longest


def compute_journal_stats(
    records: Iterable[DatedRecord],
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> JournalStats:
    stamped = _stamp(records, tz)
    current = _resolve_now(now, tz)
    week_start = current - timedelta(days=WEEK_WINDOW_DAYS)

    week = [item for item in stamped if week_start <= item.at <= current]
    shared = sum(1 for item in week if item.entry_type == ENTRY_TYPE_SHARED_JOURNEY)
    stats = JournalStats(
        total_entries=len(stamped),
        week_entries=len(week),
        longest_streak=longest_day_streak(item.day for item in stamped),
        week_shared_journeys=shared,
        week_quick_moments=len(week) - shared,
    )
    logger.debug(
        "Journal stats over %s records: week=%s streak=%s",
        stats.total_entries,
        stats.week_entries,
        stats.longest_streak,
    )
    return stats


def _mood_streak(stamped: list[_Stamped]) -> MoodStreak:
    newest_first = stamped[::-1]
    current_mood = newest_first[0].mood
    first_mood_by_day: dict[date, str] = {}
    for item in newest_first:
        first_mood_by_day.setdefault(item.day, item.mood)

    streak_days = 0
    previous_day = None
    for day, mood in first_mood_by_day.items():
        if previous_day is not None and (previous_day - day).days > 1:
            break
        if mood != current_mood:
            break
        streak_days += 1
        previous_day = day
    return MoodStreak(current_mood=current_mood, streak_days=streak_days)


def compute_mood_analytics(
    records: Iterable[DatedRecord],
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
    positive_moods: Iterable[str] | None = None,
) -> MoodAnalytics:
    """Distribution, 30-day trends, weekly positivity and the current mood streak.

    Records without a mood are ignored; when none carry one the empty
    ``MoodAnalytics()`` is returned.
    """
    stamped = [item for item in _stamp(records, tz) if item.mood]
    if not stamped:
        return MoodAnalytics()
    positive = frozenset(positive_moods) if positive_moods is not None else POSITIVE_MOOD_MARKERS
    current = _resolve_now(now, tz)

    counts: dict[str, int] = {}
    for item in stamped:
        counts[item.mood] = counts.get(item.mood, 0) + 1
    total = len(stamped)
    distribution = [
        MoodShare(mood=mood, count=count, percentage=_round_half_up(count / total * 100))
        for mood, count in counts.items()
    ]

    trend_start = current - timedelta(days=MOOD_TREND_WINDOW_DAYS)
    trend_counts: dict[tuple[date, str], int] = {}
    for item in stamped:
        if trend_start <= item.at <= current:
            key = (item.day, item.mood)
            trend_counts[key] = trend_counts.get(key, 0) + 1
    trends = [
        MoodTrendPoint(date=day.isoformat(), mood=mood, count=count)
        for (day, mood), count in trend_counts.items()
    ]

    week_start = current - timedelta(days=WEEK_WINDOW_DAYS)
    week = [item for item in stamped if week_start <= item.at <= current]
    positive_count = sum(1 for item in week if item.mood in positive)
    weekly_average = _round_half_up(positive_count / len(week) * 100) if week else 0

    return MoodAnalytics(
        mood_distribution=distribution,
        mood_trends=trends,
        weekly_mood_average=weekly_average,
        mood_streak=_mood_streak(stamped),
    )
