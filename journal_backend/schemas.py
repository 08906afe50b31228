from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

EntryType = Literal["shared_journey", "quick_moment"]


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _reject_null(value, field_name: str):
    # Field defaults skip validation, so only an explicit null reaches here.
    if value is None:
        raise ValueError(f"{field_name} cannot be null")
    return value


class JournalEntryCreate(BaseModel):
    title: Optional[str] = None
    content: str = Field(..., min_length=1)
    mood: Optional[str] = None
    entry_type: EntryType = "shared_journey"
    child_profile_id: Optional[str] = None
    calm_reset_used: bool = False

    @field_validator("title", "mood", "child_profile_id", mode="before")
    @classmethod
    def strip_optional_text(cls, value):
        return _blank_to_none(value)


class JournalEntryPatch(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    mood: Optional[str] = None
    entry_type: Optional[EntryType] = None
    child_profile_id: Optional[str] = None
    calm_reset_used: Optional[bool] = None

    @field_validator("title", "mood", "child_profile_id", mode="before")
    @classmethod
    def strip_optional_text(cls, value):
        return _blank_to_none(value)

    @field_validator("content", mode="before")
    @classmethod
    def reject_null_content(cls, value):
        return _reject_null(value, "content")


class FavoritePayload(BaseModel):
    is_favorite: bool


class ChildProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    developmental_stage: Optional[str] = None
    notes: Optional[str] = None


class ChildProfilePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    developmental_stage: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def reject_null_name(cls, value):
        return _reject_null(value, "name")


class ParentProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    relationship: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    parenting_style: Optional[str] = None
    parenting_philosophy: Optional[str] = None
    personality_traits: List[str] = Field(default_factory=list)
    parenting_goals: Optional[str] = None
    stressors: Optional[str] = None
    support_systems: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("relationship", mode="before")
    @classmethod
    def strip_optional_text(cls, value):
        return _blank_to_none(value)


class ParentProfilePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    relationship: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    parenting_style: Optional[str] = None
    parenting_philosophy: Optional[str] = None
    personality_traits: Optional[List[str]] = None
    parenting_goals: Optional[str] = None
    stressors: Optional[str] = None
    support_systems: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("relationship", mode="before")
    @classmethod
    def strip_optional_text(cls, value):
        return _blank_to_none(value)

    @field_validator("name", mode="before")
    @classmethod
    def reject_null_name(cls, value):
        return _reject_null(value, "name")


class DailyCheckin(BaseModel):
    """Answers from the daily wellness check-in; each is an option key such as ``"tired"``."""

    energy_level: Optional[str] = None
    patience_level: Optional[str] = None
    parent_child_connection: Optional[str] = None
    parenting_confidence: Optional[str] = None
    parent_self_care: Optional[str] = None
    support_system_contact: Optional[str] = None
    arguments_or_tension: Optional[str] = None
    emotional_regulation: Optional[str] = None
    discipline_style: Optional[str] = None
    wins_of_the_day: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def strip_answers(cls, value):
        return _blank_to_none(value)

    def answers(self) -> Dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class ItemsResponse(BaseModel):
    items: List[Dict[str, Any]]


class JournalStatsResponse(BaseModel):
    total_entries: int = Field(serialization_alias="totalEntries")
    week_entries: int = Field(serialization_alias="weekEntries")
    longest_streak: int = Field(serialization_alias="longestStreak")
    week_shared_journeys: int = Field(serialization_alias="weekSharedJourneys")
    week_quick_moments: int = Field(serialization_alias="weekQuickMoments")


class MoodShareResponse(BaseModel):
    mood: str
    count: int
    percentage: int


class MoodTrendPointResponse(BaseModel):
    date: str
    mood: str
    count: int


class MoodStreakResponse(BaseModel):
    current_mood: Optional[str] = Field(serialization_alias="currentMood")
    streak_days: int = Field(serialization_alias="streakDays")


class MoodAnalyticsResponse(BaseModel):
    mood_distribution: List[MoodShareResponse] = Field(serialization_alias="moodDistribution")
    mood_trends: List[MoodTrendPointResponse] = Field(serialization_alias="moodTrends")
    weekly_mood_average: int = Field(serialization_alias="weeklyMoodAverage")
    mood_streak: MoodStreakResponse = Field(serialization_alias="moodStreak")
