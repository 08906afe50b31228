from __future__ import annotations

import logging
from datetime import tzinfo
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from journal_backend.constants import POSITIVE_MOOD_MARKERS

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")

    stats_timezone: str = Field("UTC", alias="STATS_TIMEZONE")

    allowed_family_ids_raw: str = Field("", alias="ALLOWED_FAMILY_IDS")
    positive_moods_raw: str = Field("", alias="POSITIVE_MOODS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_family_ids(self) -> List[str]:
        return [item.strip() for item in self.allowed_family_ids_raw.split(",") if item.strip()]

    @property
    def positive_moods(self) -> frozenset[str]:
        items = [item.strip() for item in self.positive_moods_raw.split(",") if item.strip()]
        return frozenset(items) if items else POSITIVE_MOOD_MARKERS

    def stats_tzinfo(self) -> tzinfo:
        try:
            return ZoneInfo(self.stats_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown STATS_TIMEZONE %r, falling back to UTC.", self.stats_timezone)
            return ZoneInfo("UTC")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
