from __future__ import annotations

ENTRY_TYPE_SHARED_JOURNEY = "shared_journey"
ENTRY_TYPE_QUICK_MOMENT = "quick_moment"
ENTRY_TYPES = (ENTRY_TYPE_SHARED_JOURNEY, ENTRY_TYPE_QUICK_MOMENT)
DEFAULT_ENTRY_TYPE = ENTRY_TYPE_SHARED_JOURNEY

# Happy, joyful, loving, calm, hugging.
POSITIVE_MOOD_MARKERS = frozenset({"😊", "😄", "🥰", "😌", "🤗"})

WEEK_WINDOW_DAYS = 7
MOOD_TREND_WINDOW_DAYS = 30

DEFAULT_ENTRY_LIST_LIMIT = 10
MAX_ENTRY_LIST_LIMIT = 100

# Parent profile shown when a single profile is requested for the family.
PRIMARY_PARENT_RELATIONSHIP = "Primary"
