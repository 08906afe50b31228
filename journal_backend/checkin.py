"""Daily wellness check-in scoring.

Each answer is an option key from the check-in form. Keys map to a score
from 1 (worst) to 8 (best); the average picks the mood stored on the
resulting journal entry.
"""

from __future__ import annotations

import math
from typing import Mapping

NEUTRAL_SCORE = 5

ANSWER_SCORES = {
    # Energy
    "completely_drained": 1, "exhausted": 2, "very_tired": 3, "tired": 4,
    "energetic": 7, "vibrant": 8,
    # Patience
    "explosive": 1, "very_short_fuse": 2, "short_fuse": 3, "impatient": 4,
    "mostly_patient": 6, "patient": 7, "zen": 8,
    # Parent-child connection
    "completely_disconnected": 1, "very_distant": 2, "distant": 3, "strained": 4,
    "close": 7, "deeply_bonded": 8,
    # Confidence
    "completely_lost": 1, "very_doubting": 2, "doubting": 3, "unsure": 4,
    "somewhat_confident": 6, "confident": 7, "very_empowered": 8,
    # Self-care
    "completely_neglected": 1, "very_neglected": 2, "neglected": 3, "minimal": 4,
    "adequate": 5, "some_self_care": 6, "good_self_care": 7, "prioritized_myself": 8,
    # Support system
    "completely_isolated": 1, "very_isolated": 2, "isolated": 3, "limited": 4,
    "some_connection": 5, "regular_contact": 6, "good_support": 7, "strong_network": 8,
    # Arguments or tension
    "constant_conflict": 1, "frequent_arguments": 2, "some_tension": 3, "occasional_disagreements": 4,
    # Emotional regulation
    "completely_overwhelmed": 1, "very_overwhelmed": 2, "overwhelmed": 3, "struggled": 4,
    "managed": 5, "handled_well": 6, "balanced": 7, "completely_centered": 8,
    # Discipline
    "very_harsh": 1, "too_harsh": 2, "harsh": 3, "strict": 4,
    "firm_but_fair": 6, "gentle": 7, "kind": 7, "loving_guide": 8,
    # Wins of the day
    "very_rough_day": 1, "rough_day": 2, "challenging_day": 3, "few_bright_spots": 4,
    "some_wins": 5, "good_moments": 6, "great_moments": 7, "absolutely_amazing": 8,
    # Shared middle options
    "okay": 5, "neutral": 5, "good": 6,
}

# Lower bound of the average for each mood, best first.
MOOD_THRESHOLDS = (
    (7.5, "joyful"),
    (6.5, "content"),
    (5.5, "hopeful"),
    (4.5, "neutral"),
    (3.5, "tired"),
    (2.5, "stressed"),
    (1.5, "frustrated"),
)
LOWEST_MOOD = "overwhelmed"

ANSWER_LABELS = (
    ("energy_level", "Energy Level"),
    ("patience_level", "Patience Level"),
    ("parent_child_connection", "Parent-Child Connection"),
    ("parenting_confidence", "Parenting Confidence"),
    ("parent_self_care", "Self-Care"),
    ("support_system_contact", "Support System Contact"),
    ("arguments_or_tension", "Arguments/Tension"),
    ("emotional_regulation", "Emotional Regulation"),
    ("discipline_style", "Discipline Style"),
    ("wins_of_the_day", "Wins of the Day"),
)


def average_score(answers: Mapping[str, str]) -> float:
    """Mean score of the answers; unknown option keys count as neutral."""
    if not answers:
        raise ValueError("A check-in needs at least one answer")
    scores = [ANSWER_SCORES.get(value, NEUTRAL_SCORE) for value in answers.values()]
    return sum(scores) / len(scores)


def mood_for_score(score: float) -> str:
    for lower_bound, mood in MOOD_THRESHOLDS:
        if score >= lower_bound:
            return mood
    return LOWEST_MOOD


def round_score(score: float) -> float:
    return math.floor(score * 10 + 0.5) / 10


def checkin_content(answers: Mapping[str, str]) -> str:
    lines = ["Daily Wellness Check-In:", ""]
    for key, label in ANSWER_LABELS:
        if key in answers:
            lines.append(f"{label}: {answers[key]}")
    return "\n".join(lines)
