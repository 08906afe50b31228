"""Tests for daily check-in scoring."""

import pytest

from journal_backend.checkin import (
    ANSWER_SCORES,
    average_score,
    checkin_content,
    mood_for_score,
    round_score,
)


# =============================================================================
# Score to mood buckets
# =============================================================================


class TestMoodForScore:

    @pytest.mark.parametrize(
        "score, mood",
        [
            (8.0, "joyful"),
            (7.5, "joyful"),
            (7.49, "content"),
            (6.5, "content"),
            (6.0, "hopeful"),
            (5.5, "hopeful"),
            (5.0, "neutral"),
            (4.5, "neutral"),
            (4.0, "tired"),
            (3.5, "tired"),
            (3.0, "stressed"),
            (2.5, "stressed"),
            (2.0, "frustrated"),
            (1.5, "frustrated"),
            (1.49, "overwhelmed"),
            (1.0, "overwhelmed"),
        ],
    )
    def test_buckets(self, score, mood):
        assert mood_for_score(score) == mood


# =============================================================================
# Averages
# =============================================================================


class TestAverageScore:

    def test_known_answers(self):
        assert average_score({"energy_level": "vibrant", "patience_level": "explosive"}) == 4.5

    def test_unknown_answer_counts_as_neutral(self):
        assert average_score({"energy_level": "sparkly"}) == 5

    def test_empty_answers_rejected(self):
        with pytest.raises(ValueError):
            average_score({})

    def test_scores_within_range(self):
        assert all(1 <= score <= 8 for score in ANSWER_SCORES.values())

    def test_round_score_half_up(self):
        assert round_score(7.25) == 7.3
        assert round_score(23 / 3) == 7.7


class TestCheckinContent:

    def test_lists_answers_in_form_order(self):
        content = checkin_content({"wins_of_the_day": "some_wins", "energy_level": "tired"})
        lines = content.splitlines()
        assert lines[0] == "Daily Wellness Check-In:"
        assert lines[2:] == ["Energy Level: tired", "Wins of the Day: some_wins"]
