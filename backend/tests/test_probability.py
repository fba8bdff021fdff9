"""
Tests for the pass-probability estimator.
"""

from datetime import date, timedelta

import pytest

from models.profile import Profile
from utils.probability import (
    calculate_base_probability,
    calculate_pass_probability,
    default_exam_date,
    get_deviation_range,
    get_probability_display,
)

EXAM = date(2025, 6, 1)


def _profile(current=None, target=None, exam_date=EXAM):
    return Profile(
        user_id="user-1",
        current_deviation=current,
        target_deviation=target,
        exam_date=exam_date,
    )


def _days_before(days):
    return EXAM - timedelta(days=days)


class TestBaseProbability:
    @pytest.mark.parametrize("days", [0, 10, 45, 120, 200, 400])
    def test_on_target_is_80_regardless_of_exam_date(self, days):
        result = calculate_pass_probability(_profile(60, 60), _days_before(days))
        assert result["probability"] == 80

    def test_above_target(self):
        assert calculate_base_probability(60, 50) == 95

    def test_above_target_is_capped_at_99(self):
        assert calculate_base_probability(80, 50) == 99

    def test_below_target(self):
        assert calculate_base_probability(50, 55) == 70

    def test_below_target_penalty_is_capped_at_60(self):
        assert calculate_base_probability(40, 70) == 20
        assert calculate_base_probability(30, 80) == 20

    def test_half_values_round_up(self):
        # 80 + 3 * 1.5 = 84.5
        result = calculate_pass_probability(_profile(53, 50), _days_before(10))
        assert result["probability"] == 85


class TestDefaults:
    def test_missing_deviations_default_to_50_on_target(self):
        result = calculate_pass_probability(_profile(), _days_before(10))
        assert result["probability"] == 80

    def test_missing_current_uses_50(self):
        result = calculate_pass_probability(_profile(None, 55), _days_before(10))
        assert result["probability"] == 70

    def test_missing_target_equals_current(self):
        result = calculate_pass_probability(_profile(42, None), _days_before(10))
        assert result["probability"] == 80

    def test_missing_exam_date_defaults_to_next_february_first(self):
        today = date(2024, 10, 17)
        result = calculate_pass_probability(_profile(exam_date=None), today)
        assert default_exam_date(today) == date(2025, 2, 1)
        assert result["days_until_exam"] == 107
        assert (result["min_probability"], result["max_probability"]) == (70, 90)

    def test_exam_date_time_component_is_ignored(self):
        profile = _profile(exam_date="2025-06-01T23:30:00+09:00")
        assert profile.exam_date == EXAM
        assert calculate_pass_probability(profile, _days_before(5))["days_until_exam"] == 5


class TestDeviationRange:
    @pytest.mark.parametrize("days,expected", [
        (400, 20), (365, 20), (364, 15),
        (180, 15), (179, 10),
        (90, 10), (89, 5),
        (30, 5), (29, 0), (0, 0),
    ])
    def test_thresholds(self, days, expected):
        assert get_deviation_range(days) == expected

    @pytest.mark.parametrize("days,band", [(365, 20), (180, 15), (90, 10), (30, 5), (29, 0)])
    def test_band_applied_around_base(self, days, band):
        result = calculate_pass_probability(_profile(50, 55), _days_before(days))
        assert result["days_until_exam"] == days
        assert result["min_probability"] == 70 - band
        assert result["max_probability"] == 70 + band

    def test_example_profile_400_days_out(self):
        result = calculate_pass_probability(_profile(60, 50), _days_before(400))
        assert result == {
            "probability": 95,
            "min_probability": 75,
            "max_probability": 99,
            "days_until_exam": 400,
        }
        display = get_probability_display(
            result["probability"], result["min_probability"],
            result["max_probability"], result["days_until_exam"],
        )
        assert display == {"display": "75-99%", "is_range": True}

    def test_min_is_clamped_at_zero(self):
        result = calculate_pass_probability(_profile(40, 70), _days_before(400))
        assert result["min_probability"] == 0
        assert result["max_probability"] == 40


class TestDaysUntilExam:
    def test_past_exam_is_zero(self):
        result = calculate_pass_probability(_profile(60, 50), EXAM + timedelta(days=3))
        assert result["days_until_exam"] == 0
        assert result["min_probability"] == result["probability"] == result["max_probability"]

    def test_non_increasing_as_time_advances(self):
        previous = None
        for offset in range(60, -10, -1):
            days = calculate_pass_probability(_profile(), _days_before(offset))["days_until_exam"]
            assert days >= 0
            if previous is not None:
                assert days <= previous
            previous = days


class TestInvariants:
    @pytest.mark.parametrize("current", [0.5, 20, 45, 50, 55.5, 70, 99])
    @pytest.mark.parametrize("target", [30, 50, 65, 80])
    @pytest.mark.parametrize("days", [0, 29, 30, 100, 200, 500])
    def test_ordering_and_bounds(self, current, target, days):
        result = calculate_pass_probability(_profile(current, target), _days_before(days))
        assert 0 <= result["min_probability"] <= result["probability"] <= result["max_probability"] <= 99
        assert all(isinstance(result[key], int) for key in result)


class TestDisplay:
    def test_single_value_within_30_days(self):
        assert get_probability_display(80, 80, 80, 30) == {"display": "80%", "is_range": False}
        assert get_probability_display(80, 80, 80, 0)["is_range"] is False

    def test_range_beyond_30_days(self):
        assert get_probability_display(80, 75, 85, 31) == {"display": "75-85%", "is_range": True}
