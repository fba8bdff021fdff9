"""
Tests for the probability simulation helpers.
"""

from datetime import date, timedelta

from conftest import local, make_log
from models.profile import Profile
from utils.probability_explanation import (
    SIMULATION_DAYS,
    build_probability_history,
    calculate_probability_drop_without_study,
    calculate_required_daily_study,
)

NOW = local(2024, 10, 17, 12, 0)


def _profile():
    return Profile(user_id="user-1", current_deviation=58, target_deviation=60,
                   exam_date=date(2025, 2, 1))


def test_required_daily_study_counts_last_seven_days():
    logs = [
        make_log(40, NOW - timedelta(days=1)),
        make_log(50, NOW - timedelta(days=6, hours=23)),
        make_log(90, NOW - timedelta(days=8)),
    ]
    result = calculate_required_daily_study(_profile(), logs, NOW)
    assert result == {"to_maintain": 30, "to_increase": 120, "recent_7_days_minutes": 90}


def test_drop_without_study_is_zero_because_history_is_not_used():
    latest = make_log(30, NOW - timedelta(hours=2))
    result = calculate_probability_drop_without_study(_profile(), [latest], latest, NOW)

    assert result["current_probability"] == 76
    assert [s["days"] for s in result["simulations"]] == list(SIMULATION_DAYS)
    for simulation in result["simulations"]:
        assert simulation["probability"] == 76
        assert simulation["drop"] == 0
        assert simulation["latest_study_at"] == NOW - timedelta(days=simulation["days"])


def test_drop_without_any_log():
    result = calculate_probability_drop_without_study(_profile(), [], None, NOW)
    assert all(s["latest_study_at"] is None for s in result["simulations"])


def test_history_starts_at_first_study_day():
    logs = [make_log(30, NOW - timedelta(days=5)), make_log(10, NOW - timedelta(days=1))]
    history = build_probability_history(_profile(), logs, 30, NOW)

    assert len(history) == 6
    assert history[0]["full_date"] == "2024-10-12"
    assert history[0]["date"] == "10/12"
    assert history[-1]["full_date"] == "2024-10-17"
    assert {point["probability"] for point in history} == {76}


def test_history_is_limited_to_requested_days():
    logs = [make_log(30, NOW - timedelta(days=100))]
    assert len(build_probability_history(_profile(), logs, 7, NOW)) == 7


def test_history_without_logs():
    assert build_probability_history(_profile(), [], 30, NOW) == []
