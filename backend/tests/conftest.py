"""Pytest configuration and shared fixtures."""

import itertools
from datetime import datetime

import pytest
import pytz

import config
from models.profile import Profile
from models.reference_book import ReferenceBook
from models.study_log import StudyLog

TOKYO = pytz.timezone("Asia/Tokyo")

_log_ids = itertools.count(1)


@pytest.fixture(autouse=True)
def fixed_timezone(monkeypatch):
    """Run every test against the same local timezone."""
    monkeypatch.setattr(config, "APP_TIMEZONE", "Asia/Tokyo")
    monkeypatch.setattr(config, "DAY_BOUNDARY_HOUR", 3)
    return TOKYO


def local(*args) -> datetime:
    """Tokyo-aware datetime from naive components."""
    return TOKYO.localize(datetime(*args))


def make_log(minutes, started_at, reference_book_id=None, subject="数学", user_id="user-1"):
    return StudyLog(
        id=f"log-{next(_log_ids)}",
        user_id=user_id,
        subject=subject,
        reference_book_id=reference_book_id,
        study_minutes=minutes,
        started_at=started_at,
    )


def make_book(book_id, name, deleted=False, user_id="user-1"):
    return ReferenceBook(
        id=book_id,
        user_id=user_id,
        name=name,
        deleted_at=local(2024, 1, 1, 0, 0) if deleted else None,
    )


@pytest.fixture
def profile():
    return Profile(
        user_id="user-1",
        current_deviation=55,
        target_deviation=60,
        weekday_target_minutes=60,
        weekend_target_minutes=120,
    )
