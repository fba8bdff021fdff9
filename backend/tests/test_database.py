"""
Tests for the Supabase data-access boundary (no live database).
"""

import pytest

import config
from conftest import local, make_book
from models import database
from models.database import DEFAULT_SUBJECT, DatabaseError, resolve_subject, save_study_log


class FakeQuery:
    """Records the chained PostgREST calls and returns canned rows."""

    def __init__(self, rows, calls):
        self.rows = rows
        self.calls = calls

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args))
            return self
        return method

    def execute(self):
        return type("Response", (), {"data": self.rows})()


class FakeClient:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def table(self, name):
        self.calls.append(("table", (name,)))
        return FakeQuery(self.rows, self.calls)


@pytest.fixture
def fake_db(monkeypatch):
    def install(rows):
        client = FakeClient(rows)
        monkeypatch.setattr(database, "get_db", lambda: client)
        return client
    return install


@pytest.mark.parametrize("minutes", [0, -5, None, 1.5])
def test_sub_minute_logs_are_never_written(fake_db, minutes):
    client = fake_db([])
    with pytest.raises(ValueError):
        save_study_log({
            "user_id": "user-1",
            "subject": "数学",
            "study_minutes": minutes,
            "started_at": local(2024, 1, 24, 10, 0),
        })
    assert client.calls == []


@pytest.mark.parametrize("minutes", [0, None])
def test_update_never_writes_sub_minute_logs(fake_db, minutes):
    client = fake_db([])
    with pytest.raises(ValueError):
        database.update_study_log("log-1", {"study_minutes": minutes})
    assert client.calls == []


def test_save_study_log_serializes_started_at(fake_db):
    row = {
        "id": "log-1", "user_id": "user-1", "subject": "数学", "reference_book_id": None,
        "study_minutes": 25, "started_at": "2024-01-24T01:00:00+00:00",
    }
    client = fake_db([row])

    log = save_study_log({
        "user_id": "user-1",
        "subject": "数学",
        "study_minutes": 25,
        "started_at": local(2024, 1, 24, 10, 0),
    })

    insert = next(args for name, args in client.calls if name == "insert")
    assert insert[0]["started_at"] == "2024-01-24T10:00:00+09:00"
    assert log.study_minutes == 25


def test_empty_insert_result_raises(fake_db):
    fake_db([])
    with pytest.raises(DatabaseError):
        save_study_log({
            "user_id": "user-1", "subject": "数学", "study_minutes": 5,
            "started_at": "2024-01-24T01:00:00+00:00",
        })


def test_reference_books_exclude_deleted_by_default(fake_db):
    client = fake_db([{"id": "b1", "user_id": "user-1", "name": "青チャート"}])

    books = database.get_reference_books("user-1")
    assert books[0].name == "青チャート"
    assert ("is_", ("deleted_at", "null")) in client.calls

    client.calls.clear()
    database.get_reference_books("user-1", include_deleted=True)
    assert not any(name == "is_" for name, _ in client.calls)


def test_get_profile_missing(fake_db):
    fake_db([])
    assert database.get_profile("nobody") is None


def test_resolve_subject():
    assert resolve_subject(make_book("b1", "  青チャート ")) == "青チャート"
    assert resolve_subject(None, " 英語 ") == "英語"
    assert resolve_subject(None, "  ") == DEFAULT_SUBJECT
    assert resolve_subject(None) == DEFAULT_SUBJECT


def test_init_requires_credentials(monkeypatch):
    monkeypatch.setattr(database, "_supabase_initialized", False)
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_KEY", None)
    with pytest.raises(ValueError):
        database.init_supabase()
