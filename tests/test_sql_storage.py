"""Tests specific to the SQLAlchemy backend."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from vinyl_vault.adapters.sql_storage import SqlCatalogStorage


def test_connect_creates_tables(sql_storage: SqlCatalogStorage) -> None:
    tables = set(inspect(sql_storage.engine).get_table_names())

    assert {"users", "records", "sessions"} <= tables
    assert sql_storage.kind == "sql"


def test_connect_is_repeatable_on_existing_schema(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'vinyl.db'}"
    first = SqlCatalogStorage.connect(url)
    first.close()

    second = SqlCatalogStorage.connect(url)
    try:
        assert second.get_user(1) is None
    finally:
        second.close()


def test_connect_raises_for_unreachable_database(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'missing' / 'vinyl.db'}"

    with pytest.raises(OperationalError):
        SqlCatalogStorage.connect(url)


def test_sessions_round_trip(sql_storage: SqlCatalogStorage) -> None:
    expires_at = datetime.now(tz=UTC) + timedelta(hours=1)

    session = sql_storage.sessions.create(user_id=7, expires_at=expires_at)
    fetched = sql_storage.sessions.get(session.id)

    assert fetched is not None
    assert fetched.user_id == 7
    assert abs(fetched.expires_at - expires_at) < timedelta(seconds=1)


def test_expired_session_is_dropped(sql_storage: SqlCatalogStorage) -> None:
    past = datetime.now(tz=UTC) - timedelta(minutes=1)
    session = sql_storage.sessions.create(user_id=7, expires_at=past)

    assert sql_storage.sessions.get(session.id) is None
    assert sql_storage.sessions.prune_expired() == 0


def test_touch_extends_session(sql_storage: SqlCatalogStorage) -> None:
    soon = datetime.now(tz=UTC) + timedelta(seconds=30)
    later = datetime.now(tz=UTC) + timedelta(days=1)
    session = sql_storage.sessions.create(user_id=7, expires_at=soon)

    sql_storage.sessions.touch(session.id, later)

    fetched = sql_storage.sessions.get(session.id)
    assert fetched is not None
    assert fetched.expires_at > soon


def test_prune_and_destroy(sql_storage: SqlCatalogStorage) -> None:
    now = datetime.now(tz=UTC)
    live = sql_storage.sessions.create(user_id=1, expires_at=now + timedelta(hours=1))
    sql_storage.sessions.create(user_id=2, expires_at=now - timedelta(hours=1))
    sql_storage.sessions.create(user_id=3, expires_at=now - timedelta(hours=2))

    assert sql_storage.sessions.prune_expired() == 2

    sql_storage.sessions.destroy(live.id)
    assert sql_storage.sessions.get(live.id) is None
