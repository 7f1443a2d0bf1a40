"""Tests specific to the in-memory backend."""

from datetime import UTC, datetime, timedelta

from vinyl_vault.adapters.memory_storage import (
    InMemoryCatalogStorage,
    InMemorySessionStore,
)
from tests.conftest import make_draft, make_user


def test_ids_count_up_per_collection(memory_storage: InMemoryCatalogStorage) -> None:
    alice = make_user(memory_storage)
    bob = make_user(memory_storage, username="bob@example.com")
    first = memory_storage.create_record(make_draft(alice.id))
    second = memory_storage.create_record(make_draft(bob.id))

    assert (alice.id, bob.id) == (1, 2)
    assert (first.id, second.id) == (1, 2)


def test_deleted_ids_are_not_reused(memory_storage: InMemoryCatalogStorage) -> None:
    alice = make_user(memory_storage)
    first = memory_storage.create_record(make_draft(alice.id))
    memory_storage.delete_record(first.id)

    second = memory_storage.create_record(make_draft(alice.id))

    assert second.id == 2


def test_custom_fields_are_copied(memory_storage: InMemoryCatalogStorage) -> None:
    alice = make_user(memory_storage)
    fields = {"Pressing": "UK 1st"}
    created = memory_storage.create_record(make_draft(alice.id, custom_fields=fields))

    fields["Pressing"] = "changed"

    assert memory_storage.get_record(created.id).custom_fields == {"Pressing": "UK 1st"}


def test_session_store_expiry_and_prune() -> None:
    store = InMemorySessionStore()
    now = datetime.now(tz=UTC)
    live = store.create(user_id=1, expires_at=now + timedelta(hours=1))
    stale = store.create(user_id=2, expires_at=now - timedelta(seconds=1))
    store.create(user_id=3, expires_at=now - timedelta(hours=1))

    assert store.get(live.id) == live
    assert store.get(stale.id) is None
    assert store.prune_expired() == 1
    assert list(store.entries) == [live.id]


def test_session_touch_and_destroy() -> None:
    store = InMemorySessionStore()
    now = datetime.now(tz=UTC)
    session = store.create(user_id=1, expires_at=now + timedelta(seconds=5))

    store.touch(session.id, now + timedelta(days=1))
    assert store.get(session.id).expires_at == now + timedelta(days=1)

    store.destroy(session.id)
    store.destroy(session.id)
    assert store.get(session.id) is None
