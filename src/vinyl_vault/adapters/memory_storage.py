"""In-memory storage used when no database is available.

State lives for the lifetime of the process only. Mutations are not guarded
by locks; the app runs handlers for this backend in a single process.
"""

import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from vinyl_vault.domain.models import (
    RECORD_FIELDS,
    NewUser,
    RecordDraft,
    UserRecord,
    VinylRecord,
)
from vinyl_vault.domain.sessions import SessionRecord
from vinyl_vault.errors import ConflictError
from vinyl_vault.services.storage import CatalogStorage, SessionStore


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store."""

    entries: dict[str, SessionRecord] = field(default_factory=dict)

    def create(self, user_id: int, expires_at: datetime) -> SessionRecord:
        session = SessionRecord(
            id=secrets.token_urlsafe(32), user_id=user_id, expires_at=expires_at
        )
        self.entries[session.id] = session
        return session

    def get(self, session_id: str) -> SessionRecord | None:
        session = self.entries.get(session_id)
        if session is None:
            return None
        if session.is_expired(datetime.now(tz=UTC)):
            self.entries.pop(session_id, None)
            return None
        return session

    def touch(self, session_id: str, expires_at: datetime) -> None:
        session = self.entries.get(session_id)
        if session is not None:
            self.entries[session_id] = replace(session, expires_at=expires_at)

    def destroy(self, session_id: str) -> None:
        self.entries.pop(session_id, None)

    def prune_expired(self) -> int:
        now = datetime.now(tz=UTC)
        expired = [key for key, value in self.entries.items() if value.is_expired(now)]
        for key in expired:
            del self.entries[key]
        return len(expired)


@dataclass
class InMemoryCatalogStorage(CatalogStorage):
    """Dictionary-backed users and records with per-collection id counters."""

    kind: str = "memory"
    users: dict[int, UserRecord] = field(default_factory=dict)
    records: dict[int, VinylRecord] = field(default_factory=dict)
    sessions: InMemorySessionStore = field(default_factory=InMemorySessionStore)
    next_user_id: int = 1
    next_record_id: int = 1

    def get_user(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> UserRecord | None:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def create_user(self, candidate: NewUser) -> UserRecord:
        if self.get_user_by_username(candidate.username) is not None:
            raise ConflictError("Username already exists")
        user = UserRecord(
            id=self.next_user_id,
            username=candidate.username,
            password_hash=candidate.password_hash,
            name=candidate.name,
            created_at=datetime.now(tz=UTC),
        )
        self.next_user_id += 1
        self.users[user.id] = user
        return user

    def get_records(self, owner_id: int) -> list[VinylRecord]:
        return [record for record in self.records.values() if record.owner_id == owner_id]

    def get_record(self, record_id: int) -> VinylRecord | None:
        return self.records.get(record_id)

    def create_record(self, candidate: RecordDraft) -> VinylRecord:
        record = VinylRecord(
            id=self.next_record_id,
            owner_id=candidate.owner_id,
            title=candidate.title,
            artist=candidate.artist,
            year=candidate.year,
            genre=candidate.genre,
            cover_image=candidate.cover_image,
            custom_fields=dict(candidate.custom_fields),
            created_at=datetime.now(tz=UTC),
        )
        self.next_record_id += 1
        self.records[record.id] = record
        return record

    def update_record(
        self, record_id: int, fields: Mapping[str, object]
    ) -> VinylRecord | None:
        existing = self.records.get(record_id)
        if existing is None:
            return None
        changes = {name: fields[name] for name in RECORD_FIELDS if name in fields}
        if "custom_fields" in changes:
            changes["custom_fields"] = dict(changes["custom_fields"] or {})
        updated = replace(existing, **changes)
        self.records[record_id] = updated
        return updated

    def delete_record(self, record_id: int) -> bool:
        return self.records.pop(record_id, None) is not None

    def search_records(self, owner_id: int, query: str) -> list[VinylRecord]:
        return [
            record
            for record in self.records.values()
            if record.owner_id == owner_id and record.matches(query)
        ]

    def close(self) -> None:
        return None
