"""Storage interfaces shared by the relational and in-memory backends."""

from collections.abc import Mapping
from datetime import datetime
from typing import Protocol

from vinyl_vault.domain.models import NewUser, RecordDraft, UserRecord, VinylRecord
from vinyl_vault.domain.sessions import SessionRecord


class SessionStore(Protocol):
    """Persistence interface for login sessions."""

    def create(self, user_id: int, expires_at: datetime) -> SessionRecord:
        """Create a new session and return it."""

    def get(self, session_id: str) -> SessionRecord | None:
        """Return a live session by id, if present."""

    def touch(self, session_id: str, expires_at: datetime) -> None:
        """Move the expiry of a session forward."""

    def destroy(self, session_id: str) -> None:
        """Remove a session."""

    def prune_expired(self) -> int:
        """Remove expired sessions and return how many were dropped."""


class CatalogStorage(Protocol):
    """Persistence interface for users and their records."""

    kind: str
    sessions: SessionStore

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return a user by id, if present."""

    def get_user_by_username(self, username: str) -> UserRecord | None:
        """Return a user by username, if present."""

    def create_user(self, candidate: NewUser) -> UserRecord:
        """Create and return a user. Raises ConflictError on a taken username."""

    def get_records(self, owner_id: int) -> list[VinylRecord]:
        """Return every record of an owner, in no particular order."""

    def get_record(self, record_id: int) -> VinylRecord | None:
        """Return a record by id, if present."""

    def create_record(self, candidate: RecordDraft) -> VinylRecord:
        """Create a record, assigning its id and creation time."""

    def update_record(
        self, record_id: int, fields: Mapping[str, object]
    ) -> VinylRecord | None:
        """Merge the given fields into a record and return it."""

    def delete_record(self, record_id: int) -> bool:
        """Delete a record and report whether it existed."""

    def search_records(self, owner_id: int, query: str) -> list[VinylRecord]:
        """Return owner records whose title, artist, genre or year contain query."""

    def close(self) -> None:
        """Release any held resources."""
