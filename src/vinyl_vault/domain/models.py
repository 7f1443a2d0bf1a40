"""Domain models for the vinyl catalog."""

from dataclasses import dataclass, field
from datetime import datetime

RECORD_FIELDS = (
    "title",
    "artist",
    "year",
    "genre",
    "cover_image",
    "custom_fields",
)


@dataclass(frozen=True)
class NewUser:
    """Candidate user before an id is assigned."""

    username: str
    password_hash: str
    name: str


@dataclass(frozen=True)
class UserRecord:
    """Represents a registered user."""

    id: int
    username: str
    password_hash: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class RecordDraft:
    """Candidate catalog entry before an id is assigned."""

    owner_id: int
    title: str
    artist: str
    year: str | None = None
    genre: str | None = None
    cover_image: str | None = None
    custom_fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class VinylRecord:
    """Represents a stored catalog entry."""

    id: int
    owner_id: int
    title: str
    artist: str
    year: str | None
    genre: str | None
    cover_image: str | None
    custom_fields: dict[str, str]
    created_at: datetime

    def matches(self, query: str) -> bool:
        """Return true when title, artist, genre or year contains the query."""
        needle = query.lower()
        return any(
            value is not None and needle in value.lower()
            for value in (self.title, self.artist, self.genre, self.year)
        )
