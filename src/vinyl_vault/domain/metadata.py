"""Domain models for record metadata lookups."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecordMetadata:
    """Best-effort metadata for an artist and title."""

    year: str | None = None
    genre: str | None = None
    cover_image: str | None = None

    def is_empty(self) -> bool:
        """Return true when nothing was found."""
        return not (self.year or self.genre or self.cover_image)
