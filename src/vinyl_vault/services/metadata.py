"""Best-effort metadata lookup for records.

Two sources are available: the Discogs release search, and a small curated
table used offline or whenever the remote search comes back empty. Lookups
never raise; any failure degrades to an empty ``RecordMetadata``.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from vinyl_vault.adapters.discogs_client import DiscogsClient
from vinyl_vault.domain.metadata import RecordMetadata

logger = logging.getLogger(__name__)

_MIN_KEY_LENGTH = 4

# Declaration order is the tie-break when several keys match.
LOCAL_ALBUMS: tuple[tuple[str, RecordMetadata], ...] = (
    (
        "bee gees",
        RecordMetadata(
            year="1977",
            genre="Disco",
            cover_image="https://m.media-amazon.com/images/I/61g-E7+95zL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "saturday night fever",
        RecordMetadata(
            year="1977",
            genre="Disco",
            cover_image="https://m.media-amazon.com/images/I/61g-E7+95zL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "sick boi",
        RecordMetadata(
            year="2012",
            genre="Hip Hop",
            cover_image="https://f4.bcbits.com/img/a1393343511_65",
        ),
    ),
    (
        "michael jackson",
        RecordMetadata(
            year="1982",
            genre="Pop",
            cover_image="https://m.media-amazon.com/images/I/71uGjw17d8L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "thriller",
        RecordMetadata(
            year="1982",
            genre="Pop",
            cover_image="https://m.media-amazon.com/images/I/71uGjw17d8L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "pink floyd",
        RecordMetadata(
            year="1973",
            genre="Rock",
            cover_image="https://m.media-amazon.com/images/I/61jx0giD+qL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "dark side of the moon",
        RecordMetadata(
            year="1973",
            genre="Progressive Rock",
            cover_image="https://m.media-amazon.com/images/I/61jx0giD+qL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "nirvana",
        RecordMetadata(
            year="1991",
            genre="Grunge",
            cover_image="https://m.media-amazon.com/images/I/71DQrKpImPL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "nevermind",
        RecordMetadata(
            year="1991",
            genre="Grunge",
            cover_image="https://m.media-amazon.com/images/I/71DQrKpImPL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "fleetwood mac",
        RecordMetadata(
            year="1977",
            genre="Rock",
            cover_image="https://m.media-amazon.com/images/I/71BekDJBb3L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "rumours",
        RecordMetadata(
            year="1977",
            genre="Rock",
            cover_image="https://m.media-amazon.com/images/I/71BekDJBb3L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "beatles",
        RecordMetadata(
            year="1969",
            genre="Rock",
            cover_image="https://m.media-amazon.com/images/I/818pIz-iV2L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "abbey road",
        RecordMetadata(
            year="1969",
            genre="Rock",
            cover_image="https://m.media-amazon.com/images/I/818pIz-iV2L._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "paul simon",
        RecordMetadata(
            year="1986",
            genre="Folk Rock",
            cover_image="https://m.media-amazon.com/images/I/71jUsnb+8QL._UF1000,1000_QL80_.jpg",
        ),
    ),
    (
        "graceland",
        RecordMetadata(
            year="1986",
            genre="Folk Rock",
            cover_image="https://m.media-amazon.com/images/I/71jUsnb+8QL._UF1000,1000_QL80_.jpg",
        ),
    ),
)


class MetadataSource(Protocol):
    """A single strategy for finding record metadata."""

    async def lookup(self, artist: str, title: str) -> RecordMetadata:
        """Return metadata for an artist and title."""


@dataclass
class LocalMetadataSource(MetadataSource):
    """Curated table matched by lowercase artist/title fragments."""

    table: Sequence[tuple[str, RecordMetadata]] = LOCAL_ALBUMS

    async def lookup(self, artist: str, title: str) -> RecordMetadata:
        """Match artist first, then title, then both combined."""
        return self.match(artist, title)

    def match(self, artist: str, title: str) -> RecordMetadata:
        normalized_artist = artist.strip().lower()
        normalized_title = title.strip().lower()
        candidates = (
            normalized_artist,
            normalized_title,
            f"{normalized_artist} {normalized_title}",
        )
        for text in candidates:
            for key, metadata in self.table:
                if len(key) >= _MIN_KEY_LENGTH and key in text:
                    return metadata
        return RecordMetadata()


@dataclass
class RemoteMetadataSource(MetadataSource):
    """Release search against the Discogs database."""

    client: DiscogsClient

    async def lookup(self, artist: str, title: str) -> RecordMetadata:
        """Return metadata from the first matching release."""
        payload = await self.client.search_releases(f"{artist} {title}", per_page=3)
        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results:
            return RecordMetadata()
        first = results[0]
        if not isinstance(first, dict):
            return RecordMetadata()
        return RecordMetadata(
            year=_as_text(first.get("year")),
            genre=_first_text(first.get("genre")) or _first_text(first.get("style")),
            cover_image=_as_text(first.get("cover_image"))
            or _as_text(first.get("thumb")),
        )


@dataclass
class MetadataService:
    """Combines the remote and local sources; never raises."""

    remote: MetadataSource | None = None
    local: MetadataSource = field(default_factory=LocalMetadataSource)

    async def lookup(self, artist: str, title: str) -> RecordMetadata:
        """Return best-effort metadata for an artist and title."""
        if self.remote is not None:
            try:
                found = await self.remote.lookup(artist, title)
            except Exception:
                logger.exception(
                    "Remote metadata lookup failed",
                    extra={"artist": artist, "title": title},
                )
            else:
                if not found.is_empty():
                    return found
        try:
            return await self.local.lookup(artist, title)
        except Exception:
            logger.exception(
                "Local metadata lookup failed",
                extra={"artist": artist, "title": title},
            )
        return RecordMetadata()


def _as_text(value: object) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float | str):
        text = str(value).strip()
        return text or None
    return None


def _first_text(value: object) -> str | None:
    if isinstance(value, list) and value:
        return _as_text(value[0])
    return _as_text(value)
