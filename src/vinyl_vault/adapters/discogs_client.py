"""Discogs database API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

USER_AGENT = "VinylVault/1.0"


class DiscogsClient(Protocol):
    """Interface for Discogs API interactions."""

    async def search_releases(self, query: str, per_page: int = 3) -> dict[str, object]:
        """Search releases by free text and return raw API data."""


@dataclass
class HttpxDiscogsClient(DiscogsClient):
    """HTTPX-backed Discogs client."""

    token: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, token: str, base_url: str) -> "HttpxDiscogsClient":
        """Create a Discogs client with a managed httpx session."""
        return cls(token=token, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_releases(self, query: str, per_page: int = 3) -> dict[str, object]:
        """Search the release database."""
        url = f"{self.base_url}/database/search"
        response = await self.http_client.get(
            url,
            params={"q": query, "type": "release", "per_page": per_page},
            headers={
                "Authorization": f"Discogs token={self.token}",
                "User-Agent": USER_AGENT,
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
