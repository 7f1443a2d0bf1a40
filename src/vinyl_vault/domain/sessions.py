"""Domain models for login sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionRecord:
    """Represents a server-held login session."""

    id: str
    user_id: int
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return true once the expiry has passed."""
        return now >= self.expires_at
