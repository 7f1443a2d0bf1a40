"""Registration, login and session handling."""

import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from vinyl_vault.domain.models import NewUser, UserRecord
from vinyl_vault.errors import AuthError, ConflictError
from vinyl_vault.services.passwords import hash_password, verify_password
from vinyl_vault.services.storage import CatalogStorage

logger = logging.getLogger(__name__)


def sign_session_id(session_id: str, secret: str) -> str:
    """Return the cookie value for a session id."""
    return f"{session_id}.{_signature(session_id, secret)}"


def unsign_session_token(token: str, secret: str) -> str | None:
    """Return the session id from a cookie value, or None if it was tampered with."""
    session_id, sep, signature = token.rpartition(".")
    if not sep or not session_id:
        return None
    if not hmac.compare_digest(signature, _signature(session_id, secret)):
        return None
    return session_id


def _signature(session_id: str, secret: str) -> str:
    digest = hmac.new(
        secret.encode("utf-8"), session_id.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


@dataclass
class AuthService:
    """Application service for user accounts and login sessions."""

    storage: CatalogStorage
    session_secret: str
    session_max_age_seconds: int

    def register(
        self, username: str, password: str, name: str
    ) -> tuple[UserRecord, str]:
        """Create an account and sign it in."""
        if self.storage.get_user_by_username(username) is not None:
            raise ConflictError("Username already exists")
        user = self.storage.create_user(
            NewUser(
                username=username,
                password_hash=hash_password(password),
                name=name,
            )
        )
        logger.info("Registered user", extra={"user_id": user.id})
        return user, self._start_session(user)

    def login(self, username: str, password: str) -> tuple[UserRecord, str]:
        """Check credentials and open a session."""
        user = self.storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Invalid username or password")
        pruned = self.storage.sessions.prune_expired()
        if pruned:
            logger.info("Pruned expired sessions", extra={"count": pruned})
        return user, self._start_session(user)

    def logout(self, token: str | None) -> None:
        """Destroy the session behind a cookie value, if any."""
        session_id = self._session_id(token)
        if session_id is not None:
            self.storage.sessions.destroy(session_id)

    def current_user(self, token: str | None) -> UserRecord | None:
        """Return the signed-in user and refresh the session expiry."""
        session_id = self._session_id(token)
        if session_id is None:
            return None
        session = self.storage.sessions.get(session_id)
        if session is None:
            return None
        user = self.storage.get_user(session.user_id)
        if user is None:
            self.storage.sessions.destroy(session_id)
            return None
        self.storage.sessions.touch(session_id, self._expiry())
        return user

    def _start_session(self, user: UserRecord) -> str:
        session = self.storage.sessions.create(user.id, self._expiry())
        return sign_session_id(session.id, self.session_secret)

    def _session_id(self, token: str | None) -> str | None:
        if not token:
            return None
        return unsign_session_token(token, self.session_secret)

    def _expiry(self) -> datetime:
        return datetime.now(tz=UTC) + timedelta(seconds=self.session_max_age_seconds)
