"""Request dependencies shared by the routers."""

from fastapi import Depends, Request, Response

from vinyl_vault.config import Settings
from vinyl_vault.containers import AppContainer
from vinyl_vault.domain.models import UserRecord
from vinyl_vault.errors import AuthError


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


def set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    """Write the session cookie with a full max-age."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


def get_session_token(
    request: Request, container: AppContainer = Depends(get_container)
) -> str | None:
    """Return the raw session cookie, if any."""
    return request.cookies.get(container.settings.session_cookie_name)


async def get_current_user(
    response: Response,
    token: str | None = Depends(get_session_token),
    container: AppContainer = Depends(get_container),
) -> UserRecord | None:
    """Return the signed-in user, or None for anonymous requests.

    The session expiry is refreshed server-side, so the cookie is re-issued
    to keep the browser's copy alive for as long.
    """
    user = container.auth_service.current_user(token)
    if user is not None and token:
        set_session_cookie(response, container.settings, token)
    return user


async def require_user(
    user: UserRecord | None = Depends(get_current_user),
) -> UserRecord:
    """Reject anonymous requests with 401."""
    if user is None:
        raise AuthError("Unauthorized")
    return user
