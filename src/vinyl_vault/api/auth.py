"""Account and session endpoints."""

from fastapi import APIRouter, Depends, Response, status

from vinyl_vault.api.dependencies import (
    get_container,
    get_session_token,
    require_user,
    set_session_cookie,
)
from vinyl_vault.api.models import LoginRequest, RegisterRequest, UserResponse
from vinyl_vault.containers import AppContainer
from vinyl_vault.domain.models import UserRecord

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse
)
async def register(
    payload: RegisterRequest,
    response: Response,
    container: AppContainer = Depends(get_container),
) -> UserResponse:
    """Create an account and sign it in."""
    user, token = container.auth_service.register(
        payload.username, payload.password, payload.name
    )
    set_session_cookie(response, container.settings, token)
    return UserResponse.from_domain(user)


@router.post("/login", response_model=UserResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    container: AppContainer = Depends(get_container),
) -> UserResponse:
    """Sign in with a username and password."""
    user, token = container.auth_service.login(payload.username, payload.password)
    set_session_cookie(response, container.settings, token)
    return UserResponse.from_domain(user)


@router.post("/logout")
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Destroy the current session."""
    container.auth_service.logout(token)
    response.delete_cookie(container.settings.session_cookie_name)
    return {"status": "ok"}


@router.get("/user", response_model=UserResponse)
async def current_user(user: UserRecord = Depends(require_user)) -> UserResponse:
    """Return the signed-in user."""
    return UserResponse.from_domain(user)
