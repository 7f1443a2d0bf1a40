"""Error taxonomy shared by services and the HTTP layer."""

from fastapi import status


class VinylVaultError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body for this error."""
        return {"message": self.message}


class ValidationError(VinylVaultError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self, message: str, errors: list[dict[str, object]] | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_payload(self) -> dict[str, object]:
        return {"message": self.message, "errors": self.errors}


class AuthError(VinylVaultError):
    """Bad credentials or no valid session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(VinylVaultError):
    """Authenticated, but not the owner of the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(VinylVaultError):
    """Unknown identifier."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(VinylVaultError):
    """Duplicate username."""

    status_code = status.HTTP_400_BAD_REQUEST


class DependencyError(VinylVaultError):
    """Database or external service unavailable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
