"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from vinyl_vault.api.auth import router as auth_router
from vinyl_vault.api.metadata import router as metadata_router
from vinyl_vault.api.records import router as records_router
from vinyl_vault.app_logging import configure_logging
from vinyl_vault.containers import AppContainer
from vinyl_vault.errors import DependencyError, ValidationError, VinylVaultError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting Vinyl Vault", extra={"storage": app.state.container.storage.kind}
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Vinyl Vault", lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(records_router)
    app.include_router(metadata_router)

    @app.exception_handler(VinylVaultError)
    async def handle_app_error(request: Request, exc: VinylVaultError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError("Invalid request", _field_errors(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        logger.exception("Database error", extra={"path": request.url.path})
        error = DependencyError("Database unavailable")
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    @app.get("/health")
    async def health(request: Request) -> dict[str, str]:
        """Simple health check endpoint."""
        state_container: AppContainer = request.app.state.container
        return {"status": "ok", "storage": state_container.storage.kind}

    return app


def _field_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Flatten pydantic errors into ``{"field", "message"}`` pairs."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(
            {
                "field": ".".join(location) or "body",
                "message": error.get("msg", "Invalid value"),
            }
        )
    return errors
