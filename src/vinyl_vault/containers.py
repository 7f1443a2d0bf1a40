"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from vinyl_vault.adapters.discogs_client import HttpxDiscogsClient
from vinyl_vault.adapters.memory_storage import InMemoryCatalogStorage
from vinyl_vault.adapters.sql_storage import SqlCatalogStorage
from vinyl_vault.config import Settings, normalize_database_url
from vinyl_vault.services.auth import AuthService
from vinyl_vault.services.metadata import (
    LocalMetadataSource,
    MetadataService,
    RemoteMetadataSource,
)
from vinyl_vault.services.records import RecordService
from vinyl_vault.services.storage import CatalogStorage

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: CatalogStorage
    auth_service: AuthService
    record_service: RecordService
    metadata_service: MetadataService
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> CatalogStorage:
    """Pick the relational backend when it is configured and reachable."""
    database_url = normalize_database_url(settings.database_url)
    if database_url is None:
        logger.warning("DATABASE_URL is not set; using in-memory storage")
        return InMemoryCatalogStorage()
    try:
        storage = SqlCatalogStorage.connect(database_url)
    except Exception:
        logger.exception("Failed to connect to database; using in-memory storage")
        return InMemoryCatalogStorage()
    logger.info("Using relational storage")
    return storage


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = build_storage(resolved_settings)
    auth_service = AuthService(
        storage=storage,
        session_secret=resolved_settings.session_secret,
        session_max_age_seconds=resolved_settings.session_max_age_seconds,
    )
    record_service = RecordService(storage)
    discogs_client = None
    if resolved_settings.remote_metadata_enabled:
        discogs_client = HttpxDiscogsClient.create(
            token=resolved_settings.discogs_token or "",
            base_url=resolved_settings.discogs_base_url,
        )
    metadata_service = MetadataService(
        remote=RemoteMetadataSource(discogs_client) if discogs_client else None,
        local=LocalMetadataSource(),
    )

    async def close_resources() -> None:
        if discogs_client is not None:
            await discogs_client.close()
        storage.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        auth_service=auth_service,
        record_service=record_service,
        metadata_service=metadata_service,
        close_resources=close_resources,
    )
