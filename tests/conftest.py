"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from vinyl_vault.adapters.discogs_client import DiscogsClient
from vinyl_vault.adapters.memory_storage import InMemoryCatalogStorage
from vinyl_vault.adapters.sql_storage import SqlCatalogStorage
from vinyl_vault.api.app import create_app
from vinyl_vault.config import Settings
from vinyl_vault.containers import AppContainer
from vinyl_vault.domain.models import NewUser, RecordDraft, UserRecord
from vinyl_vault.services.auth import AuthService
from vinyl_vault.services.metadata import (
    LocalMetadataSource,
    MetadataService,
    RemoteMetadataSource,
)
from vinyl_vault.services.records import RecordService
from vinyl_vault.services.storage import CatalogStorage


@dataclass
class FakeDiscogsClient(DiscogsClient):
    """Fake Discogs client returning a fixed payload or raising."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "results": [
                {
                    "title": "Miles Davis - Kind Of Blue",
                    "year": "1959",
                    "genre": ["Jazz"],
                    "style": ["Modal"],
                    "cover_image": "https://img.example.com/kind-of-blue.jpg",
                }
            ]
        }
    )
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def search_releases(self, query: str, per_page: int = 3) -> dict[str, object]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payload


def make_user(storage: CatalogStorage, username: str = "alice@example.com") -> UserRecord:
    return storage.create_user(
        NewUser(username=username, password_hash="hash.salt", name="Alice")
    )


def make_draft(owner_id: int, **overrides: object) -> RecordDraft:
    values: dict[str, object] = {
        "owner_id": owner_id,
        "title": "The Dark Side of the Moon",
        "artist": "Pink Floyd",
        "year": "1973",
        "genre": "Rock",
        "cover_image": "https://img.example.com/dsotm.jpg",
        "custom_fields": {"Pressing": "UK 1st", "Condition": "VG+"},
    }
    values.update(overrides)
    return RecordDraft(**values)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=None,
        discogs_token=None,
        session_secret="test-secret",
        environment="test",
    )


@pytest.fixture
def memory_storage() -> InMemoryCatalogStorage:
    return InMemoryCatalogStorage()


@pytest.fixture
def sql_storage() -> Iterator[SqlCatalogStorage]:
    storage = SqlCatalogStorage.connect("sqlite://")
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sql"])
def storage(request: pytest.FixtureRequest) -> CatalogStorage:
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def discogs_client() -> FakeDiscogsClient:
    return FakeDiscogsClient()


@pytest.fixture
def container(settings: Settings, storage: CatalogStorage) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        storage=storage,
        auth_service=AuthService(
            storage=storage,
            session_secret=settings.session_secret,
            session_max_age_seconds=settings.session_max_age_seconds,
        ),
        record_service=RecordService(storage),
        metadata_service=MetadataService(remote=None, local=LocalMetadataSource()),
        close_resources=close_resources,
    )


@pytest.fixture
def remote_container(
    container: AppContainer, discogs_client: FakeDiscogsClient
) -> AppContainer:
    container.metadata_service = MetadataService(
        remote=RemoteMetadataSource(discogs_client), local=LocalMetadataSource()
    )
    return container


@pytest.fixture
def app(container: AppContainer):  # type: ignore[no-untyped-def]
    return create_app(container)


@pytest.fixture
def client(app) -> TestClient:  # type: ignore[no-untyped-def]
    return TestClient(app)


@pytest.fixture
def other_client(app) -> TestClient:  # type: ignore[no-untyped-def]
    return TestClient(app)
