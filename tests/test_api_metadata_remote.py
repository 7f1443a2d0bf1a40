"""Tests for the metadata endpoint with the remote source enabled."""

import httpx
from fastapi.testclient import TestClient

from vinyl_vault.api.app import create_app
from vinyl_vault.containers import AppContainer
from tests.conftest import FakeDiscogsClient


def _signed_in_client(container: AppContainer) -> TestClient:
    client = TestClient(create_app(container))
    response = client.post(
        "/api/register",
        json={"username": "alice@example.com", "password": "hunter22", "name": "Alice"},
    )
    assert response.status_code == 201
    return client


def test_remote_result_is_returned(
    remote_container: AppContainer, discogs_client: FakeDiscogsClient
) -> None:
    client = _signed_in_client(remote_container)

    response = client.post(
        "/api/metadata/lookup", json={"artist": "Miles Davis", "title": "Kind of Blue"}
    )

    assert response.json() == {
        "year": "1959",
        "genre": "Jazz",
        "coverImage": "https://img.example.com/kind-of-blue.jpg",
    }
    assert discogs_client.queries == ["Miles Davis Kind of Blue"]


def test_remote_failure_degrades_to_local_table(
    remote_container: AppContainer, discogs_client: FakeDiscogsClient
) -> None:
    discogs_client.error = httpx.ConnectError("unreachable")
    client = _signed_in_client(remote_container)

    response = client.post(
        "/api/metadata/lookup",
        json={"artist": "Pink Floyd", "title": "The Dark Side of the Moon"},
    )

    assert response.status_code == 200
    assert response.json()["year"] == "1973"
    assert response.json()["genre"] == "Rock"
