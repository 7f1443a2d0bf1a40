"""Tests for configuration helpers."""

from vinyl_vault.config import Settings, normalize_database_url


def test_normalize_database_url() -> None:
    assert normalize_database_url(None) is None
    assert normalize_database_url("  ") is None
    assert normalize_database_url(" sqlite:///vinyl.db ") == "sqlite:///vinyl.db"
    assert (
        normalize_database_url("postgres://user:pw@db:5432/vinyl")
        == "postgresql://user:pw@db:5432/vinyl"
    )


def test_cookie_security_follows_environment() -> None:
    assert Settings(_env_file=None, environment="production").secure_cookies
    assert not Settings(_env_file=None, environment="local").secure_cookies


def test_remote_metadata_requires_token() -> None:
    assert not Settings(_env_file=None, discogs_token=None).remote_metadata_enabled
    assert Settings(_env_file=None, discogs_token="t").remote_metadata_enabled
    assert not Settings(
        _env_file=None, discogs_token="t", metadata_mode="local"
    ).remote_metadata_enabled
