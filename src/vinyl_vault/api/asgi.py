"""ASGI entrypoint for the Vinyl Vault API."""

from vinyl_vault.api.app import create_app
from vinyl_vault.containers import build_container

app = create_app(build_container())
