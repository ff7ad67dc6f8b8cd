"""Test fixtures for the vaultconsole TUI."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from vaultconsole.secrets.client import VaultClient
from vaultconsole.secrets.models import Backend, MountInfo
from vaultconsole.secrets.route import ListRoute
from vaultconsole.secrets.store import ListingStore


@pytest.fixture
def mock_client():
    """A mocked VaultClient with a small mount table."""
    client = MagicMock(spec=VaultClient)
    client.base_url = "http://127.0.0.1:8200/v1"
    client.mounts = AsyncMock(
        return_value={
            "secret/": MountInfo(type="kv", options={"version": "2"}),
            "team/kv/": MountInfo(type="kv", options={"version": "1"}),
            "pki/": MountInfo(type="pki"),
            "database/": MountInfo(type="database"),
        }
    )
    client.list = AsyncMock(return_value={"data": {"keys": ["app/", "token"]}})
    client.read = AsyncMock(return_value={"data": {}})
    client.capabilities_self = AsyncMock(return_value={})
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_app(mock_client):
    """A mock ConsoleApp wired to a real route over the mocked client."""
    store = ListingStore(mock_client)
    store.add_backend(Backend(backend_id="secret", type="kv", options={"version": "2"}))
    store.add_backend(Backend(backend_id="team/kv", type="kv"))
    store.add_backend(Backend(backend_id="pki", type="pki"))

    app = MagicMock()
    app.client = mock_client
    app.store = store
    app.route = ListRoute(store)
    app.open_listing = AsyncMock()
    app.show_mounts = AsyncMock()
    app.reload_listing = AsyncMock()
    app.exit = MagicMock()
    return app
