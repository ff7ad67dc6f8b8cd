"""
Test fixtures for the secrets list route.

- Mocked VaultClient (no network)
- A ListingStore pre-populated with one backend per engine type
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from vaultconsole.secrets.client import VaultClient
from vaultconsole.secrets.models import Backend
from vaultconsole.secrets.store import ListingStore

BACKENDS = [
    Backend(backend_id="secret", type="kv", options={"version": "2"}),
    Backend(backend_id="kv1", type="kv", options={"version": "1"}),
    Backend(backend_id="legacy", type="generic"),
    Backend(backend_id="cubbyhole", type="cubbyhole"),
    Backend(backend_id="transit", type="transit"),
    Backend(backend_id="ssh", type="ssh"),
    Backend(backend_id="aws", type="aws"),
    Backend(backend_id="pki", type="pki"),
    Backend(backend_id="database", type="database"),
]


@pytest.fixture
def mock_client():
    """A mocked VaultClient for unit tests."""
    client = MagicMock(spec=VaultClient)
    client.base_url = "http://127.0.0.1:8200/v1"
    client.list = AsyncMock(return_value={"data": {"keys": []}})
    client.read = AsyncMock(return_value={"data": {}})
    client.mounts = AsyncMock(return_value={})
    client.capabilities_self = AsyncMock(return_value={})
    client.close = AsyncMock()
    return client


@pytest.fixture
def store(mock_client) -> ListingStore:
    """A ListingStore with one backend per engine type."""
    s = ListingStore(mock_client)
    for b in BACKENDS:
        s.add_backend(b)
    return s
