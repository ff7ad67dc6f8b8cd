"""
Secrets list route — paginated, engine-typed listings of a mounted backend.

Public API:
    ListRoute(store, supported_engines)   → navigation lifecycle
    ListingStore(client)                  → backend registry + dataset/record caches
    VaultClient(config)                   → async HTTP transport
    resolve_schema(backend, tab)          → entry schema for a listing
"""

from __future__ import annotations

from vaultconsole.secrets.client import VaultClient
from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.route import ListRoute
from vaultconsole.secrets.schema import resolve_schema
from vaultconsole.secrets.store import ListingStore

__all__ = ["ListRoute", "ListingStore", "VaultApiError", "VaultClient", "resolve_schema"]
