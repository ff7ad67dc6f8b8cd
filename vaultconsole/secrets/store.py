"""
Listing store — backend registry, paginated dataset cache, and record cache.

A listing is fetched from Vault once per (schema, backend, path) and cached
as a dataset. Pages and filters are then cut from the cached dataset on the
client side, so paging through a large directory costs one request.

Safe without locks: asyncio is single-threaded and every mutation happens
between awaits.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from vaultconsole.secrets.client import VaultClient
from vaultconsole.secrets.models import (
    Backend,
    ListingPage,
    PageQuery,
    Record,
    SchemaId,
)

logger = logging.getLogger(__name__)

# Vault API path of a listing, per entry schema
LIST_PATHS: dict[SchemaId, str] = {
    SchemaId.SECRET: "{backend}/{id}",
    SchemaId.SECRET_V2: "{backend}/metadata/{id}",
    SchemaId.TRANSIT_KEY: "{backend}/keys/",
    SchemaId.ROLE_SSH: "{backend}/roles/",
    SchemaId.ROLE_AWS: "{backend}/roles/",
    SchemaId.ROLE_PKI: "{backend}/roles/",
    SchemaId.PKI_CERTIFICATE: "{backend}/certs/",
}

# Vault API path of a single record, per entry schema
RECORD_PATHS: dict[SchemaId, str] = {
    SchemaId.SECRET: "{backend}/{id}",
    SchemaId.SECRET_V2: "{backend}/data/{id}",
    SchemaId.TRANSIT_KEY: "{backend}/keys/{id}",
    SchemaId.ROLE_SSH: "{backend}/roles/{id}",
    SchemaId.ROLE_AWS: "{backend}/roles/{id}",
    SchemaId.ROLE_PKI: "{backend}/roles/{id}",
    SchemaId.PKI_CERTIFICATE: "{backend}/cert/{id}",
}


def _clamp(num: int, lo: int, hi: int) -> int:
    return max(lo, min(num, hi))


def _get_path(body: dict[str, Any], dotted: str) -> Any:
    """Resolve a dotted path like "data.keys" inside a response body."""
    node: Any = body
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def filter_keys(keys: list[str], page_filter: str | None) -> list[str]:
    """Case-insensitive substring filter over listing keys."""
    if not page_filter:
        return list(keys)
    needle = page_filter.lower()
    return [k for k in keys if needle in k.lower()]


class ListingStore:
    """Client-side cache in front of VaultClient."""

    def __init__(self, client: VaultClient) -> None:
        self.client = client
        self._backends: dict[str, Backend] = {}
        self._datasets: dict[tuple[str, str, str], list[str]] = {}
        self._records: dict[tuple[str, str, str], Record] = {}

    # ── Backends ──────────────────────────────────────────────────────

    async def load_backends(self) -> list[Backend]:
        """Fetch the mount table and replace the backend registry."""
        mounts = await self.client.mounts()
        self._backends = {}
        for path, info in mounts.items():
            backend = Backend.from_mount(path, info)
            self._backends[backend.backend_id] = backend
        logger.debug("Loaded %d backends", len(self._backends))
        return self.backends()

    def add_backend(self, backend: Backend) -> None:
        self._backends[backend.backend_id] = backend

    def peek_backend(self, backend_id: str) -> Backend | None:
        """Synchronous registry lookup. Never hits the network."""
        return self._backends.get(backend_id.rstrip("/"))

    def backends(self) -> list[Backend]:
        return sorted(self._backends.values(), key=lambda b: b.backend_id)

    # ── Datasets ──────────────────────────────────────────────────────

    def _dataset_key(self, schema: SchemaId, query: PageQuery) -> tuple[str, str, str]:
        backend, path = query.dataset_key
        return (str(schema), backend, path)

    def has_dataset(self, schema: SchemaId, query: PageQuery) -> bool:
        return self._dataset_key(schema, query) in self._datasets

    async def lazy_paginated_query(self, schema: SchemaId, query: PageQuery) -> ListingPage:
        """Return one page of a listing, fetching the dataset only on a cache miss.

        Raises VaultApiError unchanged when the listing request fails.
        """
        key = self._dataset_key(schema, query)
        keys = self._datasets.get(key)
        if keys is None:
            template = LIST_PATHS.get(schema)
            if template is None:
                raise ValueError(f"Schema {schema} has no listing endpoint")
            body = await self.client.list(template.format(backend=query.backend, id=query.id))
            keys = list(_get_path(body, query.response_path) or [])
            self._datasets[key] = keys
            logger.debug("Cached dataset %s (%d keys)", key, len(keys))
        return self._construct_page(keys, query)

    def _construct_page(self, keys: list[str], query: PageQuery) -> ListingPage:
        size = max(query.size, 1)
        data = filter_keys(keys, query.page_filter)
        last_page = max(math.ceil(len(data) / size), 1)
        current_page = _clamp(query.page or 1, 1, last_page)
        end = current_page * size
        start = end - size
        return ListingPage(
            entries=data[start:end],
            current_page=current_page,
            last_page=last_page,
            next_page=_clamp(current_page + 1, 1, last_page),
            prev_page=_clamp(current_page - 1, 1, last_page),
            total=len(keys),
            filtered_total=len(data),
            page_size=size,
        )

    def clear_all_datasets(self) -> None:
        """Drop every cached listing dataset, across all backends."""
        if self._datasets:
            logger.debug("Clearing %d cached datasets", len(self._datasets))
        self._datasets.clear()

    # ── Records ───────────────────────────────────────────────────────

    async def query_record(self, schema: SchemaId, *, id: str, backend: str) -> Record:
        """Fetch one record and push it into the record cache."""
        template = RECORD_PATHS.get(schema)
        if template is None:
            raise ValueError(f"Schema {schema} has no record endpoint")
        body = await self.client.read(template.format(backend=backend, id=id))
        record = Record(schema=schema, id=id, backend=backend, data=dict(body.get("data") or {}))
        self._records[record.cache_key] = record
        return record

    def peek_record(self, schema: SchemaId, id: str, backend: str) -> Record | None:
        return self._records.get((str(schema), backend, id))

    def unload_record(self, record: Record) -> None:
        self._records.pop(record.cache_key, None)

    def unload_all(self, schema: SchemaId) -> None:
        """Evict every cached record of one schema."""
        prefix = str(schema)
        for key in [k for k in self._records if k[0] == prefix]:
            del self._records[key]

    async def query_capabilities(self, backend: str, path: str = "") -> Record:
        """Fetch the token's capabilities on a path, cached as a capabilities record."""
        full_path = f"{backend}/{path}"
        cached = self.peek_record(SchemaId.CAPABILITIES, path, backend)
        if cached is not None:
            return cached
        caps = await self.client.capabilities_self([full_path])
        record = Record(
            schema=SchemaId.CAPABILITIES,
            id=path,
            backend=backend,
            data={"capabilities": caps.get(full_path, [])},
        )
        self._records[record.cache_key] = record
        return record
