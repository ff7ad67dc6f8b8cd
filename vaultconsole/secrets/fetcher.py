"""
Listing fetcher — one paginated query with the empty-root recovery policy.

A freshly mounted engine has no children, and Vault answers its root LIST
with 404. That case is an empty listing, not an error. A 404 on any deeper
path means the path does not exist and is re-raised for the route to
classify.
"""

from __future__ import annotations

import logging

from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.models import ListingPage, PageQuery, SchemaId
from vaultconsole.secrets.store import ListingStore

logger = logging.getLogger(__name__)

RESPONSE_PATH = "data.keys"
DEFAULT_PAGE_SIZE = 100


class ListingFetcher:
    """Fetch listing pages through a ListingStore."""

    def __init__(self, store: ListingStore) -> None:
        self.store = store

    async def fetch(
        self,
        schema: SchemaId,
        *,
        path: str,
        backend: str,
        page: int = 1,
        page_filter: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ListingPage:
        query = PageQuery(
            id=path,
            backend=backend,
            response_path=RESPONSE_PATH,
            page=page,
            page_filter=page_filter,
            size=page_size,
        )
        try:
            return await self.store.lazy_paginated_query(schema, query)
        except VaultApiError as e:
            if e.is_not_found and path == "" and self.store.peek_backend(backend) is not None:
                logger.debug("Empty root listing for %s", backend)
                return ListingPage.empty(page_size)
            raise
