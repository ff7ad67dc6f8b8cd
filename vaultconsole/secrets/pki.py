"""
PKI pseudo-entry reconciliation for the certs tab.

``ca``, ``crl`` and ``ca_chain`` are always readable through the pki API,
even when no certificate was ever configured. The only way to tell whether
one exists is to fetch it and look for a ``certificate`` field. Records
without one are evicted from the record cache so they never render as
present. Every failure is swallowed: the listing must render regardless.
"""

from __future__ import annotations

import asyncio
import logging

from vaultconsole.secrets.models import PSEUDO_ENTRY_IDS, Record, SchemaId
from vaultconsole.secrets.schema import CERTS_TAB
from vaultconsole.secrets.store import ListingStore

logger = logging.getLogger(__name__)


class PkiPseudoEntryReconciler:
    """Fetch the pki pseudo-entries and prune the ones with no certificate."""

    def __init__(self, store: ListingStore) -> None:
        self.store = store

    async def reconcile(self, backend: str, tab: str | None) -> None:
        if tab != CERTS_TAB:
            return
        try:
            results = await asyncio.gather(
                *(
                    self.store.query_record(SchemaId.PKI_CERTIFICATE, id=pid, backend=backend)
                    for pid in PSEUDO_ENTRY_IDS
                ),
                return_exceptions=True,
            )
            for pid, result in zip(PSEUDO_ENTRY_IDS, results):
                if isinstance(result, Exception):
                    logger.debug("Pseudo-entry %s/%s unavailable: %s", backend, pid, result)
                    continue
                if isinstance(result, Record) and not result.certificate:
                    self.store.unload_record(result)
        except Exception as e:
            logger.debug("Pseudo-entry reconciliation failed for %s: %s", backend, e)

    def present(self, backend: str) -> list[str]:
        """Pseudo-entry ids currently held in the record cache with a certificate."""
        present = []
        for pid in PSEUDO_ENTRY_IDS:
            record = self.store.peek_record(SchemaId.PKI_CERTIFICATE, pid, backend)
            if record is not None and record.certificate:
                present.append(pid)
        return present
