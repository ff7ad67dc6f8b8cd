"""Tests for pki pseudo-entry reconciliation."""

from __future__ import annotations

import pytest

from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.models import SchemaId
from vaultconsole.secrets.pki import PkiPseudoEntryReconciler


def _reader(responses: dict):
    """Build a VaultClient.read side effect keyed by API path."""

    async def read(path: str):
        result = responses[path]
        if isinstance(result, Exception):
            raise result
        return result

    return read


class TestReconcile:
    @pytest.mark.asyncio
    async def test_mixed_results(self, store, mock_client):
        """Empty ca is evicted, crl kept, failed ca_chain absent, nothing raised."""
        mock_client.read.side_effect = _reader(
            {
                "pki/cert/ca": {"data": {"certificate": ""}},
                "pki/cert/crl": {"data": {"certificate": "-----BEGIN X509 CRL-----"}},
                "pki/cert/ca_chain": VaultApiError("HTTP 500", http_status=500),
            }
        )
        reconciler = PkiPseudoEntryReconciler(store)

        await reconciler.reconcile("pki", "certs")

        assert store.peek_record(SchemaId.PKI_CERTIFICATE, "ca", "pki") is None
        assert store.peek_record(SchemaId.PKI_CERTIFICATE, "crl", "pki") is not None
        assert store.peek_record(SchemaId.PKI_CERTIFICATE, "ca_chain", "pki") is None
        assert reconciler.present("pki") == ["crl"]

    @pytest.mark.asyncio
    async def test_fetches_concurrently_all_three(self, store, mock_client):
        """All three pseudo-entries are requested."""
        mock_client.read.return_value = {"data": {"certificate": "PEM"}}
        reconciler = PkiPseudoEntryReconciler(store)

        await reconciler.reconcile("pki", "certs")

        paths = sorted(call.args[0] for call in mock_client.read.await_args_list)
        assert paths == ["pki/cert/ca", "pki/cert/ca_chain", "pki/cert/crl"]
        assert reconciler.present("pki") == ["ca", "crl", "ca_chain"]

    @pytest.mark.asyncio
    async def test_record_without_data_evicted(self, store, mock_client):
        """A response with no data at all counts as no certificate."""
        mock_client.read.return_value = {}
        reconciler = PkiPseudoEntryReconciler(store)

        await reconciler.reconcile("pki", "certs")

        assert reconciler.present("pki") == []
        for pid in ("ca", "crl", "ca_chain"):
            assert store.peek_record(SchemaId.PKI_CERTIFICATE, pid, "pki") is None

    @pytest.mark.asyncio
    async def test_all_failures_swallowed(self, store, mock_client):
        """Every fetch failing is still a no-op for the caller."""
        mock_client.read.side_effect = VaultApiError("connection refused")
        reconciler = PkiPseudoEntryReconciler(store)

        await reconciler.reconcile("pki", "certs")

        assert reconciler.present("pki") == []

    @pytest.mark.asyncio
    async def test_other_tabs_skip(self, store, mock_client):
        """Nothing is fetched outside the certs tab."""
        reconciler = PkiPseudoEntryReconciler(store)

        await reconciler.reconcile("pki", None)
        await reconciler.reconcile("pki", "roles")

        mock_client.read.assert_not_awaited()
