"""
Root-level shared test fixtures.

Inherited by the package test suites under vaultconsole/ and by tests/.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove Vault env vars that leak in from the developer's shell."""
    for key in [
        "VAULT_ADDR",
        "VAULT_TOKEN",
        "VAULT_NAMESPACE",
        "VAULTCONSOLE_PAGE_SIZE",
        "VAULTCONSOLE_SUPPORTED_ENGINES",
        "VAULTCONSOLE_TIMEOUT",
    ]:
        monkeypatch.delenv(key, raising=False)
