"""
Centralized configuration for vaultconsole.

All configuration is loaded from environment variables with sensible defaults.

Usage:
    from vaultconsole.config import get_config
    cfg = get_config()
    print(cfg.vault.addr)          # "http://127.0.0.1:8200" or $VAULT_ADDR
    print(cfg.page_size)           # 100
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# Engine types the list route knows how to render
DEFAULT_SUPPORTED_ENGINES: frozenset[str] = frozenset(
    {"transit", "ssh", "aws", "pki", "cubbyhole", "kv", "generic"}
)


@dataclass(frozen=True)
class VaultConfig:
    """Vault server connection parameters."""

    addr: str = "http://127.0.0.1:8200"
    token: str = ""
    namespace: str = ""  # enterprise namespaces only
    timeout: float = 10.0

    @property
    def api_url(self) -> str:
        return f"{self.addr.rstrip('/')}/v1"

    @property
    def headers(self) -> dict[str, str]:
        """Return request headers for httpx."""
        h: dict[str, str] = {}
        if self.token:
            h["X-Vault-Token"] = self.token
        if self.namespace:
            h["X-Vault-Namespace"] = self.namespace
        return h


@dataclass(frozen=True)
class ConsoleConfig:
    """Top-level vaultconsole configuration."""

    vault: VaultConfig = field(default_factory=VaultConfig)

    # Listing
    page_size: int = 100
    supported_engines: frozenset[str] = DEFAULT_SUPPORTED_ENGINES


# Singleton
_config: ConsoleConfig | None = None


def get_config() -> ConsoleConfig:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _parse_engines(raw: str) -> frozenset[str]:
    engines = frozenset(e.strip().lower() for e in raw.split(",") if e.strip())
    return engines or DEFAULT_SUPPORTED_ENGINES


def _load_from_env() -> ConsoleConfig:
    """Load configuration from environment variables."""
    vault = VaultConfig(
        addr=os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200"),
        token=os.environ.get("VAULT_TOKEN", ""),
        namespace=os.environ.get("VAULT_NAMESPACE", ""),
        timeout=float(os.environ.get("VAULTCONSOLE_TIMEOUT", "10")),
    )

    return ConsoleConfig(
        vault=vault,
        page_size=int(os.environ.get("VAULTCONSOLE_PAGE_SIZE", "100")),
        supported_engines=_parse_engines(os.environ.get("VAULTCONSOLE_SUPPORTED_ENGINES", "")),
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
