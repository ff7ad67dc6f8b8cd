"""
vaultconsole — terminal management console for Vault secrets engines.

Browse mounted secrets engines, page through their listings, and inspect
pki certificate pseudo-entries from the shell or a Textual TUI.
"""

from __future__ import annotations

__version__ = "0.1.0"
