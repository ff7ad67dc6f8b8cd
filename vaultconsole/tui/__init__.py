"""
vaultconsole TUI — interactive terminal browser for secrets engine listings.

Requires the optional `tui` dependency group:
    pip install vaultconsole[tui]
"""

from __future__ import annotations


def check_textual() -> bool:
    """Check if Textual is installed and available."""
    try:
        import textual  # noqa: F401

        return True
    except ImportError:
        return False
