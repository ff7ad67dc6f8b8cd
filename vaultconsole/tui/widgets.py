"""
Custom Textual widgets for the vaultconsole TUI.

MessageDisplay — system notes and errors between listings.
ListingDisplay — one page of a backend listing, with the stale 404 overlay.
MountsDisplay — the landing view: every mounted secrets engine.
StatusBar — bottom bar with connection state, backend, page, and filter.
"""

from __future__ import annotations

from textual.content import Content
from textual.markup import escape
from textual.widgets import Static

from vaultconsole.secrets.models import Backend, ListingViewState


class MessageDisplay(Static):
    """Renders a single console message with role-based styling."""

    def __init__(
        self,
        content: str = "",
        role: str = "system",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._role = role
        self._content = content
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if self._role == "user":
            return f"[cyan]> {escape(self._content)}[/cyan]"
        elif self._role == "error":
            return f"[red]{escape(self._content)}[/red]"
        else:
            return f"[dim italic]{escape(self._content)}[/dim italic]"


class ListingDisplay(Static):
    """One page of a listing. Directories are bold, pki pseudo-entries on top."""

    DEFAULT_CSS = """
    ListingDisplay {
        margin: 0 1;
        height: auto;
    }
    """

    def __init__(
        self,
        view: ListingViewState,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self.view = view
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        view = self.view
        path = view.base_key.get("id", "")
        title = escape(f"{view.backend_id}/{path}")
        lines = [f"[bold]{title}[/bold] [dim]({view.backend_type})[/dim]"]

        if view.has_404:
            lines.append("[red]Not found. Showing the previous listing.[/red]")

        for pid in view.pseudo_entries:
            lines.append(f"  [yellow]{escape(pid)}[/yellow]")

        if not view.entries:
            lines.append("  [dim](empty)[/dim]")
        for entry in view.entries:
            if entry.endswith("/"):
                lines.append(f"  [bold]{escape(entry)}[/bold]")
            else:
                lines.append(f"  {escape(entry)}")

        meta = view.meta
        if meta is not None and meta.last_page > 1:
            lines.append(f"[dim]page {view.page}/{meta.last_page} · {meta.filtered_total} entries[/dim]")
        return "\n".join(lines)


class MountsDisplay(Static):
    """Landing view listing every mounted backend."""

    DEFAULT_CSS = """
    MountsDisplay {
        margin: 1 2;
        padding: 1 2;
        border: solid $accent;
        height: auto;
    }
    """

    def __init__(
        self,
        backends: list[Backend],
        supported: frozenset[str],
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self.backends = backends
        self.supported = supported
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if not self.backends:
            return "[bold]Secrets engines[/bold]\n\nNo engines mounted."
        lines = ["[bold]Secrets engines[/bold]", ""]
        for b in self.backends:
            marker = "" if b.type.lower() in self.supported else " [dim](not browsable)[/dim]"
            lines.append(f"  {escape(b.backend_id + '/'):<24} {escape(b.type)}{marker}")
        lines.append("")
        lines.append("Open one with [dim]/ls <backend>[/dim], or [dim]/help[/dim] for commands.")
        return "\n".join(lines)


class StatusBar(Static):
    """Bottom status bar showing connection state, backend, page, and filter."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._connected = False
        self._addr = ""
        self._backend: str | None = None
        self._page = 0
        self._last_page = 0
        self._filter = ""
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if self._connected:
            status = "[green]●[/green] connected"
        else:
            status = "[red]●[/red] disconnected"

        parts = [status]

        if self._addr:
            parts.append(escape(self._addr))

        if self._backend:
            parts.append(f"backend: {escape(self._backend)}")

        if self._page:
            parts.append(f"page {self._page}/{self._last_page}")

        if self._filter:
            parts.append(f"filter: {escape(self._filter)}")

        return " | ".join(parts)

    def set_connected(self, connected: bool, addr: str = "") -> None:
        self._connected = connected
        self._addr = addr
        self.update(Content.from_markup(self._format()))

    def set_listing(self, view: ListingViewState | None) -> None:
        if view is None:
            self._backend = None
            self._page = self._last_page = 0
            self._filter = ""
        else:
            self._backend = view.backend_id
            self._page = view.page
            self._last_page = view.meta.last_page if view.meta else 1
            self._filter = view.filter
        self.update(Content.from_markup(self._format()))
