"""
ConsoleApp — main Textual application for the vaultconsole TUI.

Connects to Vault, shows the mounted engines, and drives the list route
for whichever backend listing the user opens.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Footer, Header, Input

from vaultconsole.config import ConsoleConfig, get_config
from vaultconsole.secrets.client import VaultClient
from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.models import (
    LANDING_ROUTE,
    ListingViewState,
    ListParams,
    NavigationOutcome,
    Transition,
)
from vaultconsole.secrets.route import ListRoute
from vaultconsole.secrets.store import ListingStore
from vaultconsole.tui.widgets import (
    ListingDisplay,
    MessageDisplay,
    MountsDisplay,
    StatusBar,
)

logger = logging.getLogger(__name__)


class ConsoleApp(App):
    """Terminal browser for Vault secrets engines."""

    TITLE = "vaultconsole"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
        Binding("ctrl+c", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        config: ConsoleConfig | None = None,
        location: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.console_config = config or get_config()
        self.client = VaultClient(self.console_config.vault)
        self.store = ListingStore(self.client)
        self.route = ListRoute(
            self.store,
            self.console_config.supported_engines,
            page_size=self.console_config.page_size,
        )
        self._initial_location = location
        self._connected = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(id="main-scroll")
        yield Input(placeholder="Type to filter, or /help for commands...", id="command-input")
        yield StatusBar(id="status-bar")
        yield Footer()

    @property
    def status_bar(self) -> StatusBar:
        return self.query_one("#status-bar", StatusBar)

    async def on_mount(self) -> None:
        """Load the mount table on startup."""
        await self._try_connect()
        if self._connected and self._initial_location:
            from vaultconsole.tui.commands import handle_command

            _, output = await handle_command(self, f"/ls {self._initial_location}")
            if output:
                await self._show_message(output)
        self.query_one("#command-input", Input).focus()

    async def _try_connect(self) -> None:
        addr = self.console_config.vault.addr
        try:
            await self.store.load_backends()
        except VaultApiError as e:
            self._connected = False
            self.status_bar.set_connected(False, addr)
            await self._show_message(f"Cannot read mounts from {addr}: {e}", role="error")
            return
        self._connected = True
        self.status_bar.set_connected(True, addr)
        await self.show_mounts()

    async def _replace_main(self, widget: Widget) -> None:
        scroll = self.query_one("#main-scroll")
        await scroll.remove_children()
        await scroll.mount(widget)
        scroll.scroll_home(animate=False)

    async def _show_message(self, content: str, role: str = "system") -> None:
        scroll = self.query_one("#main-scroll")
        await scroll.mount(MessageDisplay(content=content, role=role))
        scroll.scroll_end(animate=False)

    async def _render_view(self, view: ListingViewState) -> None:
        await self._replace_main(ListingDisplay(view))
        self.status_bar.set_listing(view)

    async def show_mounts(self) -> None:
        """Leave any open listing and show the landing view."""
        if self.route.params is not None:
            self.route.exit(Transition(target=LANDING_ROUTE))
        await self._replace_main(MountsDisplay(self.store.backends(), self.console_config.supported_engines))
        self.status_bar.set_listing(None)

    async def open_listing(self, params: ListParams) -> None:
        """Navigate the list route to ``params`` and render the outcome."""
        transition = Transition(target=params.route, params=params)
        if self.route.params is not None:
            self.route.will_transition(transition)
        try:
            outcome = await self.route.navigate(params, transition)
        except VaultApiError as e:
            await self._show_message(f"Cannot list {params.backend}/{params.secret}: {e}", role="error")
            return
        await self._apply_outcome(params, outcome)

    async def reload_listing(self) -> None:
        if self.route.params is None:
            return
        params = self.route.params
        try:
            outcome = await self.route.reload()
        except VaultApiError as e:
            await self._show_message(f"Reload failed: {e}", role="error")
            return
        await self._apply_outcome(params, outcome)

    async def _apply_outcome(self, params: ListParams, outcome: NavigationOutcome) -> None:
        redirect = outcome.redirect
        if redirect is not None:
            if redirect.route == LANDING_ROUTE:
                await self.show_mounts()
                await self._show_message(f"{params.backend} is not a browsable secrets engine.")
            else:
                await self.open_listing(
                    replace(params, secret=redirect.secret or "", route=redirect.route)
                )
            return
        if outcome.view is not None:
            await self._render_view(outcome.view)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle user input — slash commands, or a filter for the open listing."""
        text = event.value.strip()
        input_widget = self.query_one("#command-input", Input)
        input_widget.value = ""
        if not text:
            return

        from vaultconsole.tui.commands import cmd_filter, handle_command

        if text.startswith("/"):
            handled, output = await handle_command(self, text)
        else:
            handled, output = True, await cmd_filter(self, text)
        if handled and output:
            await self._show_message(output)

    async def action_reload(self) -> None:
        await self.reload_listing()

    async def on_unmount(self) -> None:
        """Clean up on exit."""
        await self.client.close()
