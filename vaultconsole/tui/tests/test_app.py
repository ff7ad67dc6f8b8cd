"""Tests for the main ConsoleApp — Textual pilot tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from vaultconsole.config import ConsoleConfig, VaultConfig
from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.models import ListParams, MountInfo
from vaultconsole.tui.app import ConsoleApp
from vaultconsole.tui.widgets import ListingDisplay, MessageDisplay, MountsDisplay


def _app(location: str | None = None) -> ConsoleApp:
    app = ConsoleApp(config=ConsoleConfig(vault=VaultConfig(addr="http://vault:8200")), location=location)
    app.client.mounts = AsyncMock(
        return_value={
            "secret/": MountInfo(type="kv", options={"version": "2"}),
            "database/": MountInfo(type="database"),
        }
    )
    app.client.list = AsyncMock(return_value={"data": {"keys": ["app/", "token"]}})
    app.client.read = AsyncMock(return_value={"data": {}})
    app.client.close = AsyncMock()
    return app


class TestAppInit:
    def test_config_addr_used(self):
        """The Vault address from config reaches the client."""
        app = _app()
        assert app.client.base_url == "http://vault:8200/v1"

    def test_route_uses_config(self):
        config = ConsoleConfig(page_size=25, supported_engines=frozenset({"kv"}))
        app = ConsoleApp(config=config)
        assert app.route.page_size == 25
        assert app.route.supported_engines == frozenset({"kv"})


class TestAppPilot:
    @pytest.mark.asyncio
    async def test_unreachable_shows_error(self):
        """When Vault is unreachable, shows an error and stays disconnected."""
        app = _app()
        app.client.mounts = AsyncMock(side_effect=VaultApiError("connection refused"))

        async with app.run_test() as _pilot:
            status_bar = app.query_one("#status-bar")
            assert "disconnected" in status_bar._format()
            assert len(app.query(MessageDisplay)) > 0

    @pytest.mark.asyncio
    async def test_connected_shows_mounts(self):
        app = _app()

        async with app.run_test() as _pilot:
            assert len(app.query(MountsDisplay)) == 1
            assert "connected" in app.query_one("#status-bar")._format()

    @pytest.mark.asyncio
    async def test_initial_location_opens_listing(self):
        """A location given at startup is listed, with the trailing slash added."""
        app = _app(location="secret/app")

        async with app.run_test() as _pilot:
            assert len(app.query(ListingDisplay)) == 1
            assert app.route.params.secret == "app/"
            app.client.list.assert_awaited_with("secret/metadata/app/")

    @pytest.mark.asyncio
    async def test_unsupported_backend_back_to_mounts(self):
        app = _app()

        async with app.run_test() as _pilot:
            await app.open_listing(ListParams(backend="database"))
            assert len(app.query(MountsDisplay)) == 1
            app.client.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_404_keeps_listing(self):
        """A missing path after a listing keeps it on screen with the overlay."""
        app = _app()

        async with app.run_test() as _pilot:
            await app.open_listing(ListParams(backend="secret", secret="app/"))
            app.client.list.side_effect = VaultApiError("HTTP 404", http_status=404)
            await app.open_listing(ListParams(backend="secret", secret="gone/"))

            display = app.query_one(ListingDisplay)
            assert display.view.has_404 is True
            assert display.view.entries == ["app/", "token"]

    @pytest.mark.asyncio
    async def test_fatal_error_reported(self):
        app = _app()

        async with app.run_test() as _pilot:
            app.client.list.side_effect = VaultApiError("HTTP 403", http_status=403)
            await app.open_listing(ListParams(backend="secret", secret="locked/"))

            assert len(app.query(ListingDisplay)) == 0
            assert len(app.query(MessageDisplay)) > 0

    @pytest.mark.asyncio
    async def test_plain_text_filters(self):
        """Submitting plain text filters the open listing."""
        app = _app()

        async with app.run_test() as pilot:
            await app.open_listing(ListParams(backend="secret", secret="app/"))
            input_widget = app.query_one("#command-input")
            input_widget.value = "tok"
            await pilot.press("enter")
            await pilot.pause()

            assert app.route.params.page_filter == "tok"
            assert app.query_one(ListingDisplay).view.entries == ["token"]
