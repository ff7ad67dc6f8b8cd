"""Tests for TUI widgets — ListingDisplay, MountsDisplay, StatusBar."""

from __future__ import annotations

from textual.content import Content

from vaultconsole.secrets.models import Backend, EngineType, ListingPage, ListingViewState
from vaultconsole.tui.widgets import ListingDisplay, MessageDisplay, MountsDisplay, StatusBar


def _view(**overrides) -> ListingViewState:
    fields = dict(
        entries=["app/", "token"],
        has_404=False,
        backend_id="secret",
        backend_type=EngineType.KV,
        base_key={"id": ""},
        filter="",
        page=1,
        meta=ListingPage(entries=["app/", "token"], filtered_total=2),
    )
    fields.update(overrides)
    return ListingViewState(**fields)


class TestListingDisplay:
    def test_directories_bold(self):
        """Directory keys render bold, leaf keys plain."""
        rendered = ListingDisplay(_view())._format()
        assert "[bold]app/[/bold]" in rendered
        assert "  token" in rendered

    def test_empty_listing(self):
        rendered = ListingDisplay(_view(entries=[]))._format()
        assert "(empty)" in rendered

    def test_stale_404_overlay(self):
        """A stale 404 keeps the entries and adds the not-found note."""
        rendered = ListingDisplay(_view(has_404=True))._format()
        assert "Not found" in rendered
        assert "token" in rendered

    def test_pseudo_entries_listed_first(self):
        rendered = ListingDisplay(_view(pseudo_entries=["ca", "crl"]))._format()
        assert rendered.index("ca") < rendered.index("token")
        assert "crl" in rendered

    def test_pager_only_when_multiple_pages(self):
        assert "page" not in ListingDisplay(_view())._format()
        meta = ListingPage(entries=["a"], current_page=2, last_page=3, filtered_total=250)
        rendered = ListingDisplay(_view(page=2, meta=meta))._format()
        assert "page 2/3" in rendered
        assert "250 entries" in rendered


class TestMountsDisplay:
    def test_marks_unsupported(self):
        backends = [Backend(backend_id="secret", type="kv"), Backend(backend_id="db", type="database")]
        rendered = MountsDisplay(backends, frozenset({"kv"}))._format()
        assert "secret/" in rendered
        assert "(not browsable)" in rendered
        assert rendered.count("not browsable") == 1

    def test_no_mounts(self):
        assert "No engines mounted" in MountsDisplay([], frozenset())._format()


class TestMessageDisplay:
    def test_error_is_red(self):
        assert "[red]" in MessageDisplay(content="boom", role="error")._format()

    def test_system_is_dim(self):
        assert "[dim italic]" in MessageDisplay(content="note")._format()


class TestStatusBar:
    def test_disconnected_by_default(self):
        assert "disconnected" in StatusBar()._format()

    def test_connected_with_listing(self):
        bar = StatusBar()
        bar._connected = True
        bar._addr = "http://vault:8200"
        bar._backend = "secret"
        bar._page, bar._last_page = 2, 5
        bar._filter = "app/db"
        rendered = bar._format()
        assert "connected" in rendered
        assert "backend: secret" in rendered
        assert "page 2/5" in rendered
        assert "filter: app/db" in rendered


def _plain(markup: str) -> str:
    return Content.from_markup(markup).plain


class TestMarkupInKeys:
    def test_bracketed_keys_render_verbatim(self):
        """Key names that look like markup are shown as typed."""
        entries = ["[/bold]", "config[prod]", "[red]admin", "team[a]/"]
        plain = _plain(ListingDisplay(_view(entries=entries))._format())
        assert "  [/bold]" in plain
        assert "  config[prod]" in plain
        assert "  [red]admin" in plain
        assert "  team[a]/" in plain

    def test_bracketed_path_in_header(self):
        plain = _plain(ListingDisplay(_view(base_key={"id": "env[dev]/"}))._format())
        assert plain.startswith("secret/env[dev]/ (kv)")

    def test_uppercase_mount_type_is_browsable(self):
        backends = [Backend(backend_id="secret", type="KV")]
        assert "not browsable" not in MountsDisplay(backends, frozenset({"kv"}))._format()

    def test_error_message_with_brackets(self):
        plain = _plain(MessageDisplay(content="HTTP 403: [/red] denied", role="error")._format())
        assert plain == "HTTP 403: [/red] denied"

    def test_filter_with_brackets(self):
        bar = StatusBar()
        bar._filter = "[/red]"
        assert _plain(bar._format()).endswith("filter: [/red]")
