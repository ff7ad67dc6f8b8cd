"""
vaultconsole CLI — entry point for all operations.

Usage:
    vaultconsole mounts                     # List mounted secrets engines
    vaultconsole ls secret/app/             # List a path inside a backend
    vaultconsole ls pki --tab certs         # pki certificates (+ ca, crl, ca_chain)
    vaultconsole tui [secret/app/]          # Interactive terminal console
    vaultconsole version                    # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace

from vaultconsole.secrets.errors import VaultApiError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vaultconsole",
        description="vaultconsole — browse Vault secrets engines from the terminal.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command")

    # mounts
    subparsers.add_parser("mounts", help="List mounted secrets engines")

    # ls
    ls_parser = subparsers.add_parser("ls", help="List a path inside a backend")
    ls_parser.add_argument("location", help="<backend>[/path/]")
    ls_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    ls_parser.add_argument("--filter", dest="page_filter", default=None, help="Substring filter")
    ls_parser.add_argument("--tab", default=None, help="Listing tab (e.g. certs on pki)")

    # tui
    tui_parser = subparsers.add_parser("tui", help="Interactive terminal console")
    tui_parser.add_argument("location", nargs="?", default=None, help="Listing to open on start")

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.version or args.command == "version":
        from vaultconsole import __version__

        print(f"vaultconsole {__version__}")
        return 0

    if args.command == "mounts":
        return asyncio.run(_cmd_mounts())
    elif args.command == "ls":
        return asyncio.run(_cmd_ls(args))
    elif args.command == "tui":
        return _cmd_tui(args)
    else:
        parser.print_help()
        return 0


async def _cmd_mounts() -> int:
    from vaultconsole.config import get_config
    from vaultconsole.secrets.client import VaultClient
    from vaultconsole.secrets.store import ListingStore

    cfg = get_config()
    client = VaultClient(cfg.vault)
    try:
        backends = await ListingStore(client).load_backends()
    except VaultApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await client.close()

    for b in backends:
        marker = "" if b.type.lower() in cfg.supported_engines else "  (not browsable)"
        print(f"{b.backend_id + '/':<24} {b.type}{marker}")
    return 0


async def _cmd_ls(args: argparse.Namespace) -> int:
    from vaultconsole.config import get_config
    from vaultconsole.secrets.client import VaultClient
    from vaultconsole.secrets.models import LANDING_ROUTE, ListParams
    from vaultconsole.secrets.route import ListRoute
    from vaultconsole.secrets.store import ListingStore
    from vaultconsole.tui.commands import split_location

    cfg = get_config()
    client = VaultClient(cfg.vault)
    try:
        store = ListingStore(client)
        await store.load_backends()
        found = split_location(args.location, store.backends())
        if found is None:
            print(f"Error: no mounted backend matches {args.location!r}", file=sys.stderr)
            return 2
        backend, path = found

        route = ListRoute(store, cfg.supported_engines, page_size=cfg.page_size)
        params = ListParams(
            backend=backend,
            secret=path,
            page=args.page,
            page_filter=args.page_filter,
            tab=args.tab,
        )
        outcome = await route.navigate(params)
        if outcome.redirect is not None and outcome.redirect.route != LANDING_ROUTE:
            params = replace(params, secret=outcome.redirect.secret or "", route=outcome.redirect.route)
            outcome = await route.navigate(params)
        if outcome.redirect is not None:
            print(f"Error: {backend} is not a browsable secrets engine", file=sys.stderr)
            return 2
    except VaultApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await client.close()

    view = outcome.view
    if view is None:
        return 1
    for pid in view.pseudo_entries:
        print(pid)
    for entry in view.entries:
        print(entry)
    if view.meta is not None and view.meta.last_page > 1:
        print(f"-- page {view.page}/{view.meta.last_page} ({view.meta.filtered_total} entries) --")
    return 0


def _cmd_tui(args: argparse.Namespace) -> int:
    from vaultconsole.tui import check_textual

    if not check_textual():
        print("Error: the TUI needs Textual. Install with: pip install vaultconsole[tui]")
        return 1

    from vaultconsole.tui.app import ConsoleApp

    ConsoleApp(location=args.location).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
