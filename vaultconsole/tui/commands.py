"""
Slash command registry for the vaultconsole TUI.

Handles navigation commands like /ls, /cd, /page, /filter, /tab, /reload.
Returns (handled: bool, output: str | None).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vaultconsole.secrets.models import Backend, ListParams

if TYPE_CHECKING:
    from vaultconsole.tui.app import ConsoleApp

# Command registry: name → (handler_name, description)
COMMANDS: dict[str, tuple[str, str]] = {
    "/mounts": ("cmd_mounts", "List mounted secrets engines"),
    "/ls": ("cmd_ls", "Open a listing: /ls <backend>[/path/]"),
    "/cd": ("cmd_cd", "Enter a directory of the listing (.. goes up)"),
    "/page": ("cmd_page", "Jump to a page"),
    "/next": ("cmd_next", "Next page"),
    "/prev": ("cmd_prev", "Previous page"),
    "/filter": ("cmd_filter", "Filter entries (no argument clears)"),
    "/tab": ("cmd_tab", "Switch tab, e.g. /tab certs on pki"),
    "/reload": ("cmd_reload", "Refetch the listing"),
    "/help": ("cmd_help", "Show available commands"),
    "/quit": ("cmd_quit", "Exit the TUI"),
    "/exit": ("cmd_quit", "Exit the TUI"),
}


async def handle_command(app: ConsoleApp, text: str) -> tuple[bool, str | None]:
    """Try to handle text as a slash command.

    Returns (True, output) if handled, (False, None) if not a command.
    """
    parts = text.strip().split(None, 1)
    if not parts or not parts[0].startswith("/"):
        return False, None

    cmd = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    if cmd not in COMMANDS:
        return True, f"Unknown command: {cmd}. Type /help for available commands."

    handler_name, _ = COMMANDS[cmd]
    handler = globals().get(handler_name)
    if handler is None:
        return True, f"Command {cmd} not implemented."

    output = await handler(app, args)
    return True, output


def split_location(location: str, backends: list[Backend]) -> tuple[str, str] | None:
    """Split "<backend>/<path>" on the longest mounted backend id.

    Returns None when no mounted backend prefixes the location.
    """
    location = location.strip().lstrip("/")
    for b in sorted(backends, key=lambda b: len(b.backend_id), reverse=True):
        if location == b.backend_id or location.startswith(b.backend_id + "/"):
            return b.backend_id, location[len(b.backend_id) + 1 :]
    return None


def parent_path(path: str) -> str:
    """Parent directory of a listing path ("a/b/" → "a/", "a/" → "")."""
    trimmed = path.rstrip("/")
    if "/" not in trimmed:
        return ""
    return trimmed.rsplit("/", 1)[0] + "/"


def _current(app: ConsoleApp) -> ListParams | None:
    return app.route.params


async def cmd_mounts(app: ConsoleApp, args: str) -> str | None:
    """Return to the mounts landing view."""
    await app.show_mounts()
    return None


async def cmd_ls(app: ConsoleApp, args: str) -> str | None:
    """Open a listing by location."""
    if not args.strip():
        return "Usage: /ls <backend>[/path/]"
    found = split_location(args, app.store.backends())
    if found is None:
        return f"[red]No mounted backend matches {args.strip()!r}[/red]"
    backend, path = found
    await app.open_listing(ListParams(backend=backend, secret=path))
    return None


async def cmd_cd(app: ConsoleApp, args: str) -> str | None:
    """Enter a directory relative to the current listing."""
    current = _current(app)
    if current is None:
        return "No listing open. Use /ls <backend> first."
    target = args.strip()
    if not target:
        return "Usage: /cd <directory/> or /cd .."
    if target == "..":
        secret = parent_path(current.secret)
    elif target.endswith("/"):
        secret = current.secret + target
    else:
        return f"{target} is not a directory."
    await app.open_listing(ListParams(backend=current.backend, secret=secret, tab=current.tab))
    return None


async def cmd_page(app: ConsoleApp, args: str) -> str | None:
    """Jump to a page of the current listing."""
    current = _current(app)
    if current is None:
        return "No listing open."
    try:
        page = int(args)
    except ValueError:
        return "Usage: /page <number>"
    await app.open_listing(
        ListParams(
            backend=current.backend,
            secret=current.secret,
            page=page,
            page_filter=current.page_filter,
            tab=current.tab,
        )
    )
    return None


async def cmd_next(app: ConsoleApp, args: str) -> str | None:
    view = app.route.state.view
    if view is None or view.meta is None:
        return "No listing open."
    return await cmd_page(app, str(view.meta.next_page))


async def cmd_prev(app: ConsoleApp, args: str) -> str | None:
    view = app.route.state.view
    if view is None or view.meta is None:
        return "No listing open."
    return await cmd_page(app, str(view.meta.prev_page))


async def cmd_filter(app: ConsoleApp, args: str) -> str | None:
    """Apply a page filter to the current listing."""
    current = _current(app)
    if current is None:
        return "No listing open."
    await app.open_listing(
        ListParams(
            backend=current.backend,
            secret=current.secret,
            page_filter=args.strip() or None,
            tab=current.tab,
        )
    )
    return None


async def cmd_tab(app: ConsoleApp, args: str) -> str | None:
    """Switch the listing tab."""
    current = _current(app)
    if current is None:
        return "No listing open."
    await app.open_listing(
        ListParams(backend=current.backend, secret=current.secret, tab=args.strip() or None)
    )
    return None


async def cmd_reload(app: ConsoleApp, args: str) -> str | None:
    """Refetch the current listing."""
    if _current(app) is None:
        return "No listing open."
    await app.reload_listing()
    return None


async def cmd_help(app: ConsoleApp, args: str) -> str:
    """Show available commands."""
    lines = ["[bold]Available Commands[/bold]", ""]
    for cmd, (_, desc) in sorted(COMMANDS.items()):
        if cmd == "/exit":
            continue  # Skip alias
        lines.append(f"  {cmd:<12} {desc}")
    lines.append("")
    lines.append("Plain text filters the current listing. Ctrl+R reloads.")
    return "\n".join(lines)


async def cmd_quit(app: ConsoleApp, args: str) -> str:
    """Exit the TUI."""
    app.exit()
    return ""
