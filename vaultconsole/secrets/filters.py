"""Filter and page state shown above a listing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FilterState:
    filter: str = ""
    page: int = 1


def compute_filter_state(
    path: str,
    page_filter: str | None,
    *,
    has_404: bool,
    current_page: int | None,
    previous: FilterState,
) -> FilterState:
    """Derive the filter string and page for a listing.

    After a stale 404 the previous state is kept as-is, so the filter input
    still shows what the user typed before the failed navigation.
    """
    if has_404:
        return previous
    if path:
        text = path + (page_filter or "")
    else:
        text = page_filter or ""
    return FilterState(filter=text, page=current_page or 1)
