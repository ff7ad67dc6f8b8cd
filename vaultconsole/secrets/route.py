"""
List route — navigation lifecycle for a backend's secret listing.

One navigation runs: before_navigate → load → after_load → setup.
Failures from load go through on_error, which either swallows a 404 on top
of an already-displayed listing (stale overlay, transition aborted) or lets
the error bubble to the caller.

All mutable state lives in a single NavigationState owned by the route.
"""

from __future__ import annotations

import logging

from vaultconsole.config import DEFAULT_SUPPORTED_ENGINES
from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.fetcher import DEFAULT_PAGE_SIZE, ListingFetcher
from vaultconsole.secrets.filters import FilterState, compute_filter_state
from vaultconsole.secrets.models import (
    LANDING_ROUTE,
    LIST_ROOT_ROUTE,
    LIST_ROUTE,
    ListingViewState,
    ListParams,
    NavigationOutcome,
    NavigationState,
    Redirect,
    ResolvedListing,
    RoutePhase,
    SchemaId,
    Transition,
)
from vaultconsole.secrets.pki import PkiPseudoEntryReconciler
from vaultconsole.secrets.schema import CERTS_TAB, resolve_schema
from vaultconsole.secrets.store import ListingStore

logger = logging.getLogger(__name__)


class ListRoute:
    """Lists the children of a secret path inside one backend."""

    def __init__(
        self,
        store: ListingStore,
        supported_engines: frozenset[str] | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        state: NavigationState | None = None,
    ) -> None:
        self.store = store
        self.supported_engines = (
            supported_engines if supported_engines is not None else DEFAULT_SUPPORTED_ENGINES
        )
        self.page_size = page_size
        self.fetcher = ListingFetcher(store)
        self.reconciler = PkiPseudoEntryReconciler(store)
        self.state = state or NavigationState()
        self.params: ListParams | None = None  # params of the listing on screen

    @property
    def route_name(self) -> str:
        return self.params.route if self.params else LIST_ROUTE

    def before_navigate(self, params: ListParams) -> Redirect | None:
        """Validate the backend and path. Returns a Redirect when the navigation must go elsewhere."""
        backend = self.store.peek_backend(params.backend)
        engine = backend.type.lower() if backend else ""
        if (
            backend is None
            or engine not in self.supported_engines
            or resolve_schema(backend, params.tab) is None
        ):
            logger.info("Backend %r is not browsable (type=%r), redirecting", params.backend, engine)
            return Redirect(LANDING_ROUTE)

        if params.route == LIST_ROUTE and not params.secret.endswith("/"):
            return Redirect(LIST_ROUTE, secret=params.secret + "/", replace=True)

        # Capabilities of the previous path must not leak into this one
        self.store.unload_all(SchemaId.CAPABILITIES)
        return None

    async def load(self, params: ListParams) -> ResolvedListing:
        secret = params.secret or ""
        backend = self.store.peek_backend(params.backend)
        if backend is None:
            raise VaultApiError(f"Unknown backend {params.backend!r}", http_status=404)
        schema = resolve_schema(backend, params.tab)
        if schema is None:
            raise VaultApiError(f"Backend {params.backend!r} cannot be listed", http_status=400)

        self.state.phase = RoutePhase.RESOLVING
        page = await self.fetcher.fetch(
            schema,
            path=secret,
            backend=backend.backend_id,
            page=params.page,
            page_filter=params.page_filter,
            page_size=self.page_size,
        )
        self.state.has_404 = False
        return ResolvedListing(secret=secret, secrets=page, backend=backend)

    async def after_load(self, params: ListParams, resolved: ResolvedListing) -> ResolvedListing:
        if params.tab == CERTS_TAB:
            await self.reconciler.reconcile(resolved.backend.backend_id, params.tab)
        return resolved

    def setup(self, params: ListParams, resolved: ResolvedListing) -> ListingViewState:
        """Publish the view state for a resolved listing."""
        backend = self.store.peek_backend(params.backend)
        if backend is None:
            logger.warning(
                "Backend %r left the registry during navigation; using the mount seen at load",
                params.backend,
            )
            backend = resolved.backend

        previous = self.state.view
        filter_state = compute_filter_state(
            resolved.secret,
            params.page_filter,
            has_404=self.state.has_404,
            current_page=resolved.secrets.current_page,
            previous=FilterState(previous.filter, previous.page) if previous else FilterState(),
        )

        view = ListingViewState(
            entries=resolved.secrets.entries,
            has_404=self.state.has_404,
            backend_id=backend.backend_id,
            backend_type=backend.engine_type,
            base_key={"id": resolved.secret},
            filter=filter_state.filter,
            page=filter_state.page,
            tab=params.tab,
            meta=resolved.secrets,
            pseudo_entries=(
                self.reconciler.present(backend.backend_id) if params.tab == CERTS_TAB else []
            ),
        )
        self.state.view = view
        self.state.has_model = True
        self.state.phase = RoutePhase.DISPLAYING
        return view

    def on_error(self, error: Exception, transition: Transition, params: ListParams) -> bool:
        """Classify a load failure. Returns True when the error should bubble."""
        status = None
        if isinstance(error, VaultApiError):
            error.secret = params.secret
            error.is_root = True
            error.backend = params.backend
            status = error.http_status

        # Only swallow the error if a listing is already on screen
        if self.state.has_model and status == 404:
            self.state.has_404 = True
            self.state.phase = RoutePhase.ERROR_404_STALE
            if self.state.view is not None:
                self.state.view.has_404 = True
            transition.abort()
            logger.info("Path %r not found in %s; keeping previous listing", params.secret, params.backend)
            return False

        self.state.phase = RoutePhase.ERROR_FATAL
        return True

    async def navigate(
        self, params: ListParams, transition: Transition | None = None
    ) -> NavigationOutcome:
        """Run one navigation to ``params``.

        Raises the load error when it is not a stale 404.
        """
        transition = transition or Transition(target=params.route, params=params)

        redirect = self.before_navigate(params)
        if redirect is not None:
            return NavigationOutcome(phase=self.state.phase, view=self.state.view, redirect=redirect)

        try:
            resolved = await self.load(params)
            resolved = await self.after_load(params, resolved)
        except Exception as e:
            if self.on_error(e, transition, params):
                raise
            return NavigationOutcome(
                phase=self.state.phase, view=self.state.view, aborted=transition.aborted
            )

        view = self.setup(params, resolved)
        self.params = params
        return NavigationOutcome(phase=self.state.phase, view=view)

    def will_transition(self, transition: Transition) -> bool:
        """Leaving for another route drops every cached listing, not just this backend's."""
        if transition.target != self.route_name:
            self.store.clear_all_datasets()
        return True

    def reset(self, is_exiting: bool) -> None:
        if is_exiting and self.state.view is not None:
            self.state.view.filter = ""

    def exit(self, transition: Transition) -> None:
        """Run the exit hooks for a transition away from the displayed listing."""
        is_exiting = transition.target != self.route_name
        self.will_transition(transition)
        self.reset(is_exiting)
        if transition.target not in (LIST_ROUTE, LIST_ROOT_ROUTE):
            self.params = None
            self.state.has_model = False
            self.state.phase = RoutePhase.IDLE

    async def reload(self) -> NavigationOutcome:
        """Re-run the current listing with every dataset cache dropped."""
        if self.params is None:
            raise RuntimeError("No listing to reload")
        self.store.clear_all_datasets()
        return await self.navigate(self.params)

