"""
Data models for the secrets list route.

Domain state is plain dataclasses. Wire-format entries parsed from the
Vault API use pydantic (see MountInfo).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel

LIST_ROUTE = "secrets.backend.list"
LIST_ROOT_ROUTE = "secrets.backend.list-root"
LANDING_ROUTE = "secrets"

PSEUDO_ENTRY_IDS = ("ca", "crl", "ca_chain")


class EngineType(StrEnum):
    TRANSIT = "transit"
    SSH = "ssh"
    AWS = "aws"
    PKI = "pki"
    CUBBYHOLE = "cubbyhole"
    KV = "kv"
    GENERIC = "generic"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> EngineType:
        """Map a mount table type string to an EngineType (UNKNOWN if unrecognised)."""
        try:
            return cls((raw or "").lower())
        except ValueError:
            return cls.UNKNOWN


class SchemaId(StrEnum):
    TRANSIT_KEY = "transit-key"
    ROLE_SSH = "role-ssh"
    ROLE_AWS = "role-aws"
    ROLE_PKI = "role-pki"
    PKI_CERTIFICATE = "pki-certificate"
    SECRET = "secret"
    SECRET_V2 = "secret-v2"
    CAPABILITIES = "capabilities"


class RoutePhase(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    DISPLAYING = "displaying"
    ERROR_404_STALE = "error_404_stale"
    ERROR_FATAL = "error_fatal"


class MountInfo(BaseModel):
    """One entry of the sys/mounts table."""

    type: str
    description: str = ""
    accessor: str = ""
    options: dict[str, Any] | None = None


@dataclass(frozen=True)
class Backend:
    """A mounted secrets engine."""

    backend_id: str  # mount path without trailing slash, e.g. "secret"
    type: str  # raw mount type as reported by the server
    options: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    @property
    def engine_type(self) -> EngineType:
        return EngineType.parse(self.type)

    @property
    def kv_version_schema(self) -> SchemaId:
        """Entry schema for kv/generic mounts: secret-v2 for KV version 2, else secret."""
        if str(self.options.get("version", "1")) == "2":
            return SchemaId.SECRET_V2
        return SchemaId.SECRET

    @classmethod
    def from_mount(cls, path: str, mount: MountInfo) -> Backend:
        return cls(
            backend_id=path.rstrip("/"),
            type=mount.type,
            options=dict(mount.options or {}),
            description=mount.description,
        )


@dataclass
class PageQuery:
    """Query for one page of a listing dataset."""

    id: str  # secret path being listed
    backend: str
    response_path: str = "data.keys"
    page: int = 1
    page_filter: str | None = None
    size: int = 100

    @property
    def dataset_key(self) -> tuple[str, str]:
        """Cache key for the unfiltered dataset (page, filter and size excluded)."""
        return (self.backend, self.id)


@dataclass
class ListingPage:
    """One page of child keys under a secret path."""

    entries: list[str] = field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    next_page: int = 1
    prev_page: int = 1
    total: int | None = None  # unfiltered dataset size, None if unknown
    filtered_total: int = 0
    page_size: int = 100

    @classmethod
    def empty(cls, page_size: int = 100) -> ListingPage:
        """The listing of a mount that exists but has no children yet."""
        return cls(entries=[], total=0, page_size=page_size)


@dataclass
class Record:
    """A single fetched object held in the store's record cache."""

    schema: SchemaId
    id: str
    backend: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def certificate(self) -> str | None:
        """PEM certificate for pki-certificate records, None if unset."""
        return self.data.get("certificate") or None

    @property
    def cache_key(self) -> tuple[str, str, str]:
        return (str(self.schema), self.backend, self.id)


@dataclass
class ListParams:
    """Route and query params for one list navigation."""

    backend: str
    secret: str = ""
    page: int = 1
    page_filter: str | None = None
    tab: str | None = None
    route: str = ""  # root route for an empty path, list route otherwise

    def __post_init__(self) -> None:
        if not self.route:
            self.route = LIST_ROOT_ROUTE if self.secret == "" else LIST_ROUTE


@dataclass(frozen=True)
class Redirect:
    """Instruction to leave the current navigation for another route."""

    route: str
    secret: str | None = None
    replace: bool = False  # replace history entry instead of pushing


@dataclass
class Transition:
    """A navigation attempt that can be aborted by the route's error hook."""

    target: str
    params: ListParams | None = None
    aborted: bool = False

    def abort(self) -> None:
        self.aborted = True


@dataclass
class ResolvedListing:
    """Result of the load step: the path listed, its page, and the backend used."""

    secret: str
    secrets: ListingPage
    backend: Backend


@dataclass
class ListingViewState:
    """Display-ready bundle published to the rendering layer."""

    entries: list[str]
    has_404: bool
    backend_id: str
    backend_type: EngineType
    base_key: dict[str, str]
    filter: str = ""
    page: int = 1
    tab: str | None = None
    meta: ListingPage | None = None
    pseudo_entries: list[str] = field(default_factory=list)


@dataclass
class NavigationState:
    """All mutable state of the list route, owned by one ListRoute."""

    phase: RoutePhase = RoutePhase.IDLE
    has_404: bool = False
    has_model: bool = False
    view: ListingViewState | None = None


@dataclass
class NavigationOutcome:
    """What a navigation attempt produced."""

    phase: RoutePhase
    view: ListingViewState | None = None
    redirect: Redirect | None = None
    aborted: bool = False
