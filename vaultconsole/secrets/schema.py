"""
Engine schema resolution — which entry schema a listing is materialized as.

Pure lookup over an already-resolved Backend.
"""

from __future__ import annotations

from vaultconsole.secrets.models import Backend, EngineType, SchemaId

CERTS_TAB = "certs"


def resolve_schema(backend: Backend, tab: str | None = None) -> SchemaId | None:
    """Map a backend's engine type (and the active tab) to its entry schema.

    Returns None for engine types the console cannot list.
    """
    engine = backend.engine_type
    if engine is EngineType.TRANSIT:
        return SchemaId.TRANSIT_KEY
    elif engine is EngineType.SSH:
        return SchemaId.ROLE_SSH
    elif engine is EngineType.AWS:
        return SchemaId.ROLE_AWS
    elif engine is EngineType.PKI:
        return SchemaId.PKI_CERTIFICATE if tab == CERTS_TAB else SchemaId.ROLE_PKI
    elif engine is EngineType.CUBBYHOLE:
        return SchemaId.SECRET
    elif engine in (EngineType.KV, EngineType.GENERIC):
        return backend.kv_version_schema
    elif engine is EngineType.UNKNOWN:
        return None
    raise AssertionError(f"unhandled engine type: {engine}")
