"""Errors raised by the Vault transport and propagated through the list route."""

from __future__ import annotations


class VaultApiError(Exception):
    """A failed Vault API request.

    ``http_status`` is None for transport failures (connection refused, timeout).
    The list route tags errors with ``secret``, ``backend`` and ``is_root``
    before deciding whether to surface them.
    """

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        errors: list[str] | None = None,
        path: str = "",
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.errors = errors or []
        self.path = path
        self.secret: str | None = None
        self.backend: str | None = None
        self.is_root = False

    @property
    def is_not_found(self) -> bool:
        return self.http_status == 404

    def __str__(self) -> str:
        base = super().__str__()
        if self.errors:
            return f"{base}: {'; '.join(self.errors)}"
        return base
