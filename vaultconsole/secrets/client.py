"""
Async HTTP client for the Vault API.

Wraps httpx.AsyncClient. Every non-2xx response and every transport failure
is raised as VaultApiError so callers can branch on ``http_status``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from vaultconsole.config import VaultConfig
from vaultconsole.secrets.errors import VaultApiError
from vaultconsole.secrets.models import MountInfo

logger = logging.getLogger(__name__)


class VaultClient:
    """Async client for the Vault HTTP API (read-only subset)."""

    def __init__(
        self,
        config: VaultConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or VaultConfig()
        self.base_url = self.config.api_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.config.headers,
            timeout=self.config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = "/" + path.lstrip("/")
        try:
            resp = await self._client.request(method, url, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("Vault request %s %s failed: %s", method, url, e)
            raise VaultApiError(f"{method} {url} failed: {e}", path=path) from e

        if resp.status_code >= 400:
            errors: list[str] = []
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("errors"), list):
                errors = [str(e) for e in body["errors"]]
            logger.debug("Vault %s %s -> HTTP %d", method, url, resp.status_code)
            raise VaultApiError(
                f"HTTP {resp.status_code} for {method} {url}",
                http_status=resp.status_code,
                errors=errors,
                path=path,
            )

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError as e:
            logger.warning("Vault %s %s returned a non-JSON body", method, url)
            raise VaultApiError(
                f"Invalid JSON from {method} {url}", http_status=resp.status_code, path=path
            ) from e
        if not isinstance(body, dict):
            raise VaultApiError(
                f"Unexpected {type(body).__name__} body from {method} {url}",
                http_status=resp.status_code,
                path=path,
            )
        return body

    async def list(self, path: str) -> dict[str, Any]:
        """LIST <path> — child keys live under data.keys. Vault answers 404 when empty."""
        return await self._request("GET", path, params={"list": "true"})

    async def read(self, path: str) -> dict[str, Any]:
        """GET <path> — raw response body."""
        return await self._request("GET", path)

    async def mounts(self) -> dict[str, MountInfo]:
        """GET sys/mounts — mount path (with trailing slash) → MountInfo."""
        body = await self._request("GET", "sys/mounts")
        table = body.get("data") or body
        return {
            path: MountInfo.model_validate(info)
            for path, info in table.items()
            if isinstance(info, dict) and "type" in info
        }

    async def capabilities_self(self, paths: list[str]) -> dict[str, list[str]]:
        """POST sys/capabilities-self — the token's capabilities per path."""
        body = await self._request("POST", "sys/capabilities-self", json={"paths": paths})
        data = body.get("data") or body
        return {p: list(data.get(p, [])) for p in paths}
