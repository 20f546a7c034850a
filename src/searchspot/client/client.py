"""Searchspot Python SDK — Async and sync clients for the Searchspot REST API.

Usage::

    # Async
    async with AsyncSearchspotClient("http://localhost:3000", read_secret="...") as client:
        page = await client.search("talents", desired_work_roles=["DevOps"], limit=2)

    # Sync (wraps async client internally)
    client = SearchspotClient("http://localhost:3000")
    page = client.search("scores", job_id=[42])

Filters are passed as keyword arguments and encoded the way the server reads
them: lists become repeated ``field[]`` parameters, booleans ``true``/``false``
and datetimes ISO-8601 strings. Range bounds are passed under their parameter
names (``score_from=0.5``).
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Coroutine
from datetime import datetime
from typing import Any, TypeVar, cast

import httpx

from searchspot.core.auth import generate_token

_T = TypeVar("_T")

SearchPage = dict[str, Any]
"""Search response dict (mirrors ``SearchResponse`` JSON)."""


def encode_filters(filters: dict[str, Any]) -> list[tuple[str, str]]:
    """Encode keyword filters as query-string pairs."""
    params: list[tuple[str, str]] = []
    for name, value in filters.items():
        if value is None:
            continue
        if isinstance(value, list | tuple | set):
            params.extend((f"{name}[]", _encode_value(item)) for item in value)
        else:
            params.append((name, _encode_value(value)))
    return params


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncSearchspotClient:
    """Async Python client for the Searchspot API.

    Args:
        base_url: Searchspot server URL, e.g. ``"http://localhost:3000"``.
        read_secret: Secret used to sign search requests.
        write_secret: Secret used to sign delete requests.
        digits: Length of the one-time codes the server expects.
        step: Time step of the one-time codes, in seconds.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        read_secret: str | None = None,
        write_secret: str | None = None,
        digits: int = 6,
        step: int = 30,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._read_secret = read_secret
        self._write_secret = write_secret
        self._digits = digits
        self._step = step
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncSearchspotClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def _auth_headers(self, secret: str | None) -> dict[str, str]:
        if not secret:
            return {}
        code = generate_token(secret, time.time(), digits=self._digits, step=self._step)
        return {"Authorization": f"token {code}"}

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        """Check server health."""
        resp = await self._client.get("/v1/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def engine_health(self) -> dict[str, Any]:
        """Check search engine health."""
        resp = await self._client.get("/v1/health/engine")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Resources ──

    async def search(self, resource: str, **filters: Any) -> SearchPage:
        """Search documents of ``resource``.

        Args:
            resource: Resource endpoint name, e.g. ``"talents"``.
            **filters: Filter, paging and sorting parameters.

        Returns:
            Response dict with ``total``, ``offset``, ``limit`` and ``results``.
        """
        resp = await self._client.get(
            f"/v1/{resource}",
            params=encode_filters(filters),
            headers=self._auth_headers(self._read_secret),
        )
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def delete(self, resource: str, doc_id: str | int) -> None:
        """Delete a single document of ``resource``."""
        resp = await self._client.delete(
            f"/v1/{resource}/{doc_id}",
            headers=self._auth_headers(self._write_secret),
        )
        resp.raise_for_status()


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncSearchspotClient)
# ═══════════════════════════════════════════════════════════════════════════════


class SearchspotClient:
    """Synchronous Python client for the Searchspot API.

    Wraps :class:`AsyncSearchspotClient` using ``asyncio.run``; takes the
    same arguments.
    """

    def __init__(self, base_url: str = "http://localhost:3000", **kwargs: Any) -> None:
        self._base_url = base_url
        self._kwargs = kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncSearchspotClient:
        return AsyncSearchspotClient(self._base_url, **self._kwargs)

    def health(self) -> dict[str, Any]:
        """Check server health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.health()

        return self._run(_call())

    def engine_health(self) -> dict[str, Any]:
        """Check search engine health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.engine_health()

        return self._run(_call())

    def search(self, resource: str, **filters: Any) -> SearchPage:
        """Search documents of ``resource``."""

        async def _call() -> SearchPage:
            async with self._make_client() as c:
                return await c.search(resource, **filters)

        return self._run(_call())

    def delete(self, resource: str, doc_id: str | int) -> None:
        """Delete a single document of ``resource``."""

        async def _call() -> None:
            async with self._make_client() as c:
                await c.delete(resource, doc_id)

        self._run(_call())
