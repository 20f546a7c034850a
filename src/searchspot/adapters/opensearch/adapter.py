"""OpenSearch adapter — Runs built queries against OpenSearch (v2+).

OpenSearch is an AWS-maintained fork of Elasticsearch with a compatible
query DSL and API surface. This adapter uses the async ``opensearch-py``
client and translates its transport errors into adapter exceptions:

  - connection failures, timeouts and 5xx responses → ``ConnectionError``
  - missing documents → ``DocumentNotFoundError``
  - every other rejected request → ``QueryError``
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

from opensearchpy import AsyncOpenSearch
from opensearchpy import exceptions as os_exceptions

from searchspot.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from searchspot.adapters.base.exceptions import (
    ConfigurationError,
    ConnectionError,
    DocumentNotFoundError,
    QueryError,
)

logger = logging.getLogger(__name__)


class OpenSearchAdapter(SearchAdapter):
    """Search adapter for OpenSearch (v2+).

    Args:
        hosts: List of OpenSearch node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        timeout: Per-request timeout in seconds.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.

    Raises:
        ConfigurationError: Only one of username and password is given.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        if bool(username) != bool(password):
            raise ConfigurationError("OpenSearch basic auth needs both a username and a password")
        self._hosts = hosts or ["http://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._timeout = timeout
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    def name(self) -> str:
        return "opensearch"

    async def initialize(self) -> None:
        """Create the ``AsyncOpenSearch`` client and check connectivity.

        The client is kept even when the check fails, so requests can
        succeed once the cluster comes up.
        """
        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)
        self._client = AsyncOpenSearch(**client_kwargs)

        try:
            info = await self._client.info()
        except Exception as e:
            raise ConnectionError(f"Failed to connect to OpenSearch: {e}") from e

        version = info.get("version", {}).get("number", "unknown")
        cluster = info.get("cluster_name", "unknown")
        logger.info("Connected to OpenSearch cluster: %s (v%s)", cluster, version)

    async def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            await self._client.close()
            self._client = None

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, index: str, body: dict[str, Any]) -> RawResults:
        """Execute a query body against ``index``."""
        if not self._client:
            raise ConnectionError("OpenSearch client not initialized.")

        start = time.monotonic()
        try:
            response = await self._client.search(index=index, body=body)
        except os_exceptions.NotFoundError as e:
            raise QueryError(f"Index '{index}' does not exist") from e
        except Exception as e:
            raise self._translate(e, "search") from e
        took_ms = int((time.monotonic() - start) * 1000)

        hits = response.get("hits", {})
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)

        return RawResults(
            total_hits=total,
            documents=list(hits.get("hits", [])),
            took_ms=took_ms,
        )

    async def delete_document(self, index: str, doc_id: str) -> None:
        """Delete a single document by ID."""
        if not self._client:
            raise ConnectionError("OpenSearch client not initialized.")
        try:
            await self._client.delete(index=index, id=doc_id)
        except os_exceptions.NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found.") from e
        except Exception as e:
            raise self._translate(e, "delete") from e

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check OpenSearch cluster health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _translate(error: Exception, operation: str) -> Exception:
        """Map a client exception onto the adapter exception hierarchy."""
        if isinstance(error, os_exceptions.ConnectionError | asyncio.TimeoutError):
            return ConnectionError(f"OpenSearch {operation} failed: {error}")
        if isinstance(error, os_exceptions.TransportError):
            status = error.status_code
            if isinstance(status, int) and status >= 500:
                return ConnectionError(f"OpenSearch {operation} failed with HTTP {status}: {error}")
        return QueryError(f"OpenSearch {operation} failed: {error}")
