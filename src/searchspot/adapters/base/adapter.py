"""Base search adapter — Abstract interface for search engine connectors.

The executor depends only on this narrow contract:
  1. Executing a structured query body against a named index
  2. Deleting a single document
  3. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class RawResults(BaseModel):
    """Raw search results from a backend before deserialization."""

    total_hits: int = Field(default=0, description="Total number of matching documents")
    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw hit dicts")
    took_ms: int = Field(default=0, description="Round-trip time in ms")


class SearchAdapter(ABC):
    """Abstract base class for search engine adapters.

    All adapters must implement:
      - search(): Execute a query body and return raw hits
      - delete_document(): Remove a single document by ID
      - health_check(): Report adapter health status

    Adapters are shared by all requests and must not keep per-request state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'opensearch')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the adapter (connections, pools, etc.).

        Called once during application startup.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Gracefully shut down the adapter.

        Called during application shutdown. Should close connections
        and release resources.
        """

    @abstractmethod
    async def search(self, index: str, body: dict[str, Any]) -> RawResults:
        """Execute a search request body against ``index``.

        Args:
            index: Index (or index pattern) to search.
            body: Engine query body.

        Returns:
            Raw hits and the total match count.

        Raises:
            ConnectionError: The backend is unreachable or timed out.
            QueryError: The backend rejected the request.
        """

    @abstractmethod
    async def delete_document(self, index: str, doc_id: str) -> None:
        """Delete a single document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            ConnectionError: The backend is unreachable or timed out.
            QueryError: The backend rejected the request.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the search backend.

        Returns:
            Current health status of the adapter.
        """
