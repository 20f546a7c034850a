"""Searchspot engine — wires filters, builder and executor per resource.

The engine owns everything that lives for the whole process: the settings,
the shared search adapter, the auth gate and the registered resources. All of
it is read-only once the application has started; each search builds its own
filters, query and result.

Pipeline of one search:
  raw params → [parse_filters] → FilterRequest
             → [build_query] (+ resource scope clauses) → QueryDescription
             → [SearchExecutor] → SearchResult
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from searchspot.adapters.opensearch.adapter import OpenSearchAdapter
from searchspot.core.auth import AuthGate
from searchspot.core.builder import build_query
from searchspot.core.executor import SearchExecutor
from searchspot.models.filters import RawParams, parse_filters

if TYPE_CHECKING:
    from searchspot.adapters.base.adapter import AdapterHealth, SearchAdapter
    from searchspot.config.settings import Settings
    from searchspot.models.response import SearchResult
    from searchspot.resources.base import Resource

logger = logging.getLogger(__name__)


class UnknownResourceError(KeyError):
    """No resource is registered under the requested endpoint name."""


class SearchspotEngine:
    """Core orchestrator shared by all requests.

    Attributes:
        settings: Application configuration.
        adapter: Search engine adapter.
        auth: Token gate for resource routes.
    """

    def __init__(self, settings: Settings, adapter: SearchAdapter | None = None) -> None:
        self.settings = settings
        self.adapter = adapter or self._create_adapter(settings)
        self.auth = AuthGate(settings.auth)
        self._resources: dict[str, type[Resource]] = {}
        self._executors: dict[str, SearchExecutor[Any]] = {}

    @staticmethod
    def _create_adapter(settings: Settings) -> OpenSearchAdapter:
        engine = settings.engine
        return OpenSearchAdapter(
            hosts=engine.hosts,
            username=engine.username,
            password=engine.password,
            verify_certs=engine.verify_certs,
            timeout=engine.timeout_seconds,
            **engine.extra,
        )

    async def initialize(self) -> None:
        """Connect the search adapter."""
        await self.adapter.initialize()
        logger.info(
            "Searchspot engine initialized (adapter=%s, resources=%s)",
            self.adapter.name,
            ", ".join(self._resources) or "none",
        )

    async def shutdown(self) -> None:
        """Close the search adapter."""
        await self.adapter.shutdown()
        logger.info("Searchspot engine shut down")

    # ── Resources ────────────────────────────────────────────────────────

    def register(self, endpoint: str, resource: type[Resource]) -> None:
        """Expose ``resource`` under ``endpoint`` (e.g. ``"talents"``)."""
        if endpoint in self._resources:
            raise ValueError(f"Resource endpoint '{endpoint}' is already registered")
        self._resources[endpoint] = resource
        self._executors[endpoint] = SearchExecutor(self.adapter, resource, strict=self.settings.engine.strict)
        logger.debug("Registered resource %s at '%s'", resource.__name__, endpoint)

    @property
    def resources(self) -> dict[str, type[Resource]]:
        return dict(self._resources)

    def resource(self, endpoint: str) -> type[Resource]:
        try:
            return self._resources[endpoint]
        except KeyError:
            raise UnknownResourceError(endpoint) from None

    def index_for(self, endpoint: str) -> str:
        """Index searched for ``endpoint``; settings override the resource default."""
        return self.settings.engine.indexes.get(endpoint) or self.resource(endpoint).index_name()

    # ── Operations ───────────────────────────────────────────────────────

    async def search(self, endpoint: str, raw_params: RawParams) -> SearchResult[Any]:
        """Validate ``raw_params``, build the query and run it.

        Raises:
            InvalidFilterError: A parameter failed validation.
            ExecutionError: The query could not be executed.
        """
        resource = self.resource(endpoint)
        schema = resource.search_schema()
        filters = parse_filters(
            raw_params,
            schema,
            default_limit=self.settings.search.default_limit,
            max_limit=self.settings.search.max_limit,
            max_window=self.settings.search.max_window,
        )
        query = build_query(filters, schema, resource.scope_clauses(filters))
        return await self._executors[endpoint].execute(query, self.index_for(endpoint))

    async def delete(self, endpoint: str, doc_id: str) -> None:
        """Delete one document of the resource at ``endpoint``."""
        self.resource(endpoint)
        await self._executors[endpoint].delete(self.index_for(endpoint), doc_id)

    async def health(self) -> AdapterHealth:
        return await self.adapter.health_check()
