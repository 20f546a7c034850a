"""Health check endpoints — Service and search engine health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from searchspot import __version__
from searchspot.adapters.base.adapter import AdapterHealth
from searchspot.api.deps import get_engine
from searchspot.core.engine import SearchspotEngine

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="Searchspot server version")
    service: str = Field(description="Service name ('searchspot')")
    adapter: str = Field(description="Name of the search engine adapter")
    resources: dict[str, str] = Field(description="Registered resource endpoints and the index each searches")
    auth_enabled: bool = Field(description="Whether resource routes require a token")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
    description="Returns service status, version and the registered resources.",
)
async def health_check(
    engine: SearchspotEngine = Depends(get_engine),
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="searchspot",
        adapter=engine.adapter.name,
        resources={endpoint: engine.index_for(endpoint) for endpoint in engine.resources},
        auth_enabled=engine.auth.enabled,
    )


@router.get(
    "/health/engine",
    response_model=AdapterHealth,
    summary="Search Engine Health Check",
    description="Runs a cluster health check against the search engine.",
)
async def engine_health(
    engine: SearchspotEngine = Depends(get_engine),
) -> AdapterHealth:
    """Check health of the search engine cluster."""
    return await engine.health()
