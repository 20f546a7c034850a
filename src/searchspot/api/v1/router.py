"""API v1 Router — Health and resource endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from searchspot.api.v1.endpoints.health import router as health_router
from searchspot.api.v1.endpoints.resources import router as resources_router

router = APIRouter(tags=["v1"])
# Health routes first: "/health" would otherwise match "/{resource}"
router.include_router(health_router)
router.include_router(resources_router)
