"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from searchspot import __version__
from searchspot.adapters.base.adapter import SearchAdapter
from searchspot.adapters.base.exceptions import ConnectionError as EngineConnectionError
from searchspot.api.deps import set_engine
from searchspot.api.errors import register_exception_handlers
from searchspot.api.v1.router import router as v1_router
from searchspot.config.settings import Settings
from searchspot.core.engine import SearchspotEngine
from searchspot.observability.logging import setup_logging
from searchspot.resources import DEFAULT_RESOURCES, Resource

logger = logging.getLogger(__name__)

CONFIG_ENV = "SEARCHSPOT_CONFIG"


def create_app(
    settings: Settings | None = None,
    resources: Mapping[str, type[Resource]] | None = None,
    adapter: SearchAdapter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        resources: Resource classes by endpoint name. Defaults to talents
            and scores.
        adapter: Search adapter to use instead of one built from settings.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        config_path = Path(os.environ.get(CONFIG_ENV, "searchspot.yaml"))
        if config_path.exists():
            logger.info("Loading configuration from %s", config_path)
            settings = Settings.from_file(config_path)
        elif CONFIG_ENV in os.environ:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            settings = Settings()

    registered = dict(DEFAULT_RESOURCES if resources is None else resources)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.observability)
        logger.info("Starting Searchspot v%s", __version__)

        engine = SearchspotEngine(settings, adapter=adapter)
        for endpoint, resource in registered.items():
            engine.register(endpoint, resource)

        try:
            await engine.initialize()
        except EngineConnectionError as e:
            # Searches answer 503 until the cluster is reachable
            logger.warning("Search engine not reachable at startup: %s", e)

        set_engine(engine)
        app.state.settings = settings
        app.state.engine = engine

        if not settings.auth.enabled:
            logger.warning("Token authentication is disabled")
        logger.info("Searchspot is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down Searchspot...")
        await engine.shutdown()
        set_engine(None)
        logger.info("Searchspot shutdown complete")

    app = FastAPI(
        title="Searchspot",
        description="Search-query gateway translating HTTP filters into OpenSearch queries.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/v1")

    return app
