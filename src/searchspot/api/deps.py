"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from fastapi import Depends, Header, Request

from searchspot.core.auth import method_class, parse_authorization
from searchspot.core.engine import SearchspotEngine

# Global engine instance (set during application lifespan)
_engine: SearchspotEngine | None = None


def set_engine(engine: SearchspotEngine | None) -> None:
    """Set the global engine instance (called during app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> SearchspotEngine:
    """Get the global Searchspot engine instance.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    if _engine is None:
        raise RuntimeError("Searchspot engine not initialized. Is the server running?")
    return _engine


def require_token(
    request: Request,
    authorization: str | None = Header(default=None),
    engine: SearchspotEngine = Depends(get_engine),
) -> None:
    """Check the ``Authorization`` token against the secret of the request method.

    Raises:
        AuthError: The token is missing or invalid while auth is enabled.
    """
    engine.auth.authorize(parse_authorization(authorization), method_class(request.method))
