"""Resource endpoints — search and delete documents of a registered resource.

Query-string parameters are passed through unchanged as the raw filter map:

- ``field[]=a&field[]=b`` for list fields
- ``field=true|false`` for booleans
- ``field_from`` / ``field_until`` for date and numeric ranges
- the resource's free-text parameter (``query`` unless it declares another)
- ``offset``, ``limit``, ``order_by``, ``order``

Every route requires a token when auth is enabled: the read secret for
``GET``, the write secret for ``DELETE``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from searchspot.api.deps import get_engine, require_token
from searchspot.core.engine import SearchspotEngine
from searchspot.models.response import SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_token)])

_ERRORS = {
    401: {"description": "Missing or invalid token"},
    404: {"description": "Unknown resource"},
    503: {"description": "Search engine unavailable, safe to retry"},
}


@router.get(
    "/{resource}",
    response_model=SearchResponse,
    summary="Search Resource",
    description=(
        "Search documents of a resource. Filters within one field are ORed, "
        "distinct fields are ANDed. Results are paged with `offset`/`limit` "
        "and sorted by relevance for free-text searches."
    ),
    responses={422: {"description": "Invalid filter, names the offending field"}, **_ERRORS},
)
async def search_resource(
    resource: str,
    request: Request,
    engine: SearchspotEngine = Depends(get_engine),
) -> SearchResponse:
    """Run a filtered search on ``resource``."""
    result = await engine.search(resource, request.query_params.multi_items())
    if result.dropped:
        logger.info("Search on '%s' dropped %d malformed hits", resource, result.dropped)
    return result.to_response()


@router.delete(
    "/{resource}/{doc_id}",
    status_code=204,
    summary="Delete Document",
    description="Delete a single document of a resource by its ID.",
    responses=_ERRORS,
)
async def delete_document(
    resource: str,
    doc_id: str,
    engine: SearchspotEngine = Depends(get_engine),
) -> Response:
    """Delete document ``doc_id`` of ``resource``."""
    await engine.delete(resource, doc_id)
    return Response(status_code=204)
