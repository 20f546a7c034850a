"""Query executor — run a QueryDescription and deserialize the hits.

The executor is the only place a request touches the network. It turns adapter
failures into the execution error taxonomy and hits into typed records:

  - adapter ``ConnectionError`` → :class:`UnavailableError` (retryable)
  - adapter ``QueryError`` → :class:`BadQueryError` (a builder defect)
  - a hit failing ``from_hit`` → dropped and logged, or
    :class:`CorruptIndexError` in strict mode
"""

from __future__ import annotations

import logging
from typing import Generic

from searchspot.adapters.base import exceptions as adapter_errors
from searchspot.adapters.base.adapter import SearchAdapter
from searchspot.core.errors import (
    BadQueryError,
    CorruptIndexError,
    DeserializationError,
    DocumentNotFoundError,
    UnavailableError,
)
from searchspot.models.query import QueryDescription
from searchspot.models.response import ResourceT, SearchHit, SearchResult

logger = logging.getLogger(__name__)


class SearchExecutor(Generic[ResourceT]):
    """Executes queries for one resource type through a search adapter.

    Args:
        adapter: Engine adapter shared by all requests.
        resource: Resource class hits are deserialized into.
        strict: Abort on the first hit that fails to deserialize.
    """

    def __init__(self, adapter: SearchAdapter, resource: type[ResourceT], *, strict: bool = False) -> None:
        self.adapter = adapter
        self.resource = resource
        self.strict = strict

    async def execute(self, query: QueryDescription, index: str) -> SearchResult[ResourceT]:
        """Send ``query`` to ``index`` and map the hits.

        Raises:
            UnavailableError: The engine is unreachable or timed out.
            BadQueryError: The engine rejected the query.
            CorruptIndexError: A hit is malformed while strict mode is on.
        """
        try:
            raw = await self.adapter.search(index, query.to_body())
        except (adapter_errors.ConnectionError, TimeoutError) as e:
            logger.warning("Search engine unavailable for index '%s': %s", index, e)
            raise UnavailableError(str(e)) from e
        except adapter_errors.QueryError as e:
            logger.error("Search engine rejected query on index '%s': %s", index, e, exc_info=True)
            raise BadQueryError(str(e)) from e

        hits: list[SearchHit[ResourceT]] = []
        dropped = 0
        for document in raw.documents:
            try:
                record = self.resource.from_hit(document)
            except DeserializationError as e:
                if self.strict:
                    raise CorruptIndexError(f"Index '{index}' holds a malformed document: {e}") from e
                logger.warning("Dropping hit '%s' from index '%s': %s", document.get("_id"), index, e)
                dropped += 1
                continue
            hits.append(
                SearchHit(
                    record=record,
                    score=document.get("_score"),
                    highlight=document.get("highlight"),
                )
            )

        logger.debug(
            "Search on '%s' returned %d of %d hits in %d ms",
            index,
            len(hits),
            raw.total_hits,
            raw.took_ms,
        )
        return SearchResult(
            hits=hits,
            total=raw.total_hits,
            offset=query.from_,
            limit=query.size,
            dropped=dropped,
        )

    async def delete(self, index: str, doc_id: str) -> None:
        """Delete one document of this resource.

        Raises:
            DocumentNotFoundError: The document does not exist.
            UnavailableError: The engine is unreachable or timed out.
            BadQueryError: The engine rejected the request.
        """
        try:
            await self.adapter.delete_document(index, doc_id)
        except adapter_errors.DocumentNotFoundError as e:
            raise DocumentNotFoundError(str(e)) from e
        except (adapter_errors.ConnectionError, TimeoutError) as e:
            logger.warning("Search engine unavailable for index '%s': %s", index, e)
            raise UnavailableError(str(e)) from e
        except adapter_errors.QueryError as e:
            logger.error("Search engine rejected delete on index '%s': %s", index, e, exc_info=True)
            raise BadQueryError(str(e)) from e
        logger.info("Deleted document '%s' from index '%s'", doc_id, index)
