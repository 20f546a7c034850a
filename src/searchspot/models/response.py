"""Search result models — typed results and the JSON response envelope."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from searchspot.resources.base import Resource

ResourceT = TypeVar("ResourceT", bound=Resource)


class SearchHit(BaseModel, Generic[ResourceT]):
    """One deserialized hit."""

    record: ResourceT
    score: float | None = Field(default=None, description="Relevance score, when computed")
    highlight: dict[str, list[str]] | None = Field(default=None, description="Matched fragments per field")


class SearchResult(BaseModel, Generic[ResourceT]):
    """Ordered hits of one search plus the total and the page window applied."""

    hits: list[SearchHit[ResourceT]] = Field(default_factory=list)
    total: int = Field(default=0, description="Total number of matching documents")
    offset: int = Field(default=0, description="Index of the first returned hit")
    limit: int = Field(default=10, description="Requested page size")
    dropped: int = Field(default=0, description="Hits skipped because they failed to deserialize")

    @property
    def records(self) -> list[ResourceT]:
        return [hit.record for hit in self.hits]

    def to_response(self) -> SearchResponse:
        """Serialize into the wire envelope."""
        return SearchResponse(
            total=self.total,
            offset=self.offset,
            limit=self.limit,
            results=[
                ResultItem(resource=hit.record.to_response(), score=hit.score, highlight=hit.highlight)
                for hit in self.hits
            ],
        )


class ResultItem(BaseModel):
    """A serialized resource record with its score and highlight."""

    resource: dict[str, Any] = Field(description="Serialized resource record")
    score: float | None = Field(default=None, description="Relevance score, when computed")
    highlight: dict[str, list[str]] | None = Field(default=None, description="Matched fragments per field")


class SearchResponse(BaseModel):
    """Response body of a resource search endpoint."""

    total: int = Field(description="Total number of matching documents")
    offset: int = Field(description="Index of the first returned result")
    limit: int = Field(description="Requested page size")
    results: list[ResultItem] = Field(default_factory=list, description="Results in ranking order")
