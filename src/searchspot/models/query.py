"""Query description — engine-ready form of a built search.

Built fresh per request by :func:`searchspot.core.builder.build_query`,
immutable afterwards, and rendered to an OpenSearch request body with
:meth:`QueryDescription.to_body`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Clause = dict[str, Any]


class QueryClauses(BaseModel):
    """Boolean combination of query clauses.

    ``must`` clauses are scored, ``filter`` and ``must_not`` are not. When
    ``should`` is non-empty at least one of its clauses has to match.
    """

    model_config = ConfigDict(frozen=True)

    must: tuple[Clause, ...] = ()
    should: tuple[Clause, ...] = ()
    filter: tuple[Clause, ...] = ()
    must_not: tuple[Clause, ...] = ()

    def merge(self, other: QueryClauses | None) -> QueryClauses:
        """Return the clauses of both, ``self`` first."""
        if other is None:
            return self
        return QueryClauses(
            must=self.must + other.must,
            should=self.should + other.should,
            filter=self.filter + other.filter,
            must_not=self.must_not + other.must_not,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.must or self.should or self.filter or self.must_not)

    def to_query(self) -> Clause:
        """Render as an OpenSearch ``bool`` query (``match_all`` when empty)."""
        if self.is_empty:
            return {"match_all": {}}
        body: dict[str, Any] = {}
        for occur in ("must", "should", "filter", "must_not"):
            clauses = getattr(self, occur)
            if clauses:
                body[occur] = list(clauses)
        if self.should:
            body["minimum_should_match"] = 1
        return {"bool": body}


class QueryDescription(BaseModel):
    """A complete search: clauses, sort, page window and scoring options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    clauses: QueryClauses = Field(default_factory=QueryClauses)
    sort: tuple[Clause, ...] = ()
    from_: int = Field(default=0, ge=0, alias="from")
    size: int = Field(default=10, ge=1)
    highlight: Clause | None = None
    min_score: float | None = None

    @property
    def scored(self) -> bool:
        """Whether hits are ranked by relevance (free-text search)."""
        return bool(self.clauses.must)

    def to_body(self) -> dict[str, Any]:
        """Render the OpenSearch ``_search`` request body."""
        body: dict[str, Any] = {
            "query": self.clauses.to_query(),
            "from": self.from_,
            "size": self.size,
        }
        if self.sort:
            body["sort"] = list(self.sort)
            if self.scored:
                body["track_scores"] = True
        if self.highlight:
            body["highlight"] = self.highlight
        if self.min_score is not None:
            body["min_score"] = self.min_score
        return body
