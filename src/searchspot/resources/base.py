"""Resource capability — the contract a record type implements to be searchable.

A resource declares a :class:`ResourceSchema` (which request parameters it
accepts and how each maps onto the index), knows the index it lives in, and
rebuilds itself from a raw engine hit. The filter parser, query builder and
executor are written once against this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from searchspot.core.errors import DeserializationError

if TYPE_CHECKING:
    from searchspot.models.filters import FilterRequest
    from searchspot.models.query import QueryClauses


class FieldKind(str, Enum):
    """How a request parameter is coerced and translated."""

    KEYWORD = "keyword"
    """Exact-match list (``field[]=a&field[]=b``) → ``terms`` filter."""

    FULL_TEXT = "full_text"
    """Field searched by the free-text parameter; not a parameter itself."""

    BOOLEAN = "boolean"
    """``field=true|false`` → ``term`` filter."""

    DATE = "date"
    """``field_from`` / ``field_until`` ISO-8601 bounds → ``range`` filter."""

    NUMERIC = "numeric"
    """``field_from`` / ``field_until`` number bounds → ``range`` filter."""

    EXCLUDE = "exclude"
    """List of values whose documents are left out → ``must_not`` terms."""

    CONTEXT = "context"
    """Typed values consumed by :meth:`Resource.scope_clauses` only."""


class FieldSpec(BaseModel):
    """Declaration of a single searchable field.

    Attributes:
        name: Request parameter name.
        kind: How the parameter is interpreted.
        field: Target field in the index. Defaults to ``name``.
        extra_fields: Further index fields an ``EXCLUDE`` field applies to.
        item_type: Type list items are coerced to (``KEYWORD``, ``EXCLUDE``,
            ``CONTEXT``).
        match_all: For ``KEYWORD``, require every listed value instead of any.
        boost: Relevance boost for ``FULL_TEXT`` fields.
        raw_field: Unanalysed sub-field used for quoted free-text phrases.
        sortable: Whether ``order_by`` may name this field.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind
    field: str = ""
    extra_fields: tuple[str, ...] = ()
    item_type: type[Any] = str
    match_all: bool = False
    boost: float | None = None
    raw_field: str | None = None
    sortable: bool = True

    @property
    def target(self) -> str:
        return self.field or self.name

    @property
    def targets(self) -> tuple[str, ...]:
        return (self.target, *self.extra_fields)

    @property
    def is_range(self) -> bool:
        return self.kind in (FieldKind.DATE, FieldKind.NUMERIC)


class SortSpec(BaseModel):
    """One entry of a default sort."""

    model_config = ConfigDict(frozen=True)

    field: str
    order: str = "desc"
    unmapped_type: str | None = None

    def to_clause(self) -> dict[str, Any]:
        options: dict[str, Any] = {"order": self.order}
        if self.unmapped_type:
            options["unmapped_type"] = self.unmapped_type
        return {self.field: options}


class ResourceSchema(BaseModel):
    """Static description of everything a resource lets callers filter on.

    Attributes:
        fields: Field declarations, unique by parameter name.
        text_param: Name of the free-text parameter.
        id_field: Index field used as the deterministic sort tiebreaker.
        default_sort: Sort applied when neither free text nor ``order_by`` is given.
        highlight: Return highlight fragments for free-text matches.
        min_score: Minimum relevance score for free-text matches.
        strict: Reject unknown parameters. When false they are ignored.
    """

    model_config = ConfigDict(frozen=True)

    fields: tuple[FieldSpec, ...]
    text_param: str = "query"
    id_field: str = "id"
    default_sort: tuple[SortSpec, ...] = ()
    highlight: bool = False
    min_score: float | None = None
    strict: bool = True

    def get(self, name: str) -> FieldSpec | None:
        """Return the parameter declaration for ``name``, if any."""
        for spec in self.fields:
            if spec.name == name and spec.kind is not FieldKind.FULL_TEXT:
                return spec
        return None

    @property
    def full_text_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.kind is FieldKind.FULL_TEXT)


class Resource(BaseModel, ABC):
    """Base class for searchable record types.

    Subclasses are pydantic models describing the indexed document and
    implement :meth:`search_schema`. The defaults cover the common case of a
    document whose ``_source`` maps one-to-one onto the model.
    """

    model_config = ConfigDict(populate_by_name=True)

    index: ClassVar[str] = ""
    """Default logical index name; overridable per deployment in settings."""

    @classmethod
    @abstractmethod
    def search_schema(cls) -> ResourceSchema:
        """Return the static field declarations of this resource."""

    @classmethod
    def index_name(cls) -> str:
        return cls.index

    @classmethod
    def from_hit(cls, hit: dict[str, Any]) -> Resource:
        """Rebuild a record from a raw engine hit.

        Raises:
            DeserializationError: If ``_source`` is missing or does not
                validate against the model.
        """
        source = hit.get("_source")
        if not isinstance(source, dict):
            raise DeserializationError(f"Hit '{hit.get('_id', '?')}' has no _source document")
        try:
            return cls.model_validate(source)
        except PydanticValidationError as e:
            raise DeserializationError(f"Hit '{hit.get('_id', '?')}' is malformed: {e}") from e

    def to_document(self) -> dict[str, Any]:
        """Serialize into the raw document form stored in the index."""
        return self.model_dump(mode="json", by_alias=True)

    def to_response(self) -> dict[str, Any]:
        """Serialize as a search result item. Defaults to the full document."""
        return self.to_document()

    @classmethod
    def scope_clauses(cls, filters: FilterRequest) -> QueryClauses | None:
        """Extra clauses this resource always applies to a search.

        Called with the parsed request so that ``CONTEXT`` fields can shape
        the clauses. Returns None when the resource adds nothing.
        """
        return None


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
