"""Query builder — translate a FilterRequest into a QueryDescription.

Pure and deterministic: the same filters and schema always produce the same
description, and nothing here performs I/O. Clause order follows the order
fields are declared in the schema.

Translation rules:
  - keyword lists → one ``terms`` filter per field (any value matches;
    every field must match), or one ``term`` per value for match-all fields
  - booleans → ``term`` filter
  - date / numeric ranges → ``range`` filter with only the bounds given
  - exclusions → ``must_not`` ``terms`` on each target field
  - free text → scored ``multi_match`` across all full-text fields
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from searchspot.models.filters import DateRange, FilterRequest, NumericRange
from searchspot.models.query import Clause, QueryClauses, QueryDescription
from searchspot.resources.base import FieldKind, FieldSpec, ResourceSchema

SCORE_SORT: Clause = {"_score": {"order": "desc"}}


def build_query(
    filters: FilterRequest,
    schema: ResourceSchema,
    scope: QueryClauses | None = None,
) -> QueryDescription:
    """Build the engine query for ``filters``.

    Args:
        filters: Parsed request constraints.
        schema: Field declarations of the searched resource.
        scope: Clauses the resource always applies, merged after the
            request's own clauses.

    Returns:
        The immutable query description.
    """
    must: list[Clause] = []
    filter_: list[Clause] = []
    must_not: list[Clause] = []

    if filters.text:
        must.append(full_text_clause(filters.text, schema))

    for spec in schema.fields:
        if spec.name not in filters.constraints:
            continue
        value = filters.constraints[spec.name]

        if spec.kind is FieldKind.KEYWORD:
            if spec.match_all:
                filter_.extend({"term": {spec.target: item}} for item in value)
            else:
                filter_.append(terms_clause(spec.target, value))
        elif spec.kind is FieldKind.BOOLEAN:
            filter_.append({"term": {spec.target: value}})
        elif spec.is_range:
            filter_.append(range_clause(spec.target, value))
        elif spec.kind is FieldKind.EXCLUDE:
            must_not.extend(terms_clause(target, value) for target in spec.targets)

    clauses = QueryClauses(must=tuple(must), filter=tuple(filter_), must_not=tuple(must_not))

    return QueryDescription(
        clauses=clauses.merge(scope),
        sort=tuple(_sort(filters, schema)),
        from_=filters.offset,
        size=filters.limit,
        highlight=_highlight(filters.text, schema) if filters.text and schema.highlight else None,
        min_score=schema.min_score if filters.text else None,
    )


def terms_clause(field: str, values: tuple[Any, ...] | list[Any]) -> Clause:
    """``terms`` clause matching documents holding any of ``values``."""
    return {"terms": {field: [_json_value(v) for v in values]}}


def range_clause(field: str, value: DateRange | NumericRange) -> Clause:
    """``range`` clause with only the bounds that are set."""
    bounds: dict[str, Any] = {}
    if value.gte is not None:
        bounds["gte"] = _json_value(value.gte)
    if value.lte is not None:
        bounds["lte"] = _json_value(value.lte)
    return {"range": {field: bounds}}


def full_text_clause(text: str, schema: ResourceSchema) -> Clause:
    """Scored match of ``text`` across every full-text field.

    Text containing double quotes is matched as a phrase against the raw
    sub-fields, where the schema declares them.
    """
    quoted = '"' in text
    fields = [_text_field(spec, quoted) for spec in schema.full_text_fields]
    if quoted:
        return {"multi_match": {"query": text.replace('"', "").strip(), "fields": fields, "type": "phrase"}}
    return {"multi_match": {"query": text, "fields": fields, "type": "best_fields"}}


# ── Helpers ──────────────────────────────────────────────────────────────


def _text_field(spec: FieldSpec, quoted: bool) -> str:
    name = spec.raw_field if quoted and spec.raw_field else spec.target
    return f"{name}^{spec.boost:g}" if spec.boost else name


def _sort(filters: FilterRequest, schema: ResourceSchema) -> list[Clause]:
    if filters.order_by:
        spec = schema.get(filters.order_by)
        target = spec.target if spec else filters.order_by
        sort = [{target: {"order": filters.order}}]
    elif filters.text or not schema.default_sort:
        sort = [SCORE_SORT]
    else:
        sort = [entry.to_clause() for entry in schema.default_sort]

    if not any(schema.id_field in entry for entry in sort):
        sort.append({schema.id_field: {"order": "asc"}})
    return sort


def _highlight(text: str | None, schema: ResourceSchema) -> Clause:
    quoted = text is not None and '"' in text
    settings = {"type": "plain", "fragment_size": 1}
    return {
        "encoder": "html",
        "pre_tags": [""],
        "post_tags": [""],
        "fields": {
            (spec.raw_field if quoted and spec.raw_field else spec.target): dict(settings)
            for spec in schema.full_text_fields
        },
    }


def _json_value(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value
