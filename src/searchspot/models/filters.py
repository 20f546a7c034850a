"""Filter model — typed form of one request's search constraints.

``parse_filters`` turns the untyped query-string map of an HTTP request into a
:class:`FilterRequest`, validating every parameter against the resource's
:class:`~searchspot.resources.base.ResourceSchema`:

- ``field[]=a&field[]=b`` — list fields (keyword, exclusion, context)
- ``field=true|false`` — boolean fields
- ``field_from=...&field_until=...`` — date and numeric ranges, either bound optional
- ``<text_param>=...`` — free text, matched against every full-text field
- ``offset``, ``limit``, ``order_by``, ``order`` — pagination and sorting
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from searchspot.core.errors import OutOfRangeError, TypeMismatchError, UnknownFieldError
from searchspot.resources.base import FieldKind, FieldSpec, ResourceSchema, parse_datetime

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_WINDOW = 10_000

RANGE_FROM = "_from"
RANGE_UNTIL = "_until"

RawParams = Mapping[str, Any] | Iterable[tuple[str, Any]]


class DateRange(BaseModel):
    """Inclusive date range; a missing bound leaves that side open."""

    model_config = ConfigDict(frozen=True)

    gte: datetime | None = None
    lte: datetime | None = None


class NumericRange(BaseModel):
    """Inclusive numeric range; a missing bound leaves that side open."""

    model_config = ConfigDict(frozen=True)

    gte: int | float | None = None
    lte: int | float | None = None


class FilterRequest(BaseModel):
    """Validated search constraints of a single request.

    ``constraints`` maps a schema field name to its coerced value: a tuple of
    items for list fields, a bool, a :class:`DateRange` or a
    :class:`NumericRange`. Only fields present in the request appear.
    """

    model_config = ConfigDict(frozen=True)

    constraints: dict[str, Any] = Field(default_factory=dict)
    text: str | None = None
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    order_by: str | None = None
    order: Literal["asc", "desc"] = "asc"
    issued_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def values(self, name: str) -> tuple[Any, ...]:
        """Return the list values given for ``name`` (empty when absent)."""
        value = self.constraints.get(name, ())
        return value if isinstance(value, tuple) else ()


def parse_filters(
    raw_params: RawParams,
    schema: ResourceSchema,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
    max_window: int = MAX_WINDOW,
    now: datetime | None = None,
) -> FilterRequest:
    """Validate a raw parameter map against ``schema``.

    Args:
        raw_params: Query parameters, either as a mapping (values may be
            lists) or as ``(key, value)`` pairs with repeated keys.
        schema: Declared fields of the searched resource.
        default_limit: Page size used when ``limit`` is absent.
        max_limit: Upper bound ``limit`` is clamped to.
        max_window: Deepest result ``offset + limit`` may reach.
        now: Request time recorded on the result. Defaults to the current time.

    Returns:
        The parsed FilterRequest.

    Raises:
        UnknownFieldError: A parameter is not declared (strict schemas only).
        TypeMismatchError: A value cannot be coerced to its field's kind.
        OutOfRangeError: A range's lower bound exceeds its upper bound, or the
            page window reaches past ``max_window``.
    """
    grouped = _group(raw_params)
    lookup = _parameter_lookup(schema)

    constraints: dict[str, Any] = {}
    bounds: dict[str, dict[str, Any]] = {}

    for key, values in grouped.items():
        if key in ("offset", "limit", "order_by", "order") or key == schema.text_param:
            continue

        entry = lookup.get(key)
        if entry is None:
            if schema.strict:
                raise UnknownFieldError(key)
            logger.debug("Ignoring undeclared filter parameter '%s'", key)
            continue

        spec, bound = entry
        if spec.is_range:
            raw = _single(key, values)
            if raw.strip():
                bounds.setdefault(spec.name, {})[bound] = _coerce_bound(key, spec, raw)
        elif spec.kind is FieldKind.BOOLEAN:
            constraints[spec.name] = _coerce_bool(key, _single(key, values))
        else:
            items = [_coerce_item(key, spec, v) for v in values if v.strip()]
            if items:
                constraints[spec.name] = tuple(dict.fromkeys(items))

    for name, given in bounds.items():
        spec = lookup[name + RANGE_FROM][0]
        lower, upper = given.get("gte"), given.get("lte")
        if lower is not None and upper is not None and lower > upper:
            raise OutOfRangeError(name, f"'{name}{RANGE_FROM}' is after '{name}{RANGE_UNTIL}'")
        range_cls = DateRange if spec.kind is FieldKind.DATE else NumericRange
        constraints[name] = range_cls(gte=lower, lte=upper)

    text = _parse_text(grouped, schema)
    order_by, order = _parse_order(grouped, schema)

    offset = max(0, _parse_int(grouped, "offset", 0))
    limit = min(max(1, _parse_int(grouped, "limit", default_limit)), max_limit)
    if offset + limit > max_window:
        raise OutOfRangeError("offset", f"'offset' + 'limit' must not exceed {max_window}, got {offset + limit}")

    return FilterRequest(
        constraints=constraints,
        text=text,
        offset=offset,
        limit=limit,
        order_by=order_by,
        order=order,
        issued_at=now or datetime.now(UTC),
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _group(raw_params: RawParams) -> dict[str, list[str]]:
    """Collect values per parameter, folding ``field[]`` into ``field``."""
    items = raw_params.items() if isinstance(raw_params, Mapping) else raw_params
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        name = key[:-2] if key.endswith("[]") else key
        values = value if isinstance(value, list | tuple) else [value]
        grouped.setdefault(name, []).extend(str(v) for v in values)
    return grouped


def _parameter_lookup(schema: ResourceSchema) -> dict[str, tuple[FieldSpec, str | None]]:
    lookup: dict[str, tuple[FieldSpec, str | None]] = {}
    for spec in schema.fields:
        if spec.kind is FieldKind.FULL_TEXT:
            continue
        if spec.is_range:
            lookup[spec.name + RANGE_FROM] = (spec, "gte")
            lookup[spec.name + RANGE_UNTIL] = (spec, "lte")
        else:
            lookup[spec.name] = (spec, None)
    return lookup


def _single(key: str, values: list[str]) -> str:
    if len(values) != 1:
        raise TypeMismatchError(key, f"'{key}' accepts a single value, got {len(values)}")
    return values[0]


def _coerce_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise TypeMismatchError(key, f"'{key}' must be 'true' or 'false', got '{raw}'")


def _coerce_item(key: str, spec: FieldSpec, raw: str) -> Any:
    raw = raw.strip()
    try:
        if spec.item_type is datetime:
            return _as_utc(parse_datetime(raw))
        value = spec.item_type(raw)
    except ValueError as e:
        raise TypeMismatchError(key, f"'{key}' expects {spec.item_type.__name__} values, got '{raw}'") from e
    if isinstance(value, float) and not math.isfinite(value):
        raise TypeMismatchError(key, f"'{key}' expects finite numbers, got '{raw}'")
    return value


def _coerce_bound(key: str, spec: FieldSpec, raw: str) -> Any:
    raw = raw.strip()
    if spec.kind is FieldKind.DATE:
        try:
            return _as_utc(parse_datetime(raw))
        except ValueError as e:
            raise TypeMismatchError(key, f"'{key}' must be an ISO-8601 timestamp, got '{raw}'") from e
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError as e:
        raise TypeMismatchError(key, f"'{key}' must be a number, got '{raw}'") from e
    if not math.isfinite(value):
        raise TypeMismatchError(key, f"'{key}' must be a finite number, got '{raw}'")
    return value


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _parse_text(grouped: dict[str, list[str]], schema: ResourceSchema) -> str | None:
    if schema.text_param not in grouped:
        return None
    if not schema.full_text_fields:
        if schema.strict:
            raise UnknownFieldError(schema.text_param)
        return None
    text = _single(schema.text_param, grouped[schema.text_param]).strip()
    return text or None


def _parse_int(grouped: dict[str, list[str]], key: str, default: int) -> int:
    if key not in grouped:
        return default
    raw = _single(key, grouped[key]).strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise TypeMismatchError(key, f"'{key}' must be an integer, got '{raw}'") from e


def _parse_order(grouped: dict[str, list[str]], schema: ResourceSchema) -> tuple[str | None, Literal["asc", "desc"]]:
    order: Literal["asc", "desc"] = "asc"
    if "order" in grouped:
        raw = _single("order", grouped["order"]).strip().lower()
        if raw == "asc":
            order = "asc"
        elif raw == "desc":
            order = "desc"
        else:
            raise TypeMismatchError("order", f"'order' must be 'asc' or 'desc', got '{raw}'")

    if "order_by" not in grouped:
        return None, order
    name = _single("order_by", grouped["order_by"]).strip()
    if not name:
        return None, order
    spec = schema.get(name)
    if spec is None or not spec.sortable or spec.kind in (FieldKind.EXCLUDE, FieldKind.CONTEXT):
        raise UnknownFieldError("order_by", f"Cannot order by '{name}'")
    return name, order
