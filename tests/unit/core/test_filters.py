"""Tests for request filter parsing."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from searchspot.core.errors import OutOfRangeError, TypeMismatchError, UnknownFieldError
from searchspot.models.filters import MAX_LIMIT, DateRange, NumericRange, parse_filters
from searchspot.resources.base import ResourceSchema

# ── Lists and booleans ───────────────────────────────────────────────────────


class TestListAndBooleanFields:
    def test_repeated_list_values(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters(
            [("work_roles[]", "DevOps"), ("work_roles[]", "Backend")],
            profile_schema,
        )
        assert filters.constraints["work_roles"] == ("DevOps", "Backend")

    def test_list_values_are_deduplicated(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"work_roles[]": ["DevOps", "DevOps", "QA"]}, profile_schema)
        assert filters.values("work_roles") == ("DevOps", "QA")

    def test_single_value_without_brackets(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"work_roles": "DevOps"}, profile_schema)
        assert filters.values("work_roles") == ("DevOps",)

    def test_empty_list_values_are_dropped(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"work_roles[]": ["", "  "]}, profile_schema)
        assert "work_roles" not in filters.constraints

    def test_typed_list_items(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"skip_ids[]": ["3", "5"]}, profile_schema)
        assert filters.values("skip_ids") == (3, 5)

    def test_bad_typed_list_item(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"skip_ids[]": ["3", "five"]}, profile_schema)
        assert exc.value.field == "skip_ids"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("FALSE", False), ("True", True)])
    def test_boolean_is_case_insensitive(self, profile_schema: ResourceSchema, raw: str, expected: bool) -> None:
        filters = parse_filters({"open_to_relocation": raw}, profile_schema)
        assert filters.constraints["open_to_relocation"] is expected

    @pytest.mark.parametrize("raw", ["yes", "1", ""])
    def test_boolean_rejects_other_literals(self, profile_schema: ResourceSchema, raw: str) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"open_to_relocation": raw}, profile_schema)
        assert exc.value.field == "open_to_relocation"


# ── Ranges ───────────────────────────────────────────────────────────────────


class TestRangeFields:
    def test_date_range_both_bounds(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters(
            {"joined_at_from": "2024-01-01T00:00:00Z", "joined_at_until": "2024-12-31T00:00:00Z"},
            profile_schema,
        )
        value = filters.constraints["joined_at"]
        assert isinstance(value, DateRange)
        assert value.gte == datetime(2024, 1, 1, tzinfo=UTC)
        assert value.lte == datetime(2024, 12, 31, tzinfo=UTC)

    def test_open_ended_date_range(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"joined_at_from": "2024-01-01"}, profile_schema)
        value = filters.constraints["joined_at"]
        assert value.gte == datetime(2024, 1, 1, tzinfo=UTC)
        assert value.lte is None

    def test_numeric_range(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"salary_from": "50000", "salary_until": "80000.5"}, profile_schema)
        value = filters.constraints["salary"]
        assert isinstance(value, NumericRange)
        assert value.gte == 50000
        assert value.lte == 80000.5

    def test_bad_timestamp(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"joined_at_until": "last tuesday"}, profile_schema)
        assert exc.value.field == "joined_at_until"

    def test_bad_number(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(TypeMismatchError):
            parse_filters({"salary_from": "lots"}, profile_schema)

    @pytest.mark.parametrize("raw", ["nan", "NaN", "inf", "-Infinity"])
    def test_non_finite_bound(self, profile_schema: ResourceSchema, raw: str) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters([("salary_from", raw), ("salary_until", "0.5")], profile_schema)
        assert exc.value.field == "salary_from"

    def test_non_finite_list_item(self, profile_schema: ResourceSchema) -> None:
        fields = tuple(
            spec.model_copy(update={"item_type": float}) if spec.name == "work_roles" else spec
            for spec in profile_schema.fields
        )
        schema = profile_schema.model_copy(update={"fields": fields})
        assert parse_filters({"work_roles[]": ["1.5"]}, schema).values("work_roles") == (1.5,)
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"work_roles[]": ["1.5", "nan"]}, schema)
        assert exc.value.field == "work_roles"

    def test_inverted_range(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(OutOfRangeError) as exc:
            parse_filters({"salary_from": "9", "salary_until": "1"}, profile_schema)
        assert exc.value.field == "salary"

    def test_range_name_without_suffix_is_unknown(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(UnknownFieldError):
            parse_filters({"salary": "10"}, profile_schema)


# ── Text, unknown fields ─────────────────────────────────────────────────────


class TestTextAndUnknownFields:
    def test_text(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"query": " rust engineer "}, profile_schema)
        assert filters.text == "rust engineer"

    def test_empty_text_is_absent(self, profile_schema: ResourceSchema) -> None:
        assert parse_filters({"query": ""}, profile_schema).text is None

    def test_unknown_field_rejected(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(UnknownFieldError) as exc:
            parse_filters({"colour": "blue"}, profile_schema)
        assert exc.value.field == "colour"

    def test_full_text_field_is_not_a_parameter(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(UnknownFieldError) as exc:
            parse_filters({"bio": "rust"}, profile_schema)
        assert exc.value.field == "bio"

    def test_unknown_field_ignored_when_lenient(self, profile_schema: ResourceSchema) -> None:
        lenient = profile_schema.model_copy(update={"strict": False})
        filters = parse_filters({"colour": "blue", "work_roles": "QA"}, lenient)
        assert list(filters.constraints) == ["work_roles"]
        assert filters.text is None


# ── Pagination and sorting ───────────────────────────────────────────────────


class TestPaginationAndSorting:
    def test_defaults(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({}, profile_schema)
        assert filters.offset == 0
        assert filters.limit == 10
        assert filters.order_by is None
        assert filters.order == "asc"

    @pytest.mark.parametrize(
        "limit,expected",
        [("0", 1), ("-4", 1), ("25", 25), ("1000", MAX_LIMIT)],
    )
    def test_limit_is_clamped(self, profile_schema: ResourceSchema, limit: str, expected: int) -> None:
        assert parse_filters({"limit": limit}, profile_schema).limit == expected

    def test_custom_bounds(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"limit": "70"}, profile_schema, default_limit=5, max_limit=50)
        assert filters.limit == 50
        assert parse_filters({}, profile_schema, default_limit=5).limit == 5

    def test_negative_offset_is_normalized(self, profile_schema: ResourceSchema) -> None:
        assert parse_filters({"offset": "-3"}, profile_schema).offset == 0

    def test_offset_beyond_result_window(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(OutOfRangeError) as exc:
            parse_filters({"offset": "99999999999"}, profile_schema)
        assert exc.value.field == "offset"

    def test_result_window_bound(self, profile_schema: ResourceSchema) -> None:
        assert parse_filters({"offset": "9990", "limit": "10"}, profile_schema).offset == 9990
        with pytest.raises(OutOfRangeError):
            parse_filters({"offset": "9991", "limit": "10"}, profile_schema)
        with pytest.raises(OutOfRangeError):
            parse_filters({"offset": "40", "limit": "20"}, profile_schema, max_window=50)

    def test_non_integer_offset(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"offset": "two"}, profile_schema)
        assert exc.value.field == "offset"

    def test_order_by_declared_field(self, profile_schema: ResourceSchema) -> None:
        filters = parse_filters({"order_by": "salary", "order": "DESC"}, profile_schema)
        assert filters.order_by == "salary"
        assert filters.order == "desc"

    def test_order_by_unknown_field(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(UnknownFieldError) as exc:
            parse_filters({"order_by": "shoe_size"}, profile_schema)
        assert exc.value.field == "order_by"

    def test_bad_order(self, profile_schema: ResourceSchema) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            parse_filters({"order": "sideways"}, profile_schema)
        assert exc.value.field == "order"

    def test_issued_at_is_recorded(self, profile_schema: ResourceSchema) -> None:
        now = datetime(2025, 3, 1, tzinfo=UTC)
        assert parse_filters({}, profile_schema, now=now).issued_at == now
