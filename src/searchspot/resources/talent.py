"""Talent resource — candidate profiles searched by companies.

Besides the request filters, every talent search applies visibility rules: a
talent shows up only once accepted and while their batch is live. Talents
already presented to the searching company stay visible regardless.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from searchspot.models.query import Clause, QueryClauses
from searchspot.resources.base import FieldKind, FieldSpec, Resource, ResourceSchema, SortSpec

if TYPE_CHECKING:
    from searchspot.models.filters import FilterRequest

MIN_SCORE = 0.56

FULL_TEXT_FIELDS = ("skills", "summary", "headline", "desired_work_roles", "work_experiences", "educations")
BOOSTED = {"summary": 2.0, "headline": 2.0}


class SalaryExpectations(BaseModel):
    minimum: int | None = None
    maximum: int | None = None
    currency: str = ""
    city: str = ""


class RolesExperience(BaseModel):
    """A desired role paired with the experience the talent has in it."""

    role: str
    experience: str = ""


class Talent(Resource):
    """A talent as stored in the index."""

    index = "searchspot_talents"

    id: int
    accepted: bool
    desired_work_roles: list[str] = Field(default_factory=list)
    desired_work_roles_experience: list[str] = Field(default_factory=list)
    professional_experience: str = ""
    work_locations: list[str] = Field(default_factory=list)
    current_location: str = ""
    work_authorization: str = ""
    skills: list[str] = Field(default_factory=list)
    summary: str = ""
    headline: str = ""
    contacted_company_ids: list[int] = Field(default_factory=list)
    batch_starts_at: str
    batch_ends_at: str
    added_to_batch_at: str = ""
    weight: int = 0
    blocked_companies: list[int] = Field(default_factory=list)
    work_experiences: list[str] = Field(default_factory=list)
    avatar_url: str = ""
    salary_expectations: list[SalaryExpectations] = Field(default_factory=list)
    latest_position: str = ""
    languages: list[str] = Field(default_factory=list)
    educations: list[str] = Field(default_factory=list)

    @classmethod
    def search_schema(cls) -> ResourceSchema:
        return TALENT_SCHEMA

    @property
    def roles_experiences(self) -> list[RolesExperience]:
        experiences = self.desired_work_roles_experience
        return [
            RolesExperience(role=role, experience=experiences[i] if i < len(experiences) else "")
            for i, role in enumerate(self.desired_work_roles)
        ]

    def to_response(self) -> dict[str, Any]:
        """Limited view shown to companies."""
        return {
            "id": self.id,
            "headline": self.headline,
            "avatar_url": self.avatar_url,
            "work_locations": list(self.work_locations),
            "current_location": self.current_location,
            "salary_expectations": [s.model_dump() for s in self.salary_expectations],
            "roles_experiences": [r.model_dump() for r in self.roles_experiences],
            "latest_position": self.latest_position,
            "batch_starts_at": self.batch_starts_at,
        }

    @classmethod
    def scope_clauses(cls, filters: FilterRequest) -> QueryClauses:
        """Visibility rules for the batch live at the request's epoch.

        An explicit ``epoch`` parameter selects the batch starting exactly at
        that instant instead of the batch running at request time.
        """
        epochs = filters.values("epoch")
        if epochs:
            visible = _bool_must(
                {"term": {"accepted": True}},
                {"term": {"batch_starts_at": epochs[0].isoformat()}},
            )
        else:
            epoch = filters.issued_at.isoformat()
            visible = _bool_must(
                {"term": {"accepted": True}},
                {"range": {"batch_starts_at": {"lte": epoch, "format": "strict_date_optional_time"}}},
                {"range": {"batch_ends_at": {"gte": epoch, "format": "strict_date_optional_time"}}},
            )

        presented = filters.values("presented_talents")
        if presented:
            return QueryClauses(should=(visible, {"terms": {"id": list(presented)}}))
        return QueryClauses(filter=(visible,))


def _bool_must(*clauses: Clause) -> Clause:
    return {"bool": {"must": list(clauses)}}


TALENT_SCHEMA = ResourceSchema(
    fields=(
        *(
            FieldSpec(name=name, kind=FieldKind.FULL_TEXT, boost=BOOSTED.get(name), raw_field=f"{name}.raw")
            for name in FULL_TEXT_FIELDS
        ),
        FieldSpec(name="desired_work_roles", kind=FieldKind.KEYWORD, field="desired_work_roles.raw"),
        FieldSpec(name="professional_experience", kind=FieldKind.KEYWORD),
        FieldSpec(name="work_authorization", kind=FieldKind.KEYWORD),
        FieldSpec(name="work_locations", kind=FieldKind.KEYWORD),
        FieldSpec(name="current_location", kind=FieldKind.KEYWORD),
        FieldSpec(name="languages", kind=FieldKind.KEYWORD, match_all=True),
        FieldSpec(name="bookmarked_talents", kind=FieldKind.KEYWORD, field="id", item_type=int, sortable=False),
        FieldSpec(name="batch_starts_at", kind=FieldKind.DATE),
        FieldSpec(name="weight", kind=FieldKind.NUMERIC),
        FieldSpec(
            name="company_id",
            kind=FieldKind.EXCLUDE,
            field="contacted_company_ids",
            extra_fields=("blocked_companies",),
            item_type=int,
        ),
        FieldSpec(name="contacted_talents", kind=FieldKind.EXCLUDE, field="id", item_type=int),
        FieldSpec(name="ignored_talents", kind=FieldKind.EXCLUDE, field="id", item_type=int),
        FieldSpec(name="presented_talents", kind=FieldKind.CONTEXT, item_type=int),
        FieldSpec(name="epoch", kind=FieldKind.CONTEXT, item_type=datetime),
    ),
    text_param="keywords",
    default_sort=(
        SortSpec(field="batch_starts_at", unmapped_type="date"),
        SortSpec(field="weight", unmapped_type="integer"),
        SortSpec(field="added_to_batch_at", unmapped_type="date"),
    ),
    highlight=True,
    min_score=MIN_SCORE,
)
