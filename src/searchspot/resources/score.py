"""Score resource — matching scores between a talent and a job."""

from __future__ import annotations

from searchspot.resources.base import FieldKind, FieldSpec, Resource, ResourceSchema


class Score(Resource):
    """One computed talent/job match score."""

    index = "searchspot_scores"

    request_id: str
    person_id: str | None = None
    company_id: str | None = None
    position_id: str | None = None
    job_id: int
    talent_id: int
    score: float

    @classmethod
    def search_schema(cls) -> ResourceSchema:
        return SCORE_SCHEMA


SCORE_SCHEMA = ResourceSchema(
    fields=(
        FieldSpec(name="job_id", kind=FieldKind.KEYWORD, item_type=int),
        FieldSpec(name="talent_id", kind=FieldKind.KEYWORD, item_type=int),
        FieldSpec(name="score", kind=FieldKind.NUMERIC),
    ),
    # Score indexes use dynamic mapping, which maps string ids to text with a
    # keyword sub-field. Text fields cannot be sorted on.
    id_field="request_id.keyword",
)
