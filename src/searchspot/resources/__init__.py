"""Searchable resources and the capability contract they implement."""

from searchspot.resources.base import FieldKind, FieldSpec, Resource, ResourceSchema, SortSpec
from searchspot.resources.score import Score
from searchspot.resources.talent import Talent

DEFAULT_RESOURCES: dict[str, type[Resource]] = {
    "talents": Talent,
    "scores": Score,
}

__all__ = [
    "DEFAULT_RESOURCES",
    "FieldKind",
    "FieldSpec",
    "Resource",
    "ResourceSchema",
    "Score",
    "SortSpec",
    "Talent",
]
