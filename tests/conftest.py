"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import Field

from searchspot.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from searchspot.config.settings import Settings
from searchspot.core.engine import SearchspotEngine
from searchspot.resources.base import FieldKind, FieldSpec, Resource, ResourceSchema, SortSpec


class Profile(Resource):
    """Minimal resource covering every field kind."""

    index = "test-profiles"

    id: int
    name: str
    bio: str = ""
    work_roles: list[str] = Field(default_factory=list)
    open_to_relocation: bool = False
    joined_at: str = ""
    salary: int = 0

    @classmethod
    def search_schema(cls) -> ResourceSchema:
        return ResourceSchema(
            fields=(
                FieldSpec(name="name", kind=FieldKind.FULL_TEXT, boost=2.0, raw_field="name.raw"),
                FieldSpec(name="bio", kind=FieldKind.FULL_TEXT, raw_field="bio.raw"),
                FieldSpec(name="work_roles", kind=FieldKind.KEYWORD),
                FieldSpec(name="open_to_relocation", kind=FieldKind.BOOLEAN),
                FieldSpec(name="joined_at", kind=FieldKind.DATE),
                FieldSpec(name="salary", kind=FieldKind.NUMERIC),
                FieldSpec(name="skip_ids", kind=FieldKind.EXCLUDE, field="id", item_type=int),
            ),
        )


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def auth_settings() -> Settings:
    """Settings with token authentication turned on."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        auth={"enabled": True, "read": "read-secret", "write": "write-secret"},
    )


@pytest.fixture
def profile_resource() -> type[Profile]:
    return Profile


@pytest.fixture
def profile_schema() -> ResourceSchema:
    return Profile.search_schema()


@pytest.fixture
def sorted_schema(profile_schema: ResourceSchema) -> ResourceSchema:
    """Profile schema with a default sort, like the talent resource."""
    return profile_schema.model_copy(update={"default_sort": (SortSpec(field="joined_at", unmapped_type="date"),)})


@pytest.fixture
def profile_hit() -> dict[str, Any]:
    """Raw engine hit of one profile."""
    return {
        "_index": "test-profiles",
        "_id": "7",
        "_score": 3.2,
        "_source": {
            "id": 7,
            "name": "Ada Lovelace",
            "bio": "Rust engineer and DevOps enthusiast",
            "work_roles": ["DevOps", "Backend"],
            "open_to_relocation": True,
            "joined_at": "2024-05-01T00:00:00+00:00",
            "salary": 70000,
        },
        "highlight": {"bio": ["Rust engineer"]},
    }


@pytest.fixture
def mock_adapter() -> MagicMock:
    """Search adapter double returning no hits."""
    adapter = MagicMock(spec=SearchAdapter)
    adapter.name = "mock"
    adapter.initialize = AsyncMock()
    adapter.shutdown = AsyncMock()
    adapter.search = AsyncMock(return_value=RawResults())
    adapter.delete_document = AsyncMock()
    adapter.health_check = AsyncMock(return_value=AdapterHealth(status="healthy", message="mock"))
    return adapter


@pytest.fixture
def engine(settings: Settings, mock_adapter: MagicMock) -> SearchspotEngine:
    engine = SearchspotEngine(settings, adapter=mock_adapter)
    engine.register("profiles", Profile)
    return engine
