"""Integration test fixtures — a Docker-based OpenSearch seeded with talents and scores.

Expects OpenSearch to be running, e.g.:
    docker run -p 9201:9200 -e discovery.type=single-node -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Seed data is loaded on first use.
"""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

OPENSEARCH_HOST = "http://localhost:9201"
TALENT_INDEX = "it-talents"
SCORE_INDEX = "it-scores"

_NOW = datetime.now(UTC).replace(microsecond=0)
LIVE_BATCH = (_NOW - timedelta(days=2), _NOW + timedelta(days=12))
PAST_BATCH = (_NOW - timedelta(days=40), _NOW - timedelta(days=26))


def _talent(talent_id: int, batch: tuple[datetime, datetime], **fields: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "id": talent_id,
        "accepted": True,
        "desired_work_roles": [],
        "work_locations": [],
        "skills": [],
        "summary": "",
        "headline": "",
        "contacted_company_ids": [],
        "blocked_companies": [],
        "languages": [],
        "batch_starts_at": batch[0].isoformat(),
        "batch_ends_at": batch[1].isoformat(),
        "added_to_batch_at": batch[0].isoformat(),
        "weight": 0,
    }
    doc.update(fields)
    return doc


MOCK_TALENTS: list[dict[str, Any]] = [
    _talent(
        1,
        LIVE_BATCH,
        desired_work_roles=["DevOps"],
        work_locations=["Berlin"],
        skills=["Rust", "Kubernetes"],
        headline="Rust engineer",
        languages=["English", "German"],
        weight=5,
    ),
    _talent(
        2,
        LIVE_BATCH,
        desired_work_roles=["Frontend"],
        work_locations=["Berlin", "Remote"],
        skills=["TypeScript"],
        headline="Frontend developer",
        languages=["English"],
        contacted_company_ids=[77],
    ),
    _talent(3, LIVE_BATCH, accepted=False, desired_work_roles=["DevOps"], headline="Pending review"),
    _talent(4, PAST_BATCH, desired_work_roles=["DevOps"], headline="Previous batch"),
    _talent(5, LIVE_BATCH, desired_work_roles=["DevOps"], headline="Site reliability engineer", blocked_companies=[77]),
]

MOCK_SCORES: list[dict[str, Any]] = [
    {"request_id": "r-1", "job_id": 10, "talent_id": 1, "score": 0.91},
    {"request_id": "r-2", "job_id": 10, "talent_id": 2, "score": 0.42},
    {"request_id": "r-3", "job_id": 11, "talent_id": 1, "score": 0.77},
]

_TEXT = {"type": "text", "fields": {"raw": {"type": "keyword"}}}

TALENT_MAPPING = {
    "mappings": {
        "properties": {
            "id": {"type": "integer"},
            "accepted": {"type": "boolean"},
            "desired_work_roles": _TEXT,
            "work_locations": {"type": "keyword"},
            "languages": {"type": "keyword"},
            "skills": _TEXT,
            "summary": _TEXT,
            "headline": _TEXT,
            "work_experiences": _TEXT,
            "educations": _TEXT,
            "contacted_company_ids": {"type": "integer"},
            "blocked_companies": {"type": "integer"},
            "batch_starts_at": {"type": "date"},
            "batch_ends_at": {"type": "date"},
            "added_to_batch_at": {"type": "date"},
            "weight": {"type": "integer"},
        }
    }
}


def _wait_for_service(url: str, timeout: float = 120.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=30)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed_index(
    client: httpx.AsyncClient, index: str, mapping: dict[str, Any] | None, docs: list[dict], id_key: str
) -> None:
    await client.delete(f"/{index}", params={"ignore_unavailable": "true"})
    resp = await client.put(f"/{index}", json=mapping) if mapping else await client.put(f"/{index}")
    resp.raise_for_status()
    for doc in docs:
        resp = await client.put(f"/{index}/_doc/{doc[id_key]}", json=doc)
        resp.raise_for_status()
    await client.post(f"/{index}/_refresh")


async def _seed_opensearch(host: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await _seed_index(client, TALENT_INDEX, TALENT_MAPPING, MOCK_TALENTS, "id")
        # scores rely on dynamic mapping, as deployed
        await _seed_index(client, SCORE_INDEX, None, MOCK_SCORES, "request_id")


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    if not _wait_for_service(OPENSEARCH_HOST, timeout=30.0):
        pytest.skip(f"OpenSearch not available at {OPENSEARCH_HOST}")
    asyncio.run(_seed_opensearch(OPENSEARCH_HOST))
    return OPENSEARCH_HOST


@pytest.fixture(scope="session")
def seeded_indexes() -> dict[str, str]:
    """Resource endpoint to seeded index name."""
    return {"talents": TALENT_INDEX, "scores": SCORE_INDEX}
