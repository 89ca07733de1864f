"""PositionService over a populated store, including failure paths."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from hrdash.core.models.enums import FilterType
from hrdash.core.models.interview import Interview, InterviewResponse
from hrdash.core.storage.object_store import ObjectStore
from hrdash.services.positions import PositionService

BASE_TIME = datetime(2024, 6, 1, tzinfo=timezone.utc)
SCORES = [95, 90, 88, 85, 80, 75, 70, 60]
STATUSES = ["SELECTED", "POTENTIAL", None, "NOT_SELECTED", "SELECTED", "NO_STATUS", "POTENTIAL", "bogus"]


@pytest.fixture
def store(tmp_path):
    store = ObjectStore(tmp_path / "store")
    store.save_interview(
        Interview(id="int1", name="Backend Engineer", organization_id="org1", created_at=BASE_TIME)
    )
    store.save_interview(
        Interview(
            id="int2",
            name="Data Analyst",
            organization_id="org1",
            created_at=BASE_TIME + timedelta(days=2),
        )
    )
    for idx, (score, status) in enumerate(zip(SCORES, STATUSES)):
        store.save_response(
            InterviewResponse(
                id=f"r{idx}",
                interview_id="int1",
                call_id=f"call_{idx}",
                name=f"Candidate {idx}",
                candidate_status=status,
                # lower scores are newer, so list order differs from score order
                created_at=BASE_TIME + timedelta(hours=idx),
                analytics={"overallScore": score},
            )
        )
    store.save_response(
        InterviewResponse(id="open", interview_id="int1", call_id="call_open", is_ended=False)
    )
    return store


def test_list_positions_counts(store):
    service = PositionService(store)

    positions = service.list_positions(organization_id="org1")

    assert [p.id for p in positions] == ["int2", "int1"]
    backend = positions[1]
    assert backend.interview_id == "int1"
    assert backend.total_candidates == 8
    assert backend.hired_count == 2
    assert backend.interviewed_count == 2
    assert backend.rejected_count == 1
    assert backend.pending_count == 3
    assert positions[0].total_candidates == 0


def test_get_position(store):
    service = PositionService(store)
    assert service.get_position("int1").name == "Backend Engineer"
    assert service.get_position("missing") is None


def test_candidates_newest_first_and_filters(store):
    service = PositionService(store)

    everyone = service.get_candidates("int1")
    assert [c.id for c in everyone] == [f"r{i}" for i in reversed(range(8))]
    assert all(c.interview_id == "int1" for c in everyone)

    top5 = service.get_candidates("int1", FilterType.TOP_5)
    assert [c.score for c in top5] == [95, 90, 88, 85, 80]

    selected = service.get_candidates("int1", "selected")
    assert [c.id for c in selected] == ["r4", "r0"]


def test_stats(store):
    stats = PositionService(store).get_position_stats("int1")
    assert stats.total_candidates == 8
    assert stats.average_score == 80  # 643 / 8 = 80.375
    assert [c.score for c in stats.top_performers] == [95, 90, 88, 85, 80]


def test_corrupt_data_degrades_to_empty(store):
    service = PositionService(store)
    (store.base_dir / "responses" / "int1" / "r0.json").write_text("{not json", encoding="utf-8")

    assert service.get_candidates("int1") == []
    assert service.get_position_stats("int1").total_candidates == 0
    position = service.get_position("int1")
    assert position is not None
    assert position.total_candidates == 0


def test_corrupt_interview_listing(store):
    (store.base_dir / "interviews" / "broken.json").write_text("[", encoding="utf-8")
    assert PositionService(store).list_positions() == []


def test_infinite_score_in_stored_row(store):
    path = store.base_dir / "responses" / "int1" / "r0.json"
    row = json.loads(path.read_text(encoding="utf-8"))
    row["analytics"]["overallScore"] = float("inf")
    path.write_text(json.dumps(row), encoding="utf-8")
    assert "Infinity" in path.read_text(encoding="utf-8")
    service = PositionService(store)

    candidates = service.get_candidates("int1")

    assert len(candidates) == 8
    assert next(c for c in candidates if c.id == "r0").score == 0
    assert service.get_position_stats("int1").total_candidates == 8


def test_non_object_row_degrades_to_empty(store):
    (store.base_dir / "responses" / "int1" / "r1.json").write_text("[1, 2]", encoding="utf-8")
    (store.base_dir / "interviews" / "int2.json").write_text("[1, 2]", encoding="utf-8")
    service = PositionService(store)

    assert service.get_candidates("int1") == []
    assert service.get_position("int1").total_candidates == 0
    assert service.get_position("int2") is None
    assert service.list_positions() == []
    # call-id lookups skip rows that are not objects
    assert store.load_response_by_call_id("call_2").id == "r2"
