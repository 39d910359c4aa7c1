"""Tests for the comparison view built from fetched schedule documents."""

import json
from pathlib import Path

import pytest

from schedule_viewer.compare import compare_schedules_impl, tag_solutions
from solution_core.decoder import decode_schedules_metadata

FIXTURE = Path(__file__).resolve().parents[2] / "solution_core" / "tests" / "fixtures" / "solution_small.json"

METADATA = decode_schedules_metadata({
    "schedules": [
        {"scheduleId": "s-1", "seed": 11},
        {"scheduleId": "s-2", "seed": 22},
    ],
})


@pytest.fixture
def documents():
    first = json.loads(FIXTURE.read_text(encoding="utf-8"))
    second = json.loads(FIXTURE.read_text(encoding="utf-8"))
    # employee 9 only exists in the first schedule
    second["employees"] = [e for e in second["employees"] if e["id"] != 9]
    second["stats"] = {"violated_wish_total": 1}
    return [("s-1", first), ("s-2", second)]


class TestTagSolutions:
    def test_seeds_attached(self, documents):
        tagged = tag_solutions(documents, METADATA)
        assert [(sid, seed) for sid, seed, _ in tagged] == [("s-1", 11), ("s-2", 22)]

    def test_documents_without_solution_dropped(self, documents):
        tagged = tag_solutions(documents + [("s-3", None)], METADATA)
        assert len(tagged) == 2

    def test_unknown_seed_defaults_to_zero(self, documents):
        tagged = tag_solutions([("s-x", documents[0][1])], METADATA)
        assert tagged[0][1] == 0


class TestCompareSchedules:
    def test_groups_and_hours(self, documents):
        result = compare_schedules_impl(tag_solutions(documents, METADATA))
        groups = {g["employee_id"]: g for g in result["groups"]}
        assert len(groups[7]["entries"]) == 2
        assert len(groups[9]["entries"]) == 1
        assert groups[7]["entries"][1]["seed"] == 22
        assert groups[7]["entries"][0]["hours"]["total_shifts"] == 3
        assert result["stats"]["best_schedule_id"] == "s-2"
        assert result["empty"] is False

    def test_query_filter(self, documents):
        result = compare_schedules_impl(tag_solutions(documents, METADATA), query="omer")
        assert [g["employee_id"] for g in result["groups"]] == [9]

    def test_nothing_to_compare(self):
        result = compare_schedules_impl([])
        assert result["empty"] is True
        assert result["groups"] == []
