"""Tests for the read-only schedule service client (httpx.MockTransport)."""

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from schedule_viewer.schedule_client import ReadOnlyScheduleClient, ScheduleFetchError

FIXTURE = Path(__file__).resolve().parents[2] / "solution_core" / "tests" / "fixtures" / "solution_small.json"
BASE_URL = "http://schedules.test/api"

METADATA = {
    "schedules": [
        {"scheduleId": "s-1", "seed": 11, "isSelected": True, "stats": {"violated_wish_total": 2}},
        {"scheduleId": "s-2", "seed": 22, "isSelected": False, "stats": {}},
    ],
    "selectedScheduleId": "s-1",
}


def _solution():
    return json.loads(FIXTURE.read_text(encoding="utf-8"))


def _client(handler, retries=1):
    return ReadOnlyScheduleClient(
        base_url=BASE_URL, retries=retries, transport=httpx.MockTransport(handler),
    )


def _service(missing=(), empty=(), seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        path = request.url.path
        if path == "/api/schedule":
            return httpx.Response(200, json=METADATA)
        schedule_id = path.rsplit("/", 1)[-1]
        if schedule_id in missing:
            return httpx.Response(404, json={"error": "Schedule not found"})
        if schedule_id in empty:
            return httpx.Response(200, json={"solution": None})
        return httpx.Response(200, json={"solution": _solution()})

    return handler


class TestSyncRequests:
    def test_metadata_sends_case_header(self):
        seen = []
        meta = _client(_service(seen=seen)).fetch_schedules_metadata(3)
        assert [m.schedule_id for m in meta.schedules] == ["s-1", "s-2"]
        assert meta.selected_schedule_id == "s-1"
        assert seen[0].headers["x-case-id"] == "3"
        assert seen[0].url.path == "/api/schedule"

    def test_fetch_solution(self):
        doc = _client(_service()).fetch_solution(3, "s-1")
        assert set(doc) >= {"variables", "employees", "shifts", "days"}

    def test_selected_schedule_path(self):
        seen = []
        _client(_service(seen=seen)).fetch_selected_solution(3)
        assert seen[0].url.path == "/api/schedule/selected"

    def test_null_solution(self):
        assert _client(_service(empty={"s-2"})).fetch_solution(3, "s-2") is None

    def test_not_found_raises(self):
        with pytest.raises(httpx.HTTPStatusError):
            _client(_service(missing={"s-9"})).fetch_solution(3, "s-9")

    def test_unknown_operation_rejected(self):
        client = _client(_service())
        with pytest.raises(ValueError, match="not allowed"):
            client._request(operation="delete_schedule", case_id=3)

    def test_server_errors_are_retried(self, monkeypatch):
        monkeypatch.setattr("schedule_viewer.schedule_client.sleep", lambda s: None)
        calls = []

        def flaky(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json=METADATA)

        meta = _client(flaky, retries=2).fetch_schedules_metadata(1)
        assert len(calls) == 2
        assert len(meta.schedules) == 2


class TestBatchFetch:
    def test_preserves_input_order(self):
        docs = asyncio.run(_client(_service()).fetch_solutions(3, ["s-2", "s-1"]))
        assert [sid for sid, _ in docs] == ["s-2", "s-1"]
        assert all(doc is not None for _, doc in docs)

    def test_empty_batch(self):
        assert asyncio.run(_client(_service()).fetch_solutions(3, [])) == []

    def test_null_solutions_kept_as_none(self):
        docs = asyncio.run(_client(_service(empty={"s-2"})).fetch_solutions(3, ["s-1", "s-2"]))
        assert docs[1] == ("s-2", None)

    def test_single_failure_fails_whole_batch(self):
        client = _client(_service(missing={"s-2"}))
        with pytest.raises(ScheduleFetchError) as excinfo:
            asyncio.run(client.fetch_solutions(3, ["s-1", "s-2", "s-3"]))
        assert list(excinfo.value.failed) == ["s-2"]
        assert "s-2" in str(excinfo.value)
