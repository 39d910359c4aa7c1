from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import sleep
from typing import Any

import httpx

from solution_core.decoder import decode_schedules_metadata
from solution_core.models import SchedulesMetadata

logger = logging.getLogger(__name__)

CASE_HEADER = "x-case-id"


class ScheduleFetchError(RuntimeError):
    """One or more schedule documents could not be fetched.

    Raised for the whole batch; no partial comparison is produced.
    """

    def __init__(self, failed: dict[str, BaseException]):
        self.failed = dict(failed)
        ids = ", ".join(sorted(self.failed))
        super().__init__(f"Failed to fetch schedule(s): {ids}")


@dataclass(frozen=True)
class ReadOperation:
    method: str
    path_template: str


READ_ONLY_OPERATIONS: dict[str, ReadOperation] = {
    "schedules_metadata": ReadOperation("GET", "/schedule"),
    "selected_schedule": ReadOperation("GET", "/schedule/selected"),
    "schedule": ReadOperation("GET", "/schedule/{schedule_id}"),
}


def _should_retry(exc: BaseException) -> bool:
    if isinstance(exc, (httpx.TimeoutException, httpx.ConnectError)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class ReadOnlyScheduleClient:
    """Read-only client for the schedule service.

    Only the operation names listed in READ_ONLY_OPERATIONS are executable.
    Any unknown operation is rejected before any network request is sent.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_s: float = 30.0,
        retries: int = 3,
        transport: Any = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.retries = max(1, retries)
        # httpx.MockTransport in tests; serves both the sync and async client.
        self._transport = transport

    def _prepare(self, operation: str, case_id: int, path_params: dict[str, str]) -> tuple[str, str, dict[str, str]]:
        op = READ_ONLY_OPERATIONS.get(operation)
        if op is None:
            raise ValueError(f"Operation '{operation}' is not allowed in read-only mode")
        path = op.path_template.format(**path_params)
        headers = {CASE_HEADER: str(case_id), "Accept": "application/json"}
        return op.method, f"{self.base_url}{path}", headers

    def _request(self, *, operation: str, case_id: int, **path_params: str) -> httpx.Response:
        method, url, headers = self._prepare(operation, case_id, path_params)

        for attempt in range(self.retries):
            try:
                with httpx.Client(transport=self._transport, timeout=self.timeout_s) as client:
                    resp = client.request(method, url, headers=headers)
                resp.raise_for_status()
                return resp
            except (httpx.TimeoutException, httpx.ConnectError, httpx.HTTPStatusError) as exc:
                if _should_retry(exc) and attempt < self.retries - 1:
                    logger.warning("GET %s failed (%s), retrying in %ds", url, exc, 2**attempt)
                    sleep(2**attempt)
                    continue
                raise
        raise RuntimeError("request failed without an explicit exception")

    async def _request_async(
        self,
        client: httpx.AsyncClient,
        *,
        operation: str,
        case_id: int,
        **path_params: str,
    ) -> httpx.Response:
        method, url, headers = self._prepare(operation, case_id, path_params)

        for attempt in range(self.retries):
            try:
                resp = await client.request(method, url, headers=headers)
                resp.raise_for_status()
                return resp
            except (httpx.TimeoutException, httpx.ConnectError, httpx.HTTPStatusError) as exc:
                if _should_retry(exc) and attempt < self.retries - 1:
                    logger.warning("GET %s failed (%s), retrying in %ds", url, exc, 2**attempt)
                    await asyncio.sleep(2**attempt)
                    continue
                raise
        raise RuntimeError("request failed without an explicit exception")

    def fetch_schedules_metadata(self, case_id: int) -> SchedulesMetadata:
        resp = self._request(operation="schedules_metadata", case_id=case_id)
        return decode_schedules_metadata(resp.json())

    def fetch_solution(self, case_id: int, schedule_id: str) -> dict[str, Any] | None:
        """Raw solution document of one schedule, or None if it has none yet."""
        resp = self._request(operation="schedule", case_id=case_id, schedule_id=schedule_id)
        return _solution_of(resp.json())

    def fetch_selected_solution(self, case_id: int) -> dict[str, Any] | None:
        resp = self._request(operation="selected_schedule", case_id=case_id)
        return _solution_of(resp.json())

    async def fetch_solutions(
        self,
        case_id: int,
        schedule_ids: list[str],
    ) -> list[tuple[str, dict[str, Any] | None]]:
        """Fetch several schedules concurrently, preserving input order.

        Waits for every request; if any failed, raises ScheduleFetchError for
        the whole batch.
        """
        if not schedule_ids:
            return []
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s) as client:
            return await self._gather_solutions(client, case_id, schedule_ids)

    async def fetch_comparison(
        self,
        case_id: int,
        schedule_ids: list[str],
    ) -> tuple[SchedulesMetadata, list[tuple[str, dict[str, Any] | None]]]:
        """Schedule listing plus the requested documents, over one async client."""
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s) as client:
            resp = await self._request_async(client, operation="schedules_metadata", case_id=case_id)
            metadata = decode_schedules_metadata(resp.json())
            if not schedule_ids:
                return metadata, []
            documents = await self._gather_solutions(client, case_id, schedule_ids)
        return metadata, documents

    async def _gather_solutions(
        self,
        client: httpx.AsyncClient,
        case_id: int,
        schedule_ids: list[str],
    ) -> list[tuple[str, dict[str, Any] | None]]:
        results = await asyncio.gather(
            *(
                self._request_async(
                    client, operation="schedule", case_id=case_id, schedule_id=sid
                )
                for sid in schedule_ids
            ),
            return_exceptions=True,
        )

        failed: dict[str, BaseException] = {}
        documents: list[tuple[str, dict[str, Any] | None]] = []
        for sid, result in zip(schedule_ids, results):
            if isinstance(result, BaseException):
                failed[sid] = result
                continue
            try:
                documents.append((sid, _solution_of(result.json())))
            except ValueError as exc:
                failed[sid] = exc

        if failed:
            for sid, exc in failed.items():
                logger.error("Fetching schedule %s failed: %s", sid, exc)
            raise ScheduleFetchError(failed) from next(iter(failed.values()))
        return documents


def _solution_of(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    solution = payload.get("solution")
    return solution if isinstance(solution, dict) else None
