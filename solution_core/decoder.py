"""Normalize a raw solver document into a fully populated ScheduleSolution shell."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

from .assignments import AssignmentIndex
from .io.reader import validate_solution_document
from .io.schemas import (
    STATS_FIELDS,
    to_bool,
    to_day_set,
    to_day_shift_pairs,
    to_float,
    to_int,
    to_number,
)
from .models import (
    Availability,
    EmployeeWishes,
    ScheduleEmployee,
    ScheduleMetadata,
    SchedulesMetadata,
    ScheduleSolution,
    ScheduleStats,
    Shift,
)
from .time_utils import parse_iso_day

logger = logging.getLogger(__name__)


def decode_solution(document: dict[str, Any]) -> ScheduleSolution:
    """Decode a raw solution document.

    Raises MalformedSolutionError if variables, employees, shifts or days is
    absent. Every other missing field is defaulted; derived wish sets are left
    empty for the analysis passes to fill.
    """
    doc = validate_solution_document(document)

    variables = doc["variables"]
    shifts = tuple(decode_shift(row) for row in doc["shifts"] if isinstance(row, dict))
    employees = tuple(decode_employee(row) for row in doc["employees"] if isinstance(row, dict))

    days = []
    for raw_day in doc["days"]:
        day = parse_iso_day(raw_day)
        if day is None:
            logger.warning("Skipping unparseable day %r in solution document", raw_day)
            continue
        days.append(day)

    return ScheduleSolution(
        employees=employees,
        shifts=shifts,
        days=tuple(days),
        variables=MappingProxyType(dict(variables)),
        assignments=AssignmentIndex(variables, shifts),
        stats=decode_stats(doc.get("stats")),
    )


def decode_shift(row: dict[str, Any]) -> Shift:
    return Shift(
        id=to_int(row.get("id")),
        name=str(row.get("name") or ""),
        abbreviation=str(row.get("abbreviation") or ""),
        color=str(row.get("color") or ""),
        duration=to_number(row.get("duration")),
        is_exclusive=to_bool(row.get("is_exclusive")),
    )


def decode_employee(row: dict[str, Any]) -> ScheduleEmployee:
    wishes = row.get("wishes") if isinstance(row.get("wishes"), dict) else {}
    return ScheduleEmployee(
        id=to_int(row.get("id")),
        name=str(row.get("name") or ""),
        level=str(row.get("level") or ""),
        target_working_time=to_number(row.get("target_working_time")),
        wishes=EmployeeWishes(
            day_off_wishes=to_day_set(wishes.get("day_off_wishes")),
            shift_wishes=to_day_shift_pairs(wishes.get("shift_wishes")),
        ),
        availability=Availability(
            vacation_days=to_day_set(row.get("vacation_days")),
            forbidden_days=to_day_set(row.get("forbidden_days")),
            vacation_shifts=to_day_shift_pairs(row.get("vacation_shifts")),
            forbidden_shifts=to_day_shift_pairs(row.get("forbidden_shifts")),
        ),
    )


def decode_stats(raw: Any) -> ScheduleStats:
    """Absent stats (or absent counters) decode to zero."""
    if not isinstance(raw, dict):
        return ScheduleStats()
    return ScheduleStats(**{name: to_float(raw.get(name)) for name in STATS_FIELDS})


def decode_schedules_metadata(raw: Any) -> SchedulesMetadata:
    """Decode the schedule listing of a case ({schedules, selectedScheduleId})."""
    if not isinstance(raw, dict):
        return SchedulesMetadata()
    schedules = []
    for row in raw.get("schedules") or []:
        if not isinstance(row, dict) or not row.get("scheduleId"):
            continue
        comment = row.get("comment")
        schedules.append(
            ScheduleMetadata(
                schedule_id=str(row["scheduleId"]),
                seed=to_int(row.get("seed")),
                generated_at=str(row.get("generatedAt") or ""),
                is_selected=to_bool(row.get("isSelected")),
                comment=str(comment) if comment is not None else None,
                stats=decode_stats(row.get("stats")),
            )
        )
    selected = raw.get("selectedScheduleId")
    return SchedulesMetadata(
        schedules=tuple(schedules),
        selected_schedule_id=str(selected) if selected else None,
    )
