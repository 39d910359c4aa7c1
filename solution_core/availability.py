"""Advisory availability checks (vacation and forbidden days/shifts).

Nothing here rejects or alters an assignment; the results only feed
highlighting in the rendering layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .models import CellKey, ScheduleEmployee, ScheduleSolution, Shift
from .time_utils import iso_day, month_days


def is_unavailable(employee: ScheduleEmployee, day: date, shift: Shift | None = None) -> bool:
    """Whole-day block when `shift` is None, otherwise a block on that shift."""
    availability = employee.availability
    if shift is None:
        return day.day in availability.blocked_days
    return (day.day, shift.abbreviation) in availability.blocked_shifts


def blocked_cells(solution: ScheduleSolution) -> frozenset[CellKey]:
    """Cells where the employee has a whole-day vacation or forbidden day."""
    cells = set()
    for employee in solution.employees:
        for day in solution.days:
            if is_unavailable(employee, day):
                cells.add(CellKey.of(employee.id, day))
    return frozenset(cells)


def blocked_shift_cells(solution: ScheduleSolution) -> dict[CellKey, tuple[str, ...]]:
    """Cells with shift-level blocks, mapped to the blocked abbreviations."""
    result: dict[CellKey, tuple[str, ...]] = {}
    for employee in solution.employees:
        for day in solution.days:
            blocked = tuple(
                s.abbreviation for s in solution.shifts if is_unavailable(employee, day, s)
            )
            if blocked:
                result[CellKey.of(employee.id, day)] = blocked
    return result


def conflicting_assignments(solution: ScheduleSolution) -> list[dict[str, Any]]:
    """Assignments that fall on a blocked day or a blocked shift."""
    conflicts: list[dict[str, Any]] = []
    for employee in solution.employees:
        for day in solution.days:
            day_blocked = is_unavailable(employee, day)
            for shift in solution.assignments.assigned_shifts(employee.id, day):
                if day_blocked or is_unavailable(employee, day, shift):
                    conflicts.append({
                        "employee_id": employee.id,
                        "employee_name": employee.name,
                        "date": iso_day(day),
                        "shift": shift.abbreviation,
                        "reason": "blocked_day" if day_blocked else "blocked_shift",
                    })
    return conflicts


# ---------------------------------------------------------------------------
# Employee calendar summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarMarker:
    title: str
    category: str  # "wish-shift" | "blocked-shift"


@dataclass(frozen=True)
class CalendarDay:
    date: str
    category: str | None = None  # "wish" | "blocked" | None
    markers: tuple[CalendarMarker, ...] = field(default_factory=tuple)


def employee_calendar(employee: ScheduleEmployee, year: int, month: int) -> list[CalendarDay]:
    """Read-only month summary of an employee's wishes and blocks.

    A day that is both a day-off wish and blocked is shown as blocked. Days
    outside the month are ignored; days without any entry are omitted.
    """
    availability = employee.availability
    blocked_days = availability.blocked_days
    blocked_shifts = list(availability.vacation_shifts) + list(availability.forbidden_shifts)

    result: list[CalendarDay] = []
    for d in month_days(year, month):
        category = None
        if d.day in blocked_days:
            category = "blocked"
        elif d.day in employee.wishes.day_off_wishes:
            category = "wish"

        markers = [
            CalendarMarker(abbrev, "wish-shift")
            for abbrev in employee.wishes.shift_wishes_on(d.day)
        ]
        markers.extend(
            CalendarMarker(abbrev, "blocked-shift")
            for day, abbrev in blocked_shifts
            if day == d.day
        )
        if category is None and not markers:
            continue
        result.append(CalendarDay(date=iso_day(d), category=category, markers=tuple(markers)))
    return result
