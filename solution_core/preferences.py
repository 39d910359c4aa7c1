"""Day-off and shift wish evaluation against a decoded solution."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from .assignments import AssignmentIndex
from .models import CellKey, ScheduleEmployee, ScheduleSolution, Shift


class ShiftWishPolicy(str, Enum):
    """How a shift wish counts as fulfilled.

    AVOID: the wish names a shift the employee does not want; it is fulfilled
    when none of the wished shifts is assigned.
    GRANT: the wish names a shift the employee wants; it is fulfilled when at
    least one of the wished shifts is assigned.
    """

    AVOID = "avoid"
    GRANT = "grant"


DEFAULT_SHIFT_WISH_POLICY = ShiftWishPolicy.AVOID


@dataclass(frozen=True)
class PreferenceAnnotations:
    fulfilled_day_off_cells: frozenset[CellKey]
    fulfilled_shift_wish_cells: frozenset[CellKey]
    all_day_off_wish_cells: frozenset[CellKey]
    all_shift_wish_cells: frozenset[CellKey]
    all_shift_wish_colors: Mapping[CellKey, tuple[str, ...]]


def resolve_policy(value: ShiftWishPolicy | str | None) -> ShiftWishPolicy:
    if value is None:
        return DEFAULT_SHIFT_WISH_POLICY
    if isinstance(value, ShiftWishPolicy):
        return value
    try:
        return ShiftWishPolicy(str(value).strip().lower())
    except ValueError:
        allowed = [p.value for p in ShiftWishPolicy]
        raise ValueError(f"Unknown shift wish policy '{value}'. Allowed: {allowed}") from None


def _catalog(shifts: Iterable[Shift]) -> dict[str, Shift]:
    # First catalog entry wins for duplicated abbreviations.
    by_abbrev: dict[str, Shift] = {}
    for shift in shifts:
        by_abbrev.setdefault(shift.abbreviation, shift)
    return by_abbrev


def _shift_wish_fulfilled(
    wished: list[Shift],
    *,
    employee_id: int,
    day: date,
    index: AssignmentIndex,
    policy: ShiftWishPolicy,
) -> bool:
    hit = any(index.is_assigned(employee_id, day, shift.id) for shift in wished)
    if policy is ShiftWishPolicy.GRANT:
        return hit
    return not hit


def analyze_preferences(
    employees: Iterable[ScheduleEmployee],
    days: Iterable[date],
    shifts: Iterable[Shift],
    index: AssignmentIndex,
    *,
    policy: ShiftWishPolicy | str | None = None,
) -> PreferenceAnnotations:
    """Evaluate every (employee, day) cell against the employee's wishes.

    Day-off wishes are fulfilled when nothing is assigned that day. Shift wish
    fulfillment follows `policy` and is never granted on a day that is also a
    day-off wish, so a single day is not counted in both categories. Wishes
    naming an unknown shift abbreviation contribute no color and never count
    as assigned.
    """
    mode = resolve_policy(policy)
    catalog = _catalog(shifts)
    day_list = list(days)

    fulfilled_day_off: set[CellKey] = set()
    fulfilled_shift: set[CellKey] = set()
    all_day_off: set[CellKey] = set()
    all_shift: set[CellKey] = set()
    colors: dict[CellKey, tuple[str, ...]] = {}

    for employee in employees:
        day_offs = employee.wishes.day_off_wishes
        for day in day_list:
            cell = CellKey.of(employee.id, day)
            is_day_off_wish = day.day in day_offs

            if is_day_off_wish:
                all_day_off.add(cell)
                if not index.assigned_shifts(employee.id, day):
                    fulfilled_day_off.add(cell)

            abbreviations = employee.wishes.shift_wishes_on(day.day)
            if not abbreviations:
                continue
            all_shift.add(cell)

            wished = [catalog[a] for a in abbreviations if a in catalog]
            cell_colors = tuple(s.color for s in wished if s.color)
            if cell_colors:
                colors[cell] = cell_colors

            if is_day_off_wish:
                continue
            if _shift_wish_fulfilled(
                wished, employee_id=employee.id, day=day, index=index, policy=mode
            ):
                fulfilled_shift.add(cell)

    return PreferenceAnnotations(
        fulfilled_day_off_cells=frozenset(fulfilled_day_off),
        fulfilled_shift_wish_cells=frozenset(fulfilled_shift),
        all_day_off_wish_cells=frozenset(all_day_off),
        all_shift_wish_cells=frozenset(all_shift),
        all_shift_wish_colors=MappingProxyType(colors),
    )


def annotate_solution(
    solution: ScheduleSolution,
    *,
    policy: ShiftWishPolicy | str | None = None,
) -> ScheduleSolution:
    """Return a copy of `solution` with the derived wish sets filled in."""
    notes = analyze_preferences(
        solution.employees,
        solution.days,
        solution.shifts,
        solution.assignments,
        policy=policy,
    )
    return dataclasses.replace(
        solution,
        fulfilled_day_off_cells=notes.fulfilled_day_off_cells,
        fulfilled_shift_wish_cells=notes.fulfilled_shift_wish_cells,
        all_day_off_wish_cells=notes.all_day_off_wish_cells,
        all_shift_wish_colors=notes.all_shift_wish_colors,
    )


def violated_wishes(
    solution: ScheduleSolution,
    *,
    policy: ShiftWishPolicy | str | None = None,
) -> dict[int, dict[str, list[str]]]:
    """Per-employee ISO days whose wishes were not honored.

    Shift wishes on a day that is also a day-off wish are reported under
    day_off only.
    """
    notes = analyze_preferences(
        solution.employees,
        solution.days,
        solution.shifts,
        solution.assignments,
        policy=policy,
    )
    result: dict[int, dict[str, list[str]]] = {}
    for employee in solution.employees:
        result[employee.id] = {"day_off": [], "shift": []}

    for cell in sorted(notes.all_day_off_wish_cells - notes.fulfilled_day_off_cells):
        result[cell.employee_id]["day_off"].append(cell.iso_date)

    shift_only = notes.all_shift_wish_cells - notes.all_day_off_wish_cells
    for cell in sorted(shift_only - notes.fulfilled_shift_wish_cells):
        result[cell.employee_id]["shift"].append(cell.iso_date)
    return result
