"""Per-employee workload against target working time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .assignments import AssignmentIndex
from .models import ScheduleEmployee, ScheduleSolution, Shift
from .time_utils import minutes_to_hours

# Allowed deviation between actual and target hours (about one working day).
OVERTIME_TOLERANCE_HOURS = 7.67


@dataclass(frozen=True)
class EmployeeHours:
    actual_hours: float
    target_hours: float
    total_shifts: int
    has_overtime: bool

    @property
    def delta_hours(self) -> float:
        return self.actual_hours - self.target_hours


def compute_employee_stats(
    employee: ScheduleEmployee,
    days: Iterable[date],
    shifts: Iterable[Shift],
    index: AssignmentIndex,
    *,
    tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> EmployeeHours:
    """Sum assigned shift durations over `days` and compare with the target.

    Every assigned shift counts, including several on the same day.
    `has_overtime` is set when the absolute deviation strictly exceeds
    `tolerance_hours`, in either direction.
    """
    catalog = list(shifts)
    total_minutes = 0
    total_shifts = 0
    for day in days:
        for shift in catalog:
            if index.is_assigned(employee.id, day, shift.id):
                total_minutes += shift.duration
                total_shifts += 1

    actual = minutes_to_hours(total_minutes)
    target = minutes_to_hours(employee.target_working_time)
    return EmployeeHours(
        actual_hours=actual,
        target_hours=target,
        total_shifts=total_shifts,
        has_overtime=abs(actual - target) > tolerance_hours,
    )


def compute_all_stats(
    solution: ScheduleSolution,
    *,
    tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> dict[int, EmployeeHours]:
    """Hours per employee id, in employee order."""
    return {
        emp.id: compute_employee_stats(
            emp,
            solution.days,
            solution.shifts,
            solution.assignments,
            tolerance_hours=tolerance_hours,
        )
        for emp in solution.employees
    }
