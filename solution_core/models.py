"""Typed view model for a decoded solver solution."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from .time_utils import iso_day

if TYPE_CHECKING:
    from .assignments import AssignmentIndex

DayShift = tuple[int, str]


@dataclass(frozen=True)
class Shift:
    id: int
    name: str
    abbreviation: str
    color: str
    duration: int | float
    is_exclusive: bool = False


@dataclass(frozen=True)
class EmployeeWishes:
    day_off_wishes: frozenset[int] = frozenset()
    shift_wishes: tuple[DayShift, ...] = ()

    def shift_wishes_on(self, day_number: int) -> list[str]:
        """Abbreviations wished for a day-of-month, in declaration order."""
        return [abbrev for day, abbrev in self.shift_wishes if day == day_number]


@dataclass(frozen=True)
class Availability:
    vacation_days: frozenset[int] = frozenset()
    forbidden_days: frozenset[int] = frozenset()
    vacation_shifts: tuple[DayShift, ...] = ()
    forbidden_shifts: tuple[DayShift, ...] = ()

    @property
    def blocked_days(self) -> frozenset[int]:
        return self.vacation_days | self.forbidden_days

    @property
    def blocked_shifts(self) -> frozenset[DayShift]:
        return frozenset(self.vacation_shifts) | frozenset(self.forbidden_shifts)


@dataclass(frozen=True)
class ScheduleEmployee:
    id: int
    name: str
    level: str
    target_working_time: int | float
    wishes: EmployeeWishes = field(default_factory=EmployeeWishes)
    availability: Availability = field(default_factory=Availability)


@dataclass(frozen=True)
class ScheduleStats:
    forward_rotation_violations: float = 0
    consecutive_working_days_gt_5: float = 0
    no_free_weekend: float = 0
    consecutive_night_shifts_gt_3: float = 0
    total_overtime_hours: float = 0
    no_free_days_around_weekend: float = 0
    not_free_after_night_shift: float = 0
    violated_wish_total: float = 0

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True, order=True)
class CellKey:
    """(employee id, day) join key between derived sets and rendering."""

    employee_id: int
    iso_date: str

    @classmethod
    def of(cls, employee_id: int, day: date) -> "CellKey":
        return cls(employee_id, iso_day(day))

    def __str__(self) -> str:
        return f"{self.employee_id}-{self.iso_date}"


@dataclass(frozen=True)
class ScheduleSolution:
    employees: tuple[ScheduleEmployee, ...]
    shifts: tuple[Shift, ...]
    days: tuple[date, ...]
    variables: Mapping[str, Any]
    assignments: "AssignmentIndex"
    stats: ScheduleStats = field(default_factory=ScheduleStats)
    fulfilled_day_off_cells: frozenset[CellKey] = frozenset()
    fulfilled_shift_wish_cells: frozenset[CellKey] = frozenset()
    all_day_off_wish_cells: frozenset[CellKey] = frozenset()
    all_shift_wish_colors: Mapping[CellKey, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def employee(self, employee_id: int) -> ScheduleEmployee | None:
        for emp in self.employees:
            if emp.id == employee_id:
                return emp
        return None

    def shift_by_abbreviation(self, abbreviation: str) -> Shift | None:
        for shift in self.shifts:
            if shift.abbreviation == abbreviation:
                return shift
        return None


@dataclass(frozen=True)
class ScheduleMetadata:
    """Listing record for one generated schedule of a case."""

    schedule_id: str
    seed: int
    generated_at: str = ""
    is_selected: bool = False
    comment: str | None = None
    stats: ScheduleStats = field(default_factory=ScheduleStats)


@dataclass(frozen=True)
class SchedulesMetadata:
    schedules: tuple[ScheduleMetadata, ...] = ()
    selected_schedule_id: str | None = None

    def seed_for(self, schedule_id: str) -> int | None:
        for meta in self.schedules:
            if meta.schedule_id == schedule_id:
                return meta.seed
        return None
