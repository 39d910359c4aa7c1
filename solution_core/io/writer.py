"""Serialize analyzed solutions into JSON-ready view models.

The rendering layer (schedule table, stats grid, comparison view) reads these
dicts; nothing here recomputes wishes or hours beyond what the analysis
modules expose.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from solution_core.availability import blocked_cells, blocked_shift_cells, conflicting_assignments
from solution_core.comparison import ComparisonEntry
from solution_core.hours import OVERTIME_TOLERANCE_HOURS, EmployeeHours, compute_all_stats
from solution_core.models import CellKey, ScheduleEmployee, ScheduleSolution, Shift
from solution_core.time_utils import format_duration, is_weekend, iso_day

from .schemas import STATS_LABELS

# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def shift_to_dict(shift: Shift) -> dict[str, Any]:
    return {
        "id": shift.id,
        "name": shift.name,
        "abbreviation": shift.abbreviation,
        "color": shift.color,
        "duration": shift.duration,
        "duration_label": format_duration(shift.duration),
        "is_exclusive": shift.is_exclusive,
    }


def employee_to_dict(employee: ScheduleEmployee) -> dict[str, Any]:
    """Employee in the raw document's field layout."""
    availability = employee.availability
    return {
        "id": employee.id,
        "name": employee.name,
        "level": employee.level,
        "target_working_time": employee.target_working_time,
        "wishes": {
            "shift_wishes": [list(p) for p in employee.wishes.shift_wishes],
            "day_off_wishes": sorted(employee.wishes.day_off_wishes),
        },
        "vacation_days": sorted(availability.vacation_days),
        "forbidden_days": sorted(availability.forbidden_days),
        "vacation_shifts": [list(p) for p in availability.vacation_shifts],
        "forbidden_shifts": [list(p) for p in availability.forbidden_shifts],
    }


def hours_to_dict(hours: EmployeeHours) -> dict[str, Any]:
    return {
        "actual_hours": round(hours.actual_hours, 2),
        "target_hours": round(hours.target_hours, 2),
        "delta_hours": round(hours.delta_hours, 2),
        "total_shifts": hours.total_shifts,
        "has_overtime": hours.has_overtime,
    }


def stats_to_list(solution: ScheduleSolution) -> list[dict[str, Any]]:
    """Stats grid rows: key, label, value."""
    values = solution.stats.as_dict()
    return [
        {"key": key, "label": label, "value": values[key]}
        for key, label in STATS_LABELS.items()
    ]


# ---------------------------------------------------------------------------
# Full view model
# ---------------------------------------------------------------------------


def solution_to_view(
    solution: ScheduleSolution,
    *,
    tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> dict[str, Any]:
    """One row per employee, one cell per day, with all derived flags."""
    hours = compute_all_stats(solution, tolerance_hours=tolerance_hours)
    blocked = blocked_cells(solution)
    blocked_shifts = blocked_shift_cells(solution)

    rows: list[dict[str, Any]] = []
    for employee in solution.employees:
        cells: list[dict[str, Any]] = []
        for day in solution.days:
            key = CellKey.of(employee.id, day)
            assigned = solution.assignments.assigned_shifts(employee.id, day)
            cells.append({
                "cell_key": str(key),
                "date": iso_day(day),
                "is_weekend": is_weekend(day),
                "shifts": [s.abbreviation for s in assigned],
                "has_day_off_wish": key in solution.all_day_off_wish_cells,
                "day_off_fulfilled": key in solution.fulfilled_day_off_cells,
                "shift_wish_fulfilled": key in solution.fulfilled_shift_wish_cells,
                "shift_wish_colors": list(solution.all_shift_wish_colors.get(key, ())),
                "blocked": key in blocked,
                "blocked_shifts": list(blocked_shifts.get(key, ())),
            })
        rows.append({
            "employee": employee_to_dict(employee),
            "hours": hours_to_dict(hours[employee.id]),
            "cells": cells,
        })

    return {
        "days": [iso_day(d) for d in solution.days],
        "shifts": [shift_to_dict(s) for s in solution.shifts],
        "stats": solution.stats.as_dict(),
        "stats_grid": stats_to_list(solution),
        "rows": rows,
        "conflicts": conflicting_assignments(solution),
        "counts": {
            "employees": len(solution.employees),
            "days": len(solution.days),
            "assignments": len(solution.assignments),
            "fulfilled_day_off": len(solution.fulfilled_day_off_cells),
            "day_off_wishes": len(solution.all_day_off_wish_cells),
            "fulfilled_shift_wishes": len(solution.fulfilled_shift_wish_cells),
        },
    }


def groups_to_view(groups: dict[int, list[ComparisonEntry]]) -> list[dict[str, Any]]:
    """Comparison groups in first-seen order."""
    result = []
    for employee_id, entries in groups.items():
        result.append({
            "employee_id": employee_id,
            "entries": [
                {
                    "schedule_id": e.schedule_id,
                    "seed": e.seed,
                    "employee": employee_to_dict(e.employee),
                    "stats": e.stats.as_dict(),
                }
                for e in entries
            ],
        })
    return result


def solution_to_document(solution: ScheduleSolution) -> dict[str, Any]:
    """Re-encode a decoded solution in the solver's raw document layout."""
    return {
        "variables": solution.assignments.to_variables(),
        "employees": [employee_to_dict(e) for e in solution.employees],
        "shifts": [
            {k: v for k, v in shift_to_dict(s).items() if k != "duration_label"}
            for s in solution.shifts
        ],
        "days": [iso_day(d) for d in solution.days],
        "stats": solution.stats.as_dict(),
    }


def write_analysis(
    solution: ScheduleSolution,
    output_dir: Path,
    *,
    tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> dict[str, Path]:
    """Write analysis.json into `output_dir`. Returns {filename: path}."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / "analysis.json"
    _write_json(path, solution_to_view(solution, tolerance_hours=tolerance_hours))
    return {"analysis.json": path}


def _write_json(path: Path, payload: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
