"""Group employees across several candidate solutions for side-by-side review.

Each input solution is tagged with its schedule id and solver seed. The
grouping keeps input order within a group and first-seen order across groups.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .io.schemas import STATS_FIELDS
from .models import ScheduleEmployee, ScheduleSolution, ScheduleStats

TaggedSolution = tuple[str, int, ScheduleSolution]


@dataclass(frozen=True)
class ComparisonEntry:
    schedule_id: str
    seed: int
    employee: ScheduleEmployee
    stats: ScheduleStats


def matches_query(employee: ScheduleEmployee, query: str | None) -> bool:
    """Case-insensitive substring match on name, level or id."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return (
        needle in employee.name.lower()
        or needle in employee.level.lower()
        or needle in str(employee.id)
    )


def group_employees(
    schedules: Iterable[TaggedSolution],
    query: str | None = None,
) -> dict[int, list[ComparisonEntry]]:
    """Build employee id -> entries, one entry per solution containing them.

    The query is decided once per employee id, from the first solution in
    which that id appears. An employee missing from the first solution is
    therefore matched on a later solution's name and level. Employees absent
    from a solution get no entry for it.
    """
    groups: dict[int, list[ComparisonEntry]] = {}
    excluded: set[int] = set()

    for schedule_id, seed, solution in schedules:
        for employee in solution.employees:
            if employee.id in excluded:
                continue
            if employee.id not in groups:
                if not matches_query(employee, query):
                    excluded.add(employee.id)
                    continue
                groups[employee.id] = []
            groups[employee.id].append(
                ComparisonEntry(schedule_id, seed, employee, solution.stats)
            )
    return groups


def compare_stats(schedules: Iterable[TaggedSolution]) -> dict[str, Any]:
    """Quality counters per schedule, with deltas against the first schedule
    (`deltas`) and against the best schedule (`deltas_vs_best`).

    `best_schedule_id` is the schedule with the fewest violated wishes; ties
    keep input order.
    """
    rows: list[dict[str, Any]] = []
    baseline: dict[str, float] | None = None
    for schedule_id, seed, solution in schedules:
        counters = solution.stats.as_dict()
        if baseline is None:
            baseline = counters
        rows.append({
            "schedule_id": schedule_id,
            "seed": seed,
            "stats": counters,
            "deltas": {
                name: round(counters[name] - baseline[name], 2) for name in STATS_FIELDS
            },
        })

    best = min(rows, key=lambda r: r["stats"]["violated_wish_total"], default=None)
    for row in rows:
        row["deltas_vs_best"] = {
            name: round(row["stats"][name] - best["stats"][name], 2) for name in STATS_FIELDS
        }
    return {
        "schedules": rows,
        "best_schedule_id": best["schedule_id"] if best else None,
    }
