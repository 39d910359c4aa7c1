"""Schedule comparison -- side-by-side view of several solver runs."""

from __future__ import annotations

import logging
from typing import Any

from solution_core.comparison import TaggedSolution, compare_stats, group_employees
from solution_core.hours import OVERTIME_TOLERANCE_HOURS, compute_employee_stats
from solution_core.io.writer import groups_to_view, hours_to_dict
from solution_core.models import SchedulesMetadata
from solution_core.parser import parse_solution
from solution_core.preferences import ShiftWishPolicy

logger = logging.getLogger(__name__)


def tag_solutions(
    documents: list[tuple[str, dict[str, Any] | None]],
    metadata: SchedulesMetadata,
    *,
    shift_wish_policy: ShiftWishPolicy | str | None = None,
) -> list[TaggedSolution]:
    """Parse fetched documents and attach their seeds.

    Schedules without a solution are dropped; order is preserved.
    """
    tagged: list[TaggedSolution] = []
    for schedule_id, document in documents:
        if document is None:
            logger.info("Schedule %s has no solution yet, skipping", schedule_id)
            continue
        seed = metadata.seed_for(schedule_id)
        solution = parse_solution(document, shift_wish_policy=shift_wish_policy)
        tagged.append((schedule_id, seed if seed is not None else 0, solution))
    return tagged


def compare_schedules_impl(
    tagged: list[TaggedSolution],
    *,
    query: str | None = None,
    tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> dict[str, Any]:
    """Grouped employee rows plus per-schedule quality counters."""
    if not tagged:
        return {"schedules": [], "groups": [], "stats": compare_stats([]), "empty": True}

    groups = group_employees(tagged, query)
    by_id = {schedule_id: solution for schedule_id, _, solution in tagged}

    rows = groups_to_view(groups)
    for row, entries in zip(rows, groups.values()):
        for view, entry in zip(row["entries"], entries):
            solution = by_id[entry.schedule_id]
            hours = compute_employee_stats(
                entry.employee,
                solution.days,
                solution.shifts,
                solution.assignments,
                tolerance_hours=tolerance_hours,
            )
            view["hours"] = hours_to_dict(hours)

    return {
        "schedules": [{"schedule_id": sid, "seed": seed} for sid, seed, _ in tagged],
        "groups": rows,
        "stats": compare_stats(tagged),
        "empty": False,
    }
