"""Raw solver document -> annotated, read-only ScheduleSolution."""

from __future__ import annotations

import logging
from typing import Any

from .decoder import decode_solution
from .models import ScheduleSolution
from .preferences import ShiftWishPolicy, annotate_solution

logger = logging.getLogger(__name__)


def parse_solution(
    document: dict[str, Any],
    *,
    shift_wish_policy: ShiftWishPolicy | str | None = None,
) -> ScheduleSolution:
    """Decode a solver solution and compute its wish annotations.

    Raises MalformedSolutionError when a required top-level field is absent.
    """
    solution = annotate_solution(decode_solution(document), policy=shift_wish_policy)
    logger.debug(
        "Parsed solution: %d employees, %d shifts, %d days, %d assignments",
        len(solution.employees),
        len(solution.shifts),
        len(solution.days),
        len(solution.assignments),
    )
    return solution
