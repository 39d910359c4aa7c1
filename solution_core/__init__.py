"""Analysis engine for combinatorial solver schedule solutions."""

from .assignments import AssignmentIndex
from .availability import employee_calendar, is_unavailable
from .comparison import ComparisonEntry, compare_stats, group_employees
from .decoder import decode_solution
from .errors import MalformedSolutionError, SolutionError
from .hours import OVERTIME_TOLERANCE_HOURS, EmployeeHours, compute_all_stats, compute_employee_stats
from .models import CellKey, ScheduleEmployee, ScheduleSolution, ScheduleStats, Shift
from .parser import parse_solution
from .preferences import ShiftWishPolicy, analyze_preferences, violated_wishes

# io module: lazy writer re-exports
from .io import load_solution_file, solution_to_view, write_analysis

__all__ = [
    "AssignmentIndex",
    "CellKey",
    "ComparisonEntry",
    "EmployeeHours",
    "MalformedSolutionError",
    "OVERTIME_TOLERANCE_HOURS",
    "ScheduleEmployee",
    "ScheduleSolution",
    "ScheduleStats",
    "Shift",
    "ShiftWishPolicy",
    "SolutionError",
    "analyze_preferences",
    "compare_stats",
    "compute_all_stats",
    "compute_employee_stats",
    "decode_solution",
    "employee_calendar",
    "group_employees",
    "is_unavailable",
    "load_solution_file",
    "parse_solution",
    "solution_to_view",
    "violated_wishes",
    "write_analysis",
]
