"""Wire constants, variable-key codec, and type coercion for solution documents."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, NamedTuple

from solution_core.time_utils import iso_day, parse_iso_day

# ---------------------------------------------------------------------------
# Top-level document fields
# ---------------------------------------------------------------------------

REQUIRED_KEYS = [
    "variables",
    "employees",
    "shifts",
    "days",
]

# JSON type each required field must have.
REQUIRED_KEY_TYPES = {
    "variables": dict,
    "employees": list,
    "shifts": list,
    "days": list,
}

STATS_FIELDS = [
    "forward_rotation_violations",
    "consecutive_working_days_gt_5",
    "no_free_weekend",
    "consecutive_night_shifts_gt_3",
    "total_overtime_hours",
    "no_free_days_around_weekend",
    "not_free_after_night_shift",
    "violated_wish_total",
]

# Display labels of the stats grid, keyed like STATS_FIELDS.
STATS_LABELS = {
    "forward_rotation_violations": "Vorwärtsrotationsverletzungen",
    "consecutive_working_days_gt_5": "Mehr als 5 aufeinanderfolgende Arbeitstage",
    "no_free_weekend": "Kein freies Wochenende",
    "consecutive_night_shifts_gt_3": "Mehr als 3 aufeinanderfolgende Nachtschichten",
    "total_overtime_hours": "Gesamtüberstunden (Stunden)",
    "no_free_days_around_weekend": "Keine freien Tage um das Wochenende",
    "not_free_after_night_shift": "48h nicht frei nach Nachtschicht",
    "violated_wish_total": "Verletzte Wünsche",
}

# ---------------------------------------------------------------------------
# Decision-variable keys: "(<employeeId>, '<YYYY-MM-DD>', <shiftId>)"
# ---------------------------------------------------------------------------

_VARIABLE_KEY_RE = re.compile(
    r"^\(\s*(-?\d+)\s*,\s*'(\d{4}-\d{2}-\d{2})'\s*,\s*(-?\d+)\s*\)$"
)


class VariableKey(NamedTuple):
    employee_id: int
    day: date
    shift_id: int


def encode_variable_key(employee_id: int, day: date, shift_id: int) -> str:
    """Encode a composite key in the solver's tuple-literal text form."""
    return f"({int(employee_id)}, '{iso_day(day)}', {int(shift_id)})"


def decode_variable_key(raw: str) -> VariableKey | None:
    """Decode a solver key string. Malformed keys -> None."""
    if not isinstance(raw, str):
        return None
    match = _VARIABLE_KEY_RE.match(raw.strip())
    if match is None:
        return None
    day = parse_iso_day(match.group(2))
    if day is None:
        return None
    return VariableKey(int(match.group(1)), day, int(match.group(3)))


def is_assigned_value(value: Any) -> bool:
    """Solver flags are 0/1; only an exact 1 (or True) means assigned."""
    if isinstance(value, bool):
        return value
    return isinstance(value, (int, float)) and value == 1


# ---------------------------------------------------------------------------
# Type coercion helpers for JSON values
# ---------------------------------------------------------------------------


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a JSON value to float. None/empty -> default."""
    if value is None or str(value).strip() == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a JSON value to int. None/empty -> default."""
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return default


def to_number(value: Any, default: int = 0) -> int | float:
    """Like to_float, but integral values stay ints (480.0 -> 480, 462.5 kept)."""
    number = to_float(value, float(default))
    return int(number) if number.is_integer() else number


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().upper() in ("TRUE", "1", "YES")


def to_day_set(values: Any) -> frozenset[int]:
    """List of day-of-month numbers -> frozenset. Missing/invalid -> empty."""
    if not isinstance(values, (list, tuple, set, frozenset)):
        return frozenset()
    days = set()
    for value in values:
        day = to_int(value, default=0)
        if day > 0:
            days.add(day)
    return frozenset(days)


def to_day_shift_pairs(values: Any) -> tuple[tuple[int, str], ...]:
    """List of [day, abbreviation] pairs -> tuple of tuples. Invalid rows dropped."""
    if not isinstance(values, (list, tuple)):
        return ()
    pairs: list[tuple[int, str]] = []
    for row in values:
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            continue
        day = to_int(row[0], default=0)
        if day <= 0 or row[1] is None:
            continue
        pairs.append((day, str(row[1])))
    return tuple(pairs)
