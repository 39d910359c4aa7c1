"""Lookup structure over the solver's sparse assignment variables."""

from __future__ import annotations

import logging
from datetime import date
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .io.schemas import VariableKey, decode_variable_key, encode_variable_key, is_assigned_value
from .models import Shift

logger = logging.getLogger(__name__)


class AssignmentIndex:
    """Answers "which shifts does employee E work on day D".

    Backed by a map from structured VariableKey to the assigned flag. Keys
    that cannot be decoded are counted and otherwise ignored, so they read
    as unassigned.
    """

    def __init__(self, variables: Mapping[str, Any] | None, shifts: Iterable[Shift]):
        self._shifts: tuple[Shift, ...] = tuple(shifts)
        assigned: dict[VariableKey, bool] = {}
        skipped = 0
        for raw_key, value in (variables or {}).items():
            key = decode_variable_key(raw_key)
            if key is None:
                skipped += 1
                continue
            assigned[key] = is_assigned_value(value)
        if skipped:
            logger.debug("Ignored %d unrecognized variable keys", skipped)
        self._assigned = MappingProxyType(assigned)
        self.skipped_keys = skipped

    @property
    def shifts(self) -> tuple[Shift, ...]:
        return self._shifts

    def __len__(self) -> int:
        return sum(1 for flag in self._assigned.values() if flag)

    def is_assigned(self, employee_id: int, day: date, shift_id: int) -> bool:
        try:
            key = VariableKey(int(employee_id), day, int(shift_id))
        except (TypeError, ValueError):
            return False
        return self._assigned.get(key, False)

    def assigned_shifts(self, employee_id: int, day: date) -> list[Shift]:
        """All shifts assigned on a day, in shift-catalog order."""
        return [s for s in self._shifts if self.is_assigned(employee_id, day, s.id)]

    def primary_shift(self, employee_id: int, day: date) -> Shift | None:
        """First assigned shift in catalog order, or None."""
        for shift in self._shifts:
            if self.is_assigned(employee_id, day, shift.id):
                return shift
        return None

    def to_variables(self) -> dict[str, int]:
        """Re-encode the assigned keys in the solver's wire format."""
        return {
            encode_variable_key(key.employee_id, key.day, key.shift_id): 1
            for key, flag in sorted(self._assigned.items())
            if flag
        }
