"""Tests for wish annotation: day-off wishes, shift wishes, policy flag."""

from datetime import date

import pytest

from solution_core.models import CellKey
from solution_core.parser import parse_solution
from solution_core.preferences import (
    DEFAULT_SHIFT_WISH_POLICY,
    ShiftWishPolicy,
    resolve_policy,
    violated_wishes,
)

ANNA_DAY_OFF = CellKey(5, "2025-11-10")
ANNA_SHIFT_WISH = CellKey(5, "2025-11-11")
LUKAS_SHIFT_WISH = CellKey(7, "2025-11-10")


class TestDayOffWishes:
    def test_unassigned_day_off_is_fulfilled(self, solution):
        """Employee 5 wishes day 10 off and has nothing assigned."""
        assert ANNA_DAY_OFF in solution.all_day_off_wish_cells
        assert ANNA_DAY_OFF in solution.fulfilled_day_off_cells
        assert str(ANNA_DAY_OFF) == "5-2025-11-10"

    def test_assigned_day_off_is_not_fulfilled(self, raw_document):
        """Same employee with shift F on day 10: wish stays visible, unfulfilled."""
        raw_document["variables"]["(5, '2025-11-10', 1)"] = 1
        solution = parse_solution(raw_document)
        assert ANNA_DAY_OFF in solution.all_day_off_wish_cells
        assert ANNA_DAY_OFF not in solution.fulfilled_day_off_cells

    def test_fulfilled_day_off_never_has_assignment(self, solution):
        for cell in solution.fulfilled_day_off_cells:
            day = date.fromisoformat(cell.iso_date)
            assert solution.assignments.assigned_shifts(cell.employee_id, day) == []

    def test_fulfilled_is_subset_of_all(self, solution):
        assert solution.fulfilled_day_off_cells <= solution.all_day_off_wish_cells

    def test_wish_day_outside_period_ignored(self, raw_document):
        raw_document["employees"][0]["wishes"]["day_off_wishes"] = [25]
        solution = parse_solution(raw_document)
        assert solution.all_day_off_wish_cells == frozenset()


class TestShiftWishColors:
    def test_unknown_abbreviation_dropped_from_colors(self, solution):
        assert solution.all_shift_wish_colors[ANNA_SHIFT_WISH] == ("#6366f1",)

    def test_multiple_wishes_accumulate_colors(self, solution):
        assert solution.all_shift_wish_colors[LUKAS_SHIFT_WISH] == ("#22c55e", "#3b82f6")

    def test_only_unknown_abbreviations_leave_no_color_entry(self, raw_document):
        raw_document["employees"][0]["wishes"]["shift_wishes"] = [[11, "X"]]
        solution = parse_solution(raw_document)
        assert ANNA_SHIFT_WISH not in solution.all_shift_wish_colors
        # the unknown shift never counts as assigned
        assert ANNA_SHIFT_WISH in solution.fulfilled_shift_wish_cells


class TestAvoidPolicy:
    def test_default_policy_is_avoid(self):
        assert DEFAULT_SHIFT_WISH_POLICY is ShiftWishPolicy.AVOID

    def test_wished_shift_not_assigned_is_fulfilled(self, solution):
        assert ANNA_SHIFT_WISH in solution.fulfilled_shift_wish_cells
        assert LUKAS_SHIFT_WISH in solution.fulfilled_shift_wish_cells

    def test_wished_shift_assigned_is_not_fulfilled(self, raw_document):
        raw_document["variables"]["(7, '2025-11-10', 2)"] = 1
        solution = parse_solution(raw_document)
        assert LUKAS_SHIFT_WISH not in solution.fulfilled_shift_wish_cells


class TestGrantPolicy:
    def test_unassigned_wish_not_fulfilled(self, raw_document):
        solution = parse_solution(raw_document, shift_wish_policy=ShiftWishPolicy.GRANT)
        assert LUKAS_SHIFT_WISH not in solution.fulfilled_shift_wish_cells

    def test_assigned_wish_fulfilled(self, raw_document):
        raw_document["variables"]["(7, '2025-11-10', 1)"] = 1
        solution = parse_solution(raw_document, shift_wish_policy="grant")
        assert LUKAS_SHIFT_WISH in solution.fulfilled_shift_wish_cells

    def test_colors_independent_of_policy(self, raw_document):
        avoid = parse_solution(raw_document, shift_wish_policy="avoid")
        grant = parse_solution(raw_document, shift_wish_policy="grant")
        assert dict(avoid.all_shift_wish_colors) == dict(grant.all_shift_wish_colors)


class TestDayOffAndShiftWishSameDay:
    @pytest.mark.parametrize("policy", ["avoid", "grant"])
    def test_shift_wish_not_double_counted(self, raw_document, policy):
        raw_document["employees"][0]["wishes"] = {
            "day_off_wishes": [10],
            "shift_wishes": [[10, "F"]],
        }
        if policy == "grant":
            raw_document["variables"]["(5, '2025-11-10', 1)"] = 1
        solution = parse_solution(raw_document, shift_wish_policy=policy)
        assert ANNA_DAY_OFF in solution.all_day_off_wish_cells
        assert solution.all_shift_wish_colors[ANNA_DAY_OFF] == ("#22c55e",)
        assert ANNA_DAY_OFF not in solution.fulfilled_shift_wish_cells

    def test_day_off_fulfillment_unaffected(self, raw_document):
        raw_document["employees"][0]["wishes"] = {
            "day_off_wishes": [10],
            "shift_wishes": [[10, "F"]],
        }
        solution = parse_solution(raw_document)
        assert ANNA_DAY_OFF in solution.fulfilled_day_off_cells


class TestPolicyResolution:
    def test_resolve_strings(self):
        assert resolve_policy(None) is ShiftWishPolicy.AVOID
        assert resolve_policy(" GRANT ") is ShiftWishPolicy.GRANT

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError, match="Unknown shift wish policy"):
            resolve_policy("maybe")


class TestViolatedWishes:
    def test_reports_unfulfilled_cells(self, raw_document):
        raw_document["variables"]["(5, '2025-11-10', 1)"] = 1
        raw_document["variables"]["(7, '2025-11-10', 1)"] = 1
        solution = parse_solution(raw_document)
        result = violated_wishes(solution)
        assert result[5] == {"day_off": ["2025-11-10"], "shift": []}
        assert result[7] == {"day_off": [], "shift": ["2025-11-10"]}
        assert result[9] == {"day_off": [], "shift": []}
