"""Error types raised by the solution analysis engine."""

from __future__ import annotations


class SolutionError(ValueError):
    """Base class for problems with a solver solution document."""


class MalformedSolutionError(SolutionError):
    """A required top-level field is absent or has the wrong JSON type."""

    def __init__(self, missing: list[str], invalid: list[str] | None = None):
        self.missing = list(missing)
        self.invalid = list(invalid or [])
        problems = []
        if self.missing:
            problems.append(f"missing required field(s) {', '.join(self.missing)}")
        if self.invalid:
            problems.append(f"wrong type for field(s) {', '.join(self.invalid)}")
        super().__init__(f"Invalid solution file format: {'; '.join(problems)}")
