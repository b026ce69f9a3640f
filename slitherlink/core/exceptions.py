"""
Exception hierarchy for the Slitherlink engine.

Construction errors are raised straight to the caller. Edge and cell
conflicts are raised inside the deduction engine and converted to a boolean
failure before they reach anyone else. Only the terminal outcomes of a full
solve (no solution, several solutions, budget exceeded) escape a solver.
"""

from typing import Optional


class SlitherlinkError(Exception):
    """Base class for every error raised by the engine."""


class InvalidBoardError(SlitherlinkError, ValueError):
    """Raised when a clue matrix cannot be turned into a board."""


class EdgeValueConflictError(SlitherlinkError):
    """An edge was asked to hold the opposite of its determined state."""

    def __init__(self, edge, message: Optional[str] = None):
        super().__init__(message or f"Conflicting value for {edge}")
        self.edge = edge


class CellValueConflictError(SlitherlinkError):
    """A clue cell has more included or excluded edges than its clue allows."""

    def __init__(self, row: int, col: int, message: Optional[str] = None):
        super().__init__(message or f"Clue at ({row}, {col}) can no longer be satisfied")
        self.row = row
        self.col = col


class NoSolutionError(SlitherlinkError):
    """The search exhausted every branch without finding a loop."""


class MultipleSolutionsError(SlitherlinkError):
    """A second distinct solution was proven to exist."""


class SolveBudgetExceededError(SlitherlinkError):
    """
    Raised when a search crosses a caller-supplied bound.

    These errors describe the cost of the search, not the validity of the
    puzzle.
    """

    def __init__(
        self,
        message: str,
        *,
        limit: Optional[int] = None,
        observed: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.limit = limit
        self.observed = observed


class MaxSolveDepthExceededError(SolveBudgetExceededError):
    """The recursion went deeper than the configured maximum depth."""

    def __init__(self, limit: int, observed: int):
        super().__init__(
            f"Maximum solve depth ({limit}) exceeded",
            limit=limit,
            observed=observed,
        )


class MaxSolveIterationsExceededError(SolveBudgetExceededError):
    """The search visited more nodes than the configured maximum."""

    def __init__(self, limit: int, observed: int):
        super().__init__(
            f"Maximum solve iterations ({limit}) exceeded",
            limit=limit,
            observed=observed,
        )
