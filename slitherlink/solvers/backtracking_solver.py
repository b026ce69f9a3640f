"""
Backtracking search for Slitherlink boards.

The search branches on the first undetermined edge, exploring the included
and excluded assignments on independent clones. It counts solutions and
stops as soon as a second one is proven, so a successful solve also proves
the solution is unique.
"""

from typing import Optional

from ..core.board import Board, EdgeState
from ..core.exceptions import (
    MaxSolveDepthExceededError,
    MultipleSolutionsError,
    NoSolutionError,
)
from ..core.validator import BoardValidator
from .base_solver import BaseSolver, SolverResult


class BacktrackingSolver(BaseSolver):
    """Deduction plus depth-first branching on undetermined edges"""

    def _solve(self, board: Board) -> SolverResult:
        board.reset()
        self._solution: Optional[Board] = None
        self._solutions = 0
        self._deepest = 0

        if not self.engine.run_to_fixpoint(board, self.config.fixpoint_iterations):
            raise NoSolutionError("Board is inconsistent before any guess")

        self._search(board, 0)

        if self._solutions == 0:
            raise NoSolutionError("No loop satisfies every clue")

        # Keep only the loop edges
        board.reset()
        for edge in self._solution.included_edges():
            board.mark_edge(edge, EdgeState.INCLUDED)

        return SolverResult(
            success=True,
            solution=board,
            solutions=self._solutions,
            max_depth_reached=self._deepest,
            message="Unique solution found"
        )

    def _search(self, board: Board, depth: int) -> int:
        """Number of solutions below this node"""
        self._increment_iteration()
        if self.config.max_depth and depth > self.config.max_depth:
            raise MaxSolveDepthExceededError(self.config.max_depth, depth)
        self._deepest = max(self._deepest, depth)

        if not self.engine.run_to_fixpoint(board, self.config.fixpoint_iterations):
            return 0

        status = BoardValidator.check_solved(board)
        if not status.is_valid:
            return 0
        if status.is_solved:
            self._record_solution(board)
            return 1

        edge = board.first_undetermined_edge()
        if edge is None:
            return 0

        self._call_progress_callbacks(board, {'depth': depth, 'solutions': self._solutions})
        self.logger.debug(f"Depth {depth}: branching on {edge!r}")

        total = 0
        for state in (EdgeState.INCLUDED, EdgeState.EXCLUDED):
            branch = board.clone()
            branch.set_edge(edge, state)
            total += self._search(branch, depth + 1)
        return total

    def _record_solution(self, board: Board):
        self._solutions += 1
        if self._solutions > 1:
            raise MultipleSolutionsError(f"Found a second solution after {self._iterations} iterations")
        self._solution = board.clone()
