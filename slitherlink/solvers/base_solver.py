"""
Base solver class for Slitherlink boards, and the deduction-only solver.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Callable
from dataclasses import dataclass, field
import time
from pathlib import Path

from .. import config as settings
from ..core.board import Board
from ..core.exceptions import (
    MaxSolveIterationsExceededError,
    NoSolutionError,
    SlitherlinkError,
)
from ..core.validator import BoardValidator
from ..core.utils import setup_logger, memory_usage
from .rules import DeductionEngine


@dataclass
class SolverConfig:
    """Configuration for board solvers"""
    max_depth: int = settings.DEFAULT_MAX_DEPTH  # 0 means unbounded
    max_iterations: int = settings.DEFAULT_MAX_ITERATIONS  # 0 means unbounded
    fixpoint_iterations: int = settings.DEFAULT_FIXPOINT_ITERATIONS
    verbose: bool = False
    log_level: Optional[str] = None  # defaults to the configured level
    log_file: Optional[Path] = None

    # Algorithm-specific parameters
    extra_params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SolverResult:
    """Result from board solver"""
    success: bool
    solution: Optional[Board] = None
    solve_time: float = 0.0
    iterations: int = 0
    memory_used: float = 0.0  # MB
    message: str = ""

    # Additional information
    solutions: int = 0
    max_depth_reached: int = 0
    stats: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"SolverResult({status}, time={self.solve_time:.2f}s, iterations={self.iterations})"


class BaseSolver(ABC):
    """Abstract base class for Slitherlink solvers"""

    def __init__(self, config: Optional[SolverConfig] = None):
        """Initialize solver with configuration."""
        self.config = config or SolverConfig()
        self.logger = setup_logger(
            self.__class__.__name__,
            self.config.log_file,
            "DEBUG" if self.config.verbose else self.config.log_level
        )
        self.engine = DeductionEngine(self.logger)

        # Callbacks for monitoring progress
        self._progress_callbacks: List[Callable] = []

        # Statistics tracking
        self._start_time: Optional[float] = None
        self._iterations: int = 0

    def add_progress_callback(self, callback: Callable):
        """Add a callback function to monitor solving progress."""
        self._progress_callbacks.append(callback)

    def solve(self, board: Board) -> SolverResult:
        """
        Solve the board in place.

        Terminal outcomes (no solution, several solutions, exceeded budget)
        are logged and re-raised to the caller.
        """
        self.logger.info(f"Starting {self.__class__.__name__} solver")
        self.logger.debug(f"Board: {board!r}")

        # Initialize solving
        self._start_time = time.time()
        self._iterations = 0
        self.engine.rules_used.clear()
        initial_memory = memory_usage()

        try:
            result = self._solve(board)
        except SlitherlinkError as e:
            self.logger.info(f"Solve ended after {self._iterations} iterations: {e}")
            raise

        # Add final statistics
        result.solve_time = time.time() - self._start_time
        result.memory_used = memory_usage() - initial_memory
        result.iterations = self._iterations
        result.stats.setdefault('rules_used', dict(self.engine.rules_used))

        # Log result
        if result.success:
            self.logger.info(f"Solved in {result.solve_time:.2f}s with {result.iterations} iterations")
        else:
            self.logger.warning(f"Failed to solve: {result.message}")
        self.logger.debug(f"Rules used: {result.stats['rules_used']}")

        return result

    @abstractmethod
    def _solve(self, board: Board) -> SolverResult:
        """Implement the specific solving algorithm."""
        pass

    def _increment_iteration(self):
        """Increment iteration counter and check limits"""
        self._iterations += 1

        if self.config.max_iterations and self._iterations > self.config.max_iterations:
            raise MaxSolveIterationsExceededError(self.config.max_iterations, self._iterations)

    def _call_progress_callbacks(self, current: Optional[Board] = None,
                                 stats: Optional[Dict[str, Any]] = None):
        """Call all registered progress callbacks"""
        for callback in self._progress_callbacks:
            callback(self._iterations, current, stats or {})


class DeductiveSolver(BaseSolver):
    """
    Solver that only applies the deduction rules, without guessing.

    It succeeds when logic alone closes the loop and otherwise leaves the
    board holding every edge the rules could decide.
    """

    def _solve(self, board: Board) -> SolverResult:
        board.reset()
        self._increment_iteration()

        if not self.engine.run_to_fixpoint(board, self.config.fixpoint_iterations):
            raise NoSolutionError("Deduction found a contradiction")
        self._call_progress_callbacks(board, {'phase': 'deduction'})

        status = BoardValidator.check_solved(board)
        if status.is_solved:
            board.clear_excluded()
            return SolverResult(
                success=True,
                solution=board,
                solutions=1,
                message="Solved by deduction"
            )
        if not status.is_valid:
            raise NoSolutionError("Deduced edges do not form a valid loop")

        return SolverResult(
            success=False,
            solution=board,
            message="Deduction stalled before the loop was closed"
        )
