"""
Slitherlink puzzle engine: board model, deduction rules, search and generator.
"""

from .core import (
    Board, Edge, EdgeState, Orientation, Difficulty,
    SlitherlinkError, InvalidBoardError,
    NoSolutionError, MultipleSolutionsError,
    SolveBudgetExceededError, MaxSolveDepthExceededError, MaxSolveIterationsExceededError,
)
from .solvers import get_solver, SolverConfig, SolverResult
from .generators import PuzzleGenerator, PuzzleGeneratorConfig, generate_board

__version__ = "0.1.0"

__all__ = [
    'Board', 'Edge', 'EdgeState', 'Orientation', 'Difficulty',
    'SlitherlinkError', 'InvalidBoardError',
    'NoSolutionError', 'MultipleSolutionsError',
    'SolveBudgetExceededError', 'MaxSolveDepthExceededError', 'MaxSolveIterationsExceededError',
    'get_solver', 'SolverConfig', 'SolverResult',
    'PuzzleGenerator', 'PuzzleGeneratorConfig', 'generate_board',
]
