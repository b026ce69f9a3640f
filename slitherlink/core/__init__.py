"""
Core data structures and utilities for the Slitherlink engine.
"""

from .board import Board, Edge, EdgeState, Orientation, MarkResult, Difficulty, h_edge, v_edge
from .views import Cell, Corner, CornerKind, EdgeView
from .validator import BoardValidator, ValidationResult, LoopStatus
from .exceptions import (
    SlitherlinkError, InvalidBoardError,
    EdgeValueConflictError, CellValueConflictError,
    NoSolutionError, MultipleSolutionsError,
    SolveBudgetExceededError, MaxSolveDepthExceededError, MaxSolveIterationsExceededError
)
from .utils import (
    setup_logger, timer, memory_usage,
    BoardConverter, calculate_solution_stats
)

__all__ = [
    # Data structures
    'Board', 'Edge', 'EdgeState', 'Orientation', 'MarkResult', 'Difficulty',
    'h_edge', 'v_edge',

    # Views
    'Cell', 'Corner', 'CornerKind', 'EdgeView',

    # Validation
    'BoardValidator', 'ValidationResult', 'LoopStatus',

    # Errors
    'SlitherlinkError', 'InvalidBoardError',
    'EdgeValueConflictError', 'CellValueConflictError',
    'NoSolutionError', 'MultipleSolutionsError',
    'SolveBudgetExceededError', 'MaxSolveDepthExceededError', 'MaxSolveIterationsExceededError',

    # Utilities
    'setup_logger', 'timer', 'memory_usage',
    'BoardConverter', 'calculate_solution_stats'
]
