"""
Utility functions for the Slitherlink engine.
"""

import logging
import time
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from .. import config
from .board import NO_CLUE, Board, EdgeState


def setup_logger(name: str, log_file: Optional[Path] = None, level: str = None) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level, defaults to the configured level

    Returns:
        Configured logger
    """
    level = (level or config.LOG_LEVEL).upper()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    # Remove existing handlers
    logger.handlers = []

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level))

    # Formatter
    formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def timer(func):
    """Decorator to time function execution"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        execution_time = time.time() - start_time

        # Try to get logger from first argument (usually self)
        if args and hasattr(args[0], 'logger'):
            args[0].logger.debug(f"{func.__name__} took {execution_time:.3f} seconds")
        else:
            logging.getLogger(func.__module__).debug(f"{func.__name__} took {execution_time:.3f} seconds")

        return result
    return wrapper


def memory_usage():
    """Get current memory usage in MB"""
    import psutil
    import os
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


class BoardConverter:
    """Convert boards between different formats"""

    @staticmethod
    def to_grid(board: Board) -> np.ndarray:
        """
        Convert board clues to a 2D integer grid.
        -1: no clue, 0-3: clue value
        """
        return board.clues.astype(int)

    @staticmethod
    def from_grid(grid: np.ndarray) -> Board:
        """Create a board from a 2D integer grid (negative values mean no clue)"""
        return Board([['' if value < 0 else str(int(value)) for value in row] for row in grid])

    @staticmethod
    def to_string(board: Board, show_edges: bool = False) -> str:
        """
        Convert board to string representation.

        Args:
            board: The board to convert
            show_edges: Whether to draw the edge states around the clues

        Returns:
            One line per row with '.' for empty cells, or the edge drawing
        """
        if show_edges:
            return str(board)
        return '\n'.join(
            ''.join('.' if value == NO_CLUE else str(value) for value in row)
            for row in board.clues.tolist()
        )

    @staticmethod
    def from_string(s: str) -> Board:
        """
        Create a board from its string representation.
        Digits 0-3 are clues and '.' is an empty cell; blank lines are ignored.
        """
        lines = [line for line in s.split('\n') if line.strip()]
        rows: List[List[str]] = []
        for line in lines:
            rows.append(['' if char == '.' else char for char in line.strip()])
        return Board(rows)


def calculate_solution_stats(board: Board) -> Dict[str, Any]:
    """Calculate statistics for a solved board"""
    status = board.check_solved()
    satisfied = sum(1 for cell in board.cells() if cell.clue is not None and cell.is_satisfied)
    stats = {
        'loop_length': status.loop_length,
        'included_edges': board.count_edges(EdgeState.INCLUDED),
        'satisfied_clues': satisfied,
        'total_clues': board.clue_count(),
        'is_solved': status.is_solved,
    }

    # Fraction of cells enclosed by the loop (scan each row, toggling on vertical edges)
    inside = 0
    for row in range(board.rows):
        crossing = False
        for col in range(board.columns):
            if board.v_edges[row, col] == EdgeState.INCLUDED:
                crossing = not crossing
            inside += crossing
    stats['enclosed_cells'] = inside
    stats['enclosed_fraction'] = inside / (board.rows * board.columns)

    return stats
