"""
Puzzle generator for Slitherlink.

A board is built in three phases: grow a random region of cells whose
outline is a single loop, derive every clue from that loop, then remove
clues in random order for as long as the board stays uniquely solvable
within a bounded search.
"""

import random
from typing import List, Optional, Set, Tuple

from .. import config as settings
from ..core.board import Board, Difficulty
from ..core.exceptions import (
    MultipleSolutionsError,
    SlitherlinkError,
    SolveBudgetExceededError,
)
from ..core.utils import setup_logger, timer
from ..solvers import BacktrackingSolver, SolverConfig


Position = Tuple[int, int]


class PuzzleGeneratorConfig:
    """Configuration for puzzle generator"""

    def __init__(self, **kwargs):
        self.max_attempts: int = kwargs.get('max_attempts', settings.GENERATOR_MAX_ATTEMPTS)
        self.max_iterations: int = kwargs.get('max_iterations', 0)
        self.ensure_unique: bool = kwargs.get('ensure_unique', True)
        self.random_seed: Optional[int] = kwargs.get('random_seed', None)

        # Search depth allowed while removing clues
        self.difficulty_params = {
            difficulty: {'max_depth': settings.DIFFICULTY_MAX_DEPTH[difficulty.value]}
            for difficulty in Difficulty
        }


class PuzzleGenerator:
    """Generate Slitherlink boards from random loops"""

    def __init__(self, config: Optional[PuzzleGeneratorConfig] = None):
        self.config = config or PuzzleGeneratorConfig()
        self.logger = setup_logger(self.__class__.__name__)

        if self.config.random_seed is not None:
            random.seed(self.config.random_seed)

        # Solver for uniqueness checking
        self.solver = BacktrackingSolver(SolverConfig(
            max_iterations=self.config.max_iterations,
            log_level="WARNING"
        ))

    def generate_board(self, rows: int, columns: int,
                       difficulty: Difficulty = Difficulty.EASY) -> Optional[Board]:
        """
        Generate a board with a unique solution.

        Args:
            rows: Number of cell rows
            columns: Number of cell columns
            difficulty: Controls how deep the search may go while clues are removed

        Returns:
            Generated board with all edges undetermined, or None if every
            attempt failed
        """
        if rows < 1 or columns < 1:
            raise ValueError(f"Board size must be positive, got {rows}x{columns}")

        self.logger.info(f"Generating {rows}x{columns} {difficulty.value} board")
        max_depth = self.config.difficulty_params[difficulty]['max_depth']

        for attempt in range(self.config.max_attempts):
            board = Board.empty(rows, columns)
            region = self._generate_path(board)
            self._derive_clues(board, region)
            self._remove_clues(board, max_depth)

            if self._has_unique_solution(board):
                self.logger.info(
                    f"Successfully generated board on attempt {attempt + 1} "
                    f"with {board.clue_count()} clues"
                )
                return board
            self.logger.warning(f"Attempt {attempt + 1} produced a board without a unique solution")

        self.logger.error(f"Failed to generate valid board after {self.config.max_attempts} attempts")
        return None

    def _generate_path(self, board: Board) -> List[Position]:
        """
        Grow a random region of cells and return it.

        A cell may join the region only through one side, so the region
        never touches itself and its outline stays a single simple loop.
        Straight growth is weighted over turns.
        """
        rows, columns = board.rows, board.columns
        available: Set[Position] = {(r, c) for r in range(rows) for c in range(columns)}

        def free(cell: Position) -> bool:
            r, c = cell
            return not (0 <= r < rows and 0 <= c < columns) or cell in available

        start = (random.randrange(rows), random.randrange(columns))
        available.discard(start)
        expandable = [start]
        region = []

        while expandable:
            index = random.randrange(len(expandable))
            r, c = expandable[index]
            neighbours = []

            for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                n = (r + dr, c + dc)
                if n not in available:
                    continue
                nr, nc = n
                # Perpendicular to the growth direction
                pr, pc = dc, dr
                sides = [(nr + pr, nc + pc), (nr - pr, nc - pc)]
                ahead = [(nr + dr, nc + dc), (nr + dr + pr, nc + dc + pc), (nr + dr - pr, nc + dc - pc)]
                if all(free(cell) for cell in ahead + sides):
                    neighbours.append(n)
                    if all(cell in available for cell in sides):
                        neighbours.extend([n, n])

            if not neighbours or (len(neighbours) == 1 and random.random() < .5):
                region.append(expandable.pop(index))
            else:
                chosen = random.choice(neighbours)
                expandable.append(chosen)
                available.discard(chosen)

        return region

    @staticmethod
    def _derive_clues(board: Board, region: List[Position]):
        """Set every clue from the outline of the region"""
        claimed = set(region)
        for cell in board.cells():
            neighbours = sum(1 for other in cell.adjacent_cells if (other.row, other.col) in claimed)
            value = 4 - neighbours if (cell.row, cell.col) in claimed else neighbours
            # A lone cell is its own loop; 4 is not a clue
            board.set_clue(cell.row, cell.col, value if value < 4 else None)

    @timer
    def _remove_clues(self, board: Board, max_depth: int):
        """Drop clues in random order while the board stays uniquely solvable"""
        positions = [(r, c) for r in range(board.rows) for c in range(board.columns)]
        random.shuffle(positions)
        self.solver.config.max_depth = max_depth

        for r, c in positions:
            value = board.clue(r, c)
            board.set_clue(r, c, None)
            try:
                self.solver.solve(board)
            except (MultipleSolutionsError, SolveBudgetExceededError):
                board.set_clue(r, c, value)
            except SlitherlinkError as e:
                self.logger.error(f"Unexpected failure after removing clue at ({r}, {c}): {e}")
                board.set_clue(r, c, value)

        board.reset()
        self.logger.debug(f"Kept {board.clue_count()} of {len(positions)} clues")

    def _has_unique_solution(self, board: Board) -> bool:
        """Check the board with an unbounded search, leaving its edges undetermined"""
        if not self.config.ensure_unique:
            return True

        self.solver.config.max_depth = 0
        try:
            result = self.solver.solve(board)
        except SlitherlinkError as e:
            self.logger.debug(f"Uniqueness check failed: {e}")
            return False
        finally:
            board.reset()
        return result.success

    def generate_batch(self, count: int, rows: int, columns: int,
                       difficulty: Difficulty = Difficulty.EASY) -> List[Board]:
        """Generate multiple boards"""
        boards = []

        for i in range(count):
            self.logger.info(f"Generating board {i+1}/{count}")
            board = self.generate_board(rows, columns, difficulty)
            if board:
                boards.append(board)

        self.logger.info(f"Generated {len(boards)}/{count} valid boards")
        return boards


class DifficultyEstimator:
    """Estimate board difficulty from the search it needs"""

    @staticmethod
    def estimate_difficulty(board: Board) -> Difficulty:
        """
        Rate a board by the deepest branch its solve needs.

        Args:
            board: The board to analyze; it is not modified

        Returns:
            The easiest difficulty whose depth bound covers the search

        Raises:
            NoSolutionError, MultipleSolutionsError: If the board is not a
                proper puzzle
        """
        solver = BacktrackingSolver(SolverConfig(log_level="WARNING"))
        result = solver.solve(board.clone())

        for difficulty in Difficulty:
            if result.max_depth_reached <= settings.DIFFICULTY_MAX_DEPTH[difficulty.value]:
                return difficulty
        return Difficulty.EXPERT


def generate_board(rows: int, columns: int) -> Optional[Board]:
    """Generate an easy board with default settings"""
    return PuzzleGenerator().generate_board(rows, columns)
