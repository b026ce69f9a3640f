"""
Core data structure for Slitherlink boards.

A board is stored as three numpy arrays indexed by coordinates: the clues,
the horizontal segments and the vertical segments. Cells, corners and edges
are addressed by ``(row, col)`` and the relationships between them follow
from arithmetic on those coordinates, so cloning a board is a flat copy.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import InvalidBoardError


NO_CLUE = -1
VALID_CLUES = ('', '0', '1', '2', '3')


class Difficulty(Enum):
    """Puzzle difficulty levels"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class EdgeState(IntEnum):
    """Tri-valued marker stored for every edge"""
    EXCLUDED = -1
    UNDETERMINED = 0
    INCLUDED = 1

    @property
    def opposite(self) -> 'EdgeState':
        return EdgeState(-self.value)


class Orientation(Enum):
    """Direction in which an edge runs"""
    HORIZONTAL = "h"
    VERTICAL = "v"


class MarkResult(Enum):
    """Outcome of a single mark_edge call"""
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Edge:
    """
    A grid edge addressed by orientation and coordinates.

    Horizontal edges run left to right and live in a ``(rows + 1, columns)``
    array; vertical edges run top to bottom and live in a
    ``(rows, columns + 1)`` array.
    """
    orientation: Orientation
    row: int
    col: int

    @property
    def is_horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL

    @property
    def corners(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Corner coordinates at both ends: (left, right) or (top, bottom)"""
        if self.is_horizontal:
            return (self.row, self.col), (self.row, self.col + 1)
        return (self.row, self.col), (self.row + 1, self.col)

    @property
    def cells(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Cell coordinates on both sides: (above, below) or (left, right)"""
        if self.is_horizontal:
            return (self.row - 1, self.col), (self.row, self.col)
        return (self.row, self.col - 1), (self.row, self.col)

    def __repr__(self):
        return f"Edge({self.orientation.value}, {self.row}, {self.col})"


def h_edge(row: int, col: int) -> Edge:
    return Edge(Orientation.HORIZONTAL, row, col)


def v_edge(row: int, col: int) -> Edge:
    return Edge(Orientation.VERTICAL, row, col)


class Board:
    """Main board class for Slitherlink"""

    def __init__(self, clues: Sequence[Sequence[str]]):
        """
        Build a board from a clue matrix.

        Args:
            clues: Rectangular matrix of strings, each '' (no clue) or a
                digit from '0' to '3'

        Raises:
            InvalidBoardError: If rows differ in length or a clue is not one
                of the accepted values
        """
        self.clues = self._parse_clues(clues)
        self.rows, self.columns = self.clues.shape
        self.h_edges = np.zeros((self.rows + 1, self.columns), dtype=np.int8)
        self.v_edges = np.zeros((self.rows, self.columns + 1), dtype=np.int8)
        self._edge_callbacks: List[Callable] = []

    @staticmethod
    def _parse_clues(clues: Sequence[Sequence[str]]) -> np.ndarray:
        if clues is None or len(clues) == 0:
            raise InvalidBoardError("Clue matrix has no rows")

        width = len(clues[0])
        if width == 0:
            raise InvalidBoardError("Clue matrix has no columns")

        grid = np.full((len(clues), width), NO_CLUE, dtype=np.int8)
        for row, clue_row in enumerate(clues):
            if len(clue_row) != width:
                raise InvalidBoardError(
                    f"Row {row} has {len(clue_row)} cells, expected {width}"
                )
            for col, value in enumerate(clue_row):
                if not isinstance(value, str) or value not in VALID_CLUES:
                    raise InvalidBoardError(f"Invalid clue {value!r} at ({row}, {col})")
                if value:
                    grid[row, col] = int(value)
        return grid

    @classmethod
    def empty(cls, rows: int, columns: int) -> 'Board':
        """Create a board of the given size without any clues"""
        return cls([[''] * columns for _ in range(rows)])

    def clone(self) -> 'Board':
        """Create an independent copy with the same clues and edge states"""
        board = Board.__new__(Board)
        board.rows = self.rows
        board.columns = self.columns
        board.clues = self.clues.copy()
        board.h_edges = self.h_edges.copy()
        board.v_edges = self.v_edges.copy()
        board._edge_callbacks = []
        return board

    def reset(self):
        """Set every edge back to undetermined"""
        self.h_edges.fill(EdgeState.UNDETERMINED)
        self.v_edges.fill(EdgeState.UNDETERMINED)

    # Clues

    def clue(self, row: int, col: int) -> Optional[int]:
        value = int(self.clues[row, col])
        return None if value == NO_CLUE else value

    def set_clue(self, row: int, col: int, value: Optional[int]):
        """Replace a single clue; None removes it"""
        if value is None:
            self.clues[row, col] = NO_CLUE
        elif value in (0, 1, 2, 3):
            self.clues[row, col] = value
        else:
            raise InvalidBoardError(f"Invalid clue {value!r} at ({row}, {col})")

    def clue_matrix(self) -> List[List[str]]:
        """Clues in the same string form the constructor accepts"""
        return [['' if v == NO_CLUE else str(v) for v in row] for row in self.clues.tolist()]

    def clue_count(self) -> int:
        return int(np.count_nonzero(self.clues != NO_CLUE))

    # Edges

    def _edge_array(self, orientation: Orientation) -> np.ndarray:
        return self.h_edges if orientation is Orientation.HORIZONTAL else self.v_edges

    def has_edge(self, orientation: Orientation, row: int, col: int) -> bool:
        rows, cols = self._edge_array(orientation).shape
        return 0 <= row < rows and 0 <= col < cols

    def edge_at(self, orientation: Orientation, row: int, col: int) -> Optional[Edge]:
        """The edge at these coordinates, or None if it falls off the grid"""
        if self.has_edge(orientation, row, col):
            return Edge(orientation, row, col)
        return None

    def edge_state(self, edge: Edge) -> EdgeState:
        return EdgeState(int(self._edge_array(edge.orientation)[edge.row, edge.col]))

    def set_edge(self, edge: Edge, state: EdgeState):
        """
        Write an edge state unconditionally.

        This is the write used by interactive play; registered edge callbacks
        are notified with the edge and its new state.
        """
        self._edge_array(edge.orientation)[edge.row, edge.col] = state
        for callback in self._edge_callbacks:
            callback(edge, EdgeState(state))

    def mark_edge(self, edge: Edge, state: EdgeState) -> MarkResult:
        """
        Deduction write primitive.

        No-op if the edge already holds ``state``, sets it if the edge is
        undetermined, and reports a conflict without mutating if the edge
        holds the opposite determined value.
        """
        array = self._edge_array(edge.orientation)
        current = array[edge.row, edge.col]
        if current == state:
            return MarkResult.UNCHANGED
        if current == EdgeState.UNDETERMINED:
            array[edge.row, edge.col] = state
            return MarkResult.MODIFIED
        return MarkResult.CONFLICT

    def add_edge_callback(self, callback: Callable):
        """Register a callable(edge, state) notified on interactive edge writes"""
        self._edge_callbacks.append(callback)

    def remove_edge_callback(self, callback: Callable):
        self._edge_callbacks.remove(callback)

    def edges(self) -> Iterator[Edge]:
        """All edges in scan order: horizontal row-major, then vertical row-major"""
        for row in range(self.rows + 1):
            for col in range(self.columns):
                yield Edge(Orientation.HORIZONTAL, row, col)
        for row in range(self.rows):
            for col in range(self.columns + 1):
                yield Edge(Orientation.VERTICAL, row, col)

    def edges_in_state(self, state: EdgeState) -> List[Edge]:
        """Edges holding ``state``, in scan order"""
        found = [Edge(Orientation.HORIZONTAL, int(r), int(c))
                 for r, c in np.argwhere(self.h_edges == state)]
        found.extend(Edge(Orientation.VERTICAL, int(r), int(c))
                     for r, c in np.argwhere(self.v_edges == state))
        return found

    def included_edges(self) -> List[Edge]:
        return self.edges_in_state(EdgeState.INCLUDED)

    def count_edges(self, state: EdgeState) -> int:
        return int(np.count_nonzero(self.h_edges == state) + np.count_nonzero(self.v_edges == state))

    def first_undetermined_edge(self) -> Optional[Edge]:
        """First undetermined edge in scan order, or None if every edge is decided"""
        for orientation, array in ((Orientation.HORIZONTAL, self.h_edges),
                                   (Orientation.VERTICAL, self.v_edges)):
            hits = np.argwhere(array == EdgeState.UNDETERMINED)
            if len(hits):
                row, col = hits[0]
                return Edge(orientation, int(row), int(col))
        return None

    def clear_excluded(self):
        """Turn every excluded mark back into undetermined"""
        self.h_edges[self.h_edges == EdgeState.EXCLUDED] = EdgeState.UNDETERMINED
        self.v_edges[self.v_edges == EdgeState.EXCLUDED] = EdgeState.UNDETERMINED

    def copy_edges_from(self, other: 'Board'):
        self.h_edges[:] = other.h_edges
        self.v_edges[:] = other.v_edges

    # Views

    def cell(self, row: int, col: int):
        from .views import Cell
        return Cell(self, row, col)

    def corner(self, row: int, col: int):
        from .views import Corner
        return Corner(self, row, col)

    def edge_view(self, edge: Edge):
        from .views import EdgeView
        return EdgeView(self, edge)

    def cells(self) -> Iterator:
        for row in range(self.rows):
            for col in range(self.columns):
                yield self.cell(row, col)

    def corners(self) -> Iterator:
        for row in range(self.rows + 1):
            for col in range(self.columns + 1):
                yield self.corner(row, col)

    # Solving

    def check_solved(self):
        """Loop status of the current edge states"""
        from .validator import BoardValidator
        return BoardValidator.check_solved(self)

    def is_solved(self) -> bool:
        return self.check_solved().is_solved

    def solve(self, max_depth: int = 0, max_iterations: int = 0):
        """
        Solve the board in place with the backtracking search.

        Args:
            max_depth: Maximum recursion depth, 0 for unbounded
            max_iterations: Maximum search nodes, 0 for unbounded

        Returns:
            SolverResult describing the search

        Raises:
            NoSolutionError, MultipleSolutionsError, MaxSolveDepthExceededError,
            MaxSolveIterationsExceededError
        """
        from ..solvers.backtracking_solver import BacktrackingSolver
        from ..solvers.base_solver import SolverConfig

        solver = BacktrackingSolver(SolverConfig(max_depth=max_depth, max_iterations=max_iterations))
        return solver.solve(self)

    def __eq__(self, other):
        if isinstance(other, Board):
            return (np.array_equal(self.clues, other.clues)
                    and np.array_equal(self.h_edges, other.h_edges)
                    and np.array_equal(self.v_edges, other.v_edges))
        return False

    __hash__ = None

    def __str__(self):
        """String representation of the board (useful for debugging)"""
        h_marks = {EdgeState.INCLUDED: '---', EdgeState.EXCLUDED: ' x ', EdgeState.UNDETERMINED: '   '}
        v_marks = {EdgeState.INCLUDED: '|', EdgeState.EXCLUDED: 'x', EdgeState.UNDETERMINED: ' '}

        lines = []
        for row in range(self.rows + 1):
            lines.append('+' + '+'.join(h_marks[EdgeState(int(s))] for s in self.h_edges[row]) + '+')
            if row == self.rows:
                break
            parts = []
            for col in range(self.columns + 1):
                parts.append(v_marks[EdgeState(int(self.v_edges[row, col]))])
                if col < self.columns:
                    clue = self.clue(row, col)
                    parts.append(f" {clue if clue is not None else ' '} ")
            lines.append(''.join(parts))
        return '\n'.join(lines)

    def __repr__(self):
        return f"Board({self.rows}x{self.columns}, {self.clue_count()} clues, {self.count_edges(EdgeState.INCLUDED)} included edges)"
