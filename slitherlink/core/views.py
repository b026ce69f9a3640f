"""
Derived views over a board.

Cells, corners and edges hold no state of their own. Each view is a small
handle of ``(board, row, col)`` whose properties read the board's arrays on
demand, so a view always reflects the current edge states.
"""

from enum import Enum
from typing import List, Optional

from .board import Board, Edge, EdgeState, Orientation, h_edge, v_edge


class CornerKind(Enum):
    """Corner classification by the number of missing edge slots"""
    OUTER = "outer"
    EDGE = "edge"
    INNER = "inner"


def _edges_in(board: Board, edges: List[Optional[Edge]], state: EdgeState) -> List[Edge]:
    return [e for e in edges if e is not None and board.edge_state(e) == state]


class Cell:
    """A grid cell with its optional clue"""

    def __init__(self, board: Board, row: int, col: int):
        self.board = board
        self.row = row
        self.col = col

    @property
    def clue(self) -> Optional[int]:
        return self.board.clue(self.row, self.col)

    # Bounding edges

    @property
    def top_edge(self) -> Edge:
        return h_edge(self.row, self.col)

    @property
    def bottom_edge(self) -> Edge:
        return h_edge(self.row + 1, self.col)

    @property
    def left_edge(self) -> Edge:
        return v_edge(self.row, self.col)

    @property
    def right_edge(self) -> Edge:
        return v_edge(self.row, self.col + 1)

    @property
    def edges(self) -> List[Edge]:
        return [self.top_edge, self.right_edge, self.bottom_edge, self.left_edge]

    @property
    def corners(self) -> List['Corner']:
        """Corners in order top-left, top-right, bottom-left, bottom-right"""
        r, c = self.row, self.col
        return [Corner(self.board, r, c), Corner(self.board, r, c + 1),
                Corner(self.board, r + 1, c), Corner(self.board, r + 1, c + 1)]

    # Neighbours

    def _neighbour(self, dr: int, dc: int) -> Optional['Cell']:
        r, c = self.row + dr, self.col + dc
        if 0 <= r < self.board.rows and 0 <= c < self.board.columns:
            return Cell(self.board, r, c)
        return None

    @property
    def top_cell(self) -> Optional['Cell']:
        return self._neighbour(-1, 0)

    @property
    def bottom_cell(self) -> Optional['Cell']:
        return self._neighbour(1, 0)

    @property
    def left_cell(self) -> Optional['Cell']:
        return self._neighbour(0, -1)

    @property
    def right_cell(self) -> Optional['Cell']:
        return self._neighbour(0, 1)

    @property
    def top_left_cell(self) -> Optional['Cell']:
        return self._neighbour(-1, -1)

    @property
    def top_right_cell(self) -> Optional['Cell']:
        return self._neighbour(-1, 1)

    @property
    def bottom_left_cell(self) -> Optional['Cell']:
        return self._neighbour(1, -1)

    @property
    def bottom_right_cell(self) -> Optional['Cell']:
        return self._neighbour(1, 1)

    @property
    def adjacent_cells(self) -> List['Cell']:
        return [c for c in (self.top_cell, self.right_cell, self.bottom_cell, self.left_cell)
                if c is not None]

    # Edge counts

    @property
    def included_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.INCLUDED)

    @property
    def excluded_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.EXCLUDED)

    @property
    def unmarked_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.UNDETERMINED)

    def edge_count(self, state: EdgeState = EdgeState.INCLUDED) -> int:
        return len(_edges_in(self.board, self.edges, state))

    @property
    def is_satisfied(self) -> bool:
        """True if the clue matches the included edge count; clue-less cells always are"""
        clue = self.clue
        return clue is None or self.edge_count(EdgeState.INCLUDED) == clue

    # Boundary

    @property
    def is_corner_cell(self) -> bool:
        """True if the cell touches two sides of the grid boundary"""
        return self.outer_h_edge is not None and self.outer_v_edge is not None

    @property
    def outer_h_edge(self) -> Optional[Edge]:
        """The boundary horizontal edge of this cell, if any"""
        if self.row == 0:
            return self.top_edge
        if self.row == self.board.rows - 1:
            return self.bottom_edge
        return None

    @property
    def outer_v_edge(self) -> Optional[Edge]:
        """The boundary vertical edge of this cell, if any"""
        if self.col == 0:
            return self.left_edge
        if self.col == self.board.columns - 1:
            return self.right_edge
        return None

    def __eq__(self, other):
        return (isinstance(other, Cell) and other.board is self.board
                and (other.row, other.col) == (self.row, self.col))

    def __hash__(self):
        return hash((id(self.board), self.row, self.col))

    def __repr__(self):
        return f"Cell({self.row}, {self.col}, clue={self.clue})"


class Corner:
    """A grid vertex where up to four edges meet"""

    def __init__(self, board: Board, row: int, col: int):
        self.board = board
        self.row = row
        self.col = col

    @property
    def top_edge(self) -> Optional[Edge]:
        return self.board.edge_at(Orientation.VERTICAL, self.row - 1, self.col)

    @property
    def bottom_edge(self) -> Optional[Edge]:
        return self.board.edge_at(Orientation.VERTICAL, self.row, self.col)

    @property
    def left_edge(self) -> Optional[Edge]:
        return self.board.edge_at(Orientation.HORIZONTAL, self.row, self.col - 1)

    @property
    def right_edge(self) -> Optional[Edge]:
        return self.board.edge_at(Orientation.HORIZONTAL, self.row, self.col)

    @property
    def edge_slots(self) -> List[Optional[Edge]]:
        return [self.top_edge, self.right_edge, self.bottom_edge, self.left_edge]

    @property
    def edges(self) -> List[Edge]:
        return [e for e in self.edge_slots if e is not None]

    @property
    def kind(self) -> CornerKind:
        missing = sum(1 for e in self.edge_slots if e is None)
        if missing >= 2:
            return CornerKind.OUTER
        if missing == 1:
            return CornerKind.EDGE
        return CornerKind.INNER

    @property
    def cells(self) -> List[Cell]:
        """Cells touching this corner that lie inside the grid"""
        found = []
        for r in (self.row - 1, self.row):
            for c in (self.col - 1, self.col):
                if 0 <= r < self.board.rows and 0 <= c < self.board.columns:
                    found.append(Cell(self.board, r, c))
        return found

    @property
    def included_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.INCLUDED)

    @property
    def excluded_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.EXCLUDED)

    @property
    def unmarked_edges(self) -> List[Edge]:
        return _edges_in(self.board, self.edges, EdgeState.UNDETERMINED)

    @property
    def non_included_edges(self) -> List[Edge]:
        return [e for e in self.edges if self.board.edge_state(e) != EdgeState.INCLUDED]

    @property
    def non_excluded_edges(self) -> List[Edge]:
        return [e for e in self.edges if self.board.edge_state(e) != EdgeState.EXCLUDED]

    def edge_count(self, state: EdgeState = EdgeState.INCLUDED) -> int:
        return len(_edges_in(self.board, self.edges, state))

    @property
    def is_valid(self) -> bool:
        """False if the corner can no longer end up with 0 or 2 included edges"""
        included = self.edge_count(EdgeState.INCLUDED)
        if included > 2:
            return False
        return not (included == 1 and self.edge_count(EdgeState.UNDETERMINED) == 0)

    def __eq__(self, other):
        return (isinstance(other, Corner) and other.board is self.board
                and (other.row, other.col) == (self.row, self.col))

    def __hash__(self):
        return hash((id(self.board), self.row, self.col))

    def __repr__(self):
        return f"Corner({self.row}, {self.col}, {self.kind.value})"


class EdgeView:
    """An edge bound to a board, with its loop-walking accessors"""

    def __init__(self, board: Board, edge: Edge):
        self.board = board
        self.edge = edge

    @property
    def state(self) -> EdgeState:
        return self.board.edge_state(self.edge)

    @property
    def end_corners(self) -> List[Corner]:
        return [Corner(self.board, r, c) for r, c in self.edge.corners]

    @property
    def cells(self) -> List[Cell]:
        found = []
        for r, c in self.edge.cells:
            if 0 <= r < self.board.rows and 0 <= c < self.board.columns:
                found.append(Cell(self.board, r, c))
        return found

    def _path_through(self, corner: Corner) -> Optional[Edge]:
        others = [e for e in corner.included_edges if e != self.edge]
        if len(others) == 1:
            return others[0]
        return None

    @property
    def left_path(self) -> Optional[Edge]:
        """Included continuation at the left end of a horizontal edge"""
        if not self.edge.is_horizontal:
            return None
        return self._path_through(self.end_corners[0])

    @property
    def right_path(self) -> Optional[Edge]:
        """Included continuation at the right end of a horizontal edge"""
        if not self.edge.is_horizontal:
            return None
        return self._path_through(self.end_corners[1])

    @property
    def top_path(self) -> Optional[Edge]:
        """Included continuation at the top end of a vertical edge"""
        if self.edge.is_horizontal:
            return None
        return self._path_through(self.end_corners[0])

    @property
    def bottom_path(self) -> Optional[Edge]:
        """Included continuation at the bottom end of a vertical edge"""
        if self.edge.is_horizontal:
            return None
        return self._path_through(self.end_corners[1])

    def paths(self):
        """(start-side, end-side) continuations, whatever the orientation"""
        if self.edge.is_horizontal:
            return self.left_path, self.right_path
        return self.top_path, self.bottom_path

    def __repr__(self):
        return f"EdgeView({self.edge!r}, {self.state.name})"
