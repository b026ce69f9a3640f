"""
Validator for Slitherlink loop and clue constraints.
"""

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .board import Board, Edge, EdgeState
from .views import Corner


class ValidationResult:
    """Result of board validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


@dataclass
class LoopStatus:
    """Structure of the included edges on a board"""
    is_valid: bool
    is_solved: bool
    loop_count: int = 0
    open_paths: int = 0
    loop_length: int = 0
    branched: bool = False


@dataclass
class _Walk:
    closed: bool
    length: int
    branched: bool = False


class BoardValidator:
    """Validates Slitherlink boards"""

    @staticmethod
    def _step(board: Board, edge: Edge, corner: Tuple[int, int]) -> Tuple[Optional[Edge], bool]:
        """
        Continuation of ``edge`` through ``corner``.

        Returns the next included edge (or None at a dead end) and whether
        the corner branches.
        """
        if Corner(board, *corner).edge_count(EdgeState.INCLUDED) > 2:
            return None, True
        side = edge.corners.index(corner)
        return board.edge_view(edge).paths()[side], False

    @staticmethod
    def _walk(board: Board, start: Edge, visited: Set[Edge]) -> _Walk:
        visited.add(start)
        length = 1

        # Forward from the right (or bottom) end of the start edge
        edge, corner = start, start.corners[1]
        while True:
            nxt, branched = BoardValidator._step(board, edge, corner)
            if branched:
                return _Walk(False, length, branched=True)
            if nxt is None:
                break
            if nxt == start:
                return _Walk(True, length)
            if nxt in visited:
                return _Walk(False, length, branched=True)
            visited.add(nxt)
            length += 1
            corner = nxt.corners[1] if nxt.corners[0] == corner else nxt.corners[0]
            edge = nxt

        # Dead end: walk back from the other end to consume the rest of the path
        edge, corner = start, start.corners[0]
        while True:
            nxt, branched = BoardValidator._step(board, edge, corner)
            if branched:
                return _Walk(False, length, branched=True)
            if nxt is None or nxt in visited:
                break
            visited.add(nxt)
            length += 1
            corner = nxt.corners[1] if nxt.corners[0] == corner else nxt.corners[0]
            edge = nxt
        return _Walk(False, length)

    @staticmethod
    def check_solved(board: Board) -> LoopStatus:
        """
        Classify the included edges of a board.

        A board with no included edges, or with only open path fragments,
        is valid and unsolved. A branch, a closed loop next to any other
        included edge, or a single closed loop that leaves a clue unsatisfied
        is invalid. A single closed loop covering every included edge with
        every clue satisfied is solved.
        """
        included = board.included_edges()
        if not included:
            return LoopStatus(is_valid=True, is_solved=False)

        visited: Set[Edge] = set()
        loops = 0
        open_paths = 0
        loop_length = 0
        for start in included:
            if start in visited:
                continue
            walk = BoardValidator._walk(board, start, visited)
            if walk.branched:
                return LoopStatus(False, False, loops, open_paths, branched=True)
            if walk.closed:
                loops += 1
                loop_length = walk.length
            else:
                open_paths += 1

        if loops == 0:
            return LoopStatus(True, False, 0, open_paths)
        if loops > 1 or open_paths > 0:
            return LoopStatus(False, False, loops, open_paths, loop_length)

        solved = all(cell.is_satisfied for cell in board.cells())
        return LoopStatus(solved, solved, 1, 0, loop_length)

    @staticmethod
    def validate_solution(board: Board) -> ValidationResult:
        """Validate if the board holds a complete solution"""
        result = ValidationResult()

        for cell in board.cells():
            if not cell.is_satisfied:
                result.add_error(
                    f"Cell ({cell.row}, {cell.col}) has {cell.edge_count()} edges, requires {cell.clue}"
                )

        for corner in board.corners():
            degree = corner.edge_count(EdgeState.INCLUDED)
            if degree not in (0, 2):
                result.add_error(f"Corner ({corner.row}, {corner.col}) has degree {degree}")

        status = BoardValidator.check_solved(board)
        if status.branched:
            result.add_error("Loop branches")
        elif status.loop_count == 0:
            result.add_error("Board has no closed loop")
        elif status.loop_count > 1 or status.open_paths:
            result.add_error(
                f"Included edges form {status.loop_count} loops and {status.open_paths} open paths"
            )

        excluded = board.count_edges(EdgeState.EXCLUDED)
        if excluded:
            result.add_warning(f"{excluded} edges are still marked excluded")

        return result

    @staticmethod
    def validate_partial_solution(board: Board) -> ValidationResult:
        """Validate an intermediate state: nothing may be over-constrained yet"""
        result = ValidationResult()

        for cell in board.cells():
            clue = cell.clue
            if clue is None:
                continue
            if cell.edge_count(EdgeState.INCLUDED) > clue:
                result.add_error(f"Cell ({cell.row}, {cell.col}) exceeds clue {clue}")
            if cell.edge_count(EdgeState.EXCLUDED) > 4 - clue:
                result.add_error(f"Cell ({cell.row}, {cell.col}) cannot reach clue {clue}")

        for corner in board.corners():
            if not corner.is_valid:
                result.add_error(f"Corner ({corner.row}, {corner.col}) cannot reach degree 0 or 2")

        if not BoardValidator.check_solved(board).is_valid:
            result.add_error("Included edges do not form a valid loop fragment")

        return result

    @staticmethod
    def get_board_statistics(board: Board) -> dict:
        """Get various statistics about the board"""
        status = board.check_solved()
        clue_count = board.clue_count()
        stats = {
            'rows': board.rows,
            'columns': board.columns,
            'num_clues': clue_count,
            'clue_density': clue_count / (board.rows * board.columns),
            'included_edges': board.count_edges(EdgeState.INCLUDED),
            'excluded_edges': board.count_edges(EdgeState.EXCLUDED),
            'undetermined_edges': board.count_edges(EdgeState.UNDETERMINED),
            'is_valid': status.is_valid,
            'is_solved': status.is_solved,
        }

        clue_dist = {}
        for cell in board.cells():
            if cell.clue is not None:
                clue_dist[cell.clue] = clue_dist.get(cell.clue, 0) + 1
        stats['clue_distribution'] = clue_dist

        return stats
