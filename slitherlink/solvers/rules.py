"""
Deduction rules for Slitherlink boards.

Every rule reads the board and writes through ``_mark``, which wraps
``Board.mark_edge``: writing the opposite of a determined state raises an
``EdgeValueConflictError``. Conflicts never leave this module; a pass reports
them as a flag so the search can drop the branch.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.board import NO_CLUE, Board, Edge, EdgeState, MarkResult, Orientation, h_edge, v_edge
from ..core.exceptions import CellValueConflictError, EdgeValueConflictError


# Cell edges as bits: top, right, bottom, left
_TOP, _RIGHT, _BOTTOM, _LEFT = 1, 2, 4, 8
_BITS = (_TOP, _RIGHT, _BOTTOM, _LEFT)

# Corner index d: 0 top-left, 1 top-right, 2 bottom-left, 3 bottom-right.
# The diagonal opposite of d is 3 - d.
_CORNER_PAIRS = (_TOP | _LEFT, _TOP | _RIGHT, _BOTTOM | _LEFT, _BOTTOM | _RIGHT)
_POPCOUNT = tuple(bin(i).count('1') for i in range(16))
_ALL_COUNTS = 0b111


def _compatible(mask: int) -> int:
    """Counts n for one side of a vertex that can pair with a count in ``mask``"""
    allowed = 0
    for n in range(3):
        if any(mask >> m & 1 and n + m in (0, 2) for m in range(3)):
            allowed |= 1 << n
    return allowed


_COMPATIBLE = tuple(_compatible(mask) for mask in range(8))


def cell_edges(row: int, col: int) -> Tuple[Edge, Edge, Edge, Edge]:
    """Edges of a cell in bit order: top, right, bottom, left"""
    return h_edge(row, col), v_edge(row, col + 1), h_edge(row + 1, col), v_edge(row, col)


def corner_pair(row: int, col: int, d: int) -> Tuple[Edge, Edge]:
    """The two edges of cell (row, col) that meet at its corner ``d``"""
    return h_edge(row + (d >= 2), col), v_edge(row, col + d % 2)


@dataclass
class PassOutcome:
    """Result of one pass over the rule catalogue"""
    modified: int
    conflict: bool

    def __bool__(self):
        return not self.conflict


class DeductionEngine:
    """
    Applies the rule catalogue to a board.

    Rules are keyed on clue values and on corner degree. One pass applies
    each rule family once, in a fixed order; ``run_to_fixpoint`` repeats
    passes until nothing changes or a conflict appears.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.rules_used: Dict[str, int] = defaultdict(int)
        self._modified = 0

    def apply_one_time_pass(self, board: Board) -> PassOutcome:
        """Apply every rule family once"""
        self._modified = 0
        try:
            self._apply_zero_rule(board)
            self._apply_corner_cell_rule(board)
            self._apply_adjacent_threes_rule(board)
            self._apply_three_beside_zero_rule(board)
            self._apply_boundary_ones_rule(board)
            self._apply_diagonal_threes_rule(board)
            self._apply_count_closure_rule(board)
            self._apply_corner_degree_rule(board)
            self._apply_corner_count_rule(board)
        except (EdgeValueConflictError, CellValueConflictError) as e:
            self.rules_used['conflicts'] += 1
            self.logger.debug(f"Deduction conflict: {e}")
            return PassOutcome(self._modified, True)
        return PassOutcome(self._modified, False)

    def run_to_fixpoint(self, board: Board, max_iterations: int = 0) -> bool:
        """
        Repeat passes until no rule modifies the board.

        Args:
            board: Board to deduce on, modified in place
            max_iterations: Maximum number of modifying passes, 0 for unbounded

        Returns:
            False if a conflict was found, True otherwise
        """
        iterations = 0
        while True:
            outcome = self.apply_one_time_pass(board)
            if outcome.conflict:
                return False
            if outcome.modified == 0:
                return True
            iterations += 1
            if max_iterations and iterations >= max_iterations:
                self.logger.debug(f"Stopped deduction after {iterations} passes")
                return True

    def _mark(self, board: Board, edge: Optional[Edge], state: EdgeState, rule: str):
        if edge is None:
            return
        result = board.mark_edge(edge, state)
        if result is MarkResult.CONFLICT:
            raise EdgeValueConflictError(edge, f"{rule}: cannot mark {edge} {state.name}")
        if result is MarkResult.MODIFIED:
            self._modified += 1
            self.rules_used[rule] += 1

    @staticmethod
    def _clued_cells(board: Board, value: int) -> List[Tuple[int, int]]:
        return [(int(r), int(c)) for r, c in zip(*(board.clues == value).nonzero())]

    # Clue rules

    def _apply_zero_rule(self, board: Board):
        """A 0 excludes its four edges"""
        for r, c in self._clued_cells(board, 0):
            for edge in cell_edges(r, c):
                self._mark(board, edge, EdgeState.EXCLUDED, 'zero')

    def _apply_corner_cell_rule(self, board: Board):
        """
        Clues in the four grid-corner cells.

        A 1 excludes both boundary edges and a 3 includes them. A 2 includes
        the boundary edges that continue away from the corner on the
        neighbouring cells.
        """
        R, C = board.rows, board.columns
        corner_cells = [
            ((0, 0), (h_edge(0, 0), v_edge(0, 0)), (h_edge(0, 1), v_edge(1, 0))),
            ((0, C - 1), (h_edge(0, C - 1), v_edge(0, C)), (h_edge(0, C - 2), v_edge(1, C))),
            ((R - 1, 0), (h_edge(R, 0), v_edge(R - 1, 0)), (h_edge(R, 1), v_edge(R - 2, 0))),
            ((R - 1, C - 1), (h_edge(R, C - 1), v_edge(R - 1, C)), (h_edge(R, C - 2), v_edge(R - 2, C))),
        ]
        for (r, c), boundary, continuation in corner_cells:
            clue = board.clue(r, c)
            if clue == 1:
                for edge in boundary:
                    self._mark(board, edge, EdgeState.EXCLUDED, 'corner_cell')
            elif clue == 3:
                for edge in boundary:
                    self._mark(board, edge, EdgeState.INCLUDED, 'corner_cell')
            elif clue == 2:
                for edge in continuation:
                    if board.has_edge(edge.orientation, edge.row, edge.col):
                        self._mark(board, edge, EdgeState.INCLUDED, 'corner_cell')

    @staticmethod
    def _loop_satisfies_clues(board: Board, loop: List[Edge]) -> bool:
        """True if ``loop`` alone would satisfy every clue on the board"""
        edges = set(loop)
        for r, c in zip(*(board.clues != NO_CLUE).nonzero()):
            count = sum(1 for e in cell_edges(int(r), int(c)) if e in edges)
            if count != board.clues[r, c]:
                return False
        return True

    def _apply_adjacent_threes_rule(self, board: Board):
        """
        Two side-by-side 3s include the three parallel edges and exclude the
        line continuing their shared edge.

        Leaving the shared edge out closes a loop around just the two cells,
        so the rule holds unless that small loop is itself the solution.
        """
        for r, c in self._clued_cells(board, 3):
            if c + 1 < board.columns and board.clue(r, c + 1) == 3:
                ring = [h_edge(r, c), h_edge(r, c + 1), h_edge(r + 1, c), h_edge(r + 1, c + 1),
                        v_edge(r, c), v_edge(r, c + 2)]
                if not self._loop_satisfies_clues(board, ring):
                    for col in (c, c + 1, c + 2):
                        self._mark(board, v_edge(r, col), EdgeState.INCLUDED, 'adjacent_threes')
                    for row in (r - 1, r + 1):
                        self._mark(board, board.edge_at(Orientation.VERTICAL, row, c + 1),
                                   EdgeState.EXCLUDED, 'adjacent_threes')
            if r + 1 < board.rows and board.clue(r + 1, c) == 3:
                ring = [v_edge(r, c), v_edge(r + 1, c), v_edge(r, c + 1), v_edge(r + 1, c + 1),
                        h_edge(r, c), h_edge(r + 2, c)]
                if not self._loop_satisfies_clues(board, ring):
                    for row in (r, r + 1, r + 2):
                        self._mark(board, h_edge(row, c), EdgeState.INCLUDED, 'adjacent_threes')
                    for col in (c - 1, c + 1):
                        self._mark(board, board.edge_at(Orientation.HORIZONTAL, r + 1, col),
                                   EdgeState.EXCLUDED, 'adjacent_threes')

    def _apply_three_beside_zero_rule(self, board: Board):
        """A 3 next to a 0 includes its other three edges and the shared line's continuations"""
        for r, c in self._clued_cells(board, 0):
            for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                tr, tc = r + dr, c + dc
                if not (0 <= tr < board.rows and 0 <= tc < board.columns):
                    continue
                if board.clue(tr, tc) != 3:
                    continue
                if dr:
                    line = max(r, tr)
                    shared = h_edge(line, c)
                    continuations = [board.edge_at(Orientation.HORIZONTAL, line, col) for col in (c - 1, c + 1)]
                else:
                    line = max(c, tc)
                    shared = v_edge(r, line)
                    continuations = [board.edge_at(Orientation.VERTICAL, row, line) for row in (r - 1, r + 1)]
                for edge in cell_edges(tr, tc):
                    if edge != shared:
                        self._mark(board, edge, EdgeState.INCLUDED, 'three_beside_zero')
                for edge in continuations:
                    self._mark(board, edge, EdgeState.INCLUDED, 'three_beside_zero')

    def _apply_boundary_ones_rule(self, board: Board):
        """Two adjacent 1s along the boundary exclude the edge between them"""
        R, C = board.rows, board.columns
        for r, c in self._clued_cells(board, 1):
            if c + 1 < C and board.clue(r, c + 1) == 1 and (r == 0 or r == R - 1):
                self._mark(board, v_edge(r, c + 1), EdgeState.EXCLUDED, 'boundary_ones')
            if r + 1 < R and board.clue(r + 1, c) == 1 and (c == 0 or c == C - 1):
                self._mark(board, h_edge(r + 1, c), EdgeState.EXCLUDED, 'boundary_ones')

    def _apply_diagonal_threes_rule(self, board: Board):
        """
        Diagonal 3s, directly or through a chain of 2s, include the outer
        corner edges of both 3s.
        """
        for r, c in self._clued_cells(board, 3):
            # Walking towards bottom-right (d=3) and bottom-left (d=2)
            for d, dc in ((3, 1), (2, -1)):
                row, col = r + 1, c + dc
                while 0 <= row < board.rows and 0 <= col < board.columns and board.clue(row, col) == 2:
                    row, col = row + 1, col + dc
                if not (0 <= row < board.rows and 0 <= col < board.columns):
                    continue
                if board.clue(row, col) != 3:
                    continue
                for edge in corner_pair(r, c, 3 - d) + corner_pair(row, col, d):
                    self._mark(board, edge, EdgeState.INCLUDED, 'diagonal_threes')

    def _apply_count_closure_rule(self, board: Board):
        """A clue whose count is reached excludes the rest; one that needs every free edge includes them"""
        for r, c in zip(*(board.clues != NO_CLUE).nonzero()):
            r, c = int(r), int(c)
            clue = board.clue(r, c)
            edges = cell_edges(r, c)
            states = [board.edge_state(e) for e in edges]
            included = states.count(EdgeState.INCLUDED)
            excluded = states.count(EdgeState.EXCLUDED)
            if included > clue or excluded > 4 - clue:
                raise CellValueConflictError(r, c)
            if included == clue:
                fill = EdgeState.EXCLUDED
            elif excluded == 4 - clue:
                fill = EdgeState.INCLUDED
            else:
                continue
            for edge, state in zip(edges, states):
                if state == EdgeState.UNDETERMINED:
                    self._mark(board, edge, fill, 'count_closure')

    # Corner rules

    def _apply_corner_degree_rule(self, board: Board):
        """Every corner ends with 0 or 2 included edges"""
        for row in range(board.rows + 1):
            for col in range(board.columns + 1):
                corner = board.corner(row, col)
                included = corner.included_edges
                unmarked = corner.unmarked_edges
                if len(included) > 2 or (len(included) == 1 and not unmarked):
                    raise EdgeValueConflictError(
                        included[0], f"Corner ({row}, {col}) has {len(included)} included edges"
                    )
                if len(included) == 2:
                    for edge in unmarked:
                        self._mark(board, edge, EdgeState.EXCLUDED, 'corner_degree')
                elif len(included) == 1 and len(unmarked) == 1:
                    self._mark(board, unmarked[0], EdgeState.INCLUDED, 'corner_degree')
                elif not included and len(unmarked) == 1:
                    self._mark(board, unmarked[0], EdgeState.EXCLUDED, 'corner_degree')

    def _candidates(self, board: Board, row: int, col: int) -> List[int]:
        """Edge subsets of a cell consistent with its clue and current edge states"""
        inc = exc = 0
        for bit, edge in zip(_BITS, cell_edges(row, col)):
            state = board.edge_state(edge)
            if state == EdgeState.INCLUDED:
                inc |= bit
            elif state == EdgeState.EXCLUDED:
                exc |= bit
        clue = board.clue(row, col)
        return [s for s in range(16)
                if s & inc == inc and not s & exc and (clue is None or _POPCOUNT[s] == clue)]

    def _outside_edge(self, board: Board, row: int, col: int, d: int) -> Tuple[bool, Optional[Edge]]:
        """
        For a corner of a cell, whether the diagonal cell exists, and if it
        does not, the single corner edge that belongs to no cell pair (or None).
        """
        dr = -1 if d < 2 else 1
        dc = -1 if d % 2 == 0 else 1
        if 0 <= row + dr < board.rows and 0 <= col + dc < board.columns:
            return True, None
        pair = corner_pair(row, col, d)
        corner = board.corner(row + (d >= 2), col + d % 2)
        outside = [e for e in corner.edges if e not in pair]
        return False, outside[0] if outside else None

    def _apply_corner_count_rule(self, board: Board):
        """
        Propagate the number of included edges each cell has at each corner.

        For every cell and corner the engine keeps the set of possible counts
        (0, 1 or 2) of included edges among the two cell edges meeting there.
        A cell's clue ties the counts at its four corners together, and a
        vertex ties a cell's count to the count of the diagonal cell sharing
        it, since the two must add up to 0 or 2. The sets are narrowed to a
        local fixpoint and the edges forced by what remains are marked.
        """
        cells = [(r, c) for r in range(board.rows) for c in range(board.columns)]
        candidates = {cell: self._candidates(board, *cell) for cell in cells}
        masks = {(r, c, d): _ALL_COUNTS for r, c in cells for d in range(4)}

        outside = {}
        for r, c in cells:
            for d in range(4):
                has_diagonal, edge = self._outside_edge(board, r, c, d)
                if has_diagonal:
                    continue
                if edge is None:
                    outside[(r, c, d)] = (None, 0b001)
                else:
                    state = board.edge_state(edge)
                    mask = {EdgeState.INCLUDED: 0b010, EdgeState.EXCLUDED: 0b001}.get(state, 0b011)
                    outside[(r, c, d)] = (edge, mask)

        changed = True
        while changed:
            changed = False

            for (r, c), subsets in candidates.items():
                valid = [s for s in subsets
                         if all(masks[(r, c, d)] >> _POPCOUNT[s & _CORNER_PAIRS[d]] & 1 for d in range(4))]
                if not valid:
                    raise CellValueConflictError(r, c, f"No edge assignment left for cell ({r}, {c})")
                candidates[(r, c)] = valid
                for d in range(4):
                    seen = 0
                    for s in valid:
                        seen |= 1 << _POPCOUNT[s & _CORNER_PAIRS[d]]
                    if seen != masks[(r, c, d)]:
                        masks[(r, c, d)] = seen
                        changed = True

            for (r, c, d), mask in list(masks.items()):
                if (r, c, d) in outside:
                    other = outside[(r, c, d)][1]
                else:
                    dr = -1 if d < 2 else 1
                    dc = -1 if d % 2 == 0 else 1
                    other = masks[(r + dr, c + dc, 3 - d)]
                narrowed = mask & _COMPATIBLE[other]
                if not narrowed:
                    raise CellValueConflictError(r, c, f"Corner {d} of cell ({r}, {c}) cannot reach degree 0 or 2")
                if narrowed != mask:
                    masks[(r, c, d)] = narrowed
                    changed = True

        for (r, c), valid in candidates.items():
            must, may = 0b1111, 0
            for s in valid:
                must &= s
                may |= s
            for bit, edge in zip(_BITS, cell_edges(r, c)):
                if must & bit:
                    self._mark(board, edge, EdgeState.INCLUDED, 'corner_counts')
                elif not may & bit:
                    self._mark(board, edge, EdgeState.EXCLUDED, 'corner_counts')

        for key, (edge, _) in outside.items():
            if edge is None:
                continue
            mask = masks[key]
            if mask == 0b010:
                self._mark(board, edge, EdgeState.INCLUDED, 'corner_counts')
            elif not mask & 0b010:
                self._mark(board, edge, EdgeState.EXCLUDED, 'corner_counts')


def apply_one_time_pass(board: Board) -> PassOutcome:
    """Apply every rule once with a throwaway engine"""
    return DeductionEngine().apply_one_time_pass(board)


def run_to_fixpoint(board: Board, max_iterations: int = 0) -> bool:
    """Deduce until nothing changes; False if a conflict was found"""
    return DeductionEngine().run_to_fixpoint(board, max_iterations)
