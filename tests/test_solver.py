import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slitherlink.core.board import Board, EdgeState, h_edge, v_edge
from slitherlink.core.exceptions import (
    MaxSolveDepthExceededError,
    MaxSolveIterationsExceededError,
    MultipleSolutionsError,
    NoSolutionError,
    SolveBudgetExceededError,
)
from slitherlink.solvers import (
    BacktrackingSolver,
    DeductiveSolver,
    SolverConfig,
    get_solver,
)


EASY_7X7 = [
    ['2', '2', '2', '3', '3', '1', ''],
    ['', '', '0', '2', '', '3', ''],
    ['', '', '', '', '', '', ''],
    ['3', '3', '', '', '3', '3', ''],
    ['', '', '2', '', '2', '', ''],
    ['3', '', '2', '', '2', '2', ''],
    ['3', '', '2', '', '', '3', ''],
]

HARD_7X7 = [
    ['', '3', '', '2', '2', '', '1'],
    ['3', '1', '2', '1', '2', '', ''],
    ['3', '', '', '', '', '2', ''],
    ['', '', '', '', '', '2', ''],
    ['3', '', '3', '', '', '1', ''],
    ['2', '0', '', '1', '3', '', ''],
    ['', '', '3', '2', '2', '2', '3'],
]

TWO_SOLUTIONS = [['3', '2'], ['2', '3']]


def quiet_config(**kwargs):
    return SolverConfig(log_level="ERROR", **kwargs)


class TestBacktrackingSolver(unittest.TestCase):
    """Full solves and terminal outcomes"""

    def setUp(self):
        self.solver = BacktrackingSolver(quiet_config())

    def assertSolution(self, board):
        self.assertTrue(board.is_solved())
        for cell in board.cells():
            if cell.clue is not None:
                self.assertEqual(cell.edge_count(EdgeState.INCLUDED), cell.clue)
        for corner in board.corners():
            self.assertIn(corner.edge_count(EdgeState.INCLUDED), (0, 2))
        self.assertEqual(board.count_edges(EdgeState.EXCLUDED), 0)

    def test_solve_small_board(self):
        board = Board([['2', '2'], ['2', '2']])
        result = self.solver.solve(board)
        self.assertTrue(result.success)
        self.assertIs(result.solution, board)
        self.assertEqual(result.solutions, 1)
        self.assertEqual(result.max_depth_reached, 0)
        self.assertEqual(board.count_edges(EdgeState.INCLUDED), 8)
        self.assertSolution(board)

    def test_solve_two_cell_ring(self):
        board = Board([['3', '3']])
        self.solver.solve(board)
        self.assertEqual(board.count_edges(EdgeState.INCLUDED), 6)
        self.assertEqual(board.edge_state(v_edge(0, 1)), EdgeState.UNDETERMINED)
        self.assertSolution(board)

    def test_solve_easy_board(self):
        board = Board(EASY_7X7)
        result = self.solver.solve(board)
        self.assertTrue(result.success)
        self.assertSolution(board)

    def test_solve_hard_board(self):
        board = Board(HARD_7X7)
        result = self.solver.solve(board)
        self.assertTrue(result.success)
        self.assertSolution(board)

    def test_solve_is_deterministic(self):
        first = Board(HARD_7X7)
        second = Board(HARD_7X7)
        self.solver.solve(first)
        BacktrackingSolver(quiet_config()).solve(second)
        self.assertEqual(first.included_edges(), second.included_edges())

    def test_solve_solved_board_again(self):
        board = Board(EASY_7X7)
        self.solver.solve(board)
        loop = board.included_edges()
        self.solver.solve(board)
        self.assertEqual(board.included_edges(), loop)

    def test_clone_is_independent(self):
        board = Board([['2', '2'], ['2', '2']])
        copy = board.clone()
        self.solver.solve(copy)
        self.assertEqual(board.count_edges(EdgeState.INCLUDED), 0)

    def test_solve_discards_previous_marks(self):
        board = Board([['2', '2'], ['2', '2']])
        board.mark_edge(v_edge(0, 1), EdgeState.INCLUDED)
        self.solver.solve(board)
        self.assertEqual(board.edge_state(v_edge(0, 1)), EdgeState.UNDETERMINED)
        self.assertSolution(board)

    def test_no_solution(self):
        with self.assertRaises(NoSolutionError):
            self.solver.solve(Board([['1', '1'], ['1', '1']]))

    def test_multiple_solutions(self):
        with self.assertRaises(MultipleSolutionsError):
            self.solver.solve(Board(TWO_SOLUTIONS))

    def test_empty_board_has_multiple_solutions(self):
        with self.assertRaises(MultipleSolutionsError):
            self.solver.solve(Board.empty(2, 2))

    def test_max_depth(self):
        solver = BacktrackingSolver(quiet_config(max_depth=1))
        with self.assertRaises(MaxSolveDepthExceededError) as ctx:
            solver.solve(Board.empty(4, 4))
        self.assertEqual(ctx.exception.limit, 1)
        self.assertEqual(ctx.exception.observed, 2)

    def test_max_iterations(self):
        solver = BacktrackingSolver(quiet_config(max_iterations=2))
        with self.assertRaises(MaxSolveIterationsExceededError) as ctx:
            solver.solve(Board.empty(4, 4))
        self.assertIsInstance(ctx.exception, SolveBudgetExceededError)
        self.assertEqual(ctx.exception.limit, 2)

    def test_limits_large_enough(self):
        solver = BacktrackingSolver(quiet_config(max_depth=0, max_iterations=100000))
        result = solver.solve(Board([['2', '2'], ['2', '2']]))
        self.assertTrue(result.success)
        self.assertGreaterEqual(result.iterations, 1)

    def test_progress_callbacks(self):
        calls = []
        self.solver.add_progress_callback(lambda iterations, board, stats: calls.append(stats))
        with self.assertRaises(MultipleSolutionsError):
            self.solver.solve(Board(TWO_SOLUTIONS))
        self.assertTrue(calls)
        self.assertEqual(calls[0]['depth'], 0)

    def test_result_stats(self):
        result = self.solver.solve(Board([['2', '2'], ['2', '2']]))
        self.assertIn('rules_used', result.stats)
        self.assertGreater(result.stats['rules_used']['corner_cell'], 0)
        self.assertIn('Success', repr(result))

    def test_board_solve(self):
        board = Board([['3', '3']])
        result = board.solve()
        self.assertTrue(result.success)
        self.assertTrue(board.is_solved())


class TestDeductiveSolver(unittest.TestCase):

    def test_solves_by_deduction(self):
        board = Board([['2', '2'], ['2', '2']])
        result = DeductiveSolver(quiet_config()).solve(board)
        self.assertTrue(result.success)
        self.assertEqual(board.count_edges(EdgeState.EXCLUDED), 0)
        self.assertEqual(board.count_edges(EdgeState.INCLUDED), 8)

    def test_stalls_without_guessing(self):
        board = Board(TWO_SOLUTIONS)
        result = DeductiveSolver(quiet_config()).solve(board)
        self.assertFalse(result.success)
        self.assertIs(result.solution, board)
        # The outer corners of both 3s are forced either way
        self.assertEqual(board.edge_state(h_edge(0, 0)), EdgeState.INCLUDED)
        self.assertEqual(board.edge_state(h_edge(2, 1)), EdgeState.INCLUDED)

    def test_contradiction(self):
        with self.assertRaises(NoSolutionError):
            DeductiveSolver(quiet_config()).solve(Board([['1', '1'], ['1', '1']]))


class TestSolverRegistry(unittest.TestCase):

    def test_get_solver(self):
        self.assertIsInstance(get_solver('backtracking'), BacktrackingSolver)
        self.assertIsInstance(get_solver('Deduction'), DeductiveSolver)

    def test_get_solver_with_config(self):
        config = quiet_config(max_depth=3)
        solver = get_solver('backtracking', config)
        self.assertIs(solver.config, config)

    def test_unknown_solver(self):
        with self.assertRaises(ValueError):
            get_solver('annealing')


if __name__ == '__main__':
    unittest.main()
