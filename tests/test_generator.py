import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slitherlink.core.board import Board, Difficulty, EdgeState
from slitherlink.generators.puzzle_generator import (
    DifficultyEstimator,
    PuzzleGenerator,
    PuzzleGeneratorConfig,
    generate_board,
)
from slitherlink.solvers import BacktrackingSolver, SolverConfig


class TestPuzzleGenerator(unittest.TestCase):
    """Generation of uniquely solvable boards"""

    def setUp(self):
        self.generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=7))

    def assertUniquelySolvable(self, board):
        result = BacktrackingSolver(SolverConfig(log_level="ERROR")).solve(board.clone())
        self.assertTrue(result.success)
        self.assertEqual(result.solutions, 1)

    def test_generate_board(self):
        board = self.generator.generate_board(4, 4, Difficulty.EASY)
        self.assertIsNotNone(board)
        self.assertEqual((board.rows, board.columns), (4, 4))
        self.assertEqual(board.count_edges(EdgeState.UNDETERMINED), 40)
        self.assertLessEqual(board.clue_count(), 16)
        self.assertUniquelySolvable(board)

    def test_generate_medium_board(self):
        board = self.generator.generate_board(4, 5, Difficulty.MEDIUM)
        self.assertIsNotNone(board)
        self.assertEqual((board.rows, board.columns), (4, 5))
        self.assertUniquelySolvable(board)

    def test_same_seed_same_board(self):
        first = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=11)).generate_board(3, 3)
        second = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=11)).generate_board(3, 3)
        self.assertIsNotNone(first)
        self.assertEqual(first.clue_matrix(), second.clue_matrix())

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            self.generator.generate_board(0, 4)

    def test_generate_batch(self):
        boards = self.generator.generate_batch(2, 3, 3)
        self.assertLessEqual(len(boards), 2)
        for board in boards:
            self.assertIsInstance(board, Board)
            self.assertUniquelySolvable(board)

    def test_single_cell_board(self):
        for seed in range(3):
            board = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=seed)).generate_board(1, 1)
            self.assertIsNotNone(board)
            self.assertEqual(board.clue_count(), 0)
            self.assertUniquelySolvable(board)

    def test_single_row_board(self):
        board = self.generator.generate_board(1, 4)
        self.assertIsNotNone(board)
        self.assertUniquelySolvable(board)

    def test_generate_board_function(self):
        board = generate_board(3, 4)
        self.assertIsNotNone(board)
        self.assertEqual(board.columns, 4)

    def test_difficulty_params(self):
        config = PuzzleGeneratorConfig()
        self.assertEqual(config.difficulty_params[Difficulty.EASY]['max_depth'], 1)
        self.assertEqual(config.difficulty_params[Difficulty.EXPERT]['max_depth'], 4)
        self.assertTrue(config.ensure_unique)


class TestGeneratorPhases(unittest.TestCase):

    def setUp(self):
        self.generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=3))

    def test_generate_path(self):
        board = Board.empty(5, 5)
        region = self.generator._generate_path(board)
        self.assertTrue(region)
        self.assertEqual(len(region), len(set(region)))
        for r, c in region:
            self.assertTrue(0 <= r < 5 and 0 <= c < 5)

    @staticmethod
    def mark_outline(board, region):
        claimed = set(region)
        for cell in board.cells():
            if (cell.row, cell.col) not in claimed:
                continue
            for edge, other in zip(cell.edges, (cell.top_cell, cell.right_cell,
                                                cell.bottom_cell, cell.left_cell)):
                if other is None or (other.row, other.col) not in claimed:
                    board.mark_edge(edge, EdgeState.INCLUDED)

    def test_region_outline_is_a_solution(self):
        for seed in range(5):
            generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=seed))
            board = Board.empty(5, 5)
            region = generator._generate_path(board)
            generator._derive_clues(board, region)
            self.mark_outline(board, region)
            self.assertTrue(board.is_solved(), f"seed {seed}: {region}")

    def test_staircase_outline_is_a_solution(self):
        board = Board.empty(4, 4)
        region = [(0, 1), (1, 1), (1, 2), (2, 2), (3, 2)]
        PuzzleGenerator._derive_clues(board, region)
        self.assertEqual(board.clue_matrix(), [['1', '3', '2', '0'],
                                               ['1', '2', '2', '1'],
                                               ['0', '2', '2', '1'],
                                               ['0', '1', '3', '1']])
        self.mark_outline(board, region)
        self.assertTrue(board.is_solved())

    def test_derive_clues(self):
        board = Board.empty(2, 2)
        PuzzleGenerator._derive_clues(board, [(0, 0), (0, 1)])
        self.assertEqual(board.clue_matrix(), [['3', '3'], ['1', '1']])

    def test_derive_clues_leaves_single_cell_unclued(self):
        board = Board.empty(3, 3)
        PuzzleGenerator._derive_clues(board, [(1, 1)])
        self.assertEqual(board.clue_matrix(), [['0', '1', '0'],
                                               ['1', '', '1'],
                                               ['0', '1', '0']])

    def test_remove_clues_is_timed(self):
        board = Board.empty(2, 2)
        PuzzleGenerator._derive_clues(board, [(0, 0), (0, 1)])
        with self.assertLogs('PuzzleGenerator', level='DEBUG') as logs:
            self.generator._remove_clues(board, 1)
        self.assertTrue(any('_remove_clues took' in line for line in logs.output))


class TestDifficultyEstimator(unittest.TestCase):

    def test_deduction_only_board_is_easy(self):
        board = Board([['2', '2'], ['2', '2']])
        self.assertEqual(DifficultyEstimator.estimate_difficulty(board), Difficulty.EASY)
        # The board itself is left untouched
        self.assertEqual(board.count_edges(EdgeState.UNDETERMINED), 12)


if __name__ == '__main__':
    unittest.main()
