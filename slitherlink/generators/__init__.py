"""
Puzzle generators for Slitherlink.
"""

from .puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig, DifficultyEstimator, generate_board

__all__ = [
    'PuzzleGenerator', 'PuzzleGeneratorConfig',
    'DifficultyEstimator', 'generate_board',
]
