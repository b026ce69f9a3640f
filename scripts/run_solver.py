#!/usr/bin/env python3
"""
Script to solve a single Slitherlink board.

Usage:
    python scripts/run_solver.py board.txt --algorithm backtracking
    python scripts/run_solver.py --generate 7x7 --difficulty medium --show-edges
"""

import click
import sys
from pathlib import Path
import json

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from slitherlink.core.board import Difficulty
from slitherlink.core.exceptions import SlitherlinkError
from slitherlink.core.validator import BoardValidator
from slitherlink.core.utils import BoardConverter, setup_logger, calculate_solution_stats
from slitherlink.solvers import get_solver, SolverConfig, SOLVER_REGISTRY
from slitherlink.generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig


@click.command()
@click.argument('board_file', required=False, type=click.Path())
@click.option('--algorithm', '-a', type=click.Choice(list(SOLVER_REGISTRY)),
              default='backtracking', help='Solving algorithm to use')
@click.option('--max-depth', type=int, default=0,
              help='Maximum search depth (0 for unbounded)')
@click.option('--max-iterations', type=int, default=0,
              help='Maximum search nodes (0 for unbounded)')
@click.option('--generate', '-g', type=str,
              help='Generate board instead (format: ROWSxCOLUMNS)')
@click.option('--difficulty', '-d',
              type=click.Choice([d.value for d in Difficulty]),
              default='easy', help='Difficulty for generated board')
@click.option('--seed', type=int, default=None,
              help='Random seed for generation')
@click.option('--show-edges', is_flag=True, help='Draw the solved loop')
@click.option('--verbose', is_flag=True, help='Enable verbose output')
def main(board_file, algorithm, max_depth, max_iterations, generate, difficulty,
         seed, show_edges, verbose):
    """Solve a Slitherlink board using specified algorithm."""

    # Setup
    logger = setup_logger("BoardSolver", level="DEBUG" if verbose else "INFO")

    # Load or generate board
    if generate:
        # Parse dimensions
        try:
            rows, columns = map(int, generate.split('x'))
        except ValueError:
            click.echo("Error: Generate format should be ROWSxCOLUMNS (e.g., 7x7)")
            sys.exit(1)

        logger.info(f"Generating {rows}x{columns} {difficulty} board...")
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=seed))
        board = generator.generate_board(rows, columns, Difficulty(difficulty))

        if not board:
            click.echo("Error: Failed to generate valid board")
            sys.exit(1)

    elif board_file:
        board_path = Path(board_file)
        if not board_path.exists():
            click.echo(f"Error: Board file '{board_file}' not found")
            sys.exit(1)

        try:
            board = BoardConverter.from_string(board_path.read_text())
            logger.info(f"Loaded board from {board_path}")
        except SlitherlinkError as e:
            click.echo(f"Error loading board: {e}")
            sys.exit(1)
    else:
        click.echo("Error: Either provide a board file or use --generate")
        sys.exit(1)

    # Display board info
    logger.info(f"Board: {board.rows}x{board.columns} with {board.clue_count()} clues")
    click.echo(BoardConverter.to_string(board))

    config = SolverConfig(max_depth=max_depth, max_iterations=max_iterations, verbose=verbose)
    solver = get_solver(algorithm, config)

    # Add progress callback if verbose
    if verbose:
        def progress_callback(iteration, current, stats):
            if iteration % 100 == 0:
                logger.debug(f"Iteration {iteration}: {stats}")

        solver.add_progress_callback(progress_callback)

    try:
        result = solver.solve(board)
    except SlitherlinkError as e:
        click.echo(f"\nNo unique solution: {type(e).__name__}: {e}")
        sys.exit(2)

    # Display results
    click.echo("\n" + "="*50)
    click.echo(f"Algorithm: {algorithm}")
    click.echo(f"Status: {'SUCCESS' if result.success else 'FAILED'}")
    click.echo(f"Time: {result.solve_time:.3f} seconds")
    click.echo(f"Iterations: {result.iterations}")
    click.echo(f"Max depth: {result.max_depth_reached}")
    click.echo(f"Memory: {result.memory_used:.1f} MB")

    if result.message:
        click.echo(f"Message: {result.message}")

    if result.stats:
        click.echo(f"Additional stats: {json.dumps(result.stats, indent=2)}")

    click.echo("="*50 + "\n")

    if result.success and result.solution:
        validation = BoardValidator.validate_solution(result.solution)

        if validation:
            click.echo("Solution is valid!")
            click.echo(f"Solution stats: {json.dumps(calculate_solution_stats(result.solution), indent=2)}")
        else:
            click.echo("Solution is invalid!")
            click.echo(f"Errors: {'; '.join(validation.errors)}")

        if show_edges:
            click.echo("\nSolution:")
            click.echo(BoardConverter.to_string(result.solution, show_edges=True))
    else:
        click.echo("No complete solution found.")
        if show_edges and result.solution:
            click.echo(BoardConverter.to_string(result.solution, show_edges=True))


if __name__ == '__main__':
    main()
