#!/usr/bin/env python3
"""
Script to generate Slitherlink boards.

Usage:
    python scripts/generate_puzzles.py --count 10 --size 7x7 --difficulty medium
    python scripts/generate_puzzles.py --batch easy:5x5:10 hard:7x7:5 --output-dir boards
"""

import click
import sys
from pathlib import Path
from tqdm import tqdm

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from slitherlink.core.board import Difficulty
from slitherlink.core.utils import BoardConverter
from slitherlink.generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig, DifficultyEstimator


def parse_size(size: str):
    rows, columns = map(int, size.lower().split('x'))
    return rows, columns


@click.command()
@click.option('--count', '-n', type=int, default=1,
              help='Number of boards to generate')
@click.option('--size', '-s', type=str, default='5x5',
              help='Board size (format: ROWSxCOLUMNS)')
@click.option('--difficulty', '-d',
              type=click.Choice([d.value for d in Difficulty]),
              default='easy', help='Board difficulty')
@click.option('--batch', '-b', multiple=True,
              help='Batch generation (format: DIFFICULTY:ROWSxCOLUMNS:COUNT)')
@click.option('--output-dir', '-o', type=click.Path(), default=None,
              help='Write each board to a text file in this directory instead of printing')
@click.option('--max-attempts', type=int, default=None,
              help='Attempts per board before giving up')
@click.option('--estimate', is_flag=True,
              help='Report the estimated difficulty of each board')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
def main(count, size, difficulty, batch, output_dir, max_attempts, estimate, seed):
    """Generate Slitherlink boards with various configurations."""

    params = {'random_seed': seed}
    if max_attempts:
        params['max_attempts'] = max_attempts
    generator = PuzzleGenerator(PuzzleGeneratorConfig(**params))

    generation_tasks = []
    if batch:
        for entry in batch:
            try:
                diff_str, size_str, count_str = entry.split(':')
                rows, columns = parse_size(size_str)
                generation_tasks.append((Difficulty(diff_str), rows, columns, int(count_str)))
            except ValueError as e:
                click.echo(f"Error parsing batch entry '{entry}': {e}")
                click.echo("Format should be DIFFICULTY:ROWSxCOLUMNS:COUNT")
                sys.exit(1)
    else:
        try:
            rows, columns = parse_size(size)
        except ValueError:
            click.echo(f"Error: Invalid size format '{size}' (use ROWSxCOLUMNS)")
            sys.exit(1)
        generation_tasks.append((Difficulty(difficulty), rows, columns, count))

    output_path = Path(output_dir) if output_dir else None
    if output_path:
        output_path.mkdir(parents=True, exist_ok=True)

    total_boards = sum(num for _, _, _, num in generation_tasks)
    generated_count = 0
    boards = []

    with tqdm(total=total_boards, desc="Generating boards", disable=output_path is None and total_boards == 1) as pbar:
        for diff, rows, columns, num in generation_tasks:
            for i in range(num):
                board = generator.generate_board(rows, columns, diff)
                if board:
                    generated_count += 1
                    boards.append((f"{diff.value}_{rows}x{columns}_{i:04d}", board))
                pbar.update(1)

    for board_id, board in boards:
        text = BoardConverter.to_string(board)
        if output_path:
            (output_path / f"{board_id}.txt").write_text(text + "\n")
        else:
            click.echo(f"\n# {board_id}")
            click.echo(text)
        if estimate:
            click.echo(f"# {board_id}: estimated {DifficultyEstimator.estimate_difficulty(board).value}")

    click.echo(f"\nSuccessfully generated {generated_count}/{total_boards} boards")
    if output_path:
        click.echo(f"Boards saved to: {output_path}")


if __name__ == '__main__':
    main()
