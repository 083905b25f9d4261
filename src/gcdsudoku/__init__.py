"""gcdsudoku Puzzle Solver.

Fills a 9x9 grid with nine of the ten digits per row, column and box, subject to fixed
clues and per-cell exclusions, so that the nine row numbers share the largest possible
divisor.  The answer is the middle row of the best grid.
"""

import sys

from .puzzle_config import DEFAULT_PUZZLE, InvalidConfigError, load_config
from .solver import solver


def main() -> None:
    """Main entry point for the gcdsudoku solver."""
    # Expect at most one argument: path to a puzzle file (default: the built-in puzzle)
    if len(sys.argv) > 2:
        print("Usage: python -m gcdsudoku [path_to_puzzle_file]")
        sys.exit(1)

    if len(sys.argv) == 2:
        try:
            puzzle_config = load_config(sys.argv[1])
        except (OSError, InvalidConfigError) as e:
            print(f"Invalid configuration: {e}")
            sys.exit(2)
    else:
        puzzle_config = DEFAULT_PUZZLE

    result = solver.run(puzzle_config)
    sys.exit(0 if result.status == "solved" else 3)
