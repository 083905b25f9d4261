"""Main solver module for gcdsudoku puzzles."""

import sys
from pathlib import Path
from time import time
from typing import TextIO

from gcdsudoku.board import GRID_SIZE, Grid
from gcdsudoku.puzzle_config import PuzzleConfig
from gcdsudoku.solver.config import config as solver_config
from gcdsudoku.solver.generator import generate_candidates, get_executor
from gcdsudoku.solver.rows import build_row_candidates, choose_row_order
from gcdsudoku.solver.search import SearchResult, remainder, search_max_divisor
from gcdsudoku.solver.utils import int_comma, time_str, timestamp_str


def run(puzzle_config: PuzzleConfig) -> SearchResult:
    """Run the solver on the given configuration, logging to a per-run file.

    Args:
        puzzle_config (PuzzleConfig): The configuration for the puzzle to solve.
    """
    print(f"config: {puzzle_config}")

    start = time()
    stamp = timestamp_str(start).split(".")[0].replace(" ", "_").replace(":", "-")
    logfile = Path(solver_config.log_dir) / puzzle_config.name / f"{stamp}.log"
    print(f"Log file: {logfile}")

    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            result = solve_one(puzzle_config, logf=logf)
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)

    if result.status == "solved":
        print(f"Largest divisor: {result.divisor} ({len(result.solutions)} solution(s))")
        for answer in result.answers:
            print(f"Answer (row {puzzle_config.answer_row + 1}): {answer}")
    else:
        print("No solution found.")
    print()
    return result


def solve_one(puzzle_config: PuzzleConfig, *, logf: TextIO) -> SearchResult:
    """Generate candidates, build the base rows and run the divisor search.

    Args:
        puzzle_config (PuzzleConfig): The configuration for the puzzle to solve.
        logf: File object to log the solving process.

    Returns:
        The SearchResult of the divisor search.
    """
    start_time = time()
    print(f"Selected puzzle: {puzzle_config.name}", file=logf, flush=True)
    print(f"Required digits: {puzzle_config.required_digits}", file=logf, flush=True)
    print("Clue grid:", file=logf, flush=True)
    print("", file=logf, flush=True)
    for row in range(GRID_SIZE):
        print(
            puzzle_config.board_str[row * GRID_SIZE : (row + 1) * GRID_SIZE],
            file=logf,
            flush=True,
        )
    print("", file=logf, flush=True)
    print(f"Exclusion rules: {len(puzzle_config.exclusions)}", file=logf, flush=True)
    print(
        f"Divisor range: {puzzle_config.max_divisor} down to {puzzle_config.min_divisor}",
        file=logf,
        flush=True,
    )
    print(f"Start time: {timestamp_str(start_time)}", file=logf, flush=True)
    print("Solver config:", solver_config.model_dump(), file=logf, flush=True)
    print("", file=logf, flush=True)

    # Step 1: generate the candidate pool
    print("Generating row candidates...")  # stdout
    if solver_config.parallel_generation:
        with get_executor(solver_config.max_workers) as executor:
            pool = generate_candidates(puzzle_config.required_digits, executor=executor, logf=logf)
    else:
        pool = generate_candidates(puzzle_config.required_digits, logf=logf)
    print(
        f"Generated {int_comma(len(pool))} candidates in {time_str(time() - start_time)}.",
        file=logf,
        flush=True,
    )

    # Step 2: narrow the pool per row
    base_rows = build_row_candidates(pool, puzzle_config, logf=logf)
    del pool

    row_order = puzzle_config.row_order
    if row_order is None:
        row_order = choose_row_order(base_rows)
    print(f"Row order: {', '.join(str(r + 1) for r in row_order)}", file=logf, flush=True)

    # Step 3: search divisors from the largest down
    print("Searching divisors...")  # stdout
    result = search_max_divisor(base_rows, puzzle_config, row_order=row_order, logf=logf)
    report(result, puzzle_config, logf=logf)
    return result


def report(result: SearchResult, puzzle_config: PuzzleConfig, *, logf: TextIO) -> None:
    """Log the outcome of a divisor search."""
    print("", file=logf, flush=True)
    print(
        f"Divisors tried: {int_comma(result.divisors_tried)}, "
        f"solver calls: {int_comma(result.solver_calls)}, "
        f"candidates tried: {int_comma(result.candidate_tries)}, "
        f"time: {time_str(result.elapsed)}",
        file=logf,
        flush=True,
    )
    if result.status == "exhausted":
        print("No solution found.", file=logf, flush=True)
        return

    print(
        f"Found solution with divisor {result.divisor} (highest possible).",
        file=logf,
        flush=True,
    )
    print(f"The puzzle has {len(result.solutions)} solution(s).", file=logf, flush=True)
    for n, (grid, answer) in enumerate(zip(result.solutions, result.answers), start=1):
        print("", file=logf, flush=True)
        print(f"Solution #{n}:", file=logf, flush=True)
        print(grid, file=logf, flush=True)
        valid = result.divisor is not None and validate_solution(
            grid, puzzle_config, result.divisor
        )
        print(f"Valid: {valid}", file=logf, flush=True)
        print(f"Answer (row {puzzle_config.answer_row + 1}): {answer}", file=logf, flush=True)


def validate_solution(grid: Grid, puzzle_config: PuzzleConfig, divisor: int) -> bool:
    """Validate that a grid is a complete, accepted solution for the given divisor.

    Checks that every row, column and box holds nine distinct digits, that clues and
    exclusions hold, that every row is a multiple of `divisor`, and the tie-break.
    """
    units = [grid.rows()]
    units.append(["".join(map(str, grid.column(c))) for c in range(GRID_SIZE)])
    units.append(["".join(map(str, grid.box(b))) for b in range(GRID_SIZE)])
    for unit in units:
        for digits in unit:
            if "." in digits or "-" in digits or len(set(digits)) != GRID_SIZE:
                return False

    for row, col, digit in grid.cells():
        clue = puzzle_config.board_str[row * GRID_SIZE + col]
        if clue != "." and int(clue) != digit:
            return False
    for row, col, forbidden in puzzle_config.exclusions:
        if str(grid[row, col]) in forbidden:
            return False

    if any(remainder(row, divisor) != 0 for row in grid.rows()):
        return False
    required = set(puzzle_config.required_digits)
    if any(not required.issubset(row) for row in grid.rows()):
        return False

    tiebreak = int(puzzle_config.tiebreak_digit)
    return any(tiebreak in grid.column(c) for c in puzzle_config.tiebreak_cols)
