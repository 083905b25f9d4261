"""Row candidate builder: narrow the candidate pool for each row using clues and exclusions."""

from collections.abc import Sequence
from typing import TextIO

from gcdsudoku.board import GRID_SIZE
from gcdsudoku.puzzle_config import PuzzleConfig
from gcdsudoku.solver.utils import int_comma


def filter_position_equals(pool: Sequence[str], position: int, symbol: str) -> list[str]:
    """Keep candidates whose character at `position` equals `symbol`."""
    return [s for s in pool if s[position] == symbol]


def filter_position_excludes(pool: Sequence[str], position: int, forbidden: str) -> list[str]:
    """Drop candidates whose character at `position` is one of the `forbidden` symbols."""
    forbidden_set = frozenset(forbidden)
    return [s for s in pool if s[position] not in forbidden_set]


def build_row_candidates(
    pool: Sequence[str],
    puzzle_config: PuzzleConfig,
    *,
    logf: TextIO | None = None,
) -> list[list[str]]:
    """Build the candidate list of every row (the "base puzzle").

    Clue filters are applied first since they are the most selective, then the row's
    exclusions.  A row with no remaining candidates is returned as an empty list.

    Args:
        pool (Sequence[str]): All generated candidates.
        puzzle_config (PuzzleConfig): Supplies the clues and exclusions of each row.
        logf: Optional file object to log per-row candidate counts.

    Returns:
        Nine candidate lists, one per row, each preserving the pool's order.
    """
    rows: list[list[str]] = []
    for row in range(GRID_SIZE):
        options: Sequence[str] = pool
        for position, symbol in puzzle_config.clues_for_row(row):
            options = filter_position_equals(options, position, symbol)
        for position, forbidden in puzzle_config.exclusions_for_row(row):
            options = filter_position_excludes(options, position, forbidden)
        rows.append(list(options))
        print(
            f"Row {row + 1} has {int_comma(len(rows[-1]))} candidate(s) "
            "(before divisor filtering).",
            file=logf,
            flush=True,
        )
    return rows


def choose_row_order(rows: Sequence[Sequence[str]]) -> tuple[int, ...]:
    """Order rows by ascending candidate count, breaking ties by row index."""
    return tuple(sorted(range(len(rows)), key=lambda r: (len(rows[r]), r)))
