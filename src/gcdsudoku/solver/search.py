"""Divisor search: find the largest divisor shared by the rows of some accepted grid.

Divisors are tried in strictly decreasing order, so the first divisor for which the grid
solver finds a solution is the maximum.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from functools import partial
from math import isqrt
from time import time
from typing import Literal, TextIO

import numpy as np
from sortedcontainers import SortedSet

from gcdsudoku.board import GRID_SIZE, Grid
from gcdsudoku.puzzle_config import PuzzleConfig
from gcdsudoku.solver.backtrack import make_context
from gcdsudoku.solver.config import config as solver_config
from gcdsudoku.solver.progress import ProgressMonitor, ProgressUpdate, print_progress
from gcdsudoku.solver.utils import int_comma

ADMISSIBLE_LAST_DIGITS = (1, 3, 7, 9)
"""Last digits of the divisors tried (those coprime to 10)."""


@dataclass
class SearchResult:
    """Outcome of a divisor search."""

    status: Literal["solved", "exhausted"]
    """"solved" if some divisor admits a solution, "exhausted" if none in range does."""

    divisor: int | None
    """Largest divisor admitting a solution, or None if the search was exhausted."""

    solutions: list[Grid] = field(default_factory=list)
    """Every accepted grid for `divisor`."""

    answer_row: int = GRID_SIZE // 2
    """Row reported as the answer of each solution."""

    divisors_tried: int = 0
    """Number of divisors examined (including those skipped for an empty row)."""

    solver_calls: int = 0
    """Number of divisors for which the grid solver was run."""

    candidate_tries: int = 0
    """Candidate rows tried by the grid solver, summed over all solver calls."""

    elapsed: float = 0.0
    """Wall-clock duration of the search, in seconds."""

    @property
    def answers(self) -> list[str]:
        """The answer row of every solution, as 9-digit strings."""
        return [grid.row_str(self.answer_row) for grid in self.solutions]


def candidate_divisors(upper: int, lower: int) -> Iterator[int]:
    """Yield the divisors from `upper` down to `lower` (inclusive) ending in 1, 3, 7 or 9."""
    for d in range(upper, lower - 1, -1):
        if d % 10 in ADMISSIBLE_LAST_DIGITS:
            yield d


def remainder(candidate: str, divisor: int) -> int:
    """Return `int(candidate) % divisor`, accumulating one digit at a time."""
    rem = 0
    for ch in candidate:
        rem = (rem * 10 + ord(ch) - ord("0")) % divisor
    return rem


def to_values(candidates: Sequence[str]) -> np.ndarray:
    """Convert candidate strings to an int64 array of their numeric values."""
    return np.fromiter(map(int, candidates), dtype=np.int64, count=len(candidates))


def filter_divisible(values: np.ndarray, divisor: int) -> np.ndarray:
    """Keep the values that are multiples of `divisor`, preserving order."""
    return values[values % divisor == 0]


def divisors_in_range(values: np.ndarray, lower: int, upper: int) -> SortedSet:
    """Collect the admissible divisors of any of the given values.

    A divisor is admissible if it lies in `[lower, upper]` and ends in 1, 3, 7 or 9.
    Divisors are found by trial division up to the square root of the largest value,
    taking both each trial divisor and its cofactors.

    Args:
        values (np.ndarray): Positive row values.
        lower (int): Smallest admissible divisor.
        upper (int): Largest admissible divisor.

    Returns:
        A SortedSet of admissible divisors.
    """
    values = np.unique(values[values > 0])
    if values.size == 0:
        return SortedSet()

    found: list[np.ndarray] = []
    for t in range(1, isqrt(int(values.max())) + 1):
        hits = values[values % t == 0]
        if hits.size == 0:
            continue
        found.append(np.array([t], dtype=np.int64))
        found.append(hits // t)

    divisors = np.unique(np.concatenate(found))
    keep = (
        (divisors >= lower)
        & (divisors <= upper)
        & np.isin(divisors % 10, ADMISSIBLE_LAST_DIGITS)
    )
    return SortedSet(divisors[keep].tolist())


def prefilter_divisors(
    row_values: Sequence[np.ndarray], lower: int, upper: int, *, n_rows: int
) -> SortedSet | None:
    """Return the divisors for which the `n_rows` smallest rows all keep a candidate.

    Any divisor outside the returned set would leave one of those rows empty, so the
    divisor search may skip it.  Returns None when `n_rows` is 0 (no pre-screening).
    """
    if n_rows <= 0:
        return None
    smallest = sorted(range(len(row_values)), key=lambda r: (row_values[r].size, r))[:n_rows]
    allowed: SortedSet | None = None
    for r in smallest:
        row_divisors = divisors_in_range(row_values[r], lower, upper)
        allowed = row_divisors if allowed is None else allowed & row_divisors
        if not allowed:
            break
    return allowed


def iter_divisors(upper: int, lower: int, allowed: SortedSet | None = None) -> Iterator[int]:
    """Yield candidate divisors in decreasing order, restricted to `allowed` if given."""
    if allowed is None:
        yield from candidate_divisors(upper, lower)
        return
    for d in allowed.irange(lower, upper, reverse=True):
        if d % 10 in ADMISSIBLE_LAST_DIGITS:
            yield d


def search_max_divisor(
    base_rows: Sequence[Sequence[str]],
    puzzle_config: PuzzleConfig,
    *,
    row_order: tuple[int, ...],
    prefilter_rows: int | None = None,
    progress_interval: float | None = None,
    progress_callback: Callable[[ProgressUpdate], None] | None = None,
    logf: TextIO | None = None,
) -> SearchResult:
    """Find the largest divisor for which the grid solver finds a solution.

    For each divisor, every base row is narrowed to its multiples of the divisor.  If a
    row ends up empty the divisor is skipped without running the solver.

    Args:
        base_rows (Sequence[Sequence[str]]): Candidate strings per row, before divisor
            filtering.
        puzzle_config (PuzzleConfig): Supplies divisor bounds and tie-break parameters.
        row_order (tuple[int, ...]): Row visiting order for the grid solver.
        prefilter_rows (int | None): Number of smallest rows used to pre-screen divisors.
            If None, uses the solver config.
        progress_interval (float | None): Seconds between progress reports.  If None,
            uses the solver config.
        progress_callback: Receives progress reports.  Default: print to `logf`.
        logf: File object to log the search.

    Returns:
        A SearchResult; its status is "exhausted" if no divisor in range admits a solution.
    """
    start_time = time()
    if prefilter_rows is None:
        prefilter_rows = solver_config.divisor_prefilter_rows
    if progress_interval is None:
        progress_interval = solver_config.progress_interval
    if progress_callback is None:
        progress_callback = partial(print_progress, logf=logf)

    upper, lower = puzzle_config.max_divisor, puzzle_config.min_divisor
    row_values = [to_values(row) for row in base_rows]
    # Rows with fewer candidates empty out first, so test them first
    check_order = sorted(range(len(row_values)), key=lambda r: (row_values[r].size, r))

    result = SearchResult(status="exhausted", divisor=None, answer_row=puzzle_config.answer_row)

    if any(values.size == 0 for values in row_values):
        print("Some row has no candidates; no divisor can succeed.", file=logf, flush=True)
        result.elapsed = time() - start_time
        return result

    allowed = prefilter_divisors(row_values, lower, upper, n_rows=prefilter_rows)
    if allowed is not None:
        print(
            f"Pre-screening with {prefilter_rows} row(s) left "
            f"{int_comma(len(allowed))} candidate divisors.",
            file=logf,
            flush=True,
        )

    for divisor in iter_divisors(upper, lower, allowed):
        result.divisors_tried += 1

        filtered: list[np.ndarray] = list(row_values)
        feasible = True
        for r in check_order:
            filtered[r] = filter_divisible(row_values[r], divisor)
            if filtered[r].size == 0:
                feasible = False
                break
        if not feasible:
            continue

        result.solver_calls += 1
        rows = [[f"{v:0{GRID_SIZE}d}" for v in values.tolist()] for values in filtered]
        print(
            f"Starting solver for divisor {divisor} "
            f"(row candidates: {', '.join(str(len(row)) for row in rows)})...",
            file=logf,
            flush=True,
        )
        context = make_context(
            rows,
            row_order,
            tiebreak_cols=puzzle_config.tiebreak_cols,
            tiebreak_digit=puzzle_config.tiebreak_digit,
        )
        with ProgressMonitor(
            divisor, context, interval=progress_interval, callback=progress_callback
        ):
            context.search()
        result.candidate_tries += context.candidate_tries

        if context.solutions:
            result.status = "solved"
            result.divisor = divisor
            result.solutions = context.solutions
            break

        print(
            f"Divisor {divisor} yields no solutions after trying "
            f"{int_comma(context.candidate_tries)} candidates.",
            file=logf,
            flush=True,
        )

    result.elapsed = time() - start_time
    return result
