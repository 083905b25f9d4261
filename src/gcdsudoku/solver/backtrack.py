"""Backtracking grid solver.

Rows are assigned whole, from per-row candidate lists, in a fixed visiting order.
Column and box uniqueness are tracked with one bitmask per column and per box: bit `d`
is set once digit `d` occupies that column or box.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from gcdsudoku.board import BOX_INDICES, GRID_SIZE, Grid

Digits = tuple[int, ...]
MaskSnapshot = tuple[list[int], list[int]]


def to_digits(candidate: str) -> Digits:
    """Convert a candidate string to a tuple of ints."""
    return tuple(ord(ch) - ord("0") for ch in candidate)


@dataclass(kw_only=True)
class SearchContext:
    """All mutable state of one grid search.

    The context is passed by reference through the recursion.  Every placement is
    undone before the recursion returns to the caller, so the masks and grid are only
    ever observed in a consistent state.
    """

    rows: Sequence[Sequence[Digits]]
    """Candidate digits for each row."""

    row_order: tuple[int, ...]
    """Order in which rows are assigned."""

    tiebreak_cols: tuple[int, ...] = (0, 1, 2)
    """A complete grid is accepted only if one of these columns holds `tiebreak_digit`."""

    tiebreak_digit: int = 0

    col_masks: list[int] = field(default_factory=lambda: [0] * GRID_SIZE)
    box_masks: list[int] = field(default_factory=lambda: [0] * GRID_SIZE)
    grid: Grid = field(default_factory=Grid)

    solutions: list[Grid] = field(default_factory=list)
    """Accepted complete grids, in discovery order."""

    candidate_tries: int = 0
    """Number of candidate rows tried.  Read by the progress monitor."""

    def conflicts(self, row: int, digits: Digits) -> bool:
        """Return whether placing `digits` in `row` repeats a digit in any column or box."""
        col_masks = self.col_masks
        box_masks = self.box_masks
        boxes = BOX_INDICES[row]
        for col, d in enumerate(digits):
            bit = 1 << d
            if col_masks[col] & bit or box_masks[boxes[col]] & bit:
                return True
        return False

    def place(self, row: int, digits: Digits) -> MaskSnapshot:
        """Commit a row and return the masks as they were before the commit."""
        snapshot = (self.col_masks.copy(), self.box_masks.copy())
        boxes = BOX_INDICES[row]
        for col, d in enumerate(digits):
            bit = 1 << d
            self.col_masks[col] |= bit
            self.box_masks[boxes[col]] |= bit
        self.grid.set_row(row, digits)
        return snapshot

    def restore(self, snapshot: MaskSnapshot) -> None:
        """Roll the masks back to a snapshot taken by `place`."""
        col_masks, box_masks = snapshot
        self.col_masks[:] = col_masks
        self.box_masks[:] = box_masks

    def accepts(self) -> bool:
        """Tie-break predicate: some tie-break column contains the tie-break digit."""
        return any(self.tiebreak_digit in self.grid.column(c) for c in self.tiebreak_cols)

    def try_candidate(self, pos: int, row: int, digits: Digits) -> None:
        """Try one candidate for `row`, explore below it, and undo it."""
        self.candidate_tries += 1
        if self.conflicts(row, digits):
            return
        snapshot = self.place(row, digits)
        self.search(pos + 1)
        self.restore(snapshot)

    def search(self, pos: int = 0) -> None:
        """Explore every assignment of the rows from visiting position `pos` onwards.

        The search continues after a solution is found, so `solutions` ends up holding
        every accepted grid.
        """
        if pos == len(self.row_order):
            if self.accepts():
                self.solutions.append(self.grid.copy())
            return

        row = self.row_order[pos]
        for digits in self.rows[row]:
            self.try_candidate(pos, row, digits)


def make_context(
    rows: Sequence[Sequence[str]],
    row_order: tuple[int, ...],
    *,
    tiebreak_cols: tuple[int, ...] = (0, 1, 2),
    tiebreak_digit: str = "0",
) -> SearchContext:
    """Create an empty search context from candidate strings."""
    if sorted(row_order) != list(range(GRID_SIZE)):
        raise ValueError(f"Row order must be a permutation of 0..{GRID_SIZE - 1}: {row_order}")
    return SearchContext(
        rows=[[to_digits(s) for s in row] for row in rows],
        row_order=tuple(row_order),
        tiebreak_cols=tuple(tiebreak_cols),
        tiebreak_digit=int(tiebreak_digit),
    )


def solve_grid(
    rows: Sequence[Sequence[str]],
    row_order: tuple[int, ...],
    *,
    tiebreak_cols: tuple[int, ...] = (0, 1, 2),
    tiebreak_digit: str = "0",
) -> list[Grid]:
    """Find every accepted grid whose rows come from the given candidate lists.

    Args:
        rows (Sequence[Sequence[str]]): Candidate strings for each of the nine rows.
        row_order (tuple[int, ...]): Order in which rows are assigned.
        tiebreak_cols (tuple[int, ...]): Columns checked by the tie-break predicate.
        tiebreak_digit (str): Digit that must appear in one of `tiebreak_cols`.

    Returns:
        All accepted grids (possibly none).
    """
    context = make_context(
        rows, row_order, tiebreak_cols=tiebreak_cols, tiebreak_digit=tiebreak_digit
    )
    context.search()
    return context.solutions
