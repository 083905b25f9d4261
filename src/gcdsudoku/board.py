"""Classes and functions for representing the 9x9 digit grid."""

from array import array
from typing import Iterable, Iterator

GRID_SIZE = 9
BOX_SIZE = 3
EMPTY = -1


def box_index(row: int, col: int) -> int:
    """Return the index (0-8, row-major) of the 3x3 box containing cell (row, col)."""
    return (row // BOX_SIZE) * BOX_SIZE + col // BOX_SIZE


BOX_INDICES: tuple[tuple[int, ...], ...] = tuple(
    tuple(box_index(r, c) for c in range(GRID_SIZE)) for r in range(GRID_SIZE)
)
"""Precomputed box index for every (row, col) cell."""


class Grid:
    """Store a 9x9 matrix of digits as a 1D array.

    Contains support for both 1D and 2D indexing.  Empty cells hold -1.
    """

    def __init__(self, data: Iterable[int] | None = None) -> None:
        if data is None:
            data = [EMPTY] * (GRID_SIZE * GRID_SIZE)
        self.data = array("b", data)
        if len(self.data) != GRID_SIZE * GRID_SIZE:
            raise ValueError(f"A grid holds {GRID_SIZE * GRID_SIZE} cells, got {len(self.data)}.")

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Grid":
        """Build a grid from nine 9-digit row strings."""
        return cls(int(ch) for row in rows for ch in row)

    def copy(self) -> "Grid":
        """Generate a copy of the grid."""
        return Grid(self.data.__copy__())

    def __str__(self) -> str:
        """Returns the grid as nine lines of digits ('.' for empty cells)."""
        return "\n".join(self.row_str(r) for r in range(GRID_SIZE))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.data == other.data

    def __hash__(self) -> int:
        return hash(self.data.tobytes())

    def print(self) -> None:
        """Print the grid to the console."""
        print(self)

    def __getitem__(self, idx: int | tuple[int, int]) -> int:
        """Get cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            return self.data[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            return self.data[row * GRID_SIZE + col]
        raise IndexError("Invalid index type for Grid.")

    def __setitem__(self, idx: int | tuple[int, int], value: int) -> None:
        """Set cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            self.data[idx] = value
            return
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            self.data[row * GRID_SIZE + col] = value
            return
        raise IndexError("Invalid index type for Grid.")

    def set_row(self, row: int, digits: Iterable[int]) -> None:
        """Overwrite a whole row with the given digits."""
        start = row * GRID_SIZE
        self.data[start : start + GRID_SIZE] = array("b", digits)

    def row_str(self, row: int) -> str:
        """Return a row as a 9-character string."""
        start = row * GRID_SIZE
        return "".join(
            "." if d == EMPTY else str(d) for d in self.data[start : start + GRID_SIZE]
        )

    def rows(self) -> list[str]:
        """Return all nine rows as strings."""
        return [self.row_str(r) for r in range(GRID_SIZE)]

    def column(self, col: int) -> list[int]:
        """Return the digits in a column, top to bottom."""
        return list(self.data[col :: GRID_SIZE])

    def box(self, box: int) -> list[int]:
        """Return the digits in a 3x3 box, row-major."""
        top = (box // BOX_SIZE) * BOX_SIZE
        left = (box % BOX_SIZE) * BOX_SIZE
        return [
            self[r, c] for r in range(top, top + BOX_SIZE) for c in range(left, left + BOX_SIZE)
        ]

    def cells(self) -> Iterator[tuple[int, int, int]]:
        """Iterate over (row, col, digit) for every cell."""
        for idx, digit in enumerate(self.data):
            row, col = divmod(idx, GRID_SIZE)
            yield row, col, digit
