import pytest

from gcdsudoku.board import Grid


def pattern_rows(digits: str = "012345678") -> list[str]:
    """Rows of a valid 9x9 grid built by shifting `digits` within and across bands."""
    return [
        "".join(digits[(3 * (r % 3) + r // 3 + c) % 9] for c in range(9)) for r in range(9)
    ]


@pytest.fixture
def grid_rows() -> list[str]:
    """Rows of a valid grid over the digits 0-8."""
    return pattern_rows()


@pytest.fixture
def grid(grid_rows: list[str]) -> Grid:
    return Grid.from_rows(grid_rows)
