import pytest

from gcdsudoku.board import BOX_INDICES, EMPTY, Grid, box_index


def test_empty_grid():
    grid = Grid()
    assert all(d == EMPTY for d in grid.data)
    assert grid.row_str(0) == "........."


def test_wrong_size_rejected():
    with pytest.raises(ValueError):
        Grid([1, 2, 3])


def test_indexing(grid, grid_rows):
    assert grid[0] == 0
    assert grid[1, 0] == 3
    assert grid[8, 8] == int(grid_rows[8][8])
    grid[4, 4] = 9
    assert grid[4 * 9 + 4] == 9
    with pytest.raises(IndexError):
        grid["a"]  # type: ignore[index]


def test_rows_and_columns(grid, grid_rows):
    assert grid.rows() == grid_rows
    assert str(grid) == "\n".join(grid_rows)
    assert grid.column(0) == [int(row[0]) for row in grid_rows]


def test_box(grid):
    assert sorted(grid.box(0)) == list(range(9))
    assert grid.box(4)[0] == grid[3, 3]


def test_copy_is_independent(grid):
    other = grid.copy()
    assert other == grid
    other[0, 0] = 8
    assert other != grid


def test_set_row():
    grid = Grid()
    grid.set_row(2, range(9))
    assert grid.row_str(2) == "012345678"
    assert grid.row_str(1) == "........."


def test_box_indices():
    assert box_index(0, 0) == 0
    assert box_index(4, 7) == 5
    assert box_index(8, 8) == 8
    assert BOX_INDICES[7][1] == 6
