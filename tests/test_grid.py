from __future__ import annotations

import pytest

from block_blast.game import Anchor, Figure, GameGrid

SINGLE = Figure(((0, 0),))
QUAD_H = Figure(((0, 0), (1, 0), (2, 0), (3, 0)))


def fill_row(grid: GameGrid, row: int) -> None:
    grid.occupy_cells([grid.get_cell(row, c) for c in range(grid.n)], "#123456")


def test_grid_has_n_squared_cells():
    grid = GameGrid(10)
    assert len(grid.cells) == 100
    assert grid.get_cell(3, 7).row == 3
    assert grid.get_cell(3, 7).col == 7


@pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (10, 0), (0, 10)])
def test_get_cell_out_of_bounds_is_none(row, col):
    assert GameGrid(10).get_cell(row, col) is None


def test_neighbors_are_linked_both_ways():
    grid = GameGrid(3)
    cell = grid.get_cell(1, 1)
    assert cell.neighbors["right"] is grid.get_cell(1, 2)
    assert cell.neighbors["left"] is grid.get_cell(1, 0)
    assert cell.neighbors["up"] is grid.get_cell(0, 1)
    assert cell.neighbors["down"] is grid.get_cell(2, 1)
    assert "up" not in grid.get_cell(0, 0).neighbors
    with pytest.raises(ValueError):
        cell.add_neighbor("diagonal", grid.get_cell(0, 0))


def test_single_cell_fits_at_every_anchor_and_nowhere_else():
    grid = GameGrid(10)
    for r in range(10):
        for c in range(10):
            cells = grid.find_figure_intersection(SINGLE, Anchor(r, c))
            assert cells is not None and cells[0] is grid.get_cell(r, c)
    for r in range(11):
        assert grid.find_figure_intersection(SINGLE, Anchor(r, 10)) is None
        assert grid.find_figure_intersection(SINGLE, Anchor(10, r)) is None


def test_intersection_orders_cells_like_the_figure():
    grid = GameGrid(10)
    fig = Figure(((1, 0), (0, 0), (0, 1)))
    cells = grid.find_figure_intersection(fig, (4, 2))
    assert [(c.row, c.col) for c in cells] == [(4, 3), (4, 2), (5, 2)]


def test_intersection_is_a_pure_query():
    grid = GameGrid(10)
    grid.find_figure_intersection(QUAD_H, (0, 0))
    assert not grid.occupancy().any()


def test_intersection_fails_on_occupied_or_overhanging_cells():
    grid = GameGrid(10)
    grid.get_cell(0, 2).set_occupied(True, "#fff")
    assert grid.find_figure_intersection(QUAD_H, (0, 0)) is None
    assert grid.find_figure_intersection(QUAD_H, (1, 7)) is None
    assert grid.find_figure_intersection(QUAD_H, (1, 6)) is not None


def test_partial_row_does_not_complete():
    grid = GameGrid(10)
    for col in (0, 4):
        grid.occupy_cells(grid.find_figure_intersection(QUAD_H, (0, col)), "#abcdef")
    assert grid.find_figure_intersection(QUAD_H, (0, 8)) is None
    assert int(grid.occupancy()[0].sum()) == 8
    assert grid.get_complete_row_cells() == []
    assert grid.get_complete_column_cells() == []


def test_complete_row_cells_and_clear():
    grid = GameGrid(10)
    fill_row(grid, 3)
    cells = grid.get_complete_row_cells()
    assert [(c.row, c.col) for c in cells] == [(3, c) for c in range(10)]
    assert grid.get_complete_column_cells() == []
    grid.clear_cells(cells)
    assert all(not c.occupied and c.color is None for c in cells)


def test_complete_columns_scan_in_ascending_order():
    grid = GameGrid(4)
    for col in (2, 0):
        grid.occupy_cells([grid.get_cell(r, col) for r in range(4)])
    assert grid.complete_columns() == [0, 2]
    cells = grid.get_complete_column_cells()
    assert [(c.row, c.col) for c in cells[:4]] == [(r, 0) for r in range(4)]
    assert len(cells) == 8


def test_crossing_row_and_column_share_a_cell():
    grid = GameGrid(10)
    fill_row(grid, 2)
    grid.occupy_cells([grid.get_cell(r, 5) for r in range(10)])
    rows = grid.get_complete_row_cells()
    cols = grid.get_complete_column_cells()
    shared = grid.get_cell(2, 5)
    assert shared in rows and shared in cols
    assert len({(c.row, c.col) for c in rows + cols}) == 19


def test_clear_cells_ignores_none_and_empty_cells():
    grid = GameGrid(3)
    grid.clear_cells([None, grid.get_cell(0, 0)])
    assert not grid.occupancy().any()


def test_fit_positions_and_fits_anywhere():
    grid = GameGrid(4)
    assert len(grid.fit_positions(QUAD_H)) == 4
    for r in range(4):
        grid.get_cell(r, 1).set_occupied(True)
    assert grid.fit_positions(QUAD_H) == []
    assert not grid.fits_anywhere(QUAD_H)
    assert grid.fits_anywhere(SINGLE)


def test_pixel_coordinate_bridges():
    grid = GameGrid(10, board_size=300)
    assert grid.cell_size == 30
    assert grid.to_grid_coordinates(95, 31) == Anchor(1, 3)
    assert grid.to_world_coordinates(1, 3) == pytest.approx((90.0, 30.0))
