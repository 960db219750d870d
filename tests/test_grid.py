import numpy as np

from tetris_engine.game import GameGrid


def test_new_grid_is_empty():
    grid = GameGrid()
    assert grid.grid.shape == (20, 10)
    assert not grid.grid.any()
    assert grid.rows_cleared == 0
    assert not grid.is_game_over()


def test_out_of_bounds_is_never_empty():
    grid = GameGrid()
    assert grid.is_cell_empty(0, 0)
    assert not grid.is_cell_empty(-1, 0)
    assert not grid.is_cell_empty(10, 0)
    assert not grid.is_cell_empty(0, 20)
    assert grid.get_cell(-1, 5) is None
    assert grid.check_collision([(0, 20)])


def test_add_block_rejects_occupied_cell():
    grid = GameGrid()
    assert grid.add_block(2, 3, 5)
    assert grid.get_cell(2, 3) == 5
    assert not grid.add_block(2, 3, 1)
    assert grid.get_cell(2, 3) == 5


def test_add_blocks_is_all_or_nothing():
    grid = GameGrid()
    grid.add_block(3, 19, 1)
    assert not grid.add_blocks([(0, 19), (1, 19), (3, 19)], 2)
    assert grid.get_cell(0, 19) is None
    assert grid.get_cell(1, 19) is None
    assert grid.add_blocks([(0, 19), (1, 19)], 2)
    assert grid.get_cell(1, 19) == 2


def test_remove_full_rows_reports_original_indices_bottom_up():
    grid = GameGrid()
    grid.grid[19, :] = 1
    grid.grid[17, :] = 2
    grid.grid[18, 0] = 7
    grid.grid[16, 9] = 6

    cleared = grid.remove_full_rows_with_indices()

    assert cleared == [19, 17]
    assert grid.rows_cleared == 2
    # Partial rows slide down past the cleared ones
    assert grid.get_cell(0, 19) == 7
    assert grid.get_cell(9, 18) == 6
    assert not grid.grid[:18].any()


def test_remove_four_contiguous_rows():
    grid = GameGrid()
    grid.grid[16:20, :] = 3
    grid.grid[15, 4] = 5
    assert grid.remove_full_rows() == 4
    assert grid.get_cell(4, 19) == 5
    assert int(np.count_nonzero(grid.grid)) == 1
    for y in range(20):
        assert not grid.is_row_full(y)


def test_remove_row_bounds():
    grid = GameGrid()
    grid.remove_row(25)
    assert grid.rows_cleared == 0
    grid.grid[0, :] = 1
    grid.remove_row(0)
    assert not grid.grid[0].any()
    assert grid.rows_cleared == 1


def test_game_over_when_top_row_occupied():
    grid = GameGrid()
    grid.add_block(5, 0, 4)
    assert grid.is_game_over()


def test_copy_is_independent():
    grid = GameGrid()
    grid.add_block(1, 1, 1)
    other = grid.copy()
    other.add_block(2, 2, 2)
    assert grid.get_cell(2, 2) is None
    state = grid.clone_state()
    state[5, 5] = 3
    assert grid.get_cell(5, 5) is None


def test_cells_round_trip():
    grid = GameGrid()
    grid.add_block(0, 19, 4)
    grid.add_block(9, 10, 7)
    grid.rows_cleared = 3
    cells = grid.to_cells()
    assert cells[19][0] == 4
    assert cells[0][0] is None

    restored = GameGrid()
    restored.load_cells(cells, grid.rows_cleared)
    assert np.array_equal(restored.grid, grid.grid)
    assert restored.rows_cleared == 3


def test_str_marks_filled_cells():
    grid = GameGrid()
    grid.add_block(0, 19, 1)
    lines = str(grid).splitlines()
    assert len(lines) == 20
    assert lines[-1].startswith("#")
    assert lines[0] == " ".join(["."] * 10)
