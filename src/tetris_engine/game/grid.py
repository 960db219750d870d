from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np


Coordinate = Tuple[int, int]

EMPTY = 0


class GameGrid:
    """Fixed 10x20 cell matrix of locked blocks.

    Cells hold 0 when empty, otherwise the color id (1..7) of the tetromino
    that was locked there. The array is indexed ``grid[y, x]`` with y=0 as
    the top row.
    """

    WIDTH = 10
    HEIGHT = 20

    def __init__(self) -> None:
        self.width = self.WIDTH
        self.height = self.HEIGHT
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
        self.rows_cleared = 0

    def clear(self) -> None:
        self.grid.fill(EMPTY)
        self.rows_cleared = 0

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_cell_empty(self, x: int, y: int) -> bool:
        # Out of bounds counts as a wall
        if not self.is_within_bounds(x, y):
            return False
        return self.grid[y, x] == EMPTY

    def get_cell(self, x: int, y: int) -> Optional[int]:
        if not self.is_within_bounds(x, y):
            return None
        value = int(self.grid[y, x])
        return value if value != EMPTY else None

    def add_block(self, x: int, y: int, color_id: int) -> bool:
        if not self.is_cell_empty(x, y):
            return False
        self.grid[y, x] = color_id
        return True

    def add_blocks(self, positions: Iterable[Coordinate], color_id: int) -> bool:
        """Place every position or none of them."""
        scratch = self.copy()
        for x, y in positions:
            if not scratch.add_block(x, y, color_id):
                return False
        self.grid = scratch.grid
        return True

    def check_collision(self, positions: Iterable[Coordinate]) -> bool:
        for x, y in positions:
            if not self.is_cell_empty(x, y):
                return True
        return False

    def is_row_full(self, row: int) -> bool:
        if not 0 <= row < self.height:
            return False
        return bool(np.all(self.grid[row] != EMPTY))

    def remove_row(self, row: int) -> None:
        if not 0 <= row < self.height:
            return
        if row > 0:
            self.grid[1 : row + 1] = self.grid[0:row].copy()
        self.grid[0].fill(EMPTY)
        self.rows_cleared += 1

    def remove_full_rows_with_indices(self) -> List[int]:
        """Remove every full row, bottom to top.

        Returns the original indices of the cleared rows in bottom-up order.
        Clearing only shifts rows above a cleared row, so a row that was not
        full before the call never becomes full during it.
        """
        cleared = [y for y in range(self.height - 1, -1, -1) if self.is_row_full(y)]
        y = self.height - 1
        while y >= 0:
            if self.is_row_full(y):
                self.remove_row(y)
                # Same y again: the row above has just moved into it
                continue
            y -= 1
        return cleared

    def remove_full_rows(self) -> int:
        return len(self.remove_full_rows_with_indices())

    def is_game_over(self) -> bool:
        return bool(np.any(self.grid[0] != EMPTY))

    def copy(self) -> "GameGrid":
        new_grid = GameGrid()
        new_grid.grid = self.grid.copy()
        new_grid.rows_cleared = self.rows_cleared
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def to_cells(self) -> List[List[Optional[int]]]:
        """Row-major plain-data copy, ``None`` for empty cells."""
        return [[int(v) if v != EMPTY else None for v in row] for row in self.grid]

    def load_cells(self, cells: List[List[Optional[int]]], rows_cleared: int = 0) -> None:
        data = np.zeros((self.height, self.width), dtype=np.int8)
        for y, row in enumerate(cells):
            for x, value in enumerate(row):
                if value is not None:
                    data[y, x] = int(value)
        self.grid = data
        self.rows_cleared = int(rows_cleared)

    def __str__(self) -> str:
        return "\n".join(" ".join("#" if v else "." for v in row) for row in self.grid)
