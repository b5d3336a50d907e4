from __future__ import annotations

from typing import Iterable, List

import numpy as np


EMPTY = 0


class GameGrid:
    """Fixed-size board for falling pieces.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are tetromino ids, which the catalog maps to colors.
    Row 0 is the top of the board.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        """Collision view of a cell.

        Anything left, right or below the board counts as occupied. Cells
        above the top (y < 0) are always free so pieces can poke out while
        spawning or rotating.
        """
        if x < 0 or x >= self.width or y >= self.height:
            return True
        if y < 0:
            return False
        return bool(self.grid[y, x] != EMPTY)

    def write(self, x: int, y: int, value: int) -> None:
        self.grid[y, x] = value

    def row_is_full(self, row: int) -> bool:
        if not 0 <= row < self.height:
            return False
        return bool(np.all(self.grid[row, :] != EMPTY))

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def remove_rows(self, indices: Iterable[int]) -> int:
        """Delete rows and push the same number of empty rows in at the top."""
        rows = sorted({int(r) for r in indices if 0 <= int(r) < self.height})
        if not rows:
            return 0
        num = len(rows)
        kept = np.delete(self.grid, rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
