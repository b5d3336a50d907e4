from __future__ import annotations

import numpy as np

from .grid import GameGrid
from .pieces import ActivePiece, Shape


def collides(grid: GameGrid, x: int, y: int, shape: Shape) -> bool:
    """True if `shape` with its top-left at (x, y) hits a wall, the floor or a block."""
    for r, c in zip(*np.nonzero(shape)):
        if grid.is_occupied(x + int(c), y + int(r)):
            return True
    return False


def is_valid_move(grid: GameGrid, x: int, y: int, shape: Shape) -> bool:
    return not collides(grid, x, y, shape)


def place(grid: GameGrid, piece: ActivePiece) -> int:
    """Lock `piece` into the grid and return the number of cells written.

    Cells above the top of the board are dropped.
    """
    written = 0
    for x, y in piece.cells():
        if grid.is_inside(x, y):
            grid.write(x, y, int(piece.kind))
            written += 1
    return written
