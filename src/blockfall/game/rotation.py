from __future__ import annotations

from typing import Optional, Tuple

from .grid import GameGrid
from .pieces import ActivePiece, rotate_cw
from .placement import is_valid_move


# In place, one left, one right, one up. First fit wins.
KICK_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (-1, 0), (1, 0), (0, -1))


def try_rotate(grid: GameGrid, piece: ActivePiece) -> Optional[ActivePiece]:
    """Rotate clockwise with a small nudge; None when no offset fits."""
    rotated = rotate_cw(piece.shape)
    for dx, dy in KICK_OFFSETS:
        x, y = piece.x + dx, piece.y + dy
        if is_valid_move(grid, x, y, rotated):
            return piece.with_shape(rotated, x, y)
    return None
