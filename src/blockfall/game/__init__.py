"""Game module for blockfall.

Exports the core game engine and supporting classes:
- GameGrid: Board storage, row queries and row removal
- Tetromino, TetrominoType, CATALOG: The seven piece definitions
- ActivePiece: The falling piece and its origin
- collides / place: Collision checks and locking
- try_rotate: Clockwise rotation with a four-way nudge
- ScoringRules: Score, level and speed progression
- Scheduler: Virtual clock for gravity and delayed row clears
- BlockfallGame: Session state and command interface
"""

from .grid import GameGrid
from .pieces import CATALOG, ActivePiece, Tetromino, TetrominoType, random_piece, rotate_cw
from .placement import collides, is_valid_move, place
from .rotation import KICK_OFFSETS, try_rotate
from .rules import ScoringRules
from .scheduler import Scheduler, TimerHandle
from .core import Action, BlockfallGame, GameConfig, GameState, Snapshot

__all__ = [
    "GameGrid",
    "CATALOG",
    "ActivePiece",
    "Tetromino",
    "TetrominoType",
    "random_piece",
    "rotate_cw",
    "collides",
    "is_valid_move",
    "place",
    "KICK_OFFSETS",
    "try_rotate",
    "ScoringRules",
    "Scheduler",
    "TimerHandle",
    "Action",
    "BlockfallGame",
    "GameConfig",
    "GameState",
    "Snapshot",
]
