from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import CATALOG, ActivePiece, Color, Tetromino, TetrominoType, random_piece
from .placement import collides, is_valid_move, place
from .rotation import try_rotate
from .rules import ScoringRules
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

# Cells whose id is not in the session catalog.
UNKNOWN_COLOR: Color = (200, 200, 200)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class GameState(Enum):
    NO_PIECE = "no_piece"
    FALLING = "falling"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    initial_drop_interval_ms: float = 800.0
    clear_delay_ms: float = 300.0
    random_seed: Optional[int] = None
    gate_spawn_on_clear: bool = False
    autostart: bool = True

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board dimensions must be positive, got {self.width}x{self.height}")
        if self.initial_drop_interval_ms <= 0:
            raise ValueError("initial_drop_interval_ms must be positive")
        if self.clear_delay_ms < 0:
            raise ValueError("clear_delay_ms must not be negative")


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only view of a session, handed to presentation layers."""

    board: np.ndarray
    active: Optional[ActivePiece]
    score: int
    level: int
    lines_cleared: int
    drop_interval_ms: float
    game_over: bool
    state: GameState
    pending_rows: FrozenSet[int]
    palette: Mapping[int, Color]

    def overlay(self) -> np.ndarray:
        """Board copy with the falling piece drawn in."""
        state = self.board.copy()
        if self.active is not None:
            h, w = state.shape
            for x, y in self.active.cells():
                if 0 <= y < h and 0 <= x < w:
                    state[y, x] = int(self.active.kind)
        return state

    def colors(self) -> List[List[Optional[Color]]]:
        return [
            [self.palette.get(int(v), UNKNOWN_COLOR) if v else None for v in row]
            for row in self.overlay()
        ]


Listener = Callable[[Snapshot], None]


class BlockfallGame:
    """Session controller: one board, at most one falling piece.

    All commands are safe to call at any time; anything that does not apply
    to the current state is a no-op. Timed behavior (gravity and the delayed
    row clear) goes through `scheduler`, which the owner advances.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
        catalog: Optional[Mapping[TetrominoType, Tetromino]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = dict(catalog) if catalog is not None else dict(CATALOG)
        if not self.catalog:
            raise ValueError("piece catalog is empty")
        self.palette: Mapping[int, Color] = MappingProxyType(
            {int(kind): t.color for kind, t in self.catalog.items()}
        )
        self.scheduler = scheduler or Scheduler()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self._listeners: List[Listener] = []
        self._fall_timer: Optional[TimerHandle] = None
        self._clear_timer: Optional[TimerHandle] = None
        self.generation = 0
        self.active: Optional[ActivePiece] = None
        self.score = 0
        self.level = 1
        self.drop_interval_ms = self.config.initial_drop_interval_ms
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.game_over = False
        self.pending_rows: FrozenSet[int] = frozenset()
        self.state = GameState.NO_PIECE
        self.reset()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> Snapshot:
        board = self.grid.clone_state()
        board.flags.writeable = False
        return Snapshot(
            board=board,
            active=self.active,
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            drop_interval_ms=self.drop_interval_ms,
            game_over=self.game_over,
            state=self.state,
            pending_rows=self.pending_rows,
            palette=self.palette,
        )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self._cancel_timers()
        self.generation += 1
        self.grid = GameGrid(self.config.width, self.config.height)
        self.active = None
        self.score = 0
        self.level = 1
        self.drop_interval_ms = self.config.initial_drop_interval_ms
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.game_over = False
        self.pending_rows = frozenset()
        self.state = GameState.NO_PIECE
        logger.debug("session reset (generation %d)", self.generation)
        if self.config.autostart:
            self._spawn()
        self._notify()

    def spawn(self) -> bool:
        """Bring in the next piece if none is falling. False on game over."""
        if self.game_over or self.active is not None:
            return False
        ok = self._spawn()
        self._notify()
        return ok

    def _spawn(self) -> bool:
        tetromino = random_piece(self.rng, self.catalog)
        piece = ActivePiece.spawn(tetromino, self.grid.width)
        if collides(self.grid, piece.x, piece.y, piece.shape):
            self._set_game_over()
            return False
        self.active = piece
        self.state = GameState.FALLING
        if self._fall_timer is None:
            self._schedule_fall()
        logger.debug("spawned %s at (%d, %d)", tetromino.name, piece.x, piece.y)
        return True

    def _set_game_over(self) -> None:
        self.active = None
        self.game_over = True
        self.state = GameState.GAME_OVER
        if self._fall_timer is not None:
            self._fall_timer.cancel()
            self._fall_timer = None
        logger.info("game over: score=%d level=%d lines=%d", self.score, self.level, self.lines_cleared)

    def _schedule_fall(self) -> None:
        if self._fall_timer is not None:
            self._fall_timer.cancel()
        self._fall_timer = self.scheduler.call_every(self.drop_interval_ms, self.tick)

    def _cancel_timers(self) -> None:
        for handle in (self._fall_timer, self._clear_timer):
            if handle is not None:
                handle.cancel()
        self._fall_timer = None
        self._clear_timer = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _shift(self, dx: int, dy: int) -> bool:
        piece = self.active
        if piece is None or self.game_over:
            return False
        if not is_valid_move(self.grid, piece.x + dx, piece.y + dy, piece.shape):
            return False
        self.active = piece.moved(dx, dy)
        return True

    def move_left(self) -> None:
        if self._shift(-1, 0):
            self._notify()

    def move_right(self) -> None:
        if self._shift(1, 0):
            self._notify()

    def soft_drop(self) -> None:
        """Move down one row, locking the piece if it is resting."""
        if self.active is None or self.game_over:
            return
        if not self._shift(0, 1):
            self._lock()
        self._notify()

    def tick(self) -> None:
        """Gravity step, fired by the scheduler every drop interval."""
        self.soft_drop()

    def rotate(self) -> None:
        if self.active is None or self.game_over:
            return
        rotated = try_rotate(self.grid, self.active)
        if rotated is None:
            return
        self.active = rotated
        self._notify()

    def hard_drop(self) -> int:
        """Drop as far as possible and lock. Returns the rows travelled.

        A piece that is already resting is left alone.
        """
        if self.active is None or self.game_over:
            return 0
        distance = 0
        while self._shift(0, 1):
            distance += 1
        if distance == 0:
            return 0
        self._lock()
        self._notify()
        return distance

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, Dict[str, Any]]:
        if self.game_over:
            return self.snapshot().overlay(), 0, True, self.get_info()

        before = self.score
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

        obs = self.snapshot().overlay()
        return obs, self.score - before, self.game_over, self.get_info()

    def get_info(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lines_cleared": self.lines_cleared,
            "pieces_placed": self.pieces_placed,
            "drop_interval_ms": self.drop_interval_ms,
            "pending_rows": sorted(self.pending_rows),
            "state": self.state.value,
        }

    # ------------------------------------------------------------------
    # Lock and line clear
    # ------------------------------------------------------------------
    def _lock(self) -> None:
        piece = self.active
        assert piece is not None
        self.active = None
        self.state = GameState.NO_PIECE
        written = place(self.grid, piece)
        self.pieces_placed += 1
        logger.debug("locked %s at (%d, %d), %d cells", piece.kind.name, piece.x, piece.y, written)

        # An outstanding clear is finished now so its rows shift together
        # with the cells just written.
        if self.pending_rows:
            self._complete_clear()

        rows = self.grid.full_rows()
        if rows:
            self._start_clear(rows)

        if self.config.gate_spawn_on_clear and self.pending_rows:
            return
        self._spawn()

    def _start_clear(self, rows: List[int]) -> None:
        self.pending_rows = frozenset(rows)
        logger.debug("rows %s full", rows)
        if self.config.clear_delay_ms <= 0:
            self._complete_clear()
            return
        generation = self.generation
        self._clear_timer = self.scheduler.call_later(
            self.config.clear_delay_ms, lambda: self._on_clear_due(generation)
        )

    def _on_clear_due(self, generation: int) -> None:
        self._clear_timer = None
        if generation != self.generation or not self.pending_rows:
            logger.debug("dropping stale row clear from generation %d", generation)
            return
        self._complete_clear()
        self._settle_active()
        if self.active is None and not self.game_over:
            self._spawn()
        self._notify()

    def _complete_clear(self) -> None:
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._clear_timer = None
        rows = self.pending_rows
        self.pending_rows = frozenset()
        cleared = self.grid.remove_rows(rows)
        if cleared == 0:
            return
        self.lines_cleared += cleared
        self.score += self.rules.score_for_lines(cleared, self.level)
        logger.debug("cleared %d rows, score %d", cleared, self.score)

        new_level = self.rules.next_level(self.level, self.score)
        if new_level > self.level:
            self.level = new_level
            self.drop_interval_ms = self.rules.decay_interval(self.drop_interval_ms)
            logger.info("level %d, drop interval %.1f ms", self.level, self.drop_interval_ms)
            if not self.game_over and self._fall_timer is not None:
                self._schedule_fall()

    def _settle_active(self) -> None:
        # Rows shifted down under the falling piece; lift it clear of them.
        piece = self.active
        if piece is None:
            return
        while collides(self.grid, piece.x, piece.y, piece.shape):
            piece = piece.moved(0, -1)
        self.active = piece
