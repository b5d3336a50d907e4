from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, Mapping, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray
Color = Tuple[int, int, int]


def _frozen(shape) -> Shape:
    arr = np.array(shape, dtype=np.int8)
    arr.flags.writeable = False
    return arr


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees clockwise (transpose, then reverse each row)."""
    return _frozen(np.rot90(shape, 1, axes=(1, 0)))


@dataclass(frozen=True, eq=False)
class Tetromino:
    kind: TetrominoType
    shape: Shape
    color: Color

    @property
    def name(self) -> str:
        return self.kind.name


BASE_SHAPES = {
    TetrominoType.I: [[1, 1, 1, 1]],
    TetrominoType.J: [[1, 0, 0], [1, 1, 1]],
    TetrominoType.L: [[0, 0, 1], [1, 1, 1]],
    TetrominoType.O: [[1, 1], [1, 1]],
    TetrominoType.S: [[0, 1, 1], [1, 1, 0]],
    TetrominoType.T: [[0, 1, 0], [1, 1, 1]],
    TetrominoType.Z: [[1, 1, 0], [0, 1, 1]],
}

COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.I: (0, 240, 240),
    TetrominoType.J: (0, 0, 240),
    TetrominoType.L: (240, 160, 0),
    TetrominoType.O: (240, 240, 0),
    TetrominoType.S: (0, 240, 0),
    TetrominoType.T: (160, 0, 240),
    TetrominoType.Z: (240, 0, 0),
}

CATALOG: Mapping[TetrominoType, Tetromino] = {
    kind: Tetromino(kind=kind, shape=_frozen(BASE_SHAPES[kind]), color=COLORS[kind])
    for kind in TetrominoType
}


def random_piece(rng: random.Random, catalog: Mapping[TetrominoType, Tetromino] = CATALOG) -> Tetromino:
    """Pick a catalog entry uniformly at random. No bag, repeats allowed."""
    if not catalog:
        raise ValueError("piece catalog is empty")
    return rng.choice(list(catalog.values()))


@dataclass(frozen=True, eq=False)
class ActivePiece:
    """The falling piece: a (possibly rotated) shape at a board origin.

    Instances are immutable; movement and rotation build a new piece so the
    session can swap it in one assignment.
    """

    kind: TetrominoType
    shape: Shape
    x: int
    y: int

    @classmethod
    def spawn(cls, tetromino: Tetromino, board_width: int) -> "ActivePiece":
        _, w = tetromino.shape.shape
        return cls(tetromino.kind, tetromino.shape, board_width // 2 - w // 2, 0)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Absolute (x, y) of every occupied cell."""
        for dy, dx in zip(*np.nonzero(self.shape)):
            yield self.x + int(dx), self.y + int(dy)

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape, self.x + dx, self.y + dy)

    def with_shape(self, shape: Shape, x: int, y: int) -> "ActivePiece":
        return ActivePiece(self.kind, shape, x, y)
