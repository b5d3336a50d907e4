import random

import numpy as np

from blockfall.game import CATALOG, ActivePiece, GameGrid, TetrominoType, collides, rotate_cw, try_rotate


def vertical(kind: TetrominoType) -> np.ndarray:
    return rotate_cw(CATALOG[kind].shape)


def test_rotation_in_place():
    grid = GameGrid(10, 20)
    piece = ActivePiece.spawn(CATALOG[TetrominoType.I], 10)
    rotated = try_rotate(grid, piece)
    assert rotated is not None
    assert (rotated.x, rotated.y) == (piece.x, piece.y)
    assert rotated.shape.shape == (4, 1)


def test_nudge_left_off_right_wall():
    grid = GameGrid(10, 20)
    piece = ActivePiece(TetrominoType.T, vertical(TetrominoType.T), 8, 5)
    rotated = try_rotate(grid, piece)
    assert rotated is not None
    assert (rotated.x, rotated.y) == (7, 5)
    assert rotated.shape.tolist() == [[1, 1, 1], [0, 1, 0]]


def test_nudge_right_when_left_is_blocked():
    grid = GameGrid(10, 20)
    grid.write(1, 5, 1)
    piece = ActivePiece(TetrominoType.S, vertical(TetrominoType.S), 0, 5)
    assert not collides(grid, piece.x, piece.y, piece.shape)
    rotated = try_rotate(grid, piece)
    assert rotated is not None
    assert (rotated.x, rotated.y) == (1, 5)


def test_nudge_up_when_both_sides_are_blocked():
    grid = GameGrid(10, 20)
    grid.write(0, 5, 1)
    grid.write(3, 5, 1)
    piece = ActivePiece(TetrominoType.T, vertical(TetrominoType.T), 1, 5)
    assert not collides(grid, piece.x, piece.y, piece.shape)
    rotated = try_rotate(grid, piece)
    assert rotated is not None
    assert (rotated.x, rotated.y) == (1, 4)


def test_rotation_rejected_when_every_offset_fails():
    grid = GameGrid(10, 20)
    for x, y in [(0, 5), (3, 5), (1, 4)]:
        grid.write(x, y, 1)
    piece = ActivePiece(TetrominoType.T, vertical(TetrominoType.T), 1, 5)
    assert try_rotate(grid, piece) is None
    assert (piece.x, piece.y) == (1, 5)


def test_vertical_i_against_right_wall_cannot_lie_down():
    grid = GameGrid(10, 20)
    piece = ActivePiece(TetrominoType.I, vertical(TetrominoType.I), 9, 5)
    assert try_rotate(grid, piece) is None


def test_half_turn_from_valid_positions_never_corrupts():
    rng = random.Random(99)
    grid = GameGrid(10, 20)
    for y in range(8, 20):
        for x in range(10):
            if rng.random() < 0.35:
                grid.write(x, y, 1)
    for tetromino in CATALOG.values():
        h, w = tetromino.shape.shape
        for x in range(0, 10 - w + 1):
            for y in range(-1, 20 - h + 1):
                piece = ActivePiece(tetromino.kind, tetromino.shape, x, y)
                if collides(grid, x, y, piece.shape):
                    continue
                current = piece
                for _ in range(2):
                    rotated = try_rotate(grid, current)
                    if rotated is not None:
                        current = rotated
                    assert not collides(grid, current.x, current.y, current.shape)
                assert int(current.shape.sum()) == 4
