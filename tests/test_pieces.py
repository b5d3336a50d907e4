import random
from collections import Counter

import numpy as np
import pytest

from blockfall.game import CATALOG, ActivePiece, TetrominoType, random_piece, rotate_cw


def test_catalog_has_seven_four_cell_pieces():
    assert set(CATALOG) == set(TetrominoType)
    for kind, tetromino in CATALOG.items():
        assert tetromino.kind is kind
        assert tetromino.name == kind.name
        assert int(tetromino.shape.sum()) == 4
        assert len(tetromino.color) == 3


def test_catalog_shapes_are_read_only():
    with pytest.raises(ValueError):
        CATALOG[TetrominoType.T].shape[0, 0] = 1


def test_rotate_cw_transposes_then_reverses_rows():
    j = CATALOG[TetrominoType.J].shape
    assert rotate_cw(j).tolist() == [[1, 1], [1, 0], [1, 0]]
    assert rotate_cw(CATALOG[TetrominoType.I].shape).shape == (4, 1)


def test_four_rotations_return_to_start():
    for tetromino in CATALOG.values():
        shape = tetromino.shape
        for _ in range(4):
            shape = rotate_cw(shape)
        assert np.array_equal(shape, tetromino.shape)


def test_random_piece_is_roughly_uniform():
    rng = random.Random(1234)
    counts = Counter(random_piece(rng).kind for _ in range(7000))
    assert set(counts) == set(TetrominoType)
    assert all(800 < n < 1200 for n in counts.values())


def test_random_piece_with_empty_catalog_fails():
    with pytest.raises(ValueError):
        random_piece(random.Random(0), {})


@pytest.mark.parametrize(
    "kind,expected_x",
    [(TetrominoType.I, 3), (TetrominoType.O, 4), (TetrominoType.T, 4)],
)
def test_spawn_is_centered_at_top(kind, expected_x):
    piece = ActivePiece.spawn(CATALOG[kind], 10)
    assert (piece.x, piece.y) == (expected_x, 0)


def test_cells_and_moves():
    piece = ActivePiece.spawn(CATALOG[TetrominoType.S], 10)
    assert sorted(piece.cells()) == [(4, 1), (5, 0), (5, 1), (6, 0)]
    moved = piece.moved(-1, 2)
    assert (moved.x, moved.y) == (piece.x - 1, piece.y + 2)
    assert (piece.x, piece.y) == (4, 0)
    back = moved.moved(1, -2)
    assert (back.kind, back.x, back.y) == (piece.kind, piece.x, piece.y)
    assert back.shape is piece.shape
