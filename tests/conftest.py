from __future__ import annotations

import pytest

from blockfall.game import CATALOG, BlockfallGame, GameConfig, Scheduler, TetrominoType


def only(*kinds: TetrominoType):
    return {kind: CATALOG[kind] for kind in kinds}


def fill_row(game: BlockfallGame, row: int, skip=()) -> None:
    for x in range(game.grid.width):
        if x not in skip:
            game.grid.write(x, row, int(TetrominoType.Z))


def park_left(game: BlockfallGame) -> None:
    for _ in range(game.grid.width):
        game.move_left()


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


@pytest.fixture
def o_game(scheduler) -> BlockfallGame:
    """Seeded session that only ever deals O pieces."""
    return BlockfallGame(GameConfig(random_seed=7), scheduler=scheduler, catalog=only(TetrominoType.O))
