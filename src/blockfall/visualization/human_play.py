from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, List, Optional

import pygame

from blockfall.game import BlockfallGame, GameConfig, Snapshot
from .audio import MusicController, open_player
from .renderer import Renderer

logger = logging.getLogger(__name__)


def key_bindings(game: BlockfallGame) -> Dict[int, Callable[[], object]]:
    return {
        pygame.K_LEFT: game.move_left,
        pygame.K_RIGHT: game.move_right,
        pygame.K_UP: game.rotate,
        pygame.K_DOWN: game.soft_drop,
        pygame.K_SPACE: game.hard_drop,
        pygame.K_r: game.reset,
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play blockfall in a pygame window")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--music", type=str, default=None, help="Path to a looping background track")
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def run(seed: Optional[int] = None, cell_size: int = 28, music_path: Optional[str] = None) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockfallGame(GameConfig(random_seed=seed))
        renderer = Renderer(cell_size=cell_size)
        music = MusicController(open_player(music_path))

        latest: List[Snapshot] = [game.snapshot()]

        def on_change(snapshot: Snapshot) -> None:
            latest[0] = snapshot
            music.update(snapshot)

        game.add_listener(on_change)
        bindings = key_bindings(game)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("blockfall")

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_m:
                        music.toggle()
                    else:
                        command = bindings.get(event.key)
                        if command is not None:
                            command()

            # Gravity and delayed clears run on the same thread as input
            game.scheduler.advance(clock.get_time())

            renderer.draw(screen, latest[0], music_on=music.playing)
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("starting blockfall (seed=%s)", args.seed)
    run(seed=args.seed, cell_size=args.cell_size, music_path=args.music)


if __name__ == "__main__":  # pragma: no cover
    main()
