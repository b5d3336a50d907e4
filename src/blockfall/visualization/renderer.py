from __future__ import annotations

from typing import Optional, Tuple

import pygame

from blockfall.game import Snapshot


BACKGROUND = (10, 10, 14)
EMPTY_CELL = (30, 30, 36)
TEXT = (230, 230, 235)
PANEL_WIDTH = 160


def _fade(color: Tuple[int, int, int], amount: float = 0.6) -> Tuple[int, int, int]:
    # Rows waiting to be cleared are drawn blended into the background.
    return tuple(int(c + (b - c) * amount) for c, b in zip(color, EMPTY_CELL))  # type: ignore[return-value]


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 3 + PANEL_WIDTH,
            height * self.cell_size + self.margin * 2,
        )

    def _font_for(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _grid_surface(self, snapshot: Snapshot) -> pygame.Surface:
        colors = snapshot.colors()
        h = len(colors)
        w = len(colors[0]) if h else 0
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(BACKGROUND)
        for y, row in enumerate(colors):
            for x, color in enumerate(row):
                color = color or EMPTY_CELL
                if y in snapshot.pending_rows:
                    color = _fade(color)
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color, rect)
        return surf

    def _draw_panel(self, screen: pygame.Surface, snapshot: Snapshot, x0: int) -> None:
        font = self._font_for()
        lines = [
            f"Score: {snapshot.score}",
            f"Level: {snapshot.level}",
            f"Lines: {snapshot.lines_cleared}",
        ]
        if snapshot.game_over:
            lines += ["", "GAME OVER", "R to restart"]
        for i, text in enumerate(lines):
            screen.blit(font.render(text, True, TEXT), (x0, self.margin + i * 30))

    def draw(self, screen: pygame.Surface, snapshot: Snapshot, music_on: bool = False) -> None:
        grid_surf = self._grid_surface(snapshot)
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        panel_x = self.margin * 2 + grid_surf.get_width()
        self._draw_panel(screen, snapshot, panel_x)
        music = self._font_for().render(f"Music: {'on' if music_on else 'off'} (M)", True, TEXT)
        screen.blit(music, (panel_x, screen.get_height() - self.margin - music.get_height()))
        pygame.display.flip()
