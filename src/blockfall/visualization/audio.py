from __future__ import annotations

import logging
from typing import Optional, Protocol

import pygame

from blockfall.game import Snapshot

logger = logging.getLogger(__name__)


class MusicPlayer(Protocol):
    def play(self) -> None: ...

    def pause(self) -> None: ...


class PygameMusicPlayer:
    """Looping background track on pygame.mixer.music."""

    def __init__(self, path: str, volume: float = 0.3) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
        pygame.mixer.music.load(path)
        pygame.mixer.music.set_volume(volume)
        self._started = False

    def play(self) -> None:
        if self._started:
            pygame.mixer.music.unpause()
        else:
            pygame.mixer.music.play(loops=-1)
            self._started = True

    def pause(self) -> None:
        pygame.mixer.music.pause()


def open_player(path: Optional[str]) -> Optional[MusicPlayer]:
    """Build a pygame player, or None if there is no track or no audio device."""
    if not path:
        return None
    try:
        return PygameMusicPlayer(path)
    except (pygame.error, FileNotFoundError) as exc:
        logger.warning("music disabled: %s", exc)
        return None


class MusicController:
    """Plays while music is enabled and the game is running, pauses otherwise.

    Only state changes reach the player, so `update` can be called on every
    snapshot.
    """

    def __init__(self, player: Optional[MusicPlayer], music_enabled: bool = False) -> None:
        self.player = player
        self.music_enabled = music_enabled
        self.playing = False
        self._game_over = False

    def toggle(self) -> None:
        self.music_enabled = not self.music_enabled
        self._sync()

    def update(self, snapshot: Snapshot) -> None:
        self._game_over = snapshot.game_over
        self._sync()

    def _sync(self) -> None:
        want = self.music_enabled and not self._game_over
        if want == self.playing:
            return
        self.playing = want
        if self.player is None:
            return
        if want:
            self.player.play()
        else:
            self.player.pause()
