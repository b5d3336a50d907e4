from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, BlockfallGame, GameConfig, ScoringRules, Tetromino, TetrominoType
from blockfall.game.core import UNKNOWN_COLOR


class BlockfallEnv(gym.Env):
    """Falling-block environment with one discrete action per engine command.

    Row clears are applied immediately (no visual delay) and gravity is not
    tied to wall-clock time: every `gravity_every` agent steps the piece
    falls one row, as if the fall timer had fired.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        width: int = 10,
        height: int = 20,
        render_mode: Optional[str] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[Mapping[TetrominoType, Tetromino]] = None,
        gravity_every: int = 4,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        if gravity_every < 0:
            raise ValueError("gravity_every must not be negative")
        config = GameConfig(width=width, height=height, clear_delay_ms=0.0)
        self.game = BlockfallGame(config, rules, catalog=catalog)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)

        self.observation_space = spaces.Box(
            low=0, high=len(TetrominoType), shape=(height, width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[np.ndarray] = None
        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.snapshot().overlay().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        info = self.game.get_info()
        info["steps"] = self._steps
        info["max_height"] = self.game.grid.get_max_height()
        info["holes"] = self.game.grid.count_holes()
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action):
        before = self.game.score
        self.game.step(Action(int(action)))
        self._steps += 1
        if self.gravity_every and self._steps % self.gravity_every == 0 and not self.game.game_over:
            self.game.tick()

        reward = float(self.game.score - before)
        terminated = bool(self.game.game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps

        obs = self._get_obs()
        self._last_obs = obs
        return obs, reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs if self._last_obs is not None else self._get_obs()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(grid[y, x])
                    color = self.game.palette.get(v, UNKNOWN_COLOR) if v else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
