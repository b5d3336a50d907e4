from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 100
    level_threshold: int = 500
    speed_decay: float = 0.95
    min_drop_interval_ms: float = 50.0

    def __post_init__(self) -> None:
        if self.points_per_line <= 0:
            raise ValueError("points_per_line must be positive")
        if self.level_threshold <= 0:
            raise ValueError("level_threshold must be positive")
        if not 0.0 < self.speed_decay < 1.0:
            raise ValueError("speed_decay must be in (0, 1)")
        if self.min_drop_interval_ms <= 0:
            raise ValueError("min_drop_interval_ms must be positive")

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.points_per_line * level

    def level_for_score(self, score: int) -> int:
        return 1 + score // self.level_threshold

    def next_level(self, level: int, score: int) -> int:
        # One level per clear, however many thresholds the score jumped over.
        if self.level_for_score(score) > level:
            return level + 1
        return level

    def decay_interval(self, interval_ms: float) -> float:
        return max(self.min_drop_interval_ms, interval_ms * self.speed_decay)
