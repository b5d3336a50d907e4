"""Gymnasium environments for blockfall."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the standard 10x20 board
register(
    id="Blockfall-10x20-v0",
    entry_point="blockfall.env.blockfall_env:BlockfallEnv",
)

__all__ = ["Blockfall-10x20-v0"]
