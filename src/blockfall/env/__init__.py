"""Gymnasium environments for blockfall."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 10x16 falling-block environment
register(
    id="FallingBlocks-10x16-v0",
    entry_point="blockfall.env.falling_block_env:FallingBlockEnv",
)

__all__: list[str] = []
