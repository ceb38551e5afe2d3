"""Gymnasium environments for TenGrid."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One placement per step: (hand_index, row, col)
register(
    id="TenGrid-10x10-v0",
    entry_point="tengrid.env.block_puzzle_env:BlockPuzzleEnv",
)

__all__ = ["TenGrid-10x10-v0"]
