from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tengrid.game import BlockPuzzleGame, GameConfig, ScoringRules


EMPTY_RGB = (30, 30, 36)


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _compute_action_mask(game: BlockPuzzleGame) -> np.ndarray:
    size = game.config.board_size
    k = game.config.hand_size
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for piece_idx, row, col in game.valid_actions():  # list of (hand_index, row, col)
        if piece_idx < k:
            mask[piece_idx, row, col] = True
    return mask


class BlockPuzzleEnv(gym.Env):
    """Places one hand piece per step. Action: (hand_index, row, col)."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None,
                 score_scale: float = 0.01,
                 invalid_action_penalty: float = -0.1,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockPuzzleGame(config, rules)
        self.render_mode = render_mode

        self.score_scale = float(score_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        size = self.game.config.board_size
        k = self.game.config.hand_size
        max_marker = max(int(shape.kind) for shape in self.game.catalog)

        # Observation space: occupancy grid (0/1) and hand piece markers (-1 for used slots)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=max_marker, shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.hand_size
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, piece in enumerate(self.game.hand[:k]):
            pieces[i] = int(piece.kind)
        return {
            "grid": self.game.board.occupancy().astype(np.int8),
            "pieces": pieces,
            "pieces_remaining": len(self.game.hand),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "best_score": self.game.best_score,
            "steps": self.game.step_count,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        return self._get_obs(), self._get_info()

    def step(self, action):
        piece_idx, row, col = map(int, action)

        outcome = self.game.place_index(piece_idx, row, col)
        if outcome.accepted:
            reward = self.score_scale * float(outcome.earned)
        else:
            reward = self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        truncated = self.game.step_count >= self.game.config.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["status"] = outcome.status.value
        info["earned"] = outcome.earned
        info["cleared"] = outcome.cleared
        return self._get_obs(), float(reward), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.game.board.grid
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = self.game.catalog.color_for(int(grid[y, x])) if grid[y, x] else None
                rgb = _hex_to_rgb(color) if color else EMPTY_RGB
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = rgb
        return img

    def close(self) -> None:
        pass
