from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_blast.game import BLUEPRINT_MAX_DIMENSION, BlockBlastGame, BlockSetRegistry, GameConfig, HighScoreStore
from block_blast.game.colors import hex_to_rgb


PIECE_VIEW = BLUEPRINT_MAX_DIMENSION


def _compute_action_mask(game: BlockBlastGame) -> np.ndarray:
    size = game.grid.n
    k = game.config.pieces_per_set
    mask = np.zeros((k, size, size), dtype=np.bool_)
    if game.game_over:
        return mask
    for piece in game.pieces_in_play:
        for row, col in game.fit_positions(piece):
            mask[piece.slot, row, col] = True
    return mask


def _piece_masks(game: BlockBlastGame) -> np.ndarray:
    k = game.config.pieces_per_set
    pieces = np.zeros((k, PIECE_VIEW, PIECE_VIEW), dtype=np.int8)
    for piece in game.pieces_in_play:
        shape = piece.figure.to_array()[:PIECE_VIEW, :PIECE_VIEW]
        pieces[piece.slot, : shape.shape[0], : shape.shape[1]] = shape
    return pieces


class BlockBlastEnv(gym.Env):
    """Place one in-play piece per step at (slot, row, col).

    Reward is the engine score delta; rejected placements earn
    `invalid_action_penalty` and leave the game unchanged.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        registry: Optional[BlockSetRegistry] = None,
        high_scores: Optional[HighScoreStore] = None,
        invalid_action_penalty: float = -1.0,
        terminal_penalty: float = 0.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = BlockBlastGame(registry=registry, high_scores=high_scores, config=config)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        size = self.game.config.grid_size
        k = self.game.config.pieces_per_set

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k, PIECE_VIEW, PIECE_VIEW), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )
        # Action: (slot, row, col)
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.grid.occupancy().astype(np.int8),
            "pieces": _piece_masks(self.game),
            "pieces_remaining": len(self.game.pieces_in_play),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "high_score": self.game.high_score,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, row, col = map(int, action)
        result = self.game.attempt_placement(slot, (row, col))
        self._steps += 1

        reward = float(result.score_gained) if result.success else self.invalid_action_penalty
        terminated = self.game.game_over
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["placed"] = result.success
        info["lines_cleared"] = result.lines_cleared
        info["cells_cleared"] = len(result.cleared_cells)
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cell = 12
        n = self.game.grid.n
        img = np.zeros((n * cell, n * cell, 3), dtype=np.uint8)
        img[:, :] = (30, 30, 36)
        for c in self.game.grid.cells:
            if c.occupied:
                color = hex_to_rgb(c.color) if c.color else (70, 200, 120)
                img[c.row * cell : (c.row + 1) * cell, c.col * cell : (c.col + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
