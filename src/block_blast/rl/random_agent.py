from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import gymnasium as gym
import numpy as np

from block_blast.env import ENV_ID

logger = logging.getLogger(__name__)


def run_random(episodes: int = 5, seed: Optional[int] = None, max_steps: int = 500) -> list[int]:
    """Play episodes with uniformly random valid actions; returns final scores."""
    env = gym.make(ENV_ID)
    rng = np.random.default_rng(seed)
    scores: list[int] = []
    obs, info = env.reset(seed=seed)
    for episode in range(episodes):
        for _ in range(max_steps):
            valid = np.argwhere(info["action_mask"])
            if len(valid) > 0:
                action = valid[rng.integers(len(valid))]
            else:
                action = env.action_space.sample()
            obs, reward, terminated, truncated, info = env.step(action)
            if terminated or truncated:
                break
        scores.append(int(info["score"]))
        logger.info("Episode %d finished with score %d", episode, info["score"])
        obs, info = env.reset()
    env.close()
    return scores


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-steps", type=int, default=500)
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    scores = run_random(args.episodes, args.seed, args.max_steps)
    print(f"Random agent scores: {scores} (mean {np.mean(scores):.1f})")


if __name__ == "__main__":  # pragma: no cover
    main()
