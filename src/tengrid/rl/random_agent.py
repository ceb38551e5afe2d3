from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

import gymnasium as gym
import numpy as np

import tengrid.env  # noqa: F401  ensure registration


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    rng = random.Random(seed)
    env = gym.make("TenGrid-10x10-v0")
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    rounds = 0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = np.argwhere(info["action_mask"])
        if valid.size:
            action = valid[rng.randrange(len(valid))]
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            rounds += 1
            print(f"round {rounds} finished with score {info['score']} (best {info['best_score']})")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
