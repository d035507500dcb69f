from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import gymnasium as gym

import blockfall.env  # noqa: F401


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: Optional[int] = None, gravity_every: int = 4) -> float:
    env = gym.make("FallingBlocks-10x16-v0", gravity_every=gravity_every)
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("Episode %d finished: score=%d lines=%d", episodes, info["score"], info["lines"])
            obs, info = env.reset()
    env.close()
    return total_reward


def main(argv: Optional[Sequence[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Drive the environment with a uniform random policy.")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity-every", type=int, default=4)
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[BLOCKFALL] %(asctime)s - %(message)s")
    total_reward = run_random(args.steps, args.seed, args.gravity_every)
    print(f"Random agent total reward: {total_reward:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
