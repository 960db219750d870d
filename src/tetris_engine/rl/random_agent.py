from __future__ import annotations

import argparse
from typing import Optional

import gymnasium as gym

import tetris_engine.env  # noqa: F401  (registers Tetris-10x20-v0)


def run_random(steps: int = 2000, seed: Optional[int] = None, difficulty: str = "medium", mode: str = "classic") -> float:
    env = gym.make("Tetris-10x20-v0", difficulty=difficulty, mode=mode)
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"Episode {episodes}: score={info['score']} level={info['level']} "
                  f"rows={info['rows_cleared']} status={info['status']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser(description="Run a uniformly random agent on Tetris-10x20-v0")
    p.add_argument("--steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--difficulty", default="medium")
    p.add_argument("--mode", default="classic")
    args = p.parse_args()
    run_random(args.steps, args.seed, args.difficulty, args.mode)


if __name__ == "__main__":  # pragma: no cover
    main()
