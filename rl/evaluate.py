"""
Evaluation script for baseline policies on the tilt shooter environment
"""

import argparse
from typing import Callable, Dict, Optional

import numpy as np

from game.tilt_shooter import TiltShooterEnv
from rl.configs.shooter_config import ENV_CONFIG, REWARD_CONFIG, EVAL_CONFIG
from rl.metrics import EpisodeMetrics


def random_policy(env: TiltShooterEnv, obs: np.ndarray, step: int) -> np.ndarray:
    """Uniformly random tilt and fire"""
    return env.action_space.sample()


def tracker_policy(env: TiltShooterEnv, obs: np.ndarray, step: int, fire_every: int = 6) -> np.ndarray:
    """
    Steer under the enemy closest to the floor and fire when lined up.
    Reads the snapshot the same way a renderer would; never mutates the session.
    """
    snap = env.session.snapshot()
    cfg = env.engine_config
    tilts = env._tilt_values

    still = int(np.argmin(np.abs(tilts)))
    if not snap.enemies:
        return np.array([still, 0], dtype=np.int64)

    target = max(snap.enemies, key=lambda e: e.y)
    dx = (target.x + cfg.enemy_width / 2) - (snap.player_x + cfg.player_width / 2)

    deadzone = cfg.bullet_width
    if dx < -deadzone:
        tilt = 0
    elif dx > deadzone:
        tilt = len(tilts) - 1
    else:
        tilt = still

    aligned = abs(dx) < (cfg.enemy_width + cfg.bullet_width) / 2
    fire = int(aligned and step % fire_every == 0)
    return np.array([tilt, fire], dtype=np.int64)


POLICIES: Dict[str, Callable] = {
    "random": random_policy,
    "tracker": tracker_policy,
}


def evaluate_policy(
    policy: str = "tracker",
    n_episodes: int = 10,
    seed: Optional[int] = None,
    log_dir: Optional[str] = None,
    env_config: Optional[dict] = None,
    verbose: int = 1,
):
    """
    Evaluate a baseline policy

    Args:
        policy: Policy name ('random' or 'tracker')
        n_episodes: Number of episodes to evaluate
        seed: Random seed; episode i uses seed + i
        log_dir: Directory for the per-episode CSV (None disables it)
        env_config: Overrides for ENV_CONFIG
        verbose: 0 silent, 1 per-episode lines and summary
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy: {policy}")
    act = POLICIES[policy]

    env = TiltShooterEnv(render_mode=None, reward_config=REWARD_CONFIG,
                         **{**ENV_CONFIG, **(env_config or {})})
    if seed is not None:
        env.action_space.seed(seed)

    metrics = EpisodeMetrics(log_dir=log_dir, policy_name=policy, verbose=verbose)
    with metrics:
        for episode in range(n_episodes):
            obs, info = env.reset(seed=seed + episode if seed is not None else None)

            terminated = False
            truncated = False
            total_reward = 0.0
            steps = 0

            while not (terminated or truncated):
                action = act(env, obs, steps)
                obs, reward, terminated, truncated, info = env.step(action)
                total_reward += reward
                steps += 1

            metrics.record(total_reward, steps, info, env.engine_config.starting_lives)

            if verbose > 0:
                print(f"Episode {episode + 1}/{n_episodes}: "
                      f"Reward = {total_reward:.2f}, Length = {steps}, Score = {info['score']}")

    env.close()

    summary = metrics.get_summary()
    if verbose > 0 and summary:
        print("\n" + "=" * 50)
        print(f"Evaluation Results [{policy}] ({n_episodes} episodes):")
        print(f"Mean Reward: {summary['mean_reward']:.2f} ± {summary['std_reward']:.2f}")
        print(f"Mean Episode Length: {summary['mean_length']:.1f}")
        print(f"Mean Score: {summary['mean_score']:.2f} (max {summary['max_score']})")
        print(f"Mean Accuracy: {summary['mean_accuracy']:.2%}")
        print("=" * 50)

    return summary


def main():
    parser = argparse.ArgumentParser(description="Evaluate baseline policies on the tilt shooter")
    parser.add_argument(
        "--policy",
        type=str,
        default="tracker",
        choices=sorted(POLICIES),
        help="Policy to evaluate (default: tracker)",
    )
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=EVAL_CONFIG["n_episodes"],
        help=f"Number of evaluation episodes (default: {EVAL_CONFIG['n_episodes']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=EVAL_CONFIG["seed"],
        help=f"Random seed (default: {EVAL_CONFIG['seed']})",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=EVAL_CONFIG["log_dir"],
        help="Directory for per-episode CSV metrics",
    )
    parser.add_argument(
        "--compare-random",
        action="store_true",
        help="Also evaluate random policy for comparison",
    )

    args = parser.parse_args()

    results = evaluate_policy(
        policy=args.policy,
        n_episodes=args.n_episodes,
        seed=args.seed,
        log_dir=args.log_dir,
    )

    if args.compare_random and args.policy != "random":
        print("\n")
        random_results = evaluate_policy(
            policy="random",
            n_episodes=args.n_episodes,
            seed=args.seed,
            log_dir=args.log_dir,
        )

        improvement = results["mean_score"] - random_results["mean_score"]
        print(f"\nScore improvement over random: {improvement:.2f}")


if __name__ == "__main__":
    main()
