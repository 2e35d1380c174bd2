"""
Plotting script for policy evaluation results.
Reads the per-episode CSVs written by rl/evaluate.py.
"""

import os
import argparse
from typing import Dict, List, Optional

import pandas as pd
import numpy as np
import matplotlib.pyplot as plt


def load_metrics(log_dir: str, policy: str) -> Optional[pd.DataFrame]:
    """Load metrics CSV for a policy."""
    csv_path = os.path.join(log_dir, f"{policy}_metrics.csv")
    if os.path.exists(csv_path):
        return pd.read_csv(csv_path)
    return None


def smooth(data: np.ndarray, window: int = 10) -> np.ndarray:
    """Apply rolling average smoothing."""
    if len(data) < window:
        return data
    kernel = np.ones(window) / window
    return np.convolve(data, kernel, mode="valid")


def plot_policy_results(
    df: pd.DataFrame,
    policy: str,
    output_dir: str,
    window: int = 5,
) -> str:
    """Plot per-episode score, length and reward for a single policy."""
    fig, axes = plt.subplots(1, 3, figsize=(16, 5))
    fig.suptitle(f"{policy} evaluation", fontsize=16, fontweight="bold")

    episodes = df["episode"].values

    # Score per episode
    ax = axes[0]
    scores = df["score"].values
    ax.plot(episodes, scores, alpha=0.4, label="raw")
    smoothed = smooth(scores, window)
    ax.plot(episodes[len(episodes) - len(smoothed):], smoothed, linewidth=2, label="smoothed")
    ax.set_xlabel("Episode")
    ax.set_ylabel("Score")
    ax.set_title("Enemies destroyed")
    ax.legend()
    ax.grid(True, alpha=0.3)

    # Episode length
    ax = axes[1]
    ax.plot(episodes, df["length"].values, linewidth=2, color="orange")
    ax.set_xlabel("Episode")
    ax.set_ylabel("Ticks")
    ax.set_title("Episode Length")
    ax.grid(True, alpha=0.3)

    # Reward distribution histogram
    ax = axes[2]
    rewards = df["reward"].values
    ax.hist(rewards, bins=20, alpha=0.7, edgecolor="black")
    ax.axvline(np.mean(rewards), color="red", linestyle="--", label=f"Mean: {np.mean(rewards):.2f}")
    ax.set_xlabel("Episode Reward")
    ax.set_ylabel("Frequency")
    ax.set_title("Reward Distribution")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, f"{policy}_results.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    print(f"Saved {policy} results to {save_path}")
    return save_path


def plot_comparison(frames: Dict[str, pd.DataFrame], output_dir: str) -> str:
    """Bar chart of mean score and accuracy per policy."""
    names = list(frames)
    mean_scores = [frames[n]["score"].mean() for n in names]
    std_scores = [frames[n]["score"].std(ddof=0) for n in names]
    accuracy = [frames[n]["accuracy"].mean() for n in names]

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.bar(names, mean_scores, yerr=std_scores, capsize=6, alpha=0.8)
    ax.set_ylabel("Mean Score")
    ax.set_title("Score by Policy")
    ax.grid(True, axis="y", alpha=0.3)

    ax = axes[1]
    ax.bar(names, accuracy, alpha=0.8, color="green")
    ax.set_ylabel("Hits per Shot")
    ax.set_ylim(0, 1.05)
    ax.set_title("Accuracy by Policy")
    ax.grid(True, axis="y", alpha=0.3)

    plt.tight_layout()

    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, "policy_comparison.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    print(f"Saved comparison plot to {save_path}")
    return save_path


def main():
    parser = argparse.ArgumentParser(description="Plot policy evaluation results")
    parser.add_argument("--log-dir", type=str, default="./logs", help="Directory with *_metrics.csv files")
    parser.add_argument("--output-dir", type=str, default="./plots", help="Where to save figures")
    parser.add_argument("--policies", nargs="+", default=["random", "tracker"], help="Policies to plot")
    parser.add_argument("--window", type=int, default=5, help="Smoothing window (default: 5)")

    args = parser.parse_args()

    frames: Dict[str, pd.DataFrame] = {}
    missing: List[str] = []
    for policy in args.policies:
        df = load_metrics(args.log_dir, policy)
        if df is None:
            missing.append(policy)
            continue
        frames[policy] = df
        plot_policy_results(df, policy, args.output_dir, window=args.window)

    if missing:
        print(f"No metrics found for: {', '.join(missing)}")
    if len(frames) > 1:
        plot_comparison(frames, args.output_dir)


if __name__ == "__main__":
    main()
