"""
Per-episode metrics for tilt shooter evaluation runs.
Records: reward, length, score, lives lost, shots fired. Saves to CSV for easy plotting.
"""

import os
import csv
from typing import Any, Dict, List, Optional

import numpy as np


class EpisodeMetrics:
    """
    Tracks task-specific metrics per episode and writes one CSV row each.
    """

    FIELDS = ["episode", "reward", "length", "score", "lives_lost", "shots", "accuracy", "game_over"]

    def __init__(
        self,
        log_dir: Optional[str],
        policy_name: str,
        verbose: int = 1,
    ):
        self.log_dir = log_dir
        self.policy_name = policy_name
        self.verbose = verbose

        self.episode_rewards: List[float] = []
        self.episode_lengths: List[int] = []
        self.episode_scores: List[int] = []
        self.episode_lives_lost: List[int] = []
        self.episode_accuracy: List[float] = []

        self.csv_path: Optional[str] = None
        self.csv_file = None
        self.csv_writer = None

    def open(self) -> None:
        """Initialize CSV file for logging."""
        if self.log_dir is None:
            return
        os.makedirs(self.log_dir, exist_ok=True)
        self.csv_path = os.path.join(self.log_dir, f"{self.policy_name}_metrics.csv")

        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow(self.FIELDS)
        self.csv_file.flush()

        if self.verbose > 0:
            print(f"[Metrics] Logging to {self.csv_path}")

    def record(self, reward: float, length: int, info: Dict[str, Any], starting_lives: int) -> None:
        score = int(info.get("score", 0))
        shots = int(info.get("shots", 0))
        lives_lost = starting_lives - int(info.get("lives", starting_lives))
        accuracy = score / shots if shots else 0.0
        game_over = info.get("phase") == "game_over"

        self.episode_rewards.append(reward)
        self.episode_lengths.append(length)
        self.episode_scores.append(score)
        self.episode_lives_lost.append(lives_lost)
        self.episode_accuracy.append(accuracy)

        if self.csv_writer:
            self.csv_writer.writerow([
                len(self.episode_rewards), reward, length, score,
                lives_lost, shots, accuracy, int(game_over),
            ])
            self.csv_file.flush()

    def close(self) -> None:
        if self.csv_file:
            self.csv_file.close()
            self.csv_file = None
            self.csv_writer = None
            if self.verbose > 0:
                print(f"[Metrics] Saved {len(self.episode_rewards)} episodes to {self.csv_path}")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        if not self.episode_rewards:
            return {}

        return {
            "mean_reward": float(np.mean(self.episode_rewards)),
            "std_reward": float(np.std(self.episode_rewards)),
            "mean_length": float(np.mean(self.episode_lengths)),
            "mean_score": float(np.mean(self.episode_scores)),
            "max_score": int(np.max(self.episode_scores)),
            "mean_lives_lost": float(np.mean(self.episode_lives_lost)),
            "mean_accuracy": float(np.mean(self.episode_accuracy)),
            "total_episodes": len(self.episode_rewards),
        }
