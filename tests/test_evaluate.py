"""Tests for the baseline policies and episode metrics."""

from __future__ import annotations

import csv

import numpy as np
import pytest

from game.tilt_shooter import TiltShooterEnv
from game.tilt_shooter.entities import Enemy
from rl.evaluate import evaluate_policy, tracker_policy
from rl.metrics import EpisodeMetrics


def test_tracker_steers_toward_lowest_enemy():
    env = TiltShooterEnv()
    env.reset(seed=0)
    engine = env.session.engine
    cfg = engine.config
    engine.enemies.append(Enemy(id=50_001, x=0, y=600, width=cfg.enemy_width, height=cfg.enemy_height))
    engine.enemies.append(Enemy(id=50_002, x=360, y=100, width=cfg.enemy_width, height=cfg.enemy_height))

    action = tracker_policy(env, None, step=1)

    assert action[0] == 0
    assert action[1] == 0


def test_tracker_fires_when_aligned():
    env = TiltShooterEnv()
    env.reset(seed=0)
    engine = env.session.engine
    cfg = engine.config
    engine.enemies.append(Enemy(id=50_003, x=engine.player.x + 5, y=300, width=cfg.enemy_width, height=cfg.enemy_height))

    action = tracker_policy(env, None, step=0)

    assert action[0] == 2
    assert action[1] == 1


def test_tracker_idles_without_enemies():
    env = TiltShooterEnv()
    env.reset(seed=0)
    assert list(tracker_policy(env, None, step=0)) == [2, 0]


def test_evaluate_writes_csv(tmp_path):
    summary = evaluate_policy(
        policy="tracker",
        n_episodes=2,
        seed=0,
        log_dir=str(tmp_path),
        env_config={"max_steps": 300},
        verbose=0,
    )

    assert summary["total_episodes"] == 2
    assert summary["mean_length"] <= 300

    with open(tmp_path / "tracker_metrics.csv") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert rows[0]["episode"] == "1"


def test_evaluate_is_reproducible():
    kwargs = dict(policy="random", n_episodes=2, seed=3, env_config={"max_steps": 200}, verbose=0)
    assert evaluate_policy(**kwargs) == evaluate_policy(**kwargs)


def test_evaluate_rejects_unknown_policy():
    with pytest.raises(ValueError):
        evaluate_policy(policy="ppo", verbose=0)


def test_metrics_summary_without_log_dir(capsys):
    metrics = EpisodeMetrics(log_dir=None, policy_name="x", verbose=1)
    with metrics:
        metrics.record(2.0, 100, {"score": 4, "shots": 8, "lives": 1, "phase": "game_over"}, 3)
        metrics.record(0.0, 50, {"score": 0, "shots": 0, "lives": 3, "phase": "playing"}, 3)

    summary = metrics.get_summary()
    assert summary["mean_reward"] == pytest.approx(1.0)
    assert summary["max_score"] == 4
    assert summary["mean_lives_lost"] == pytest.approx(1.0)
    assert summary["mean_accuracy"] == pytest.approx(0.25)
    assert capsys.readouterr().out == ""
    assert EpisodeMetrics(None, "empty").get_summary() == {}
