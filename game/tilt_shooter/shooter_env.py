"""
TiltShooterEnv - Gymnasium wrapper around the tilt shooter session
-------------------------------------------------------------------
- Gymnasium API over a GameSession (engine + clock)
- One env step = one simulation tick; enemy spawns follow session time
- MultiDiscrete action space: [tilt(tilt_levels), fire(2)]
- Vector observation: paddle state + the K enemies closest to the floor
- Arcade window for human rendering (opened lazily)

Quick test:
    python -m game.tilt_shooter.shooter_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .clock import GameSession
from .engine import EngineConfig, SimulationEngine
from .entities import StepEvents
from .utils import clamp

DEFAULT_REWARD_CONFIG = {
    "R_HIT": 1.0,        # enemy destroyed
    "R_LIFE": 1.0,       # life lost to breach or collision
    "R_GAME_OVER": 5.0,  # last life lost
    "R_SHOT": 0.01,      # per bullet fired
    "R_TIME": 0.0,       # per tick
}


class TiltShooterEnv(gym.Env):
    """Tilt shooter environment; the agent plays the tilt/tap input collaborator"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: float = 400.0,
        height: float = 800.0,
        tick_interval: float = 0.016,
        spawn_interval: float = 1.0,
        tilt_scale: float = 20.0,
        max_steps: int = 3600,  # ~58s of 16ms ticks
        k_enemies: int = 4,
        tilt_levels: int = 5,
        max_bullets_obs: int = 20,
        reward_config: Optional[Dict[str, float]] = None,
        engine_config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode: {render_mode}"
        assert tilt_levels >= 2, "Need at least two tilt levels."
        assert k_enemies >= 1, "Observe at least one enemy."
        self.render_mode = render_mode

        self.engine_config = EngineConfig.from_dict(
            {"width": width, "height": height, **(engine_config or {})}
        )
        self.tick_interval = tick_interval
        self.spawn_interval = spawn_interval
        self.tilt_scale = tilt_scale
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.max_bullets_obs = max_bullets_obs
        self.reward_config = {**DEFAULT_REWARD_CONFIG, **(reward_config or {})}

        # Action space:
        # tilt: 0..tilt_levels-1, mapped linearly onto [-1, 1]
        # fire: 0/1
        self.action_space = spaces.MultiDiscrete([tilt_levels, 2])
        self._tilt_values = np.linspace(-1.0, 1.0, tilt_levels)

        # Observation space (vector)
        # Paddle: x(1) lives(1) bullets(1) phase(1)
        # Each enemy: dx to paddle centre(1) y(1)
        obs_dim = 4 + self.k_enemies * 2
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self.session: GameSession = self._make_session(seed=None)
        self._step_count = 0
        self._shots = 0

    def _make_session(self, seed: Optional[int]) -> GameSession:
        engine = SimulationEngine(self.engine_config, seed=seed)
        return GameSession(
            engine,
            tick_interval=self.tick_interval,
            spawn_interval=self.spawn_interval,
            tilt_scale=self.tilt_scale,
        )

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)

        # Derive the spawn seed from np_random so seeded resets replay exactly
        engine_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.session = self._make_session(seed=engine_seed)
        if self._window is not None:
            self._window.session = self.session

        self._step_count = 0
        self._shots = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        tilt_idx, fire = int(action[0]), int(action[1])

        self.session.tilt(float(self._tilt_values[tilt_idx]))
        shots = 0
        if fire and self.session.engine.playing:
            self.session.tap()
            shots = 1
        self._shots += shots

        events = self.session.update(self.tick_interval)
        reward = self._compute_reward(events, shots)

        terminated = not self.session.engine.playing
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()
        info["hits"] = sum(e.hits for e in events)
        info["life_lost"] = any(e.life_lost for e in events)

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        snap = self.session.snapshot()
        cfg = self.engine_config

        px = snap.player_x / max(1e-6, cfg.max_player_x)
        lives = snap.lives / cfg.starting_lives
        bullets = min(len(snap.bullets), self.max_bullets_obs) / self.max_bullets_obs
        phase = 1.0 if not snap.game_over else -1.0

        obs_parts = [px * 2 - 1, lives * 2 - 1, bullets * 2 - 1, phase]

        # Enemies closest to the floor are the most urgent
        paddle_cx = snap.player_x + cfg.player_width / 2
        enemies_sorted = sorted(snap.enemies, key=lambda e: e.y, reverse=True)
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                dx = (e.x + cfg.enemy_width / 2 - paddle_cx) / cfg.width
                y = e.y / cfg.height
                obs_parts += [clamp(dx, -1, 1), clamp(y * 2 - 1, -1, 1)]
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, events: List[StepEvents], shots: int) -> float:
        rc = self.reward_config
        reward = 0.0
        for e in events:
            reward += rc["R_HIT"] * e.hits
            if e.life_lost:
                reward -= rc["R_LIFE"]
            if e.game_over:
                reward -= rc["R_GAME_OVER"]
            reward -= rc["R_TIME"]
        reward -= rc["R_SHOT"] * shots
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        snap = self.session.snapshot()
        return {
            "score": snap.score,
            "lives": snap.lives,
            "phase": snap.phase.value,
            "num_enemies": len(snap.enemies),
            "num_bullets": len(snap.bullets),
            "shots": self._shots,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import TiltShooterWindow
            self._window = TiltShooterWindow(self.session, interactive=False)

        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def run_random_episode(render: bool = True, seed: int = 42):
    """Run a random episode for testing"""
    env = TiltShooterEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(env.tick_interval)

    print(f"Random episode return: {total:.2f}  score: {info['score']}  steps: {info['step']}")
    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(render=True)
