"""Tilt shooter - falling-block arcade shooter simulation"""

from .clock import GameSession
from .engine import EngineConfig, SimulationEngine
from .entities import Phase, Snapshot, StepEvents
from .shooter_env import TiltShooterEnv, run_random_episode

__all__ = [
    'EngineConfig', 'GameSession', 'Phase', 'SimulationEngine', 'Snapshot',
    'StepEvents', 'TiltShooterEnv', 'run_random_episode',
]
