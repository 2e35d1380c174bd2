"""
Game entity dataclasses and the read-only snapshot handed to collaborators
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Phase(str, Enum):
    """Session state machine value"""
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class Player:
    """Player paddle; only x changes during a session"""
    x: float
    y: float
    width: float
    height: float


@dataclass
class Bullet:
    """Projectile moving up the arena"""
    id: int
    x: float
    y: float
    width: float
    height: float


@dataclass
class Enemy:
    """Falling block"""
    id: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class EntityView:
    """Immutable (id, x, y) triple for rendering"""
    id: int
    x: float
    y: float


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the engine after a step"""
    player_x: float
    player_y: float
    bullets: Tuple[EntityView, ...]
    enemies: Tuple[EntityView, ...]
    score: int
    lives: int
    phase: Phase

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER


@dataclass
class StepEvents:
    """What happened during one step; consumed by rewards and logging"""
    hits: int = 0
    bullets_expired: int = 0
    breach: bool = False
    player_hit: bool = False
    game_over: bool = False

    @property
    def life_lost(self) -> bool:
        return self.breach or self.player_hit
