"""
SimulationEngine - the per-tick core of the tilt shooter
---------------------------------------------------------
- One engine instance owns the canonical game state
- Player paddle moves horizontally from displacement input, fires bullets up
- Enemy blocks fall from above the arena at a fixed cadence
- Each tick runs a short-circuiting pipeline:
      advance -> breach check -> bullet/enemy hits -> player collision -> commit
- Losing a life clears every bullet and enemy; losing the last one ends the game
- Collaborators read immutable snapshots and never touch engine state

The engine has no notion of time; a GameSession (see clock.py) decides when
step() and spawn_enemy() run.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Optional, Tuple

from .entities import Bullet, Enemy, EntityView, Phase, Player, Snapshot, StepEvents
from .utils import IdGenerator, clamp, make_rng, rects_overlap


@dataclass
class EngineConfig:
    """Arena geometry and fixed rates for one session"""
    width: float = 400.0
    height: float = 800.0
    player_width: float = 50.0
    player_height: float = 50.0
    bullet_width: float = 10.0
    bullet_height: float = 20.0
    enemy_width: float = 40.0
    enemy_height: float = 40.0
    bullet_speed: float = 10.0  # px/tick, upward
    enemy_speed: float = 5.0  # px/tick, downward
    starting_lives: int = 3
    player_margin: float = 20.0  # gap between paddle and arena bottom
    floor_margin: float = 20.0  # breach line sits this far above the bottom
    bullet_spawn_offset: float = 40.0
    recenter_on_restart: bool = True

    def __post_init__(self):
        for name in ("width", "height", "player_width", "player_height",
                     "bullet_width", "bullet_height", "enemy_width", "enemy_height",
                     "bullet_speed", "enemy_speed"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.starting_lives < 1:
            raise ValueError(f"starting_lives must be at least 1, got {self.starting_lives}")
        if self.player_width > self.width or self.enemy_width > self.width:
            raise ValueError("player and enemy must fit inside the arena width")
        if self.player_margin < 0 or self.floor_margin < 0:
            raise ValueError("margins must be non-negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown engine config keys: {sorted(unknown)}")
        return cls(**data)

    @property
    def player_y(self) -> float:
        return self.height - self.player_height - self.player_margin

    @property
    def floor_y(self) -> float:
        return self.height - self.floor_margin

    @property
    def max_player_x(self) -> float:
        return self.width - self.player_width


@dataclass
class _Tick:
    """Working copy of the collections while a step is in flight"""
    bullets: List[Bullet]
    enemies: List[Enemy]
    hits: int = 0


class SimulationEngine:
    """Owns player, bullets, enemies, score, lives and phase"""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.config = config if config is not None else EngineConfig()
        self.rng = rng if rng is not None else make_rng(seed)
        # Never reset, so ids stay unique across restarts too
        self._ids = IdGenerator()

        cfg = self.config
        self.player = Player(
            x=self._center_x(),
            y=cfg.player_y,
            width=cfg.player_width,
            height=cfg.player_height,
        )
        self.bullets: List[Bullet] = []
        self.enemies: List[Enemy] = []
        self.score = 0
        self.lives = cfg.starting_lives
        self.phase = Phase.PLAYING

        # Stages return False to end the tick without committing
        self._pipeline: Tuple[Callable[[_Tick, StepEvents], bool], ...] = (
            self._check_breach,
            self._resolve_hits,
            self._check_player_collision,
        )

    @property
    def playing(self) -> bool:
        return self.phase is Phase.PLAYING

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    # ----------------------------
    # Input
    # ----------------------------

    def apply_displacement(self, dx: float) -> None:
        if not self.playing:
            return
        self.player.x = clamp(self.player.x + dx, 0.0, self.config.max_player_x)

    def fire(self) -> Optional[Bullet]:
        """Shoot from the paddle centre; a tap after game over restarts instead"""
        if not self.playing:
            self.restart()
            return None

        cfg = self.config
        bullet = Bullet(
            id=self._ids.next(),
            x=self.player.x + (cfg.player_width - cfg.bullet_width) / 2,
            y=cfg.height - cfg.player_height - cfg.bullet_spawn_offset,
            width=cfg.bullet_width,
            height=cfg.bullet_height,
        )
        self.bullets.append(bullet)
        return bullet

    # ----------------------------
    # Clock-driven operations
    # ----------------------------

    def spawn_enemy(self) -> Optional[Enemy]:
        if not self.playing:
            return None

        cfg = self.config
        enemy = Enemy(
            id=self._ids.next(),
            x=self.rng.uniform(0.0, cfg.width - cfg.enemy_width),
            y=-cfg.enemy_height,
            width=cfg.enemy_width,
            height=cfg.enemy_height,
        )
        self.enemies.append(enemy)
        return enemy

    def step(self) -> StepEvents:
        events = StepEvents()
        if not self.playing:
            return events

        tick = _Tick(
            bullets=self._advance_bullets(events),
            enemies=self._advance_enemies(),
        )
        for stage in self._pipeline:
            if not stage(tick, events):
                return events

        self._commit(tick, events)
        return events

    def restart(self) -> None:
        self.bullets = []
        self.enemies = []
        self.score = 0
        self.lives = self.config.starting_lives
        self.phase = Phase.PLAYING
        if self.config.recenter_on_restart:
            self.player.x = self._center_x()

    # ----------------------------
    # Step stages
    # ----------------------------

    def _advance_bullets(self, events: StepEvents) -> List[Bullet]:
        kept = []
        for b in self.bullets:
            b.y -= self.config.bullet_speed
            if b.y <= -b.height:
                events.bullets_expired += 1
            else:
                kept.append(b)
        return kept

    def _advance_enemies(self) -> List[Enemy]:
        for e in self.enemies:
            e.y += self.config.enemy_speed
        return list(self.enemies)

    def _check_breach(self, tick: _Tick, events: StepEvents) -> bool:
        floor = self.config.floor_y
        if any(e.y + e.height >= floor for e in tick.enemies):
            events.breach = True
            self._lose_life(events)
            return False
        return True

    def _resolve_hits(self, tick: _Tick, events: StepEvents) -> bool:
        survivors = list(tick.enemies)
        kept_bullets = []
        for b in tick.bullets:
            for i, e in enumerate(survivors):
                if _overlaps(b, e):
                    # First match only; the enemy cannot be hit again this tick
                    del survivors[i]
                    tick.hits += 1
                    break
            else:
                kept_bullets.append(b)

        tick.bullets = kept_bullets
        tick.enemies = survivors
        return True

    def _check_player_collision(self, tick: _Tick, events: StepEvents) -> bool:
        if any(_overlaps(self.player, e) for e in tick.enemies):
            events.player_hit = True
            self._lose_life(events)
            return False
        return True

    def _commit(self, tick: _Tick, events: StepEvents) -> None:
        self.bullets = tick.bullets
        self.enemies = tick.enemies
        self.score += tick.hits
        events.hits = tick.hits

    def _lose_life(self, events: StepEvents) -> None:
        self.lives = max(0, self.lives - 1)
        self.bullets = []
        self.enemies = []
        if self.lives == 0:
            self.phase = Phase.GAME_OVER
            events.game_over = True

    def _center_x(self) -> float:
        return (self.config.width - self.config.player_width) / 2

    # ----------------------------
    # Snapshot
    # ----------------------------

    def snapshot(self) -> Snapshot:
        assert self.lives >= 0, "lives went negative"
        ids = [b.id for b in self.bullets] + [e.id for e in self.enemies]
        assert len(ids) == len(set(ids)), "duplicate entity identifiers"

        return Snapshot(
            player_x=self.player.x,
            player_y=self.player.y,
            bullets=tuple(EntityView(b.id, b.x, b.y) for b in self.bullets),
            enemies=tuple(EntityView(e.id, e.x, e.y) for e in self.enemies),
            score=self.score,
            lives=self.lives,
            phase=self.phase,
        )


def _overlaps(a, b) -> bool:
    return rects_overlap(a.x, a.y, a.width, a.height, b.x, b.y, b.width, b.height)
