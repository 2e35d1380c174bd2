"""
GameSession - serializes clock triggers and player input onto one engine
"""

from __future__ import annotations

from typing import List, Optional

from .engine import SimulationEngine
from .entities import Snapshot, StepEvents

_EPS = 1e-9


class GameSession:
    """
    Single owner of a SimulationEngine.

    Ticks and spawns are scheduled on one timeline fed by update(delta_time);
    tilt and tap input is applied as soon as it arrives. Nothing else should
    call engine mutators, so a step is never observed half-done.
    """

    def __init__(
        self,
        engine: Optional[SimulationEngine] = None,
        tick_interval: float = 0.016,
        spawn_interval: float = 1.0,
        tilt_scale: float = 20.0,
        max_ticks_per_update: int = 8,
        max_spawns_per_update: int = 1,
        verbose: int = 0,
    ):
        if tick_interval <= 0 or spawn_interval <= 0:
            raise ValueError("tick_interval and spawn_interval must be positive")
        if max_ticks_per_update < 1:
            raise ValueError("max_ticks_per_update must be at least 1")
        if max_spawns_per_update < 1:
            raise ValueError("max_spawns_per_update must be at least 1")

        self.engine = engine if engine is not None else SimulationEngine()
        self.tick_interval = tick_interval
        self.spawn_interval = spawn_interval
        self.tilt_scale = tilt_scale
        self.max_ticks_per_update = max_ticks_per_update
        self.max_spawns_per_update = max_spawns_per_update
        self.verbose = verbose

        self.elapsed = 0.0
        self._ticks = 0
        self._spawns = 0
        self.dropped_ticks = 0
        self.dropped_spawns = 0

    # ----------------------------
    # Input
    # ----------------------------

    def tilt(self, x: float) -> None:
        """Apply a tilt reading; displacement is proportional to its magnitude"""
        self.engine.apply_displacement(x * self.tilt_scale)

    def tap(self) -> None:
        was_over = not self.engine.playing
        self.engine.fire()
        if was_over and self.verbose > 0:
            print("[Session] Restarted")

    # ----------------------------
    # Clock
    # ----------------------------

    def update(self, delta_time: float) -> List[StepEvents]:
        """Advance session time and run every tick/spawn that fell due"""
        self.elapsed += max(0.0, delta_time)
        results: List[StepEvents] = []
        ticks_run = 0
        spawns_run = 0

        while True:
            tick_due = self._is_due(self._ticks, self.tick_interval)
            spawn_due = self._is_due(self._spawns, self.spawn_interval)
            if not (tick_due or spawn_due):
                break

            next_tick = (self._ticks + 1) * self.tick_interval
            next_spawn = (self._spawns + 1) * self.spawn_interval

            # Tick wins a tie with spawn
            if tick_due and (not spawn_due or next_tick <= next_spawn + _EPS):
                if ticks_run >= self.max_ticks_per_update:
                    caught_up = self._last_due(self._ticks, self.tick_interval)
                    self.dropped_ticks += caught_up - self._ticks
                    self._ticks = caught_up
                    continue
                events = self.engine.step()
                self._ticks += 1
                ticks_run += 1
                results.append(events)
                if events.game_over and self.verbose > 0:
                    print(f"[Session] Game over at {self.elapsed:.2f}s, score {self.engine.score}")
            else:
                if spawns_run >= self.max_spawns_per_update:
                    caught_up = self._last_due(self._spawns, self.spawn_interval)
                    self.dropped_spawns += caught_up - self._spawns
                    self._spawns = caught_up
                    continue
                self.engine.spawn_enemy()
                self._spawns += 1
                spawns_run += 1

        return results

    def _is_due(self, count: int, interval: float) -> bool:
        return (count + 1) * interval <= self.elapsed + _EPS

    def _last_due(self, count: int, interval: float) -> int:
        """Count of triggers that have fallen due by now; always past `count` when one is due"""
        last = max(count, int((self.elapsed + _EPS) / interval) - 1)
        while self._is_due(last, interval):
            last += 1
        return last

    def snapshot(self) -> Snapshot:
        return self.engine.snapshot()
