"""Tests for GameSession - tick/spawn scheduling and input routing."""

from __future__ import annotations

import pytest

from game.tilt_shooter.clock import GameSession
from game.tilt_shooter.engine import EngineConfig, SimulationEngine
from game.tilt_shooter.entities import Enemy, Phase


def _make_session(lives: int = 3, **kwargs) -> GameSession:
    engine = SimulationEngine(EngineConfig(starting_lives=lives), seed=42)
    return GameSession(engine, **kwargs)


def _end_game(session: GameSession) -> None:
    engine = session.engine
    while engine.playing:
        cfg = engine.config
        engine.enemies.append(Enemy(
            id=90_000 + engine.lives, x=0, y=cfg.floor_y - cfg.enemy_height - cfg.enemy_speed,
            width=cfg.enemy_width, height=cfg.enemy_height,
        ))
        engine.step()


class TestScheduling:
    def test_single_tick(self):
        session = _make_session()
        bullet = session.engine.fire()
        results = session.update(0.016)
        assert len(results) == 1
        assert bullet.y == pytest.approx(710 - 10)

    def test_partial_interval_runs_nothing(self):
        session = _make_session()
        assert session.update(0.010) == []
        assert len(session.update(0.006)) == 1

    def test_one_second_runs_ticks_then_spawn(self):
        session = _make_session(max_ticks_per_update=1000)
        results = session.update(1.0)

        assert len(results) == 62
        assert len(session.engine.enemies) == 1
        # Spawned after the last due tick, so it has not moved yet
        assert session.engine.enemies[0].y == -40

    def test_tick_runs_before_spawn_on_tie(self):
        session = _make_session(tick_interval=0.5, spawn_interval=1.0)
        results = session.update(1.0)

        assert len(results) == 2
        assert session.engine.enemies[0].y == -40

    def test_backlog_is_dropped_not_queued(self):
        session = _make_session(max_ticks_per_update=8)
        results = session.update(1.0)

        assert len(results) == 8
        assert session.dropped_ticks == 62 - 8
        assert len(session.engine.enemies) == 1
        assert session.update(0.016) != []

    def test_backlog_drop_with_unaligned_elapsed_time(self):
        session = _make_session(max_ticks_per_update=1)
        results = session.update(32.015999999)

        assert len(results) == 1
        assert not session._is_due(session._ticks, session.tick_interval)
        assert session.dropped_ticks == session._ticks - 1

    def test_irregular_frames_always_return(self):
        session = _make_session(max_ticks_per_update=1)
        for delta in (0.0159999999, 0.0320000001, 1.3333333, 0.047999999999, 7.77):
            session.update(delta)
            assert not session._is_due(session._ticks, session.tick_interval)
            assert not session._is_due(session._spawns, session.spawn_interval)

    def test_spawn_backlog_is_dropped_not_stacked(self):
        session = _make_session()
        session.update(10.0)

        assert len(session.engine.enemies) == 1
        assert session.dropped_spawns == 9
        assert session.update(1.0) != []
        assert len(session.engine.enemies) == 2

    def test_spawn_cadence(self):
        session = _make_session(spawn_interval=0.5, max_ticks_per_update=1000)
        for _ in range(100):
            session.update(0.025)
        # 2.5s of session time -> 5 spawns, all still falling
        assert len(session.engine.enemies) == 5
        ids = [e.id for e in session.engine.enemies]
        assert ids == sorted(set(ids))

    def test_negative_delta_is_ignored(self):
        session = _make_session()
        session.update(-5.0)
        assert session.elapsed == 0.0

    def test_invalid_intervals_rejected(self):
        with pytest.raises(ValueError):
            GameSession(tick_interval=0)
        with pytest.raises(ValueError):
            GameSession(spawn_interval=-1)
        with pytest.raises(ValueError):
            GameSession(max_ticks_per_update=0)
        with pytest.raises(ValueError):
            GameSession(max_spawns_per_update=0)


class TestInput:
    def test_tilt_scales_displacement(self):
        session = _make_session()
        session.tilt(1.0)
        assert session.engine.player.x == pytest.approx(175 + 20)
        session.tilt(-0.5)
        assert session.engine.player.x == pytest.approx(175 + 10)

    def test_tilt_is_clamped(self):
        session = _make_session()
        session.tilt(-100)
        assert session.engine.player.x == 0.0

    def test_tap_fires(self):
        session = _make_session()
        session.tap()
        assert len(session.snapshot().bullets) == 1


class TestGameOver:
    def test_ticks_and_spawns_are_no_ops_after_game_over(self):
        session = _make_session(lives=1, max_ticks_per_update=1000)
        _end_game(session)
        before = session.snapshot()

        results = session.update(3.0)

        assert all(not e.life_lost and e.hits == 0 for e in results)
        assert session.snapshot() == before
        assert before.phase is Phase.GAME_OVER

    def test_tap_restarts_and_logs(self, capsys):
        session = _make_session(lives=1, verbose=1)
        _end_game(session)

        session.tap()

        assert session.engine.phase is Phase.PLAYING
        assert session.snapshot().bullets == ()
        assert "[Session] Restarted" in capsys.readouterr().out

    def test_game_over_logged_from_update(self, capsys):
        session = _make_session(lives=1, verbose=1)
        engine = session.engine
        cfg = engine.config
        engine.enemies.append(Enemy(
            id=1, x=0, y=cfg.floor_y - cfg.enemy_height - cfg.enemy_speed,
            width=cfg.enemy_width, height=cfg.enemy_height,
        ))

        results = session.update(0.016)

        assert results[0].game_over
        assert "[Session] Game over" in capsys.readouterr().out
