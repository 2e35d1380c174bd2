"""Tests for the arcade window's input routing (drawing is not exercised)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest import mock

import pytest

try:
    import arcade
    from game.tilt_shooter.window import TILT_KEYS, TiltShooterWindow
except Exception as exc:  # arcade needs a windowing backend at import time
    pytest.skip(f"arcade unavailable: {exc}", allow_module_level=True)

from game.tilt_shooter.clock import GameSession
from game.tilt_shooter.engine import EngineConfig, SimulationEngine
from game.tilt_shooter.entities import Phase


def _make_window(interactive: bool = True, lives: int = 3):
    """Stand-in carrying the attributes the handlers use, without opening a window"""
    session = GameSession(SimulationEngine(EngineConfig(starting_lives=lives), seed=0))
    return SimpleNamespace(session=session, interactive=interactive, _held={}, close=mock.Mock())


def test_tilt_keys_cover_both_directions():
    assert TILT_KEYS[arcade.key.LEFT] == -1.0
    assert TILT_KEYS[arcade.key.D] == 1.0


def test_held_key_tilts_every_update():
    win = _make_window()
    start = win.session.engine.player.x

    TiltShooterWindow.on_key_press(win, arcade.key.LEFT, 0)
    TiltShooterWindow.on_update(win, 0.016)
    TiltShooterWindow.on_update(win, 0.016)

    assert win.session.engine.player.x == pytest.approx(start - 40)
    assert win.session.elapsed == pytest.approx(0.032)


def test_release_stops_tilt():
    win = _make_window()
    TiltShooterWindow.on_key_press(win, arcade.key.RIGHT, 0)
    TiltShooterWindow.on_update(win, 0.016)
    moved = win.session.engine.player.x

    TiltShooterWindow.on_key_release(win, arcade.key.RIGHT, 0)
    TiltShooterWindow.on_update(win, 0.016)

    assert win.session.engine.player.x == pytest.approx(moved)


def test_opposite_keys_cancel():
    win = _make_window()
    start = win.session.engine.player.x
    TiltShooterWindow.on_key_press(win, arcade.key.A, 0)
    TiltShooterWindow.on_key_press(win, arcade.key.RIGHT, 0)
    TiltShooterWindow.on_update(win, 0.016)
    assert win.session.engine.player.x == pytest.approx(start)


def test_space_and_click_fire():
    win = _make_window()
    TiltShooterWindow.on_key_press(win, arcade.key.SPACE, 0)
    TiltShooterWindow.on_mouse_press(win, 10, 10, arcade.MOUSE_BUTTON_LEFT, 0)
    assert len(win.session.snapshot().bullets) == 2


def test_tap_after_game_over_restarts():
    win = _make_window(lives=1)
    engine = win.session.engine
    engine.lives = 0
    engine.phase = Phase.GAME_OVER

    TiltShooterWindow.on_key_press(win, arcade.key.SPACE, 0)

    assert engine.playing
    assert engine.lives == 1


def test_escape_closes():
    win = _make_window()
    TiltShooterWindow.on_key_press(win, arcade.key.ESCAPE, 0)
    win.close.assert_called_once()


def test_non_interactive_window_leaves_session_alone():
    win = _make_window(interactive=False)
    start = win.session.engine.player.x
    TiltShooterWindow.on_key_press(win, arcade.key.LEFT, 0)
    TiltShooterWindow.on_update(win, 1.0)
    assert win.session.elapsed == 0.0
    assert win.session.engine.player.x == pytest.approx(start)
