"""
Arcade window: draws session snapshots and turns keys/clicks into tilt and taps
"""

from __future__ import annotations

import argparse

import arcade

from .clock import GameSession
from .engine import EngineConfig, SimulationEngine

TILT_KEYS = {
    arcade.key.LEFT: -1.0,
    arcade.key.A: -1.0,
    arcade.key.RIGHT: 1.0,
    arcade.key.D: 1.0,
}


class TiltShooterWindow(arcade.Window):
    """Render collaborator; reads snapshots only, input goes through the session"""

    def __init__(self, session: GameSession, interactive: bool = True):
        cfg = session.engine.config
        super().__init__(int(cfg.width), int(cfg.height), "Tilt Shooter - Arcade")
        self.session = session
        # Gym rendering drives the session itself; only draw in that case
        self.interactive = interactive
        self._held = {}

        # Colors
        self.BG = arcade.color.BLACK
        self.ENTITY_C = arcade.color.WHITE
        self.HUD_C = (220, 220, 220)
        self.BANNER_C = (240, 80, 80)
        self.background_color = self.BG

    def _fill_rect(self, x: float, y: float, w: float, h: float, color):
        # Engine y grows downward; arcade y grows upward
        top = self.height - y
        arcade.draw_lrbt_rectangle_filled(x, x + w, top - h, top, color)

    def on_draw(self):
        """Draw the current snapshot"""
        self.clear()

        cfg = self.session.engine.config
        snap = self.session.snapshot()

        self._fill_rect(snap.player_x, snap.player_y, cfg.player_width, cfg.player_height, self.ENTITY_C)
        for b in snap.bullets:
            self._fill_rect(b.x, b.y, cfg.bullet_width, cfg.bullet_height, self.ENTITY_C)
        for e in snap.enemies:
            self._fill_rect(e.x, e.y, cfg.enemy_width, cfg.enemy_height, self.ENTITY_C)

        # Text HUD
        arcade.draw_text(f"Score: {snap.score}  Lives: {snap.lives}",
                         12, self.height - 30, self.HUD_C, 14)
        arcade.draw_text("Tilt to move", 12, self.height - 70, self.HUD_C, 14,
                         font_name="Courier")

        if snap.game_over:
            arcade.draw_text("GAME OVER", self.width / 2, self.height / 2 + 20, self.BANNER_C, 24,
                             anchor_x="center", bold=True, font_name="Courier")
            arcade.draw_text("Tap to restart", self.width / 2, self.height / 2 - 20, self.HUD_C, 14,
                             anchor_x="center", font_name="Courier")

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        tilt = sum(self._held.values())
        if tilt:
            self.session.tilt(tilt)
        self.session.update(delta_time)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol in TILT_KEYS:
            self._held[symbol] = TILT_KEYS[symbol]
        elif symbol == arcade.key.SPACE:
            self.session.tap()
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol: int, modifiers: int):
        self._held.pop(symbol, None)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.session.tap()


def main():
    parser = argparse.ArgumentParser(description="Play the tilt shooter")
    parser.add_argument("--width", type=float, default=400.0, help="Arena width (default: 400)")
    parser.add_argument("--height", type=float, default=800.0, help="Arena height (default: 800)")
    parser.add_argument("--lives", type=int, default=3, help="Starting lives (default: 3)")
    parser.add_argument("--seed", type=int, default=None, help="Spawn RNG seed")
    parser.add_argument("--verbose", type=int, default=1, help="Session log level (default: 1)")

    args = parser.parse_args()

    config = EngineConfig(width=args.width, height=args.height, starting_lives=args.lives)
    session = GameSession(SimulationEngine(config, seed=args.seed), verbose=args.verbose)
    TiltShooterWindow(session)
    arcade.run()


if __name__ == "__main__":
    main()
