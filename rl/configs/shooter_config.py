"""
Configuration for the tilt shooter engine, session clock, environment and evaluation
"""

# Engine parameters (see game.tilt_shooter.engine.EngineConfig)
ENGINE_CONFIG = {
    "width": 400,
    "height": 800,
    "player_width": 50,
    "player_height": 50,
    "bullet_width": 10,
    "bullet_height": 20,
    "enemy_width": 40,
    "enemy_height": 40,
    "bullet_speed": 10.0,  # px per tick
    "enemy_speed": 5.0,    # px per tick
    "starting_lives": 3,
    "player_margin": 20,
    "floor_margin": 20,
    "bullet_spawn_offset": 40,
}

# Clock parameters (seconds)
CLOCK_CONFIG = {
    "tick_interval": 0.016,
    "spawn_interval": 1.0,
    "tilt_scale": 20.0,
}

# Environment parameters
ENV_CONFIG = {
    "width": ENGINE_CONFIG["width"],
    "height": ENGINE_CONFIG["height"],
    **CLOCK_CONFIG,
    "max_steps": 3600,  # ~58 seconds of ticks
    "k_enemies": 4,
    "tilt_levels": 5,
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "R_HIT": 1.0,        # Reward for destroying an enemy
    "R_LIFE": 1.0,       # Penalty for a breach or collision
    "R_GAME_OVER": 5.0,  # Penalty for losing the last life
    "R_SHOT": 0.01,      # Penalty for firing (encourage aim)
    "R_TIME": 0.0,       # Per-tick penalty
}

# ==============================================================================
# EVALUATION SETTINGS
# ==============================================================================

EVAL_CONFIG = {
    "n_episodes": 10,
    "seed": 42,
    "log_dir": "./logs",
    "policies": ["random", "tracker"],
}
