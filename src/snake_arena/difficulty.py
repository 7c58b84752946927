"""Score-driven speed scaling and the user speed control."""

from __future__ import annotations

from snake_arena.config import GameConfig


def speed_multiplier(score: int, config: GameConfig) -> float:
    """Base speed for *score*: one ``speed_increase_rate`` step per level, capped."""
    level = max(score, 0) // config.score_per_level
    return min(1.0 + level * config.speed_increase_rate, config.max_speed_multiplier)


def clamp_user_speed(value: float, config: GameConfig) -> float:
    """Clamp a user speed multiplier into the configured range."""
    clamped = max(config.min_user_speed, min(config.max_user_speed, value))
    # Keep repeated 0.1 steps from drifting (0.1 * 3 != 0.3).
    return round(clamped, 6)


def effective_speed(base_speed: float, user_speed: float) -> float:
    return base_speed * user_speed


def move_interval(base_speed: float, user_speed: float, config: GameConfig) -> float:
    """Milliseconds between simulation ticks at the given speeds."""
    return config.base_move_interval_ms / effective_speed(base_speed, user_speed)
