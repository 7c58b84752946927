"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Every tunable constant of a session.

    Distances are in arena units (pixels); times are in milliseconds.
    Supports JSON serialization for reproducibility.
    """

    # Arena
    arena_width: int = 1000
    arena_height: int = 650
    cell_size: int = 20

    # Timing
    base_moves_per_second: float = 8.0
    grace_period_ms: float = 2000.0

    # Difficulty
    score_per_level: int = 50
    speed_increase_rate: float = 0.1
    max_speed_multiplier: float = 2.0
    min_user_speed: float = 0.5
    max_user_speed: float = 2.5
    user_speed_step: float = 0.1

    # Scoring
    food_points: int = 10
    food_placement_attempts: int = 100

    # Human agent
    player_length: int = 6

    # Autonomous agents
    autonomous_count: int = 4
    autonomous_min_length: int = 6
    autonomous_max_length: int = 8
    spawn_inset: int = 150
    ai_decision_min: int = 4
    ai_decision_max: int = 7
    ai_turn_probability: float = 0.25
    ai_wall_margin: int = 20

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.cell_size < 2 or self.cell_size % 2:
            raise ValueError("cell_size must be an even number of at least 2.")
        if (
            self.arena_width < 4 * self.cell_size
            or self.arena_height < 4 * self.cell_size
        ):
            raise ValueError("arena must be at least 4 cells in each dimension.")
        if self.base_moves_per_second <= 0:
            raise ValueError("base_moves_per_second must be positive.")
        if self.grace_period_ms < 0:
            raise ValueError("grace_period_ms must be non-negative.")
        if self.score_per_level < 1:
            raise ValueError("score_per_level must be at least 1.")
        if self.max_speed_multiplier < 1.0:
            raise ValueError("max_speed_multiplier must be at least 1.0.")
        if not 0 < self.min_user_speed <= self.max_user_speed:
            raise ValueError(
                "user speed bounds must satisfy 0 < min_user_speed <= max_user_speed."
            )
        if self.user_speed_step <= 0:
            raise ValueError("user_speed_step must be positive.")
        if self.food_placement_attempts < 1:
            raise ValueError("food_placement_attempts must be at least 1.")
        if self.player_length < 1:
            raise ValueError("player_length must be at least 1.")
        if not 0 <= self.autonomous_count <= 4:
            raise ValueError("autonomous_count must be between 0 and 4.")
        if not 0 < self.spawn_inset < min(self.arena_width, self.arena_height) / 2:
            raise ValueError("spawn_inset must lie inside the arena's half-extent.")
        if not 1 <= self.autonomous_min_length <= self.autonomous_max_length:
            raise ValueError(
                "autonomous lengths must satisfy "
                "1 <= autonomous_min_length <= autonomous_max_length."
            )
        if not 1 <= self.ai_decision_min <= self.ai_decision_max:
            raise ValueError(
                "ai decision interval must satisfy "
                "1 <= ai_decision_min <= ai_decision_max."
            )
        if not 0.0 <= self.ai_turn_probability <= 1.0:
            raise ValueError("ai_turn_probability must be within [0, 1].")

    @property
    def half_cell(self) -> int:
        return self.cell_size // 2

    @property
    def base_move_interval_ms(self) -> float:
        """Milliseconds between ticks at speed 1.0."""
        return 1000.0 / self.base_moves_per_second

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file, ignoring unknown keys."""
        raw = json.loads(Path(path).read_text())
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in raw.items() if k in known})
