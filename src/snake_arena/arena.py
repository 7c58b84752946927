"""Arena geometry and food placement."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from snake_arena.agent import Agent
from snake_arena.grid import GridVector

logger = logging.getLogger(__name__)


class Arena:
    """Rectangular playing field measured in arena units.

    Cell centres sit at ``col * cell_size + cell_size / 2``. Food is
    placed by rejection sampling with a seeded NumPy RNG, so placement
    is deterministic and reproducible.
    """

    def __init__(
        self,
        width: int = 1000,
        height: int = 650,
        cell_size: int = 20,
        max_attempts: int = 100,
        rng: np.random.Generator | None = None,
    ) -> None:
        if cell_size < 2 or cell_size % 2:
            raise ValueError("cell_size must be an even number of at least 2.")
        if width < 4 * cell_size or height < 4 * cell_size:
            raise ValueError("Arena must be at least 4×4 cells.")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.max_attempts = max_attempts
        self.rng = rng if rng is not None else np.random.default_rng()
        self.food = self.cell_center(0, 0)

    @property
    def food_columns(self) -> int:
        """Number of columns food may be placed in."""
        return (self.width - self.cell_size) // self.cell_size

    @property
    def food_rows(self) -> int:
        return (self.height - self.cell_size) // self.cell_size

    def cell_center(self, col: int, row: int) -> GridVector:
        """Return the centre of the cell at (*col*, *row*)."""
        half = self.cell_size // 2
        return GridVector(col * self.cell_size + half, row * self.cell_size + half)

    def snap(self, x: float, y: float) -> GridVector:
        """Return the centre of the cell containing the point (*x*, *y*)."""
        return self.cell_center(int(x // self.cell_size), int(y // self.cell_size))

    def near_wall(self, position: GridVector, margin: int) -> bool:
        """Check whether *position* lies within *margin* of any boundary."""
        x, y = position
        return (
            x < margin
            or x >= self.width - margin
            or y < margin
            or y >= self.height - margin
        )

    def respawn_food(self, agents: Iterable[Agent]) -> GridVector:
        """Move the food to a random cell not covered by any agent.

        After ``max_attempts`` rejected samples the food stays on the last
        sampled cell, even if it is occupied.
        """
        occupied = {seg for agent in agents for seg in agent.segments}
        for attempt in range(1, self.max_attempts + 1):
            col = int(self.rng.integers(self.food_columns))
            row = int(self.rng.integers(self.food_rows))
            self.food = self.cell_center(col, row)
            if self.food not in occupied:
                return self.food

        logger.warning(
            "Food placement exhausted %d attempts; leaving food at %s.",
            attempt,
            tuple(self.food),
        )
        return self.food

    def to_dict(self) -> dict:
        """Serialize arena state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cell_size": self.cell_size,
            "food": list(self.food),
        }
