"""Grid coordinates and cardinal directions."""

from __future__ import annotations

import enum
from typing import NamedTuple


class GridVector(NamedTuple):
    """An integer (x, y) pair on the arena grid.

    Positions are cell centres, i.e. multiples of the cell size plus a
    half-cell offset.
    """

    x: int
    y: int

    def shifted(self, direction: Direction, cell_size: int) -> GridVector:
        """Return the position one cell away along *direction*."""
        dx, dy = direction.value
        return GridVector(self.x + dx * cell_size, self.y + dy * cell_size)


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) unit values.

    Screen coordinates: ``y`` grows downwards.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def reverse(self) -> Direction:
        """The direction pointing the opposite way."""
        return _OPPOSITES[self]

    def is_reverse_of(self, other: Direction) -> bool:
        return _OPPOSITES[self] is other

    @classmethod
    def from_vector(cls, x: int, y: int) -> Direction:
        """Look up the direction for a raw unit vector.

        Raises ``ValueError`` for anything that is not one of the four
        unit vectors.
        """
        try:
            return cls((x, y))
        except ValueError:
            raise ValueError(
                f"({x}, {y}) is not a unit direction vector."
            ) from None


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

ALL_DIRECTIONS: tuple[Direction, ...] = tuple(Direction)
