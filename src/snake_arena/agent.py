"""Agent representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque

from snake_arena.grid import Direction, GridVector


class AgentKind(enum.Enum):
    """Who supplies an agent's headings."""

    HUMAN = "human"
    AUTONOMOUS = "autonomous"


class Agent:
    """A snake represented as an ordered deque of :class:`GridVector` segments.

    The head is ``segments[0]``; the tail is ``segments[-1]``. Human and
    autonomous agents share this type and differ only in ``kind``.
    """

    def __init__(
        self,
        head: GridVector,
        heading: Direction = Direction.RIGHT,
        length: int = 6,
        cell_size: int = 20,
        kind: AgentKind = AgentKind.HUMAN,
    ) -> None:
        if length < 1:
            raise ValueError("Agent length must be at least 1.")
        if cell_size < 1:
            raise ValueError("cell_size must be at least 1.")
        self.kind = kind
        self.cell_size = cell_size
        self.heading = heading
        tail_ward = heading.reverse
        self.segments: deque[GridVector] = deque([head])
        for _ in range(length - 1):
            self.segments.append(self.segments[-1].shifted(tail_ward, cell_size))
        self._grow_pending = 0

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def head(self) -> GridVector:
        """Return the head coordinate."""
        return self.segments[0]

    @property
    def tail(self) -> GridVector:
        return self.segments[-1]

    @property
    def is_human(self) -> bool:
        return self.kind is AgentKind.HUMAN

    def next_head(self, heading: Direction | None = None) -> GridVector:
        """Compute the next head position without moving."""
        direction = heading if heading is not None else self.heading
        return self.head.shifted(direction, self.cell_size)

    def advance(self, heading: Direction | None = None) -> GridVector | None:
        """Move one cell along *heading* (or the current heading).

        Returns the vacated tail cell, or ``None`` if a pending growth
        unit was consumed instead.
        """
        if heading is not None:
            self.heading = heading
        self.segments.appendleft(self.next_head())
        if self._grow_pending > 0:
            self._grow_pending -= 1
            return None
        return self.segments.pop()

    def grow(self) -> None:
        """Lengthen by one immediately by duplicating the tail segment."""
        self.segments.append(self.tail)

    def schedule_growth(self, segments: int = 1) -> None:
        """Queue growth for the next *segments* calls to :meth:`advance`."""
        if segments < 0:
            raise ValueError("segments must be non-negative.")
        self._grow_pending += segments

    @property
    def growth_pending(self) -> int:
        return self._grow_pending

    def occupies(self, position: GridVector) -> bool:
        """Check whether any segment sits on *position*."""
        return position in self.segments
