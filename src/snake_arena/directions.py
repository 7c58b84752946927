"""Buffered directional input with illegal-turn filtering."""

from __future__ import annotations

import logging
from collections import deque

from snake_arena.grid import Direction

logger = logging.getLogger(__name__)


def _coerce(raw: Direction | tuple[int, int]) -> Direction | None:
    """Turn a raw intent into a :class:`Direction`, or ``None`` if malformed."""
    if isinstance(raw, Direction):
        return raw
    try:
        x, y = raw
        return Direction.from_vector(x, y)
    except (TypeError, ValueError):
        return None


class DirectionQueue:
    """FIFO of requested headings for the human agent.

    Directions are captured as soon as they arrive and released one per
    simulation tick. The queue never holds the reverse of the committed
    heading and never holds the same direction twice.
    """

    def __init__(self, heading: Direction = Direction.RIGHT) -> None:
        self.heading = heading
        self._pending: deque[Direction] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple[Direction, ...]:
        return tuple(self._pending)

    def submit(self, raw: Direction | tuple[int, int]) -> bool:
        """Queue a requested heading.

        Returns True if the request was queued.
        """
        direction = _coerce(raw)
        if direction is None:
            logger.debug("Ignoring malformed direction intent %r.", raw)
            return False

        if direction.is_reverse_of(self.heading):
            return False

        # Keep only the most recent request for a given heading.
        if direction in self._pending:
            self._pending.remove(direction)

        if direction is self.heading:
            return False

        self._pending.append(direction)
        return True

    def next_direction(self, current: Direction | None = None) -> Direction:
        """Release at most one queued heading and return the committed one.

        If *current* is given it replaces the committed heading before the
        queue is consulted.
        """
        if current is not None:
            self.heading = current
        if self._pending:
            candidate = self._pending.popleft()
            if not candidate.is_reverse_of(self.heading):
                self.heading = candidate
        return self.heading

    def clear(self) -> None:
        self._pending.clear()
