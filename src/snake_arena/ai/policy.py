"""Wander policy for autonomous agents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from snake_arena.grid import ALL_DIRECTIONS, Direction

if TYPE_CHECKING:
    from snake_arena.agent import Agent
    from snake_arena.arena import Arena

logger = logging.getLogger(__name__)


class AIPolicy:
    """Chooses headings for one autonomous agent.

    Every few ticks (a decision interval redrawn after each decision) the
    policy looks one cell ahead; if that cell is within ``wall_margin`` of
    a wall, or a random draw falls below ``turn_probability``, it picks a
    new heading among the three that are not a reversal. The choice is
    held as ``pending`` and applied by :meth:`commit` on the next move.

    A wall bounce from :meth:`bounce` is the one case where a reversal is
    committed.
    """

    def __init__(
        self,
        heading: Direction,
        *,
        turn_probability: float = 0.25,
        wall_margin: int = 20,
        decision_min: int = 4,
        decision_max: int = 7,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not 1 <= decision_min <= decision_max:
            raise ValueError("decision interval must satisfy 1 <= min <= max.")
        self.pending = heading
        self.turn_probability = turn_probability
        self.wall_margin = wall_margin
        self.decision_min = decision_min
        self.decision_max = decision_max
        self._rng = rng if rng is not None else np.random.default_rng()
        self._ticks = 0
        self._forced = False
        self.interval = self._draw_interval()

    def _draw_interval(self) -> int:
        return int(self._rng.integers(self.decision_min, self.decision_max + 1))

    @property
    def bouncing(self) -> bool:
        return self._forced

    def decide(self, agent: Agent, arena: Arena) -> bool:
        """Count one tick and, at a decision point, maybe pick a new heading.

        Returns True if this tick was a decision point. A pending bounce
        suppresses the decision for the tick it is committed in.
        """
        if self._forced:
            return False
        self._ticks += 1
        if self._ticks < self.interval:
            return False

        self._ticks = 0
        self.interval = self._draw_interval()

        near_wall = arena.near_wall(agent.next_head(), self.wall_margin)
        if near_wall or self._rng.random() < self.turn_probability:
            choices = [d for d in ALL_DIRECTIONS if not d.is_reverse_of(agent.heading)]
            self.pending = choices[int(self._rng.integers(len(choices)))]
        return True

    def commit(self, agent: Agent) -> Direction:
        """Return the heading to move along this tick."""
        if self._forced or not self.pending.is_reverse_of(agent.heading):
            self._forced = False
            return self.pending
        return agent.heading

    def bounce(self, agent: Agent) -> None:
        """Force the next committed heading to reverse the current one."""
        self.pending = agent.heading.reverse
        self._forced = True
        logger.debug("Autonomous agent at %s bounced off a wall.", tuple(agent.head))
