"""Collision predicates evaluated against current agent positions.

All functions are pure: they read agent segments and never mutate them.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import islice

from snake_arena.agent import Agent
from snake_arena.grid import GridVector


class CollisionKind(enum.Enum):
    """Reasons a human agent's run can end."""

    WALL = "wall"
    SELF = "self"
    AGENT = "agent"


@dataclass(frozen=True)
class Collision:
    """A fatal collision; ``agent_index`` is set for ``AGENT`` hits."""

    kind: CollisionKind
    agent_index: int | None = None


def hits_wall(agent: Agent, width: int, height: int) -> bool:
    """Check whether the head lies within half a cell of any boundary."""
    half = agent.cell_size // 2
    x, y = agent.head
    return x < half or x >= width - half or y < half or y >= height - half


def hits_self(agent: Agent) -> bool:
    """Check whether the head overlaps any other segment."""
    head = agent.head
    return any(seg == head for seg in islice(agent.segments, 1, None))


def hits_other(agent: Agent, other: Agent) -> bool:
    """Check whether the head overlaps any segment of *other*, head included."""
    return other.occupies(agent.head)


def hits_food(agent: Agent, food: GridVector) -> bool:
    return agent.head == food


def first_fatal_collision(
    agent: Agent,
    others: Sequence[Agent],
    width: int,
    height: int,
) -> Collision | None:
    """Evaluate fatal collisions in fixed precedence.

    Order: wall, self, then each agent of *others* in sequence order.
    Evaluation stops at the first hit.
    """
    if hits_wall(agent, width, height):
        return Collision(CollisionKind.WALL)
    if hits_self(agent):
        return Collision(CollisionKind.SELF)
    for index, other in enumerate(others):
        if hits_other(agent, other):
            return Collision(CollisionKind.AGENT, agent_index=index)
    return None
