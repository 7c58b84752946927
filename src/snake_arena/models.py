"""Pydantic models for the read-only views handed to collaborators."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, enum.Enum):
    """Lifecycle phases of a session."""

    WAITING = "waiting"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class AgentView(BaseModel):
    """One agent as the renderer sees it."""

    model_config = ConfigDict(frozen=True)

    kind: str
    segments: tuple[tuple[int, int], ...]
    heading: tuple[int, int]


class RenderSnapshot(BaseModel):
    """Everything the renderer needs for one frame."""

    model_config = ConfigDict(frozen=True)

    phase: Phase
    grace: bool
    paused: bool
    tick: int = Field(ge=0)
    arena_width: int
    arena_height: int
    cell_size: int
    food: tuple[int, int]
    agents: tuple[AgentView, ...]


class StatusUpdate(BaseModel):
    """Dashboard values pushed to the presenter on each change."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    length: int = Field(ge=1)
    speed: float
    user_speed: float
    can_speed_up: bool
    can_slow_down: bool
    phase: Phase
    death_reason: str | None = None
