"""Contracts for the collaborators the core calls outward to."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from snake_arena.models import RenderSnapshot, StatusUpdate

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Draws one frame. Must treat the snapshot as read-only."""

    def render(self, snapshot: RenderSnapshot) -> None: ...


class Presenter(Protocol):
    """Displays dashboard values and plays the eat cue."""

    def update(self, status: StatusUpdate) -> None: ...

    def play_eat_cue(self) -> None: ...


def call_safely(what: str, fn: Callable[..., object], *args: object) -> bool:
    """Invoke a collaborator, logging instead of raising on failure.

    Returns True if the call completed.
    """
    try:
        fn(*args)
    except Exception:
        logger.exception("%s failed; continuing simulation.", what)
        return False
    return True
