"""Autonomous agent steering."""

from snake_arena.ai.policy import AIPolicy

__all__ = ["AIPolicy"]
