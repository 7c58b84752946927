"""Snake Arena — deterministic simulation core."""

from snake_arena.agent import Agent, AgentKind
from snake_arena.ai.policy import AIPolicy
from snake_arena.arena import Arena
from snake_arena.clock import SimulationClock
from snake_arena.collision import Collision, CollisionKind
from snake_arena.config import GameConfig
from snake_arena.directions import DirectionQueue
from snake_arena.game import GameSession, GameStateMachine
from snake_arena.grid import Direction, GridVector
from snake_arena.models import AgentView, Phase, RenderSnapshot, StatusUpdate

__all__ = [
    "AIPolicy",
    "Agent",
    "AgentKind",
    "AgentView",
    "Arena",
    "Collision",
    "CollisionKind",
    "Direction",
    "DirectionQueue",
    "GameConfig",
    "GameSession",
    "GameStateMachine",
    "GridVector",
    "Phase",
    "RenderSnapshot",
    "SimulationClock",
    "StatusUpdate",
]
