"""Session state machine composing arena, agents, input, and AI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from snake_arena.agent import Agent, AgentKind
from snake_arena.ai.policy import AIPolicy
from snake_arena.arena import Arena
from snake_arena.collision import Collision, first_fatal_collision, hits_food, hits_wall
from snake_arena.config import GameConfig
from snake_arena.difficulty import (
    clamp_user_speed,
    effective_speed,
    move_interval,
    speed_multiplier,
)
from snake_arena.directions import DirectionQueue
from snake_arena.grid import ALL_DIRECTIONS, Direction, GridVector
from snake_arena.interfaces import Presenter, call_safely
from snake_arena.models import AgentView, Phase, RenderSnapshot, StatusUpdate

logger = logging.getLogger(__name__)


class ControlEdge:
    """Edge detector for a held control such as the pause key.

    A press arms the edge only if the control was released before it;
    :meth:`consume` reports and clears an armed edge.
    """

    __slots__ = ("_down", "_armed")

    def __init__(self) -> None:
        self._down = False
        self._armed = False

    def press(self) -> None:
        if not self._down:
            self._armed = True
        self._down = True

    def release(self) -> None:
        self._down = False

    def consume(self) -> bool:
        fired = self._armed
        self._armed = False
        return fired


@dataclass
class GameSession:
    """Mutable per-session values owned by :class:`GameStateMachine`."""

    phase: Phase = Phase.WAITING
    score: int = 0
    tick: int = 0
    base_speed: float = 1.0
    user_speed: float = 1.0
    grace: bool = True
    grace_anchor: float = 0.0
    paused_at: float | None = None
    death: Collision | None = None


class GameStateMachine:
    """Single-human, multi-autonomous session driven one tick at a time.

    Input callbacks only record intents (directions and control edges);
    :meth:`step` consumes them. Each running tick moves every autonomous
    agent, then the human agent, then resolves collisions in fixed
    precedence.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        presenter: Presenter | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.presenter = presenter
        self._last_status: StatusUpdate | None = None
        self._reset()
        self._notify()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        cfg = self.config
        self.arena = Arena(
            width=cfg.arena_width,
            height=cfg.arena_height,
            cell_size=cfg.cell_size,
            max_attempts=cfg.food_placement_attempts,
            rng=self.rng,
        )
        self.human = Agent(
            self.arena.snap(cfg.arena_width / 2, cfg.arena_height / 2),
            Direction.RIGHT,
            length=cfg.player_length,
            cell_size=cfg.cell_size,
            kind=AgentKind.HUMAN,
        )
        self.autonomous: list[Agent] = []
        self.policies: list[AIPolicy] = []
        self._spawn_autonomous()
        self.arena.respawn_food(self.agents)

        self.directions = DirectionQueue(self.human.heading)
        self._start = ControlEdge()
        self._pause = ControlEdge()
        self.session = GameSession()

    def _spawn_autonomous(self) -> None:
        """Place autonomous agents at fixed insets from the four corners."""
        cfg = self.config
        inset = cfg.spawn_inset
        corners = [
            (inset, inset),
            (cfg.arena_width - inset, inset),
            (inset, cfg.arena_height - inset),
            (cfg.arena_width - inset, cfg.arena_height - inset),
        ]
        for x, y in corners[: cfg.autonomous_count]:
            length = int(self.rng.integers(
                cfg.autonomous_min_length, cfg.autonomous_max_length + 1,
            ))
            heading = ALL_DIRECTIONS[int(self.rng.integers(len(ALL_DIRECTIONS)))]
            self.autonomous.append(Agent(
                self.arena.snap(x, y),
                heading,
                length=length,
                cell_size=cfg.cell_size,
                kind=AgentKind.AUTONOMOUS,
            ))
            self.policies.append(AIPolicy(
                heading,
                turn_probability=cfg.ai_turn_probability,
                wall_margin=cfg.ai_wall_margin,
                decision_min=cfg.ai_decision_min,
                decision_max=cfg.ai_decision_max,
                rng=self.rng,
            ))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def agents(self) -> list[Agent]:
        """The human agent followed by the autonomous agents in spawn order."""
        return [self.human, *self.autonomous]

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def food(self) -> GridVector:
        return self.arena.food

    @property
    def speed(self) -> float:
        """Effective speed multiplier (score-based times user-chosen)."""
        return effective_speed(self.session.base_speed, self.session.user_speed)

    @property
    def move_interval(self) -> float:
        """Milliseconds between simulation ticks at the current speed."""
        return move_interval(
            self.session.base_speed, self.session.user_speed, self.config,
        )

    def status(self) -> StatusUpdate:
        s = self.session
        return StatusUpdate(
            score=s.score,
            length=len(self.human),
            speed=round(self.speed, 6),
            user_speed=s.user_speed,
            can_speed_up=s.user_speed < self.config.max_user_speed,
            can_slow_down=s.user_speed > self.config.min_user_speed,
            phase=s.phase,
            death_reason=s.death.kind.value if s.death is not None else None,
        )

    def snapshot(self) -> RenderSnapshot:
        s = self.session
        return RenderSnapshot(
            phase=s.phase,
            grace=s.grace,
            paused=s.phase is Phase.PAUSED,
            tick=s.tick,
            arena_width=self.arena.width,
            arena_height=self.arena.height,
            cell_size=self.arena.cell_size,
            food=tuple(self.arena.food),
            agents=tuple(
                AgentView(
                    kind=agent.kind.value,
                    segments=tuple(tuple(seg) for seg in agent.segments),
                    heading=agent.heading.value,
                )
                for agent in self.agents
            ),
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def submit_direction(self, raw: Direction | tuple[int, int]) -> bool:
        """Buffer a directional intent for the human agent."""
        return self.directions.submit(raw)

    def press_start(self) -> None:
        self._start.press()

    def release_start(self) -> None:
        self._start.release()

    def press_pause(self) -> None:
        self._pause.press()

    def release_pause(self) -> None:
        self._pause.release()

    def adjust_speed(self, delta: float) -> float:
        """Nudge the user speed multiplier and return the clamped result."""
        self.session.user_speed = clamp_user_speed(
            self.session.user_speed + delta, self.config,
        )
        self._notify()
        return self.session.user_speed

    def speed_up(self) -> float:
        """Raise the user speed by one configured step."""
        return self.adjust_speed(self.config.user_speed_step)

    def slow_down(self) -> float:
        """Lower the user speed by one configured step."""
        return self.adjust_speed(-self.config.user_speed_step)

    def restart(self) -> None:
        """Discard the session and rebuild everything in the waiting phase."""
        logger.info(
            "Restarting session (previous score %d, phase %s).",
            self.session.score,
            self.session.phase.value,
        )
        self._reset()
        self._notify()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self, now: float) -> bool:
        """Run one simulation tick at timestamp *now* (milliseconds).

        Returns True if agents moved. While waiting or paused only the
        control edges are inspected; after game over nothing happens
        until :meth:`restart`.
        """
        s = self.session
        if s.phase is Phase.GAME_OVER:
            return False

        if s.phase is Phase.WAITING:
            # Consume both edges so a pause pressed while waiting does not
            # carry over into the running phase.
            started = self._start.consume()
            paused = self._pause.consume()
            if started or paused:
                self._begin(now)
            return False

        if self._pause.consume():
            self._toggle_pause(now)
        if s.phase is Phase.PAUSED:
            return False

        self._advance(now)
        return True

    def _begin(self, now: float) -> None:
        s = self.session
        s.phase = Phase.RUNNING
        s.grace = True
        s.grace_anchor = now
        logger.info("Session started at %.0f ms.", now)
        self._notify()

    def _toggle_pause(self, now: float) -> None:
        s = self.session
        if s.phase is Phase.RUNNING:
            s.phase = Phase.PAUSED
            s.paused_at = now
            logger.info("Paused at tick %d.", s.tick)
        else:
            # Time spent paused does not use up the grace period.
            if s.paused_at is not None:
                s.grace_anchor += now - s.paused_at
            s.paused_at = None
            s.phase = Phase.RUNNING
            logger.info("Resumed at tick %d.", s.tick)
        self._notify()

    def _advance(self, now: float) -> None:
        cfg = self.config
        s = self.session
        s.grace = now - s.grace_anchor < cfg.grace_period_ms
        s.base_speed = speed_multiplier(s.score, cfg)

        heading = self.directions.next_direction()

        for agent, policy in zip(self.autonomous, self.policies, strict=True):
            policy.decide(agent, self.arena)
            agent.advance(policy.commit(agent))

        self.human.advance(heading)
        s.tick += 1

        if not s.grace:
            collision = first_fatal_collision(
                self.human, self.autonomous, self.arena.width, self.arena.height,
            )
            if collision is not None:
                self._game_over(collision)
                return

        if hits_food(self.human, self.arena.food):
            self._eat()

        for agent, policy in zip(self.autonomous, self.policies, strict=True):
            if hits_wall(agent, self.arena.width, self.arena.height):
                policy.bounce(agent)

        self._notify()

    def _eat(self) -> None:
        s = self.session
        self.human.grow()
        s.score += self.config.food_points
        if self.presenter is not None:
            call_safely("Presenter eat cue", self.presenter.play_eat_cue)
        self.arena.respawn_food(self.agents)

    def _game_over(self, collision: Collision) -> None:
        s = self.session
        s.phase = Phase.GAME_OVER
        s.death = collision
        logger.info(
            "Game over at tick %d with score %d (%s).",
            s.tick,
            s.score,
            collision.kind.value,
        )
        self._notify()

    def _notify(self) -> None:
        """Push the dashboard status to the presenter if it changed."""
        status = self.status()
        if status == self._last_status:
            return
        self._last_status = status
        if self.presenter is not None:
            call_safely("Presenter update", self.presenter.update, status)
