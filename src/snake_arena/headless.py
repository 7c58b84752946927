"""Stand-in collaborators for running sessions without a UI."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from snake_arena.clock import SimulationClock
from snake_arena.config import GameConfig
from snake_arena.game import GameStateMachine
from snake_arena.grid import Direction
from snake_arena.models import RenderSnapshot, StatusUpdate

logger = logging.getLogger(__name__)

_DIRECTION_NAMES: dict[str, Direction] = {d.name.lower(): d for d in Direction}

# Control actions and the state-machine method each one calls.
_CONTROL_ACTIONS: dict[str, str] = {
    "start": "press_start",
    "release-start": "release_start",
    "pause": "press_pause",
    "release-pause": "release_pause",
    "faster": "speed_up",
    "slower": "slow_down",
    "restart": "restart",
}


class RecordingRenderer:
    """Keeps the most recent snapshots instead of drawing them."""

    def __init__(self, history: int = 1) -> None:
        self.frames = 0
        self.snapshots: deque[RenderSnapshot] = deque(maxlen=max(history, 1))

    @property
    def last(self) -> RenderSnapshot | None:
        return self.snapshots[-1] if self.snapshots else None

    def render(self, snapshot: RenderSnapshot) -> None:
        self.frames += 1
        self.snapshots.append(snapshot)


class LoggingPresenter:
    """Logs dashboard changes and counts eat cues."""

    def __init__(self) -> None:
        self.updates: list[StatusUpdate] = []
        self.eat_cues = 0

    @property
    def last(self) -> StatusUpdate | None:
        return self.updates[-1] if self.updates else None

    def update(self, status: StatusUpdate) -> None:
        self.updates.append(status)
        logger.debug(
            "score=%d length=%d speed=%.1fx phase=%s",
            status.score,
            status.length,
            status.speed,
            status.phase.value,
        )

    def play_eat_cue(self) -> None:
        self.eat_cues += 1


@dataclass(frozen=True)
class InputEvent:
    """One scripted input: *action* fired at *at_ms* since the run began."""

    at_ms: float
    action: str

    @classmethod
    def parse(cls, text: str) -> InputEvent:
        """Parse ``"<ms>:<action>"``, e.g. ``"500:up"`` or ``"0:faster"``.

        Actions are the four direction names, ``start``, ``release-start``,
        ``pause``, ``release-pause``, ``faster``, ``slower`` and ``restart``.
        """
        parts = text.split(":")
        if len(parts) != 2:
            raise ValueError(f"Malformed input event {text!r}.")
        at_ms = float(parts[0])
        action = parts[1].strip().lower()
        if action not in _DIRECTION_NAMES and action not in _CONTROL_ACTIONS:
            raise ValueError(f"Unknown input action {action!r}.")
        return cls(at_ms=at_ms, action=action)


class ScriptedInput:
    """Replays timed input events into a :class:`GameStateMachine`."""

    def __init__(self, events: Iterable[InputEvent] = ()) -> None:
        self._events = deque(sorted(events, key=lambda e: e.at_ms))

    def __len__(self) -> int:
        return len(self._events)

    def feed(self, game: GameStateMachine, elapsed_ms: float) -> int:
        """Deliver every event due by *elapsed_ms*. Returns how many fired."""
        fired = 0
        while self._events and self._events[0].at_ms <= elapsed_ms:
            event = self._events.popleft()
            if event.action in _DIRECTION_NAMES:
                game.submit_direction(_DIRECTION_NAMES[event.action])
            else:
                getattr(game, _CONTROL_ACTIONS[event.action])()
            fired += 1
        return fired


def run_session(
    config: GameConfig | None = None,
    *,
    duration_ms: float = 10_000.0,
    fps: float = 60.0,
    events: Iterable[InputEvent] = (),
    autostart: bool = True,
) -> dict:
    """Run a headless session on a synthetic frame clock.

    Returns a JSON-serializable summary of the final state.
    """
    if fps <= 0:
        raise ValueError("fps must be positive.")
    renderer = RecordingRenderer()
    presenter = LoggingPresenter()
    game = GameStateMachine(config, presenter=presenter)
    clock = SimulationClock(game, renderer)
    script = ScriptedInput(events)
    if autostart:
        game.press_start()

    frame_ms = 1000.0 / fps
    frame = 0
    now = 0.0
    while now <= duration_ms:
        script.feed(game, now)
        clock.frame(now)
        frame += 1
        now = frame * frame_ms

    status = game.status()
    logger.info(
        "Headless run finished: %d frames, %d ticks, score %d, phase %s.",
        clock.frames,
        clock.ticks,
        status.score,
        status.phase.value,
    )
    return {
        "frames": clock.frames,
        "ticks": clock.ticks,
        "moves": game.session.tick,
        "score": status.score,
        "length": status.length,
        "speed": status.speed,
        "phase": status.phase.value,
        "death_reason": status.death_reason,
        "eat_cues": presenter.eat_cues,
        "arena": game.arena.to_dict(),
    }
