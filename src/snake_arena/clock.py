"""Fixed-timestep driver decoupling simulation ticks from frames."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snake_arena.interfaces import Renderer, call_safely

if TYPE_CHECKING:
    from snake_arena.game import GameStateMachine

logger = logging.getLogger(__name__)


class SimulationClock:
    """Call :meth:`frame` once per rendered frame with a monotonic timestamp.

    A tick runs when the time since the last applied tick reaches the
    game's current move interval; the renderer is called on every frame
    afterwards, so it always observes a fully applied tick. At most one
    tick runs per frame: intervals missed during a long frame stall are
    dropped, not replayed.
    """

    def __init__(
        self,
        game: GameStateMachine,
        renderer: Renderer | None = None,
    ) -> None:
        self.game = game
        self.renderer = renderer
        self.frames = 0
        self.ticks = 0
        self.dropped_ticks = 0
        self._last_frame: float | None = None
        self._last_tick: float | None = None

    def frame(self, now: float) -> bool:
        """Advance the clock to *now* (milliseconds).

        Returns True if a simulation tick was applied on this frame.
        """
        if self._last_frame is not None and now < self._last_frame:
            raise ValueError(
                f"Clock went backwards: {now} < {self._last_frame}."
            )
        if self._last_tick is None:
            self._last_tick = now
        self._last_frame = now
        self.frames += 1

        ticked = False
        interval = self.game.move_interval
        elapsed = now - self._last_tick
        if elapsed >= interval:
            missed = int(elapsed // interval) - 1
            if missed > 0:
                self.dropped_ticks += missed
                logger.debug(
                    "Frame stall of %.0f ms dropped %d ticks.", elapsed, missed,
                )
            self.game.step(now)
            self._last_tick = now
            self.ticks += 1
            ticked = True

        if self.renderer is not None:
            call_safely("Renderer", self.renderer.render, self.game.snapshot())
        return ticked
