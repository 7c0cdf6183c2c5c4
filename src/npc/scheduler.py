# Path: src/npc/scheduler.py
"""
Idle scheduler.

Turns "the agent became idle" notifications into routine cycles, one at a
time. There is no parallelism: a cycle runs to completion (each delegated
action blocks until it finishes) before the next idle signal is handled.

Before acting, the scheduler waits a settling delay so that a command
queued right after the agent went idle can take over; if the agent is busy
after the delay, or an interrupted action is waiting to be resumed, the
cycle is skipped.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from spec.bot_core import AgentControl

from .history import AgentHistory
from .routine import RoutineStateMachine

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY_S = 5.0

SleepFn = Callable[[float], None]


class IdleScheduler:
    def __init__(
        self,
        agent: AgentControl,
        routine: RoutineStateMachine,
        history: Optional[AgentHistory] = None,
        settle_delay_s: float = DEFAULT_SETTLE_DELAY_S,
        sleep_fn: SleepFn = time.sleep,
    ) -> None:
        if settle_delay_s < 0:
            raise ValueError(f"settle_delay_s must be >= 0, got {settle_delay_s}")
        self.agent = agent
        self.routine = routine
        self.history = history
        self.settle_delay_s = settle_delay_s
        self._sleep = sleep_fn
        self._idle_pending = False
        self.cycles_run = 0
        self.cycles_skipped = 0

    @property
    def idle_pending(self) -> bool:
        return self._idle_pending

    def signal_idle(self) -> None:
        """Record that the agent went idle. Repeated signals coalesce."""
        self._idle_pending = True

    def on_idle(self) -> bool:
        """
        Handle one idle notification.

        Returns True if a routine cycle ran, False if it was skipped.
        """
        self._sleep(self.settle_delay_s)

        if not self.agent.is_idle():
            logger.debug("Agent busy after settle delay; skipping cycle")
            self.cycles_skipped += 1
            return False
        if self.agent.has_pending_resume():
            logger.debug("Resume pending; deferring to interrupted action")
            self.cycles_skipped += 1
            return False

        self.routine.step()
        self.cycles_run += 1
        if self.history is not None:
            self.history.save()

        # Actions that finished instantly leave the agent idle; go again.
        if self.agent.is_idle():
            self.signal_idle()
        return True

    def run_pending(self, max_cycles: Optional[int] = None) -> int:
        """
        Handle queued idle signals until none remain (or `max_cycles` ran).

        Returns the number of routine cycles that actually ran.
        """
        handled = 0
        ran = 0
        while self._idle_pending:
            if max_cycles is not None and handled >= max_cycles:
                break
            self._idle_pending = False
            handled += 1
            if self.on_idle():
                ran += 1
        return ran

    def run_forever(
        self,
        stop_event: threading.Event,
        poll_interval_s: float = 0.5,
        max_cycles_per_poll: Optional[int] = 1,
    ) -> None:
        """
        Blocking scheduler loop for the runtime thread.

        Idle signals come from the bot integration via signal_idle().
        """
        while not stop_event.is_set():
            self.run_pending(max_cycles=max_cycles_per_poll)
            stop_event.wait(poll_interval_s)
