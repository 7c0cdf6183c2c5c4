# path: src/runtime/error_handling.py

"""
Error handling helpers for the NPC runtime.

Collaborators report ordinary failures as return values. An exception that
escapes a scheduler cycle is a programming error: it is reported on the
monitoring bus and then re-raised so the supervisor decides what happens.
"""

from __future__ import annotations

import logging
from typing import Optional

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event
from npc.scheduler import IdleScheduler

logger = logging.getLogger(__name__)


def safe_step_with_logging(
    scheduler: IdleScheduler,
    bus: Optional[EventBus],
    max_cycles: Optional[int] = 1,
    context_id: Optional[str] = None,
) -> int:
    """
    Call scheduler.run_pending() inside a try/except block.

    If a cycle throws, we:
    - Emit a STEP_EXCEPTION event with the exception repr.
    - Re-raise the exception so the runtime can decide whether to abort
      or continue.

    Returns the number of cycles that ran.
    """
    try:
        return scheduler.run_pending(max_cycles=max_cycles)
    except Exception as exc:
        logger.exception("NPC scheduler cycle raised")
        log_event(
            bus=bus,
            module="runtime.safe_step",
            event_type=EventType.STEP_EXCEPTION,
            message="NPC scheduler cycle raised an exception",
            payload={
                "context_id": context_id,
                "exception_repr": repr(exc),
                "routine_state": scheduler.routine.state.name,
            },
            correlation_id=context_id,
        )
        raise
