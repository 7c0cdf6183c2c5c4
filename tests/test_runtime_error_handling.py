#tests/test_runtime_error_handling.py
"""
Tests for runtime.error_handling.safe_step_with_logging.
"""

from __future__ import annotations

from typing import List

import pytest

from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from npc.orchestrator import GoalOrchestrator
from npc.profile import Profile
from npc.routine import RoutineStateMachine
from npc.scheduler import IdleScheduler
from runtime.error_handling import safe_step_with_logging
from spec.types import Goal
from testing.fakes import FakeBody, FakeBuildExecutor, FakeItemExecutor


class ExplodingItems(FakeItemExecutor):
    def execute_next(self, item_name: str, quantity: int) -> bool:
        raise RuntimeError("pathfinder crashed")


def make_scheduler(items: FakeItemExecutor) -> IdleScheduler:
    body = FakeBody()
    orch = GoalOrchestrator(
        profile=Profile(curr_goal=Goal("oak_log", 1)),
        constructions={},
        world=body,
        item_executor=items,
        build_executor=FakeBuildExecutor(),
    )
    return IdleScheduler(body, RoutineStateMachine(orch, body, body), sleep_fn=lambda _: None)


def test_successful_cycle_returns_count_without_events():
    bus = EventBus()
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    scheduler = make_scheduler(FakeItemExecutor(default=False))
    scheduler.signal_idle()

    assert safe_step_with_logging(scheduler, bus) == 1
    assert all(e.event_type != EventType.STEP_EXCEPTION for e in events)


def test_exception_is_reported_and_reraised():
    bus = EventBus()
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    scheduler = make_scheduler(ExplodingItems())
    scheduler.signal_idle()

    with pytest.raises(RuntimeError, match="pathfinder crashed"):
        safe_step_with_logging(scheduler, bus, context_id="npc-1")

    failures = [e for e in events if e.event_type == EventType.STEP_EXCEPTION]
    assert len(failures) == 1
    assert "pathfinder crashed" in failures[0].payload["exception_repr"]
    assert failures[0].payload["routine_state"] == "WORKING"
    assert failures[0].correlation_id == "npc-1"


def test_works_without_bus():
    scheduler = make_scheduler(ExplodingItems())
    scheduler.signal_idle()

    with pytest.raises(RuntimeError):
        safe_step_with_logging(scheduler, None)
