#tests/test_npc_routine.py
"""
Tests for npc.routine.RoutineStateMachine.

Covers:
- daytime work delegates to the orchestrator
- night: return home through the door, clear the ad-hoc goal, go to bed
- morning: leave home through the door and step away
- no bed nearby / routine disabled keeps working at night
- homes without a door skip the door moves
"""

from __future__ import annotations

from typing import Optional

from construction.geometry import Orientation
from construction.schema import BuiltInstance, StructureDefinition
from monitoring.bus import EventBus
from monitoring.events import EventType
from npc.history import AgentHistory, TransitionLogger
from npc.orchestrator import GoalOrchestrator
from npc.profile import Profile
from npc.routine import RoutineConfig, RoutineState, RoutineStateMachine
from spec.types import Goal, Position
from testing.fakes import FakeBody, FakeBuildExecutor, FakeItemExecutor


def _house(with_door: bool = True) -> StructureDefinition:
    front = ["oak_planks", "oak_door" if with_door else "oak_planks", "oak_planks"]
    return StructureDefinition(
        name="small_house",
        blocks=[[front, ["oak_planks", "", "oak_planks"], ["oak_planks"] * 3]],
        offset=0,
    )


INSIDE = Position(11.5, 64, 11.5)
OUTSIDE = Position(0, 64, 0)
DOOR = Position(11, 64, 10)
NIGHT = 15000
DAY = 1000


def make_routine(body: FakeBody, profile: Profile, with_door: bool = True, bus: Optional[EventBus] = None):
    items = FakeItemExecutor(body=body)
    orch = GoalOrchestrator(
        profile=profile,
        constructions={"small_house": _house(with_door)},
        world=body,
        item_executor=items,
        build_executor=FakeBuildExecutor(),
        transitions=TransitionLogger(history=AgentHistory(), bus=bus),
    )
    return RoutineStateMachine(orch, body, body, RoutineConfig()), items


def home_profile(**kwargs) -> Profile:
    return Profile(
        built={"small_house": BuiltInstance("small_house", Position(10, 64, 10), Orientation.DEG_0)},
        home="small_house",
        do_routine=True,
        **kwargs,
    )


def history_lines(routine: RoutineStateMachine) -> list[str]:
    return [e["content"] for e in routine.orchestrator.history.get_history()]


def test_daytime_runs_one_orchestrator_cycle():
    body = FakeBody(position=OUTSIDE, time_of_day=DAY, bed=Position(11, 64, 12))
    routine, items = make_routine(body, home_profile(curr_goal=Goal("oak_log", 2)))

    assert routine.step() is RoutineState.WORKING

    assert items.calls == [("oak_log", 2)]
    assert body.calls[0] == ("move_away", 2)
    assert body.motor_calls("go_to_bed") == []


def test_night_returns_home_and_goes_to_bed():
    body = FakeBody(position=OUTSIDE, time_of_day=NIGHT, bed=Position(11, 64, 12))
    body.door_targets[DOOR] = INSIDE
    routine, items = make_routine(body, home_profile(curr_goal=Goal("oak_log", 2)))

    assert routine.step() is RoutineState.SLEEPING

    assert routine.is_sleeping
    assert routine.orchestrator.profile.curr_goal is None
    assert items.calls == []
    assert body.motor_calls("use_door") == [DOOR]
    assert len(body.motor_calls("go_to_bed")) == 1
    lines = history_lines(routine)
    assert lines.index("Returning home") < lines.index("Going to bed")


def test_night_inside_home_does_not_use_door():
    body = FakeBody(position=INSIDE, time_of_day=NIGHT, bed=Position(11, 64, 12))
    routine, _ = make_routine(body, home_profile())

    routine.step()

    assert body.motor_calls("use_door") == []
    assert len(body.motor_calls("go_to_bed")) == 1


def test_morning_exits_home_then_works():
    body = FakeBody(position=INSIDE, time_of_day=NIGHT, bed=Position(11, 64, 12))
    body.door_targets[DOOR] = OUTSIDE
    routine, items = make_routine(body, home_profile())
    routine.step()
    assert routine.is_sleeping
    body.calls.clear()

    body.time_of_day = DAY
    routine.orchestrator.profile.curr_goal = Goal("bread", 1)
    assert routine.step() is RoutineState.WORKING

    assert body.calls == [("move_away", 2), ("use_door", DOOR), ("move_away", 2)]
    assert items.calls == [("bread", 1)]
    assert "Exiting home" in history_lines(routine)


def test_no_bed_means_work_at_night():
    body = FakeBody(position=OUTSIDE, time_of_day=NIGHT, bed=None)
    routine, items = make_routine(body, home_profile(curr_goal=Goal("torch", 4)))

    assert routine.step() is RoutineState.WORKING
    assert items.calls == [("torch", 4)]


def test_routine_disabled_means_work_at_night():
    body = FakeBody(position=OUTSIDE, time_of_day=NIGHT, bed=Position(1, 64, 1))
    profile = home_profile(curr_goal=Goal("torch", 4))
    profile.do_routine = False
    routine, items = make_routine(body, profile)

    assert routine.step() is RoutineState.WORKING
    assert items.calls == [("torch", 4)]


def test_home_without_door_still_sleeps():
    body = FakeBody(position=OUTSIDE, time_of_day=NIGHT, bed=Position(11, 64, 12))
    routine, _ = make_routine(body, home_profile(), with_door=False)

    routine.step()
    assert body.motor_calls("use_door") == []
    assert len(body.motor_calls("go_to_bed")) == 1

    body.time_of_day = DAY
    body.position = INSIDE
    routine.step()
    assert body.motor_calls("use_door") == []
    assert not routine.is_sleeping


def test_no_home_goes_to_bed_where_it_stands():
    body = FakeBody(position=OUTSIDE, time_of_day=NIGHT, bed=Position(1, 64, 1))
    routine, _ = make_routine(body, Profile(do_routine=True))

    routine.step()

    assert body.motor_calls("use_door") == []
    assert "Going to bed" in history_lines(routine)


def test_state_change_is_published_but_kept_out_of_history():
    bus = EventBus()
    received = []
    bus.subscribe(received.append, event_types={EventType.ROUTINE_STATE_CHANGED})
    body = FakeBody(position=INSIDE, time_of_day=NIGHT, bed=Position(11, 64, 12))
    routine, _ = make_routine(body, home_profile(), bus=bus)

    routine.step()

    assert [e.payload for e in received] == [{"from": "WORKING", "to": "SLEEPING"}]
    assert "Going to bed" in history_lines(routine)
    assert not any(line.startswith("Routine state") for line in history_lines(routine))
