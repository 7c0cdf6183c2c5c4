# Path: src/npc/routine.py
"""
Day/night routine for the NPC.

Each idle cycle decides between working on goals and a home/sleep cycle:

    WORKING  - daytime, routine disabled, or no bed nearby:
               leave home if we slept there, then run one orchestrator cycle
    SLEEPING - night with a bed nearby and the routine enabled:
               drop the ad-hoc goal, walk home through the door, go to bed

A structure without a door is tolerated: door moves are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from construction.locator import current_building, door_position
from monitoring.events import EventType
from spec.bot_core import MotorSkills, WorldQueries
from spec.types import Position

from .orchestrator import GoalOrchestrator

logger = logging.getLogger(__name__)


class RoutineState(Enum):
    WORKING = auto()
    SLEEPING = auto()


@dataclass
class RoutineConfig:
    """
    Fields
    ------
    night_start_tick:
        Time of day (ticks) from which the agent goes to bed.
    bed_search_radius:
        Radius searched for a bed; no bed means no sleep routine.
    move_away_distance:
        Blocks to step away before acting and after leaving home.
    bed_block:
        Name fragment identifying bed blocks.
    """
    night_start_tick: int = 13000
    bed_search_radius: int = 32
    move_away_distance: int = 2
    bed_block: str = "bed"


class RoutineStateMachine:
    """Entry point of every idle cycle; delegates daytime work to the orchestrator."""

    def __init__(
        self,
        orchestrator: GoalOrchestrator,
        world: WorldQueries,
        motor: MotorSkills,
        config: Optional[RoutineConfig] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.world = world
        self.motor = motor
        self.config = config or RoutineConfig()
        self.state = RoutineState.WORKING

    @property
    def is_sleeping(self) -> bool:
        return self.state == RoutineState.SLEEPING

    # ------------------------------------------------------------------
    # Step
    # ------------------------------------------------------------------

    def step(self) -> RoutineState:
        """Run one routine cycle and return the resulting state."""
        # Step off the current block so the next action does not start
        # blocked by the agent's own position.
        self.motor.move_away(self.config.move_away_distance)

        if self._should_work():
            self._work()
        else:
            self._sleep()
        return self.state

    def _should_work(self) -> bool:
        has_bed = (
            self.world.find_nearest_block(self.config.bed_block, self.config.bed_search_radius)
            is not None
        )
        profile = self.orchestrator.profile
        return (
            not has_bed
            or not profile.do_routine
            or self.world.get_time_of_day() < self.config.night_start_tick
        )

    def _work(self) -> None:
        profile = self.orchestrator.profile
        if self.is_sleeping and profile.home is not None and self._current_building() == profile.home:
            door = self._home_door()
            if door is not None:
                self._log("Exiting home", EventType.HOME_EXITED, {"home": profile.home})
                self.motor.use_door(door)
                # Too close to the wall and the agent walks straight back in.
                self.motor.move_away(self.config.move_away_distance)

        self._set_state(RoutineState.WORKING)
        self.orchestrator.execute_goal()

    def _sleep(self) -> None:
        profile = self.orchestrator.profile

        # A new day starts with a fresh ad-hoc goal.
        profile.curr_goal = None

        if profile.home is not None and self._current_building() != profile.home:
            door = self._home_door()
            if door is not None:
                self._log("Returning home", EventType.HOME_ENTERED, {"home": profile.home})
                self.motor.use_door(door)

        self._log("Going to bed", EventType.BEDTIME, {"home": profile.home})
        self._set_state(RoutineState.SLEEPING)
        self.motor.go_to_bed()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current_building(self) -> Optional[str]:
        return current_building(
            self.world.get_position(),
            self.orchestrator.profile.built,
            self.orchestrator.constructions,
        )

    def _home_door(self) -> Optional[Position]:
        profile = self.orchestrator.profile
        door = door_position(profile.home, profile.built, self.orchestrator.constructions)
        if door is None:
            logger.debug("Home %s has no door; skipping door move", profile.home)
        return door

    def _set_state(self, new_state: RoutineState) -> None:
        if new_state == self.state:
            return
        old_state, self.state = self.state, new_state
        self.orchestrator.transitions.log(
            __name__,
            f"Routine state {old_state.name} -> {new_state.name}",
            EventType.ROUTINE_STATE_CHANGED,
            {"from": old_state.name, "to": new_state.name},
            level=logging.DEBUG,
            record_history=False,
        )

    def _log(self, message: str, event_type: EventType, payload: dict) -> None:
        self.orchestrator.transitions.log(__name__, message, event_type, payload)
