# Path: src/npc/orchestrator.py
"""
Goal orchestrator.

Once per cycle, picks the first goal that still needs work and runs one
step of it. Goals are considered in priority order:

    transient (missing materials from a paused build)
      > persistent profile goals
      > the ad-hoc current goal

so a building that ran out of materials is resumed before anything new is
started. At most one goal acts per cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from construction.geometry import Orientation
from construction.schema import BuiltInstance, StructureDefinition
from monitoring.events import EventType
from spec.bot_core import WorldQueries
from spec.llm import GoalProposer
from spec.skills import BuildGoalExecutor, BuildResult, ItemGoalExecutor
from spec.types import Goal, Position

from .history import AgentHistory, TransitionLogger
from .profile import Profile

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_THRESHOLD = 5


# ---------------------------------------------------------------
# Per-cycle bookkeeping
# ---------------------------------------------------------------

@dataclass
class OrchestratorState:
    """
    Volatile goal bookkeeping (not persisted).

    transient_goals:
        Missing-material goals produced by construction; consumed and
        cleared at the start of every cycle.
    failed_goals:
        Goal name -> consecutive failed item-acquisition attempts.
    last_goals:
        Goal name -> whether the latest attempt fully succeeded.
    """

    transient_goals: List[Goal] = field(default_factory=list)
    failed_goals: Dict[str, int] = field(default_factory=dict)
    last_goals: Dict[str, bool] = field(default_factory=dict)

    def reset_goal_tracking(self) -> Dict[str, bool]:
        """Clear failures and outcomes; return the outcomes that were dropped."""
        previous = dict(self.last_goals)
        self.failed_goals = {}
        self.last_goals = {}
        return previous

    def record_failure(self, name: str) -> int:
        self.failed_goals[name] = self.failed_goals.get(name, 0) + 1
        return self.failed_goals[name]

    def record_success(self, name: str) -> None:
        self.failed_goals.pop(name, None)

    def record_outcome(self, name: str, ok: bool) -> None:
        self.last_goals[name] = ok

    def queue_transient(self, goal: Goal) -> None:
        self.transient_goals.append(goal)

    def take_transient_goals(self) -> List[Goal]:
        goals, self.transient_goals = self.transient_goals, []
        return goals


# ---------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------

class GoalOrchestrator:
    """
    Selects and advances item-acquisition and construction goals.

    Collaborators are injected; none of them is expected to raise for an
    ordinary failure. Exceptions they do raise propagate to the caller.
    """

    def __init__(
        self,
        profile: Profile,
        constructions: Mapping[str, StructureDefinition],
        world: WorldQueries,
        item_executor: ItemGoalExecutor,
        build_executor: BuildGoalExecutor,
        proposer: Optional[GoalProposer] = None,
        history: Optional[AgentHistory] = None,
        transitions: Optional[TransitionLogger] = None,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1, got {failure_threshold}")

        self.profile = profile
        self.constructions = constructions
        self.world = world
        self.item_executor = item_executor
        self.build_executor = build_executor
        self.proposer = proposer
        if transitions is None:
            transitions = TransitionLogger(history=history if history is not None else AgentHistory())
        self.transitions = transitions
        self.history = transitions.history
        self.failure_threshold = failure_threshold
        self.state = OrchestratorState()

    # -----------------------------------------------------------
    # Goal selection
    # -----------------------------------------------------------

    def set_goal(self, name: Optional[str] = None, quantity: int = 1) -> Optional[Goal]:
        """
        Replace the ad-hoc current goal.

        With a name the goal is set directly. Without one the goal proposer
        is asked, using agent history and the previous attempt outcomes as
        context. Failure and outcome tracking is reset either way.

        Returns the new current goal, or None if none could be set.
        """
        previous_outcomes = self.state.reset_goal_tracking()

        if name:
            goal = Goal(name=name, quantity=quantity)
            self.profile.curr_goal = goal
            self._log(
                f"Set new goal: {goal.name} x{goal.quantity}",
                EventType.GOAL_SET,
                {"goal": goal.to_dict(), "source": "manual"},
            )
            return goal

        if self.proposer is None:
            logger.warning("No goal proposer configured; current goal left unchanged")
            return None

        attempted: Dict[str, bool] = dict(previous_outcomes)
        for goal in self.profile.goals:
            attempted.setdefault(goal.name, True)

        proposed = self.proposer.propose_goal(self.history.get_history(), attempted)
        if proposed is None:
            logger.error("Error setting new goal.")
            return None

        self.profile.curr_goal = proposed
        self._log(
            f"Set new goal: {proposed.name} x{proposed.quantity}",
            EventType.GOAL_SET,
            {"goal": proposed.to_dict(), "source": "proposer"},
        )
        return proposed

    def goal_queue(self) -> List[Goal]:
        """Goals in evaluation order, without consuming the transient queue."""
        goals = list(self.state.transient_goals) + list(self.profile.goals)
        if self.profile.curr_goal is not None:
            goals.append(self.profile.curr_goal)
        return goals

    # -----------------------------------------------------------
    # One orchestration cycle
    # -----------------------------------------------------------

    def execute_goal(self) -> bool:
        """
        Run one step of the highest-priority goal that still needs work.

        Returns True if a goal acted this cycle. When nothing acted and
        automatic goal selection is enabled, a new goal is requested.
        """
        goals = self.goal_queue()
        self.state.take_transient_goals()

        acted = False
        for goal in goals:
            if goal.name not in self.constructions:
                if self.world.item_satisfied(goal.name, goal.quantity):
                    continue
                self._execute_item_goal(goal)
                acted = True
                break

            if self._execute_build_goal(goal):
                acted = True
                break

        if not acted and self.profile.do_set_goal:
            self.set_goal()

        return acted

    def _execute_item_goal(self, goal: Goal) -> None:
        logger.info("Executing item goal: %d %s", goal.quantity, goal.name)
        ok = bool(self.item_executor.execute_next(goal.name, goal.quantity))
        self.state.record_outcome(goal.name, ok)

        if ok:
            self.state.record_success(goal.name)
            self._log(
                f"Successfully obtained {goal.quantity} {goal.name}",
                EventType.ITEM_GOAL_RESULT,
                {"goal": goal.to_dict(), "success": True},
            )
            return

        failures = self.state.record_failure(goal.name)
        logger.info("Item goal %s failed (%d/%d)", goal.name, failures, self.failure_threshold)
        if failures >= self.failure_threshold:
            self._log(
                f"Failed to obtain {goal.name} too many times. Quitting goal.",
                EventType.GOAL_ABANDONED,
                {"goal": goal.to_dict(), "failures": failures},
            )
            self.set_goal()

    def _execute_build_goal(self, goal: Goal) -> bool:
        """Advance one structure; returns the executor's `acted` flag."""
        structure = self.constructions[goal.name]
        logger.info("Building %s", goal.name)

        instance = self.profile.built.get(goal.name)
        if instance is not None:
            result = self.build_executor.execute_next(
                structure, instance.position, instance.orientation
            )
        else:
            result = self.build_executor.execute_next(structure)
            self.profile.built[goal.name] = self._new_instance(goal.name, result)

        missing = dict(result.missing)
        if not missing:
            self.profile.home = goal.name
        for block_name, count in missing.items():
            self.state.queue_transient(Goal(name=block_name, quantity=int(count)))

        if not result.acted:
            return False

        if not missing:
            self._log(
                f"Successfully finished building a {goal.name}",
                EventType.BUILD_COMPLETED,
                {"structure": goal.name},
            )
        else:
            needed = ", ".join(f"{key} x{value}" for key, value in missing.items())
            self._log(
                f"Pausing building {goal.name} for now. Need to gather {needed}",
                EventType.BUILD_PAUSED,
                {"structure": goal.name, "missing": missing},
            )
        self.state.record_outcome(goal.name, not missing)
        return True

    @staticmethod
    def _new_instance(name: str, result: BuildResult) -> BuiltInstance:
        return BuiltInstance(
            name=name,
            position=Position.from_any(result.position),
            orientation=Orientation.coerce(result.orientation),
        )

    # -----------------------------------------------------------
    # Introspection / logging
    # -----------------------------------------------------------

    def debug_state(self) -> Dict[str, Any]:
        """JSON-safe snapshot of profile and bookkeeping."""
        return {
            "profile": self.profile.to_dict(),
            "transient_goals": [g.to_dict() for g in self.state.transient_goals],
            "failed_goals": dict(self.state.failed_goals),
            "last_goals": dict(self.state.last_goals),
        }

    def _log(self, message: str, event_type: EventType, payload: Dict[str, Any]) -> None:
        self.transitions.log(__name__, message, event_type, payload)
