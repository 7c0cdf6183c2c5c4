# src/npc/__init__.py

"""
NPC long-horizon behavior: profile, goal orchestration, day/night routine,
and the idle scheduler that drives them.
"""

from .history import AgentHistory, TransitionLogger
from .profile import Profile, load_profile, save_profile
from .orchestrator import DEFAULT_FAILURE_THRESHOLD, GoalOrchestrator, OrchestratorState
from .routine import RoutineConfig, RoutineState, RoutineStateMachine
from .scheduler import DEFAULT_SETTLE_DELAY_S, IdleScheduler

__all__ = [
    "AgentHistory",
    "TransitionLogger",
    "Profile",
    "load_profile",
    "save_profile",
    "DEFAULT_FAILURE_THRESHOLD",
    "GoalOrchestrator",
    "OrchestratorState",
    "RoutineConfig",
    "RoutineState",
    "RoutineStateMachine",
    "DEFAULT_SETTLE_DELAY_S",
    "IdleScheduler",
]
