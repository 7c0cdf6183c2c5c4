# src/env/__init__.py
"""NPC configuration: dataclasses and the config/npc.yaml loader."""

from .loader import load_npc_config
from .schema import GoalSettings, NpcConfig, PathsConfig, RoutineSettings, SchedulerConfig

__all__ = [
    "load_npc_config",
    "GoalSettings",
    "NpcConfig",
    "PathsConfig",
    "RoutineSettings",
    "SchedulerConfig",
]
