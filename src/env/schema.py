# NpcConfig and sub-config dataclasses
# src/env/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from llm_stack.config import ModelConfig


@dataclass
class SchedulerConfig:
    """Idle scheduling knobs."""
    settle_delay_s: float = 5.0     # wait after an idle signal before acting
    poll_interval_s: float = 0.5    # run_forever polling period


@dataclass
class RoutineSettings:
    """Day/night routine knobs (see npc.routine.RoutineConfig)."""
    night_start_tick: int = 13000
    bed_search_radius: int = 32
    move_away_distance: int = 2


@dataclass
class GoalSettings:
    """Goal orchestration knobs."""
    failure_threshold: int = 5


@dataclass
class PathsConfig:
    """Filesystem locations, already resolved against the project root."""
    construction_dir: Path
    profile_path: Path
    history_path: Optional[Path] = None
    events_log_path: Optional[Path] = None


@dataclass
class NpcConfig:
    """Top-level resolved NPC configuration."""
    paths: PathsConfig
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    routine: RoutineSettings = field(default_factory=RoutineSettings)
    goals: GoalSettings = field(default_factory=GoalSettings)
    goal_model: Optional[ModelConfig] = None  # None: no automatic goal proposals
