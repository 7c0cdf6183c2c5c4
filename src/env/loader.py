# src/env/loader.py

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from llm_stack.config import ModelConfig

from .schema import (
    GoalSettings,
    NpcConfig,
    PathsConfig,
    RoutineSettings,
    SchedulerConfig,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "npc.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file that must contain a mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _section(cfg: Dict[str, Any], key: str) -> Dict[str, Any]:
    raw = cfg.get(key) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"npc.yaml '{key}' must be a mapping, got {type(raw).__name__}")
    return raw


def _resolve(value: Optional[str], base: Path) -> Optional[Path]:
    """Resolve a config path relative to `base`; None stays None."""
    if value is None:
        return None
    path = Path(value)
    return path if path.is_absolute() else base / path


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_npc_config(path: Optional[Path] = None, project_root: Optional[Path] = None) -> NpcConfig:
    """
    Main entry point: returns a fully resolved NpcConfig.

    Args:
        path: config file, defaults to config/npc.yaml.
        project_root: base for relative paths, defaults to the repo root.
    """
    cfg = _load_yaml(path or DEFAULT_CONFIG_PATH)
    base = project_root or PROJECT_ROOT

    sched_raw = _section(cfg, "scheduler")
    scheduler = SchedulerConfig(
        settle_delay_s=float(sched_raw.get("settle_delay_s", 5.0)),
        poll_interval_s=float(sched_raw.get("poll_interval_s", 0.5)),
    )

    routine_raw = _section(cfg, "routine")
    routine = RoutineSettings(
        night_start_tick=int(routine_raw.get("night_start_tick", 13000)),
        bed_search_radius=int(routine_raw.get("bed_search_radius", 32)),
        move_away_distance=int(routine_raw.get("move_away_distance", 2)),
    )

    goals_raw = _section(cfg, "goals")
    goals = GoalSettings(failure_threshold=int(goals_raw.get("failure_threshold", 5)))

    paths_raw = _section(cfg, "paths")
    paths = PathsConfig(
        construction_dir=_resolve(paths_raw.get("construction_dir", "config/construction"), base),
        profile_path=_resolve(paths_raw.get("profile_path", "data/npc/profile.yaml"), base),
        history_path=_resolve(paths_raw.get("history_path"), base),
        events_log_path=_resolve(paths_raw.get("events_log_path"), base),
    )

    model_raw = cfg.get("goal_model")
    goal_model = None
    if model_raw:
        if not isinstance(model_raw, dict):
            raise ValueError("npc.yaml 'goal_model' must be a mapping")
        goal_model = ModelConfig.from_dict(model_raw)
        goal_model.model_path = str(_resolve(goal_model.model_path, base))

    config = NpcConfig(
        paths=paths,
        scheduler=scheduler,
        routine=routine,
        goals=goals,
        goal_model=goal_model,
    )
    _validate_config(config)
    return config


def _validate_config(config: NpcConfig) -> None:
    """Minimal sanity checks for the NPC configuration."""
    if config.scheduler.settle_delay_s < 0:
        raise ValueError(f"settle_delay_s must be >= 0, got {config.scheduler.settle_delay_s}")
    if config.scheduler.poll_interval_s <= 0:
        raise ValueError(f"poll_interval_s must be > 0, got {config.scheduler.poll_interval_s}")
    if config.goals.failure_threshold < 1:
        raise ValueError(f"failure_threshold must be >= 1, got {config.goals.failure_threshold}")
    if not 0 <= config.routine.night_start_tick <= 24000:
        raise ValueError(
            f"night_start_tick must be within a day (0..24000), got {config.routine.night_start_tick}"
        )
    if config.routine.bed_search_radius < 0:
        raise ValueError(f"bed_search_radius must be >= 0, got {config.routine.bed_search_radius}")
