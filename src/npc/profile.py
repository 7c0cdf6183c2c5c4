# src/npc/profile.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from construction.schema import BuiltInstance
from spec.types import Goal

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    """
    Long-lived NPC data owned by the agent and persisted between sessions.

    Fields
    ------
    goals:
        Persistent goals, checked every cycle after transient goals.
    curr_goal:
        Ad-hoc goal (set by a command or by the goal proposer). Evaluated
        last, so persistent and in-progress work is never starved by it.
    built:
        Structure name -> placed instance (complete or not).
    home:
        Name of the structure used for the sleep routine, if any.
    do_routine:
        Enables the day/night routine (go home and sleep at night).
    do_set_goal:
        Enables asking the goal proposer for a new goal when idle.
    """

    goals: List[Goal] = field(default_factory=list)
    curr_goal: Optional[Goal] = None
    built: Dict[str, BuiltInstance] = field(default_factory=dict)
    home: Optional[str] = None
    do_routine: bool = False
    do_set_goal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goals": [g.to_dict() for g in self.goals],
            "curr_goal": self.curr_goal.to_dict() if self.curr_goal else None,
            "built": {name: inst.to_dict() for name, inst in self.built.items()},
            "home": self.home,
            "do_routine": self.do_routine,
            "do_set_goal": self.do_set_goal,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Profile":
        """
        Build a Profile from a loose mapping.

        Missing keys keep their defaults; goals may be bare names
        ("oak_log") or {"name", "quantity"} mappings.
        """
        profile = cls()
        if not data:
            return profile

        if data.get("goals"):
            profile.goals = [Goal.from_any(g) for g in data["goals"]]
        if data.get("curr_goal"):
            profile.curr_goal = Goal.from_any(data["curr_goal"])
        if data.get("built"):
            profile.built = {
                str(name): BuiltInstance.from_dict(str(name), raw)
                for name, raw in data["built"].items()
            }
        if data.get("home"):
            profile.home = str(data["home"])
        if data.get("do_routine") is not None:
            profile.do_routine = bool(data["do_routine"])
        if data.get("do_set_goal") is not None:
            profile.do_set_goal = bool(data["do_set_goal"])
        return profile


def load_profile(path: Path) -> Profile:
    """
    Load a Profile from YAML. A missing file yields an empty Profile.

    Raises:
        ValueError: if the root YAML node is not a mapping.
    """
    if not path.exists():
        logger.info("No NPC profile at %s; starting with an empty one", path)
        return Profile()
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"NPC profile must be a mapping at root: {path}")
    return Profile.from_dict(raw)


def save_profile(profile: Profile, path: Path) -> None:
    """Write a Profile to YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(profile.to_dict(), f, sort_keys=False)
