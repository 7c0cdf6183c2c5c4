# src/spec/__init__.py

from __future__ import annotations

"""
Public spec surface for the NPC runtime.

This module re-exports *interfaces and value types* shared across packages:
  - Position / Goal value types
  - executor protocols (ItemGoalExecutor, BuildGoalExecutor, BuildResult)
  - body protocols (WorldQueries, MotorSkills, AgentControl, NpcBody)
  - GoalProposer

Concrete implementations live elsewhere (llm_stack, testing.fakes, and the
bot integration that drives the real game client).
"""

from .types import Goal, Position

from .skills import BuildGoalExecutor, BuildResult, ItemGoalExecutor

from .bot_core import AgentControl, MotorSkills, NpcBody, WorldQueries

from .llm import GoalProposer

__all__ = [
    # values
    "Goal",
    "Position",
    # executors
    "BuildGoalExecutor",
    "BuildResult",
    "ItemGoalExecutor",
    # body
    "AgentControl",
    "MotorSkills",
    "NpcBody",
    "WorldQueries",
    # goal proposal
    "GoalProposer",
]
