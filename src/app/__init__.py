# src/app/__init__.py
"""
Application entrypoints for the NPC.

- build_npc_runtime: wire config, profile, constructions and monitoring
  around a bot body
- run_npc_runtime: blocking scheduler loop with optional TUI dashboard
"""

from __future__ import annotations

from .runtime import (
    NpcRuntime,
    build_goal_proposer,
    build_monitoring_stack,
    build_npc_runtime,
    run_npc_runtime,
    start_dashboard_in_background,
)

__all__ = [
    "NpcRuntime",
    "build_goal_proposer",
    "build_monitoring_stack",
    "build_npc_runtime",
    "run_npc_runtime",
    "start_dashboard_in_background",
]
