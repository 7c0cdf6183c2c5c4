# src/app/runtime.py

"""
Wiring of the NPC runtime from configuration.

The bot integration supplies the body (world queries, motor skills and
agent control) and the two goal executors; everything else is built here
from an NpcConfig:

    constructions  <- config/construction/*
    profile        <- paths.profile_path
    history        -> paths.history_path (JSONL, optional)
    events         -> paths.events_log_path (JSONL, optional)
    goal proposer  <- goal_model (llama.cpp, optional)

run_npc_runtime() then drives the idle scheduler until a stop event is set.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from construction.loader import load_structures
from construction.schema import StructureDefinition
from env.schema import NpcConfig
from llm_stack.config import ModelConfig
from llm_stack.goal_setter import LlmGoalProposer
from llm_stack.presets import GOAL_SETTER_PRESET, RolePreset
from monitoring.bus import EventBus
from monitoring.dashboard_tui import NpcDashboard
from monitoring.logger import JsonFileLogger
from npc.history import AgentHistory, TransitionLogger
from npc.orchestrator import GoalOrchestrator
from npc.profile import Profile, load_profile, save_profile
from npc.routine import RoutineConfig, RoutineStateMachine
from npc.scheduler import IdleScheduler
from runtime.error_handling import safe_step_with_logging
from spec.bot_core import NpcBody
from spec.llm import GoalProposer
from spec.skills import BuildGoalExecutor, ItemGoalExecutor

logger = logging.getLogger(__name__)


@dataclass
class NpcRuntime:
    """Everything one NPC needs at runtime, already wired together."""

    config: NpcConfig
    bus: EventBus
    profile: Profile
    constructions: dict[str, StructureDefinition]
    history: AgentHistory
    orchestrator: GoalOrchestrator
    routine: RoutineStateMachine
    scheduler: IdleScheduler
    event_logger: Optional[JsonFileLogger] = None

    def save(self) -> None:
        """Persist the profile and flush unsaved history entries."""
        save_profile(self.profile, self.config.paths.profile_path)
        self.history.save()

    def close(self) -> None:
        self.save()
        if self.event_logger is not None:
            self.event_logger.close()


def build_monitoring_stack(
    log_path: Optional[Path] = None,
    bus: Optional[EventBus] = None,
) -> Tuple[EventBus, Optional[JsonFileLogger]]:
    """
    Construct the monitoring stack.

    A JsonFileLogger is attached only when `log_path` is given.
    """
    bus = bus or EventBus()
    event_logger = JsonFileLogger(path=log_path, bus=bus) if log_path is not None else None
    return bus, event_logger


def preset_from_model_config(model: ModelConfig) -> RolePreset:
    """Goal-setter preset using the generation knobs from the model config."""
    return RolePreset(
        name=GOAL_SETTER_PRESET.name,
        temperature=model.temperature,
        max_tokens=model.max_tokens,
        system_prompt=model.system_prompt or GOAL_SETTER_PRESET.system_prompt,
        stop=model.stop,
    )


def build_goal_proposer(model: Optional[ModelConfig]) -> Optional[GoalProposer]:
    """
    LLM-backed goal proposer, or None when no goal model is configured.

    llama_cpp is imported here so the rest of the runtime works without the
    `llm` extra installed.
    """
    if model is None:
        return None
    from llm_stack.backend_llamacpp import LlamaCppBackend

    logger.info("Loading goal model from %s", model.model_path)
    return LlmGoalProposer(LlamaCppBackend(model), preset=preset_from_model_config(model))


def build_npc_runtime(
    config: NpcConfig,
    body: NpcBody,
    item_executor: ItemGoalExecutor,
    build_executor: BuildGoalExecutor,
    proposer: Optional[GoalProposer] = None,
    bus: Optional[EventBus] = None,
) -> NpcRuntime:
    """
    Build the full NPC stack for one body.

    `proposer` overrides the one described by config.goal_model.
    """
    bus, event_logger = build_monitoring_stack(config.paths.events_log_path, bus)

    constructions = load_structures(config.paths.construction_dir)
    profile = load_profile(config.paths.profile_path)
    history = AgentHistory(path=config.paths.history_path)

    if proposer is None:
        proposer = build_goal_proposer(config.goal_model)

    orchestrator = GoalOrchestrator(
        profile=profile,
        constructions=constructions,
        world=body,
        item_executor=item_executor,
        build_executor=build_executor,
        proposer=proposer,
        transitions=TransitionLogger(history=history, bus=bus),
        failure_threshold=config.goals.failure_threshold,
    )
    routine = RoutineStateMachine(
        orchestrator=orchestrator,
        world=body,
        motor=body,
        config=RoutineConfig(
            night_start_tick=config.routine.night_start_tick,
            bed_search_radius=config.routine.bed_search_radius,
            move_away_distance=config.routine.move_away_distance,
        ),
    )
    scheduler = IdleScheduler(
        agent=body,
        routine=routine,
        history=history,
        settle_delay_s=config.scheduler.settle_delay_s,
    )

    logger.info(
        "NPC runtime ready: %d structures, %d persistent goals, home=%s",
        len(constructions),
        len(profile.goals),
        profile.home,
    )
    return NpcRuntime(
        config=config,
        bus=bus,
        profile=profile,
        constructions=constructions,
        history=history,
        orchestrator=orchestrator,
        routine=routine,
        scheduler=scheduler,
        event_logger=event_logger,
    )


def start_dashboard_in_background(
    bus: EventBus,
    stop_event: Optional[threading.Event] = None,
) -> threading.Thread:
    """Run an NpcDashboard bound to `bus` in a daemon thread until `stop_event` is set."""
    dashboard = NpcDashboard(bus)

    t = threading.Thread(
        target=dashboard.run,
        kwargs={"refresh_per_second": 4.0, "stop_event": stop_event},
        name="NpcDashboardThread",
        daemon=True,
    )
    t.start()
    return t


def run_npc_runtime(
    runtime: NpcRuntime,
    stop_event: threading.Event,
    with_dashboard: bool = False,
) -> None:
    """
    Blocking main loop: handle idle signals until `stop_event` is set.

    Exceptions from a cycle are reported by safe_step_with_logging and
    propagate; the profile is saved and the event log closed either way.
    """
    if with_dashboard:
        start_dashboard_in_background(runtime.bus, stop_event)

    poll = runtime.config.scheduler.poll_interval_s
    try:
        while not stop_event.is_set():
            safe_step_with_logging(runtime.scheduler, runtime.bus, max_cycles=1)
            stop_event.wait(poll)
    except KeyboardInterrupt:
        logger.info("Shutting down NPC runtime...")
    finally:
        runtime.close()
