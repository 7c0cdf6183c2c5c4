# Path: tools/npc_demo.py

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from agent.logging_config import configure_logging
from app.runtime import build_npc_runtime
from construction.geometry import Orientation
from env.loader import load_npc_config
from spec.skills import BuildResult
from spec.types import Goal, Position
from testing.fakes import FakeBody, FakeBuildExecutor, FakeGoalProposer, FakeItemExecutor


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a few NPC scheduler cycles against in-memory fakes.")
    parser.add_argument("--cycles", type=int, default=6, help="Number of idle cycles to run.")
    parser.add_argument("--config", type=Path, default=None, help="NPC config file (default: config/npc.yaml).")
    parser.add_argument(
        "--work-dir",
        type=Path,
        default=Path("data/npc_demo"),
        help="Where the demo profile, history and event log are written.",
    )
    parser.add_argument("--night", action="store_true", help="Start at night with a bed nearby.")
    args = parser.parse_args()

    configure_logging(logging.INFO)

    config = load_npc_config(args.config)
    # Keep demo state away from the real profile.
    config.paths.profile_path = args.work_dir / "profile.yaml"
    config.paths.history_path = args.work_dir / "history.jsonl"
    config.paths.events_log_path = args.work_dir / "events.jsonl"
    config.scheduler.settle_delay_s = 0.0

    body = FakeBody(
        position=Position(0, 64, 0),
        time_of_day=18000 if args.night else 1000,
        bed=Position(11, 64, 12) if args.night else None,
    )
    origin = Position(10, 64, 10)
    builder = FakeBuildExecutor(
        results={
            "small_house": [
                BuildResult(origin, Orientation.DEG_90, {"oak_planks": 6}, acted=True),
            ]
        },
        origin=origin,
        orientation=Orientation.DEG_90,
    )
    items = FakeItemExecutor(body=body)
    proposer = FakeGoalProposer([Goal("bread", 3)])

    runtime = build_npc_runtime(config, body, items, builder, proposer=proposer)
    if not runtime.profile.goals:
        runtime.profile.goals = [Goal("small_house")]
    runtime.profile.do_routine = True
    runtime.profile.do_set_goal = True

    for i in range(args.cycles):
        runtime.scheduler.signal_idle()
        runtime.scheduler.run_pending(max_cycles=1)
        print(f"=== Cycle {i} === state={runtime.routine.state.name} home={runtime.profile.home}")

    runtime.close()

    print("\nHistory:")
    for entry in runtime.history.get_history():
        print(f"  - {entry['content']}")
    print("\nMotor calls:", body.calls)
    print(f"\nDemo state written to {args.work_dir}")


if __name__ == "__main__":
    main()
