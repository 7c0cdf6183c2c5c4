# src/agent/logging_config.py
"""
Process-wide logging setup for NPC entrypoints.

    from agent.logging_config import configure_logging
    configure_logging("debug", log_file=Path("logs/npc/npc.log"))

Goal and routine transitions are logged by npc.orchestrator / npc.routine
at INFO; routine state changes and scheduler skips at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_level(level: Union[int, str]) -> int:
    """Accept logging.DEBUG or a name such as "debug" / "WARNING"."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    log_file: Optional[Path] = None,
    rich_console: bool = False,
    logger_name: Optional[str] = None,
) -> None:
    """
    Attach console (and optionally file) handlers to the root logger, or
    to `logger_name` when given.

    Does nothing if that logger already has handlers, so calling it
    from both a tool and a library entrypoint is harmless.

    rich_console:
        Use rich's RichHandler for colored console output instead of the
        plain stdout format. Avoid it while the TUI dashboard is running.
    """
    target = logging.getLogger(logger_name)
    if target.handlers:
        return

    if rich_console:
        console: logging.Handler = RichHandler(show_path=False, rich_tracebacks=True)
        console.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        console = logging.StreamHandler(stream=sys.stdout)
        console.setFormatter(logging.Formatter(LOG_FORMAT))
    target.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        target.addHandler(file_handler)

    target.setLevel(parse_level(level))
    # llama.cpp bindings are chatty at INFO.
    logging.getLogger("llama_cpp").setLevel(logging.WARNING)
