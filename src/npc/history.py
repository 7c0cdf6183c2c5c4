# path: src/npc/history.py

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event


@dataclass
class AgentHistory:
    """
    Ordered record of what the NPC did and why.

    Every state transition the orchestrator and routine log (goal set, goal
    abandoned, build paused or finished, entering or leaving home, going to
    bed) ends up here. The goal proposer reads it back as context.

    If `path` is set, save() appends the not-yet-saved entries as JSONL.
    """

    path: Optional[Path] = None
    entries: List[Dict[str, Any]] = field(default_factory=list)
    _saved: int = field(default=0, init=False, repr=False)

    def add(self, content: str, role: str = "system") -> None:
        self.entries.append({"role": role, "content": content, "ts": time.time()})

    def get_history(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Copy of the entries, optionally only the last `limit` of them."""
        if limit is None:
            return [dict(e) for e in self.entries]
        if limit <= 0:
            return []
        return [dict(e) for e in self.entries[-limit:]]

    def save(self) -> int:
        """
        Append unsaved entries to the JSONL file.

        Returns the number of lines written (0 when no path is configured).
        """
        if self.path is None:
            return 0
        pending = self.entries[self._saved:]
        if not pending:
            return 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            for entry in pending:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        self._saved = len(self.entries)
        return len(pending)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class TransitionLogger:
    """
    Fan-out for NPC state transitions.

    One call writes the human-readable line to the module's `logging`
    logger, appends it to the AgentHistory, and publishes a
    MonitoringEvent when a bus is attached.

    Bookkeeping lines pass record_history=False so they stay out of the
    history the goal proposer reads.
    """

    history: AgentHistory
    bus: Optional[EventBus] = None

    def log(
        self,
        module: str,
        message: str,
        event_type: EventType = EventType.LOG,
        payload: Optional[Dict[str, Any]] = None,
        level: int = logging.INFO,
        record_history: bool = True,
    ) -> None:
        logging.getLogger(module).log(level, message)
        if record_history:
            self.history.add(message)
        log_event(
            bus=self.bus,
            module=module,
            event_type=event_type,
            message=message,
            payload=payload,
        )
