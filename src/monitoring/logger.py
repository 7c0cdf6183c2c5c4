# JSONL sink for monitoring events
"""
Structured event log for the NPC.

JsonFileLogger appends every MonitoringEvent it receives to a JSON-lines
file (one object per line, see MonitoringEvent.to_dict). log_event() is the
single helper the orchestrator, routine and runtime use to publish.

    bus = EventBus()
    with JsonFileLogger(Path("logs/npc/events.jsonl"), bus):
        log_event(bus, "npc.routine", EventType.BEDTIME, "Going to bed")
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent

logger = logging.getLogger(__name__)


class JsonFileLogger:
    """
    Bus subscriber writing events to `path` as JSONL.

    The file is opened in append mode, so restarts keep earlier sessions.
    Writes are serialized with a lock; a failed write is reported through
    `logging` and the event is dropped.
    """

    def __init__(
        self,
        path: Path,
        bus: EventBus,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._write_lock = Lock()
        self._bus = bus
        self.lines_written = 0
        bus.subscribe(self._write, event_types=event_types)

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, event: MonitoringEvent) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False, default=str)
        with self._write_lock:
            if self._fh.closed:
                return
            try:
                self._fh.write(line + "\n")
                self._fh.flush()
            except OSError as exc:
                logger.warning("Dropping %s event, cannot write %s: %s", event.event_type.name, self._path, exc)
                return
            self.lines_written += 1

    def close(self) -> None:
        """Detach from the bus and close the file. Safe to call twice."""
        self._bus.unsubscribe(self._write)
        with self._write_lock:
            if not self._fh.closed:
                self._fh.close()

    def __enter__(self) -> "JsonFileLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def log_event(
    bus: Optional[EventBus],
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> Optional[MonitoringEvent]:
    """
    Publish one MonitoringEvent stamped with the current time.

    Returns the published event, or None when `bus` is None (components
    built without monitoring).
    """
    if bus is None:
        return None
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=dict(payload) if payload else {},
        correlation_id=correlation_id,
    )
    bus.publish(event)
    return event
