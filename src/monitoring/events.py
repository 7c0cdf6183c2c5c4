# path: src/monitoring/events.py
"""
Monitoring event types for the NPC.

Every human-readable transition the NPC logs (goal set, build paused,
going to bed, ...) is also published as a MonitoringEvent so that the
dashboard and the JSONL event log see the same stream as the history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class EventType(Enum):
    # goal orchestration
    GOAL_SET = auto()
    GOAL_ABANDONED = auto()
    ITEM_GOAL_RESULT = auto()

    # construction
    BUILD_PAUSED = auto()
    BUILD_COMPLETED = auto()

    # day/night routine
    HOME_ENTERED = auto()
    HOME_EXITED = auto()
    BEDTIME = auto()
    ROUTINE_STATE_CHANGED = auto()

    # a scheduler cycle raised
    STEP_EXCEPTION = auto()

    LOG = auto()


@dataclass
class MonitoringEvent:
    """
    One published transition.

    `payload` holds JSON-safe structured data for the event type, e.g.
    {"structure": "small_house", "missing": {"oak_planks": 6}} for
    BUILD_PAUSED. `correlation_id` groups events of one supervisor step.
    """

    ts: float
    module: str
    event_type: EventType
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.ts,
            "module": self.module,
            "event_type": self.event_type.name,
            "message": self.message,
            "payload": dict(self.payload),
            "correlation_id": self.correlation_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonitoringEvent":
        """Inverse of to_dict, for reading an event log back."""
        return cls(
            ts=float(data["ts"]),
            module=str(data["module"]),
            event_type=EventType[data["event_type"]],
            message=str(data.get("message", "")),
            payload=dict(data.get("payload") or {}),
            correlation_id=data.get("correlation_id"),
        )
