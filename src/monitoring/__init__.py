# src/monitoring/__init__.py
"""
Monitoring for the NPC runtime: typed events, an in-process bus, a JSONL
logger and the rich TUI dashboard (imported from monitoring.dashboard_tui).
"""

from .bus import EventBus
from .events import EventType, MonitoringEvent
from .logger import JsonFileLogger, log_event

__all__ = [
    "EventBus",
    "EventType",
    "MonitoringEvent",
    "JsonFileLogger",
    "log_event",
]
