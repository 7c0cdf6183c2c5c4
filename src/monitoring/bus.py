# in-process pub/sub for NPC monitoring events
"""
Event bus for NPC monitoring.

Publishers (orchestrator, routine, runtime error handling) hand a
MonitoringEvent to EventBus.publish(); every subscriber whose filter
matches receives it synchronously, on the publisher's thread.

Subscribers may narrow what they receive:

    bus.subscribe(dashboard.on_event)                             # everything
    bus.subscribe(alerts, event_types={EventType.STEP_EXCEPTION})  # failures only
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from .events import EventType, MonitoringEvent

logger = logging.getLogger(__name__)

SubscriberFn = Callable[[MonitoringEvent], None]

_Subscription = Tuple[SubscriberFn, Optional[FrozenSet[EventType]]]


class EventBus:
    """
    Synchronous fan-out of MonitoringEvents.

    The subscription list is guarded by a lock so the dashboard thread can
    subscribe while the scheduler thread publishes. Delivery happens outside
    the lock on a snapshot, so a subscriber may itself publish or unsubscribe.
    """

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []
        self._lock = Lock()

    def subscribe(
        self,
        fn: SubscriberFn,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> None:
        """Register `fn`; with `event_types`, only those types are delivered."""
        wanted = frozenset(event_types) if event_types is not None else None
        with self._lock:
            self._subscriptions.append((fn, wanted))

    def unsubscribe(self, fn: SubscriberFn) -> None:
        """Drop every subscription of `fn`. Unknown subscribers are ignored."""
        with self._lock:
            self._subscriptions = [s for s in self._subscriptions if s[0] != fn]

    def publish(self, event: MonitoringEvent) -> None:
        with self._lock:
            snapshot = list(self._subscriptions)

        for fn, wanted in snapshot:
            if wanted is not None and event.event_type not in wanted:
                continue
            try:
                fn(event)
            except Exception:
                # A broken subscriber must not stop the NPC or other subscribers.
                logger.exception("Monitoring subscriber %r failed on %s", fn, event.event_type.name)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def clear(self) -> None:
        with self._lock:
            self._subscriptions.clear()
