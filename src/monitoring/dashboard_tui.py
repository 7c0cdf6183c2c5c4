# rich-based TUI dashboard
# src/monitoring/dashboard_tui.py
"""
TUI dashboard for NPC monitoring.

A lightweight terminal UI (using `rich`) that subscribes to the monitoring
EventBus and renders:

- Routine status:
    - WORKING / SLEEPING
    - Current goal
    - Home structure

- Construction:
    - Structures finished
    - Structure paused and the materials it is waiting for

- Recent messages:
    - The last few human-readable transition lines

This runs entirely offline. No web server, no external services.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Deque, Dict, Optional

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bus import EventBus
from .events import EventType, MonitoringEvent


class NpcDashboard:
    """
    Live terminal dashboard bound to a monitoring.EventBus.

    It consumes MonitoringEvents and keeps a small in-memory state
    representation, which is rendered periodically via rich.
    """

    def __init__(self, bus: EventBus, max_messages: int = 10) -> None:
        self._bus = bus
        self._console = Console()

        self._state: Dict[str, Any] = {
            "routine_state": "WORKING",
            "goal": None,
            "home": None,
            "completed": [],
            "paused": None,        # {"structure": str, "missing": {...}}
            "abandoned": [],
        }
        self._messages: Deque[str] = deque(maxlen=max_messages)

        self._bus.subscribe(self._on_event)

    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    @property
    def messages(self) -> list[str]:
        return list(self._messages)

    # --------------------------------------------------------
    # Event handler
    # --------------------------------------------------------

    def _on_event(self, event: MonitoringEvent) -> None:
        """
        Update dashboard state based on a MonitoringEvent.
        This should be cheap and non-blocking.
        """
        et = event.event_type
        payload = event.payload or {}

        if et == EventType.GOAL_SET:
            goal = payload.get("goal") or {}
            self._state["goal"] = f"{goal.get('name', '?')} x{goal.get('quantity', 1)}"

        elif et == EventType.GOAL_ABANDONED:
            goal = payload.get("goal") or {}
            self._state["abandoned"].append(goal.get("name", "?"))

        elif et == EventType.BUILD_COMPLETED:
            name = payload.get("structure")
            if name and name not in self._state["completed"]:
                self._state["completed"].append(name)
            self._state["home"] = name
            if self._state["paused"] and self._state["paused"].get("structure") == name:
                self._state["paused"] = None

        elif et == EventType.BUILD_PAUSED:
            self._state["paused"] = {
                "structure": payload.get("structure"),
                "missing": payload.get("missing") or {},
            }

        elif et == EventType.ROUTINE_STATE_CHANGED:
            self._state["routine_state"] = payload.get("to", self._state["routine_state"])

        elif et == EventType.BEDTIME:
            # The ad-hoc goal is dropped at night.
            self._state["goal"] = None

        if et != EventType.ROUTINE_STATE_CHANGED and event.message:
            self._messages.append(event.message)

    # --------------------------------------------------------
    # Rendering helpers
    # --------------------------------------------------------

    def _render_status_panel(self) -> Panel:
        txt = Text()
        txt.append("Routine: ", style="bold")
        txt.append(f"{self._state['routine_state']}\n")
        txt.append("Goal: ", style="bold")
        txt.append(f"{self._state['goal'] or '<none>'}\n")
        txt.append("Home: ", style="bold")
        txt.append(f"{self._state['home'] or '<none>'}\n")
        return Panel(txt, title="NPC Status", border_style="cyan")

    def _render_build_panel(self) -> Panel:
        table = Table.grid(pad_edge=False)
        table.add_column(justify="left")

        completed = self._state["completed"]
        table.add_row(f"[bold]Completed:[/bold] {', '.join(completed) if completed else '<none>'}")

        paused = self._state["paused"]
        if paused:
            missing = ", ".join(f"{k} x{v}" for k, v in paused["missing"].items())
            table.add_row(f"[bold]Paused:[/bold] {paused['structure']}")
            table.add_row(f"[bold]Needs:[/bold] {missing or '-'}")
        else:
            table.add_row("[bold]Paused:[/bold] <none>")

        abandoned = self._state["abandoned"]
        if abandoned:
            table.add_row(f"[bold red]Abandoned:[/bold red] {', '.join(abandoned[-5:])}")

        return Panel(table, title="Construction", border_style="green")

    def _render_messages_panel(self) -> Panel:
        table = Table(show_header=False, box=None)
        table.add_column("Message")
        if self._messages:
            for msg in self._messages:
                table.add_row(msg)
        else:
            table.add_row("No activity yet")
        return Panel(table, title="Recent", border_style="yellow")

    def build_layout(self) -> Layout:
        """Construct the overall layout for the dashboard."""
        layout = Layout()
        layout.split(
            Layout(name="top", size=5),
            Layout(name="middle", ratio=1),
        )
        layout["top"].update(self._render_status_panel())
        layout["middle"].split_row(
            Layout(name="build"),
            Layout(name="messages", ratio=2),
        )
        layout["build"].update(self._render_build_panel())
        layout["messages"].update(self._render_messages_panel())
        return layout

    # --------------------------------------------------------
    # Main loop
    # --------------------------------------------------------

    def run(
        self,
        refresh_per_second: float = 4.0,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Render until `stop_event` is set (forever without one).

        This blocks the current thread; the runtime runs it in a daemon thread.
        """
        stop_event = stop_event or threading.Event()
        refresh_delay = 1.0 / max(refresh_per_second, 0.1)
        with Live(self.build_layout(), console=self._console, refresh_per_second=refresh_per_second) as live:
            while not stop_event.is_set():
                live.update(self.build_layout())
                stop_event.wait(refresh_delay)
        self._bus.unsubscribe(self._on_event)
