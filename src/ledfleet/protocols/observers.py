"""Observer protocols for fleet and scheduler events."""

from typing import Any, Protocol, runtime_checkable

from .events import FleetEvent, SchedulerEvent


@runtime_checkable
class FleetObserver(Protocol):
    """
    Observer that receives fleet orchestrator events.

    Lets the CLI (or a future UI) report panel status without the
    orchestrator knowing who is listening.
    """

    def on_fleet_event(self, event: FleetEvent, panel_id: str | None, **data: Any) -> None:
        """
        Handle a fleet event.

        Args:
            event: The type of fleet event
            panel_id: Panel involved, or None for fleet-wide events
            **data: Event details (e.g. error=<exception>)

        Threading:
            Called from connect worker threads and from the tick thread.
            Implementations must be thread-safe and return quickly.
        """
        ...


@runtime_checkable
class SchedulerObserver(Protocol):
    """Observer that receives frame scheduler lifecycle events."""

    def on_scheduler_event(self, event: SchedulerEvent, **data: Any) -> None:
        """
        Handle a scheduler event.

        Args:
            event: The type of scheduler event
            **data: Event details (e.g. frames=<count>)

        Threading:
            STARTED comes from the thread that called start(). FINISHED and
            the STOPPED that follows it come from the tick thread; a
            requested stop notifies from the thread that called stop().
        """
        ...
