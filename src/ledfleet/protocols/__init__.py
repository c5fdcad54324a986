"""Protocol definitions for events, observers and pixel sources."""

from .events import FleetEvent, SchedulerEvent
from .observers import FleetObserver, SchedulerObserver
from .sources import PixelSource

__all__ = [
    # Events
    "FleetEvent",
    "SchedulerEvent",
    # Observers
    "FleetObserver",
    "SchedulerObserver",
    # Sources
    "PixelSource",
]
