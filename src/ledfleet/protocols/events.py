"""Domain events for the observer pattern.

- Fleet events: panel links coming and going, send failures
- Scheduler events: render loop lifecycle
"""

from enum import Enum


class FleetEvent(Enum):
    """Events from the fleet orchestrator."""

    LINK_CONNECTED = "link_connected"        # Panel link opened
    LINK_FAILED = "link_failed"              # Connect attempt failed
    LINK_DISCONNECTED = "link_disconnected"  # Panel link closed
    SEND_FAILED = "send_failed"              # A frame did not reach a panel
    SEND_RECOVERED = "send_recovered"        # A panel accepts frames again
    FLEET_SHUTDOWN = "fleet_shutdown"        # All links blacked out and closed


class SchedulerEvent(Enum):
    """Events from the frame scheduler."""

    STARTED = "started"    # Render loop started
    FINISHED = "finished"  # Pixel source reported it is done
    STOPPED = "stopped"    # Render loop stopped (on request or after finishing)
