"""Fleet orchestration: connecting panels and fanning frames out."""

from .orchestrator import (
    BroadcastReport,
    ConnectResult,
    FleetOrchestrator,
    FleetStatus,
    PanelFailure,
)
from .registry import LinkRegistry
from .retry import AutoRetry

__all__ = [
    "AutoRetry",
    "BroadcastReport",
    "ConnectResult",
    "FleetOrchestrator",
    "FleetStatus",
    "LinkRegistry",
    "PanelFailure",
]
