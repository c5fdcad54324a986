"""ledfleet: drive a fleet of LED matrix panels from one virtual canvas."""

__version__ = "0.1.0"

from .core import FrameScheduler
from .models import AppConfig, LayoutConfig, PanelConfig
from .orchestration import FleetOrchestrator

__all__ = [
    "AppConfig",
    "FleetOrchestrator",
    "FrameScheduler",
    "LayoutConfig",
    "PanelConfig",
]
