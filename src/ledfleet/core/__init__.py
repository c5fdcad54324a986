"""Frame scheduling: the pipeline's render loop."""

from .frame import apply_brightness, sample_frame
from .scheduler import FrameScheduler, SchedulerState

__all__ = [
    "FrameScheduler",
    "SchedulerState",
    "apply_brightness",
    "sample_frame",
]
