"""Canvas to panel mapping."""

from .mapper import CoordinateMapper, local_index
from .sampler import PanelSamplingPlan, plan_for

__all__ = ["CoordinateMapper", "PanelSamplingPlan", "local_index", "plan_for"]
