"""Per-panel sampling plans.

A plan is computed once per panel and canvas size. Every tick it turns
the full canvas frame into the panel's RGB buffer with two numpy fancy
indexing operations instead of a Python loop over pixels.
"""

from functools import lru_cache

import numpy as np

from ledfleet.models import PanelConfig

from .mapper import CoordinateMapper


class PanelSamplingPlan:
    """
    Precomputed canvas-to-LED lookup for one panel.

    Attributes:
        led_indices: LED index driven by each panel pixel (row-major pixel order)
        sample_x: Canvas column sampled for each panel pixel
        sample_y: Canvas row sampled for each panel pixel
    """

    def __init__(self, panel: PanelConfig, canvas_size: tuple[int, int]):
        """
        Build the plan.

        Args:
            panel: The panel to plan for
            canvas_size: (width, height) of the canvas frames to sample

        Raises:
            ValueError: If the wiring maps two pixels to the same LED
        """
        self.panel = panel
        self.canvas_size = canvas_size
        canvas_w, canvas_h = canvas_size
        mapper = CoordinateMapper(panel)
        w, h = panel.width, panel.height

        local_y, local_x = np.divmod(np.arange(w * h, dtype=np.intp), w)
        self.led_indices = np.fromiter(
            (mapper.index_for_local(x, y) for y in range(h) for x in range(w)),
            dtype=np.intp,
            count=w * h,
        )
        if len(np.unique(self.led_indices)) != w * h:
            raise ValueError(f"Wiring of panel {panel.id} maps several pixels to one LED")

        origin_x, origin_y = panel.origin
        # Offsets move the sample point; clamping keeps it on the canvas
        self.sample_x = np.clip(origin_x + local_x + panel.pixel_offset.x, 0, canvas_w - 1)
        self.sample_y = np.clip(origin_y + local_y + panel.pixel_offset.y, 0, canvas_h - 1)

    @property
    def led_count(self) -> int:
        return self.panel.led_count

    def render(self, frame: np.ndarray) -> bytes:
        """
        Build the panel's RGB buffer from a canvas frame.

        Args:
            frame: uint8 array of shape (canvas_height, canvas_width, 3)

        Returns:
            3 * led_count bytes, R G B per LED in LED index order
        """
        rgb = np.empty((self.led_count, 3), dtype=np.uint8)
        rgb[self.led_indices] = frame[self.sample_y, self.sample_x]
        return rgb.tobytes()


@lru_cache(maxsize=256)
def plan_for(panel: PanelConfig, canvas_size: tuple[int, int]) -> PanelSamplingPlan:
    """Get the cached sampling plan for a panel on a canvas."""
    return PanelSamplingPlan(panel, canvas_size)
