"""Screen capture using mss.

Grabs only the rectangle spanning the probe regions on the selected monitor,
never the full screen.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import mss
import numpy as np

from src.models import BoundingBox

logger = logging.getLogger(__name__)


class ScreenCapture:
    """Captures a screen region using mss."""

    def __init__(self, monitor_index: int = 1):
        self._sct: Optional[mss.mss] = None
        self._monitor_index = monitor_index

    @property
    def monitor_index(self) -> int:
        return self._monitor_index

    def start(self) -> None:
        """Initialize the mss capture context."""
        self._sct = mss.mss()
        monitors = self._sct.monitors
        logger.info("Available monitors: %s (indices 1..%s)", len(monitors) - 1, len(monitors) - 1)
        if self._monitor_index >= len(monitors):
            logger.warning("Monitor %s not found, falling back to monitor 1", self._monitor_index)
            self._monitor_index = 1

    def stop(self) -> None:
        """Release capture resources."""
        if self._sct:
            self._sct.close()
            self._sct = None

    @property
    def monitor_info(self) -> dict:
        """Get info about the selected monitor."""
        if not self._sct:
            raise RuntimeError("Capture not started. Call start() first.")
        return self._sct.monitors[self._monitor_index]

    def grab_region(self, bbox: BoundingBox) -> np.ndarray:
        """Capture a monitor-relative region as a BGR array of shape (height, width, 3)."""
        if not self._sct:
            raise RuntimeError("Capture not started. Call start() first.")

        monitor = self._sct.monitors[self._monitor_index]
        region = bbox.as_mss_region(
            monitor_offset_x=monitor["left"],
            monitor_offset_y=monitor["top"],
        )

        # mss returns BGRA, convert to BGR for OpenCV compatibility
        raw = self._sct.grab(region)
        frame = np.array(raw, dtype=np.uint8)
        return frame[:, :, :3]


def capture_plan(regions: Iterable[dict], monitor_width: int, monitor_height: int) -> Optional[BoundingBox]:
    """Smallest monitor-clamped box covering every usable region, or None if there is none."""
    bbox: Optional[BoundingBox] = None
    for raw in regions:
        if not isinstance(raw, dict) or not bool(raw.get("enabled", True)):
            continue
        box = BoundingBox.from_dict(raw)
        if box.width <= 1 or box.height <= 1:
            continue
        bbox = box if bbox is None else bbox.union(box)
    if bbox is None:
        return None
    left = max(0, min(bbox.left, monitor_width - 1))
    top = max(0, min(bbox.top, monitor_height - 1))
    right = max(left + 1, min(bbox.left + bbox.width, monitor_width))
    bottom = max(top + 1, min(bbox.top + bbox.height, monitor_height))
    return BoundingBox(top=top, left=left, width=right - left, height=bottom - top)
