"""Region probe — decides whether each calibrated screen region currently shows its "present" look.

Each region holds a grayscale template captured while the thing it watches
(warmask on the paperdoll, buff icon, combat indicator, cursor mode) was
visible. A region is present once its similarity to the template stays at or
above match_threshold for confirm_frames consecutive frames.
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class _RegionRuntime:
    candidate_frames: int = 0


def encode_gray_template(gray: np.ndarray) -> dict:
    """Encode a grayscale template for JSON."""
    return {
        "shape": [int(gray.shape[0]), int(gray.shape[1])],
        "data": base64.b64encode(gray.astype(np.uint8).tobytes()).decode(),
    }


def decode_gray_template(template_dict: object) -> Optional[np.ndarray]:
    """Decode a {shape, data} template; None when missing or malformed."""
    if not isinstance(template_dict, dict):
        return None
    shape = template_dict.get("shape")
    raw_b64 = template_dict.get("data")
    if (
        not isinstance(shape, list)
        or len(shape) != 2
        or not all(isinstance(v, int) and v > 0 for v in shape)
        or not isinstance(raw_b64, str)
        or not raw_b64.strip()
    ):
        return None
    try:
        arr = np.frombuffer(base64.b64decode(raw_b64), dtype=np.uint8)
        return arr.reshape((int(shape[0]), int(shape[1]))).copy()
    except Exception:
        return None


def template_similarity(gray_roi: np.ndarray, gray_template: Optional[np.ndarray]) -> float:
    """Similarity in [0, 1]: min of mean-absdiff score and normalized correlation."""
    if gray_template is None or gray_template.size == 0 or gray_roi.size == 0:
        return 0.0
    if gray_template.shape != gray_roi.shape:
        gray_template = cv2.resize(
            gray_template,
            (gray_roi.shape[1], gray_roi.shape[0]),
            interpolation=cv2.INTER_AREA,
        )
    diff = cv2.absdiff(gray_roi, gray_template)
    diff_score = max(0.0, 1.0 - (float(np.mean(diff)) / 255.0))

    # Flat regions have no correlation signal; fall back to the diff score alone.
    if float(np.std(gray_roi)) < 1e-6 or float(np.std(gray_template)) < 1e-6:
        return diff_score
    corr = cv2.matchTemplate(gray_roi, gray_template, cv2.TM_CCOEFF_NORMED)
    corr_raw = float(corr[0, 0]) if corr.size else -1.0
    corr_score = max(0.0, min(1.0, (corr_raw + 1.0) * 0.5))
    return min(diff_score, corr_score)


def crop_region(frame: np.ndarray, region: dict, origin: tuple[int, int]) -> Optional[np.ndarray]:
    """Crop a monitor-relative region out of a frame captured at origin. None if out of frame."""
    x1 = int(region.get("left", 0)) - int(origin[0])
    y1 = int(region.get("top", 0)) - int(origin[1])
    x2 = x1 + int(region.get("width", 0))
    y2 = y1 + int(region.get("height", 0))
    if x1 < 0 or y1 < 0 or x2 > frame.shape[1] or y2 > frame.shape[0]:
        return None
    return frame[y1:y2, x1:x2]


def to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


class RegionProbe:
    """Turns captured frames into per-region presence states."""

    def __init__(self, regions: list[dict]) -> None:
        self._regions: list[dict] = []
        self._runtime: dict[str, _RegionRuntime] = {}
        self._template_cache: dict[str, np.ndarray] = {}
        self._states: dict[str, dict] = {}
        self.update_regions(regions)

    def update_regions(self, regions: list[dict]) -> None:
        self._regions = [dict(r) for r in (regions or []) if isinstance(r, dict)]
        known = {str(r.get("id", "") or "").strip().lower() for r in self._regions}
        self._runtime = {k: v for k, v in self._runtime.items() if k in known}
        self._template_cache.clear()

    def _template_for(self, region: dict) -> Optional[np.ndarray]:
        calibration = region.get("calibration")
        if not isinstance(calibration, dict):
            return None
        raw = calibration.get("present_template")
        if not isinstance(raw, dict):
            return None
        key = f"{raw.get('shape')}:{raw.get('data')}"
        cached = self._template_cache.get(key)
        if cached is not None:
            return cached
        arr = decode_gray_template(raw)
        if arr is not None:
            self._template_cache[key] = arr
        return arr

    def analyze_frame(self, frame: np.ndarray, origin: tuple[int, int] = (0, 0)) -> dict[str, dict]:
        """Update and return region states for one frame captured with its top-left at origin."""
        states: dict[str, dict] = {}
        for region in self._regions:
            region_id = str(region.get("id", "") or "").strip().lower()
            if not region_id:
                continue
            runtime = self._runtime.setdefault(region_id, _RegionRuntime())
            enabled = bool(region.get("enabled", True))
            width = int(region.get("width", 0))
            height = int(region.get("height", 0))
            threshold = max(0.0, min(1.0, float(region.get("match_threshold", 0.88))))
            confirm_frames = max(1, int(region.get("confirm_frames", 2)))
            template = self._template_for(region)

            status = "ok"
            similarity = 0.0
            if not enabled:
                status = "off"
            elif width <= 1 or height <= 1:
                status = "invalid-roi"
            elif template is None:
                status = "uncalibrated"
            else:
                crop = crop_region(frame, region, origin)
                if crop is None:
                    status = "out-of-frame"
                else:
                    similarity = template_similarity(to_gray(crop), template)
            if status == "ok" and similarity >= threshold:
                runtime.candidate_frames += 1
            else:
                runtime.candidate_frames = 0

            states[region_id] = {
                "id": region_id,
                "name": str(region.get("name", "") or "").strip() or region_id,
                "status": status,
                "similarity": float(similarity),
                "candidate_frames": int(runtime.candidate_frames),
                "confirm_frames": confirm_frames,
                "present": runtime.candidate_frames >= confirm_frames,
            }
        self._states = states
        return {k: dict(v) for k, v in states.items()}

    def region_states(self) -> dict[str, dict]:
        return {k: dict(v) for k, v in self._states.items()}
