from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BoundingBox:
    """Monitor-relative rectangle for a capture region."""
    top: int = 0
    left: int = 0
    width: int = 0
    height: int = 0

    def as_mss_region(self, monitor_offset_x: int = 0, monitor_offset_y: int = 0) -> dict:
        """Convert to mss-compatible region dict."""
        return {
            "top": self.top + monitor_offset_y,
            "left": self.left + monitor_offset_x,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BoundingBox":
        return cls(
            top=int(data.get("top", 0)),
            left=int(data.get("left", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )

    def to_dict(self) -> dict:
        return {"top": self.top, "left": self.left, "width": self.width, "height": self.height}

    def union(self, other: "BoundingBox") -> "BoundingBox":
        left = min(self.left, other.left)
        top = min(self.top, other.top)
        right = max(self.left + self.width, other.left + other.width)
        bottom = max(self.top + self.height, other.top + other.height)
        return BoundingBox(top=top, left=left, width=right - left, height=bottom - top)
