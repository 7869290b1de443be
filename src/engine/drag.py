from __future__ import annotations

from typing import Optional

from src.models.reminder import Position


def track_position(stored: Position, live: Optional[Position]) -> Optional[Position]:
    """Return the live anchor when the icon was dragged away from the stored offset, else None."""
    if live is None:
        return None
    if live.same_offset(stored):
        return None
    return live
