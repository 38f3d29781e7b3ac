"""Continuous position reconstruction between recorded waypoints."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .timeline import AgentTimeline, Vector3


def bracket_index(frames: np.ndarray, query_frame: int) -> Optional[int]:
    """Index ``k`` of the first frame strictly greater than ``query_frame``.

    Returns ``None`` when the query lies before the first waypoint
    (``k == 0``) or at/after the last one (no such frame).
    """
    k = int(np.searchsorted(frames, query_frame, side="right"))
    if k == 0 or k >= len(frames):
        return None
    return k


def position_at(
    timeline: AgentTimeline,
    time_seconds: float,
    frame_rate: float,
    scale: float = 1.0,
) -> Optional[Vector3]:
    """Linearly interpolated, scaled position of one drone at ``time_seconds``.

    Args:
        timeline: waypoints of the drone.
        time_seconds: query time.
        frame_rate: samples per second of the dataset.
        scale: factor applied to every output component.

    Returns:
        The position, or ``None`` when the drone has no bracketing pair of
        waypoints at that time. That is an expected skip, not an error.
    """
    exact_frame = time_seconds * frame_rate
    if not math.isfinite(exact_frame):
        return None
    k = bracket_index(timeline.frames, math.floor(exact_frame))
    if k is None:
        return None

    f0 = timeline.frames[k - 1]
    f1 = timeline.frames[k]
    t = (exact_frame - f0) / (f1 - f0)
    p0 = timeline.coords[k - 1]
    p1 = timeline.coords[k]
    x, y, z = (p0 + (p1 - p0) * t) * scale
    return Vector3(float(x), float(y), float(z))
