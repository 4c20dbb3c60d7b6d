"""Geometric signals derived from keypoints.

All values are in analysis-raster pixels. The vertical axis grows downward,
so a larger ``y`` is visually lower.
"""

from __future__ import annotations

import math
from typing import Mapping, Optional

from depthjudge.vision.keypoints import Frame, Keypoint, resolve_side


def distance(a: Keypoint, b: Keypoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def torso_length(keypoints: Mapping[str, Keypoint]) -> float:
    """Shoulder-hip distance on the first side that has both joints, else ``nan``."""
    resolved = resolve_side(keypoints, ("shoulder", "hip"))
    if resolved is None:
        return math.nan
    _, (shoulder, hip) = resolved
    return distance(shoulder, hip)


def hip_height(frame: Frame) -> Optional[float]:
    """Hip ``y`` from the left hip, falling back to the right; ``None`` without hips."""
    resolved = resolve_side(frame.keypoints, ("hip",))
    if resolved is None:
        return None
    _, (hip,) = resolved
    return hip.y
