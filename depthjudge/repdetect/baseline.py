"""Bottom-position detection for a single squat repetition.

The whole clip is treated as one repetition: the bottom is the sampled frame
where the hip sits lowest on screen.
"""

from __future__ import annotations

from typing import Sequence

from depthjudge.signals.kinematics import hip_height
from depthjudge.vision.keypoints import Frame


def locate_bottom_frame(frames: Sequence[Frame]) -> Frame:
    """Return the frame with the largest hip ``y``.

    Frames without a hip are not candidates. Ties keep the earliest frame. If
    no frame has a hip the first frame is returned and the depth evaluator
    reports why it cannot judge it.
    """

    if not frames:
        raise ValueError("cannot locate a bottom frame in an empty sequence")

    bottom = frames[0]
    lowest = hip_height(bottom)
    for frame in frames[1:]:
        y = hip_height(frame)
        if y is None:
            continue
        if lowest is None or y > lowest:
            bottom, lowest = frame, y
    return bottom
