"""depthjudge: squat depth verdicts from 2D pose samples.

The package samples a side-on squat video, estimates a pose per sample, and
judges at the bottom of the repetition whether the hip dropped below the knee
by a body-scaled margin.
"""

from depthjudge.analysis.depth import analyze_squat_depth
from depthjudge.analysis.findings import Finding
from depthjudge.vision.keypoints import Frame, Joint, Keypoint

__all__ = [
    "Finding",
    "Frame",
    "Joint",
    "Keypoint",
    "analyze_squat_depth",
]

__version__ = "0.1.0"
