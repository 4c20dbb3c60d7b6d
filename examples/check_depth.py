"""Sanity check for the depth verdict on a synthetic side-on squat.

Builds one descent/ascent at 5 samples per second, moving the hip from
standing height to a chosen bottom, and prints the finding for a deep and a
shallow bottom.
"""

import sys
from pathlib import Path

# Allow running this script directly without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from depthjudge.analysis.depth import analyze_squat_depth  # noqa: E402
from depthjudge.analysis.findings import format_timestamp  # noqa: E402
from depthjudge.vision.keypoints import Frame, Keypoint  # noqa: E402


def synthetic_squat(bottom_hip_y: float, knee_y: float = 300.0) -> list:
    standing_hip_y = 200.0
    frames = []
    for i in range(11):
        t = i * 0.2
        depth = 1.0 - abs(i - 5) / 5  # 0 -> 1 -> 0
        hip_y = standing_hip_y + depth * (bottom_hip_y - standing_hip_y)
        frames.append(
            Frame(
                t=t,
                keypoints={
                    "left_shoulder": Keypoint(320, hip_y - 150, 0.92),
                    "left_hip": Keypoint(330, hip_y, 0.88),
                    "left_knee": Keypoint(380, knee_y, 0.9),
                },
            )
        )
    return frames


def run_examples() -> None:
    for label, bottom in (("deep", 320.0), ("shallow", 298.0)):
        for finding in analyze_squat_depth(synthetic_squat(bottom)):
            print(f"{label:8s} [{format_timestamp(finding.t)}] {finding.title}")
            print(f"         {finding.detail}")


if __name__ == "__main__":
    run_examples()
