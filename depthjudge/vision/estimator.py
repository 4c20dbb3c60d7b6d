"""Pose estimator adapters.

The depth engine treats pose estimation as a black box: given an RGB image,
return at most one set of named joints or nothing if no subject was found.
Coordinates are reported in pixels of the image handed in; mapping into the
shared analysis raster happens in :mod:`depthjudge.io.normalization`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from depthjudge.config import PoseConfig
from depthjudge.io.normalization import AnalysisSpace
from depthjudge.vision.keypoints import Joint, Keypoint

# MediaPipe Pose landmark indices for the joints the engine reads, plus the
# limb joints useful for drawing a skeleton.
MEDIAPIPE_LANDMARKS: Dict[str, int] = {
    "nose": 0,
    Joint.LEFT_SHOULDER.value: 11,
    Joint.RIGHT_SHOULDER.value: 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    Joint.LEFT_HIP.value: 23,
    Joint.RIGHT_HIP.value: 24,
    Joint.LEFT_KNEE.value: 25,
    Joint.RIGHT_KNEE.value: 26,
    "left_ankle": 27,
    "right_ankle": 28,
}


class PoseEstimator(ABC):
    """Model adapter interface.

    Implementations take an RGB image (H, W, 3 uint8) and return named
    keypoints in that image's pixel space, or ``None`` when nobody is visible.
    """

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def estimate(self, rgb: Any) -> Optional[Dict[str, Keypoint]]: ...

    def close(self) -> None:
        return None

    def __enter__(self) -> "PoseEstimator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _require_mediapipe():
    """Import mediapipe lazily; it is an optional extra."""
    try:
        import mediapipe as mp  # type: ignore
    except ImportError as exc:  # pragma: no cover - environment dependent
        raise ImportError(
            "mediapipe is required for MediaPipePoseEstimator. "
            "Install the 'pose' extra or supply another PoseEstimator."
        ) from exc
    return mp


class MediaPipePoseEstimator(PoseEstimator):
    """Single-person MediaPipe Pose in static image mode."""

    def __init__(self, config: PoseConfig = PoseConfig()) -> None:
        mp = _require_mediapipe()
        self.config = config
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=True,
            model_complexity=config.model_complexity,
            enable_segmentation=False,
            min_detection_confidence=config.min_detection_confidence,
        )

    def name(self) -> str:
        return f"mediapipe-{self.config.cache_key()}"

    def estimate(self, rgb: Any) -> Optional[Dict[str, Keypoint]]:
        results = self._pose.process(rgb)
        if results.pose_landmarks is None:
            return None
        height, width = rgb.shape[:2]
        space = AnalysisSpace(width=width, height=height, scale=1.0)
        landmarks = results.pose_landmarks.landmark
        return {
            name: space.from_normalized(landmarks[idx].x, landmarks[idx].y, landmarks[idx].visibility)
            for name, idx in MEDIAPIPE_LANDMARKS.items()
        }

    def close(self) -> None:
        self._pose.close()
