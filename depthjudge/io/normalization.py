"""Mapping pose output into the shared analysis raster.

Depth thresholds are expressed in pixels of a fixed-width raster (see
:class:`depthjudge.config.SamplingConfig`). Every keypoint must be mapped into
that raster exactly once before it reaches the engine; a second rescale would
shrink or stretch torsos and invalidate the pixel floor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from depthjudge.config import VideoSpec
from depthjudge.vision.keypoints import Keypoint

SUPPORTED_ROTATIONS = {0, 90, 180, 270}


def _assert_supported_rotation(rotation: int) -> None:
    if rotation not in SUPPORTED_ROTATIONS:
        raise ValueError(f"Unsupported rotation: {rotation}. Expected one of {SUPPORTED_ROTATIONS}.")


@dataclass(frozen=True)
class AnalysisSpace:
    """Upright raster of ``width`` x ``height`` pixels used for analysis.

    ``scale`` converts upright source pixels into analysis pixels. Decoders
    that already deliver frames at the analysis size hand the estimator an
    image whose pixels need no further scaling.
    """

    width: int
    height: int
    scale: float

    @classmethod
    def from_video_spec(cls, spec: VideoSpec, target_width: int) -> "AnalysisSpace":
        _assert_supported_rotation(spec.rotation)
        src_w, src_h = spec.effective_size
        if src_w <= 0 or src_h <= 0:
            return cls(width=target_width, height=round(target_width * 9 / 16), scale=1.0)
        scale = target_width / src_w
        # Even height keeps yuv-friendly dimensions for ffmpeg's scaler.
        height = max(2, int(round(src_h * scale / 2)) * 2)
        return cls(width=target_width, height=height, scale=scale)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def from_normalized(self, nx: float, ny: float, score: Optional[float] = None) -> Keypoint:
        """Map a point given as fractions of the analysis raster into pixels."""
        return Keypoint(x=nx * self.width, y=ny * self.height, score=score)
