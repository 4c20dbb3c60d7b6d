"""Shared configuration and data models used across the analysis pipeline."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class VideoSpec:
    """Basic video metadata used by ingest and the frame sampler.

    Attributes:
        path: Filesystem path to the source video.
        width: Pixel width as reported by ffprobe (pre-rotation).
        height: Pixel height as reported by ffprobe (pre-rotation).
        rotation: Clockwise rotation in degrees derived from metadata; expected
            to be in {0, 90, 180, 270}.
        fps: Frames per second (float) derived from avg/r_frame_rate.
        duration: Video duration in seconds.
    """

    path: Path
    width: int
    height: int
    rotation: int
    fps: float
    duration: float

    @property
    def effective_size(self) -> tuple[int, int]:
        """Return (width, height) after applying rotation orientation."""
        if self.rotation in {90, 270}:
            return (self.height, self.width)
        return (self.width, self.height)


@dataclass(frozen=True)
class SamplingConfig:
    """How the frame producer samples a clip.

    Attributes:
        fps: Nominal sampling rate in samples per second.
        max_duration: Cap (seconds of source time) on how much of the clip is
            sampled, regardless of its real length.
        target_width: Width of the shared analysis raster. Pixel thresholds in
            :class:`DepthConfig` assume this scale.
    """

    fps: float = 5.0
    max_duration: float = 20.0
    target_width: int = 640

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError("fps must be positive")
        if self.max_duration < 0:
            raise ValueError("max_duration must be non-negative")
        if self.target_width <= 0:
            raise ValueError("target_width must be positive")

    @property
    def step(self) -> float:
        return 1.0 / self.fps

    def cache_key(self) -> str:
        """Return a short string usable in cache file naming."""
        return f"fps{self.fps:g}-max{self.max_duration:g}-w{self.target_width}"


@dataclass(frozen=True)
class DepthConfig:
    """Thresholds for the squat depth verdict.

    Attributes:
        min_frames: Fewer collected frames than this produce no findings.
        min_torso_px: Smallest usable shoulder-hip distance in the analysis
            raster. Shorter torsos are treated as degenerate geometry.
        margin_ratio: Fraction of the torso length the hip must sit below the
            knee to count as deep.
        min_confidence: Per-joint score required for a side to be judged.
    """

    min_frames: int = 5
    min_torso_px: float = 10.0
    margin_ratio: float = 0.03
    min_confidence: float = 0.4

    def __post_init__(self) -> None:
        if self.min_frames < 1:
            raise ValueError("min_frames must be at least 1")
        if self.margin_ratio < 0:
            raise ValueError("margin_ratio must be non-negative")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError("min_confidence must be within [0, 1]")


@dataclass(frozen=True)
class PoseConfig:
    """Configuration for MediaPipe Pose extraction.

    Kept centralized so the values can be folded into cache keys. Every sample
    is an independent seek, so the estimator runs in static image mode.
    """

    model_complexity: int = 1
    min_detection_confidence: float = 0.5

    def cache_key(self) -> str:
        """Return a short string usable in cache file naming."""
        return f"mc{self.model_complexity}-det{self.min_detection_confidence:.2f}"


def default_cache_dir() -> Optional[Path]:
    """Frame cache directory from ``DEPTHJUDGE_CACHE_DIR``; ``None`` disables caching."""
    value = os.getenv("DEPTHJUDGE_CACHE_DIR")
    return Path(value) if value else None
