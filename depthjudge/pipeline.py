"""End-to-end run: sample a clip, estimate poses, judge depth.

Sampling is strictly sequential. Each sample seeks, decodes and runs the
estimator to completion before the next seek starts, and only the first
``SamplingConfig.max_duration`` seconds of the clip are visited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from depthjudge.analysis.depth import analyze_squat_depth
from depthjudge.analysis.findings import Finding
from depthjudge.config import DepthConfig, SamplingConfig, VideoSpec
from depthjudge.io import ingest
from depthjudge.io.normalization import AnalysisSpace
from depthjudge.vision import cache
from depthjudge.vision.estimator import PoseEstimator
from depthjudge.vision.keypoints import Frame

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class AnalysisReport:
    """Outcome of one analysis run.

    Attributes:
        findings: Engine output (empty when too few frames were collected).
        frames: Frames that carried a detected subject.
        sample_count: Number of timestamps visited, detected or not (the
            frame count when loaded from cache).
        cached: Whether the frames were loaded from the frame cache.
    """

    findings: List[Finding]
    frames: List[Frame] = field(default_factory=list)
    sample_count: int = 0
    cached: bool = False


def collect_frames(
    spec: VideoSpec,
    estimator: PoseEstimator,
    sampling: SamplingConfig = SamplingConfig(),
    *,
    on_progress: Optional[ProgressCallback] = None,
    frame_source: Optional[Callable[[float, AnalysisSpace], object]] = None,
) -> tuple[List[Frame], int]:
    """Sample the clip and return ``(frames, samples_visited)``.

    ``frame_source`` replaces the ffmpeg grab (``(t, space) -> rgb or None``);
    it exists so tests and alternative decoders can feed images directly.
    """

    space = AnalysisSpace.from_video_spec(spec, sampling.target_width)
    logger.debug("Analysis raster %dx%d (source scale %.3f)", space.width, space.height, space.scale)
    window = ingest.sampling_window(spec, sampling)
    if frame_source is None:
        samples = ingest.iter_sampled_frames(spec, sampling, space)
    else:
        samples = ((t, frame_source(t, space)) for t in ingest.iter_sample_timestamps(spec, sampling))

    frames: List[Frame] = []
    visited = 0
    for t, rgb in samples:
        visited += 1
        if rgb is not None:
            keypoints = estimator.estimate(rgb)
            if keypoints:
                frames.append(Frame(t=t, keypoints=keypoints))
            else:
                logger.debug("No subject detected at t=%.2fs", t)
        if on_progress is not None:
            on_progress(min(1.0, t / window) if window > 0 else 1.0)

    logger.info(
        "Collected %d/%d pose samples from %s (%.4gfps, <=%.4gs)",
        len(frames),
        visited,
        spec.path,
        sampling.fps,
        sampling.max_duration,
    )
    return frames, visited


def analyze_video(
    video_path: str | Path,
    estimator: PoseEstimator,
    *,
    sampling: SamplingConfig = SamplingConfig(),
    depth: DepthConfig = DepthConfig(),
    cache_dir: Optional[Path] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> AnalysisReport:
    """Probe, sample and judge ``video_path``.

    When ``cache_dir`` is given, collected frames are stored there and reused
    on the next run with the same video, sampling config and estimator.
    """

    path = Path(video_path)
    cache_file = None
    if cache_dir is not None:
        cache_file = cache.cache_path(cache_dir, path, sampling, estimator.name())
        if cache_file.exists():
            frames = list(cache.load_frames(cache_file))
            logger.info("Loaded %d frames from cache %s", len(frames), cache_file)
            return AnalysisReport(
                findings=analyze_squat_depth(frames, depth),
                frames=frames,
                sample_count=len(frames),
                cached=True,
            )

    spec = ingest.probe_video(path)
    frames, visited = collect_frames(spec, estimator, sampling, on_progress=on_progress)
    if cache_file is not None:
        cache.save_frames(cache_file, frames)

    return AnalysisReport(findings=analyze_squat_depth(frames, depth), frames=frames, sample_count=visited)
