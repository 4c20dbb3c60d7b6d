"""Video ingest helpers for the frame producer.

This module wraps ffprobe for metadata, builds the sampling schedule, and
grabs single frames at a timestamp via ffmpeg, already scaled to the
analysis raster."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

import numpy as np

from depthjudge.config import SamplingConfig, VideoSpec
from depthjudge.io.normalization import AnalysisSpace

logger = logging.getLogger(__name__)

FFPROBE_CMD = (
    "ffprobe",
    "-v",
    "error",
    "-print_format",
    "json",
    "-show_streams",
    "-show_format",
)

# Tolerance when deciding whether the last sample still falls inside the window.
_SCHEDULE_EPSILON = 1e-9


class FFprobeError(RuntimeError):
    """Raised when ffprobe is unavailable or returns invalid data."""


class FFmpegError(RuntimeError):
    """Raised when ffmpeg is unavailable or fails to decode a frame."""


def _parse_rational(value: str) -> float:
    """Convert ffprobe rational strings (e.g., `30000/1001`) to float."""
    if not value or value == "0/0":
        return 0.0
    if "/" in value:
        num, denom = value.split("/", 1)
        denom_value = float(denom)
        if denom_value == 0:
            return 0.0
        return float(num) / denom_value
    return float(value)


def _rotation_from_stream(stream: Dict) -> int:
    tags = stream.get("tags") or {}
    if "rotate" in tags:
        try:
            return int(tags["rotate"]) % 360
        except ValueError:
            pass
    for side_data in stream.get("side_data_list", []):
        if side_data.get("rotation") is not None:
            try:
                return int(side_data["rotation"]) % 360
            except (TypeError, ValueError):
                continue
    return 0


def _fps_from_stream(stream: Dict) -> float:
    for key in ("avg_frame_rate", "r_frame_rate"):
        rate = stream.get(key)
        if rate:
            fps = _parse_rational(rate)
            if fps > 0:
                return fps
    return 0.0


def _duration_from(stream: Dict, format_section: Dict) -> float:
    """Prefer the container duration; fall back to the video stream's own."""
    for source in (format_section, stream):
        try:
            duration = float(source.get("duration"))
        except (TypeError, ValueError):
            continue
        if duration > 0:
            return duration
    return 0.0


def _select_video_stream(streams: Iterable[Dict]) -> Dict:
    for stream in streams:
        if stream.get("codec_type") == "video":
            return stream
    raise FFprobeError("ffprobe output did not contain a video stream")


def probe_video(video_path: str | Path) -> VideoSpec:
    """Probe a video with ffprobe to build a :class:`VideoSpec` instance.

    Raises:
        FFprobeError: if ffprobe is not available or returns invalid data.
    """

    path = Path(video_path)
    if not path.exists():
        raise FFprobeError(f"Video does not exist: {video_path}")

    try:
        output = subprocess.check_output(
            [*FFPROBE_CMD, str(path)],
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError as exc:
        raise FFprobeError("ffprobe is not installed or not on PATH") from exc
    except subprocess.CalledProcessError as exc:
        raise FFprobeError(f"ffprobe failed: {exc.output}") from exc

    try:
        probe_data = json.loads(output)
    except json.JSONDecodeError as exc:
        raise FFprobeError(f"Invalid ffprobe JSON: {exc}") from exc

    video_stream = _select_video_stream(probe_data.get("streams") or [])
    try:
        width = int(video_stream["width"])
        height = int(video_stream["height"])
    except KeyError as exc:
        raise FFprobeError(f"ffprobe missing width/height: {exc}") from exc

    spec = VideoSpec(
        path=path,
        width=width,
        height=height,
        rotation=_rotation_from_stream(video_stream),
        fps=_fps_from_stream(video_stream),
        duration=_duration_from(video_stream, probe_data.get("format") or {}),
    )
    logger.debug("Probed %s: %s", path, spec)
    return spec


def sampling_window(spec: VideoSpec, sampling: SamplingConfig) -> float:
    """Seconds of source time the producer will cover."""
    return max(0.0, min(spec.duration, sampling.max_duration))


def iter_sample_timestamps(spec: VideoSpec, sampling: SamplingConfig) -> Iterator[float]:
    """Yield sample times ``0, step, 2*step, ...`` up to and including the window end.

    Times are computed from the sample index so long clips do not accumulate
    floating-point drift.
    """

    window = sampling_window(spec, sampling)
    index = 0
    while True:
        t = index * sampling.step
        if t > window + _SCHEDULE_EPSILON:
            return
        yield t
        index += 1


def _fmt_seek(seconds: float) -> str:
    s = f"{seconds:.6f}".rstrip("0").rstrip(".")
    return s if s else "0"


def _ffmpeg_grab_cmd(video_path: Path, timestamp: float, width: int, height: int) -> list[str]:
    """Build an ffmpeg command that writes one raw RGB frame at ``timestamp`` to stdout."""
    return [
        "ffmpeg",
        "-v",
        "error",
        "-ss",
        _fmt_seek(timestamp),
        "-i",
        str(video_path),
        "-frames:v",
        "1",
        "-vf",
        f"scale={width}:{height}",
        "-f",
        "rawvideo",
        "-pix_fmt",
        "rgb24",
        "-an",
        "-sn",
        "-",
    ]


def grab_frame(spec: VideoSpec, timestamp: float, space: AnalysisSpace) -> Optional[np.ndarray]:
    """Seek to ``timestamp`` and decode one upright RGB frame at analysis size.

    Decoding is best-effort: a seek past the last decodable frame returns
    ``None`` rather than raising.

    Raises:
        FFmpegError: if ffmpeg is missing or exits with an error.
    """

    cmd = _ffmpeg_grab_cmd(spec.path, timestamp, space.width, space.height)
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False)
    except FileNotFoundError as exc:
        raise FFmpegError("ffmpeg is not installed or not on PATH") from exc
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise FFmpegError(f"ffmpeg failed at t={timestamp:.3f}s: {stderr}")

    frame_size = space.width * space.height * 3
    if len(proc.stdout) < frame_size:
        logger.debug("No frame decoded at t=%.3fs (%d bytes)", timestamp, len(proc.stdout))
        return None
    return np.frombuffer(proc.stdout[:frame_size], dtype=np.uint8).reshape(
        (space.height, space.width, 3)
    )


def iter_sampled_frames(
    spec: VideoSpec, sampling: SamplingConfig, space: Optional[AnalysisSpace] = None
) -> Iterator[Tuple[float, Optional[np.ndarray]]]:
    """Yield ``(timestamp, frame)`` for each scheduled sample, one seek at a time."""

    space = space or AnalysisSpace.from_video_spec(spec, sampling.target_width)
    for t in iter_sample_timestamps(spec, sampling):
        yield t, grab_frame(spec, t, space)
