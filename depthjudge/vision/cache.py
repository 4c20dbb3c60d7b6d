"""On-disk cache for collected pose frames.

Sampling a clip means one ffmpeg seek and one model call per sample, so the
collected frames are kept in a JSONL file keyed by (video hash, sampling
config, estimator name). One line per frame keeps the files easy to inspect
and to hand-edit when building test fixtures.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Iterable, Iterator

from depthjudge.config import SamplingConfig
from depthjudge.vision.keypoints import Frame, Keypoint


def video_sha256(path: Path, *, chunk_size: int = 1024 * 1024) -> str:
    """Compute a deterministic hash for the video to key caches."""

    sha = hashlib.sha256()
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            sha.update(chunk)
    return sha.hexdigest()


def cache_filename(video_hash: str, sampling: SamplingConfig, estimator_name: str) -> str:
    return f"{video_hash}_{sampling.cache_key()}_{estimator_name}.jsonl"


def cache_path(
    cache_dir: Path, video_path: Path, sampling: SamplingConfig, estimator_name: str
) -> Path:
    """Return the path for the cache file without creating it."""
    return cache_dir / cache_filename(video_sha256(video_path), sampling, estimator_name)


def frame_to_obj(frame: Frame) -> dict:
    return {
        "t": frame.t,
        "keypoints": {
            name: {"x": kp.x, "y": kp.y, "score": kp.score} for name, kp in frame.keypoints.items()
        },
    }


def _keypoint_from_obj(name: str, kp: Any) -> Keypoint:
    if not isinstance(kp, dict):
        raise ValueError(f"keypoint {name!r} must be a JSON object")
    score = kp.get("score")
    try:
        return Keypoint(
            x=float(kp["x"]),
            y=float(kp["y"]),
            score=float(score) if score is not None else None,
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"keypoint {name!r} has a non-numeric value: {exc}") from exc


def frame_from_obj(obj: Any) -> Frame:
    """Build a :class:`Frame` from one decoded JSONL line.

    Raises:
        ValueError: if the line is not a frame object or holds non-numeric values.
        KeyError: if ``t``, ``x`` or ``y`` is missing.
    """
    if not isinstance(obj, dict):
        raise ValueError("frame line must be a JSON object")
    raw_keypoints = obj.get("keypoints") or {}
    if not isinstance(raw_keypoints, dict):
        raise ValueError("frame keypoints must be a JSON object")
    keypoints = {name: _keypoint_from_obj(name, kp) for name, kp in raw_keypoints.items()}
    try:
        t = float(obj["t"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"frame time must be numeric: {exc}") from exc
    return Frame(t=t, keypoints=keypoints)


def save_frames(cache_file: Path, frames: Iterable[Frame], *, overwrite: bool = True) -> Path:
    """Write frames to a JSONL file.

    Raises:
        FileExistsError: if the file exists and ``overwrite`` is False.
    """

    cache_file.parent.mkdir(parents=True, exist_ok=True)
    if cache_file.exists() and not overwrite:
        raise FileExistsError(f"Cache already exists: {cache_file}")

    with cache_file.open("w", encoding="utf-8") as fh:
        for frame in frames:
            fh.write(json.dumps(frame_to_obj(frame), ensure_ascii=False))
            fh.write("\n")
    return cache_file


def load_frames(cache_file: Path) -> Iterator[Frame]:
    """Read frames from a JSONL file, skipping blank lines."""
    with cache_file.open("r", encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            yield frame_from_obj(json.loads(line))
