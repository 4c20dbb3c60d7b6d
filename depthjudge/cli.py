"""Command-line interface for the squat depth check.

Usage:
- `depthjudge analyze squat.mp4` samples the clip, runs MediaPipe Pose and
  prints the verdict.
- `depthjudge frames frames.jsonl` judges an already collected frame file
  (the format written by the frame cache).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from depthjudge.analysis.depth import analyze_squat_depth
from depthjudge.analysis.findings import Finding, format_timestamp
from depthjudge.config import DepthConfig, PoseConfig, SamplingConfig, default_cache_dir
from depthjudge.io.ingest import FFmpegError, FFprobeError
from depthjudge.vision import cache


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="depthjudge",
        description="Judge whether a squat repetition reached competition depth from a side-on video.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Sample a video, estimate poses and judge depth")
    analyze.add_argument("video", help="Path to the squat video")
    analyze.add_argument("--fps", type=float, default=SamplingConfig.fps,
                         help="Sampling rate in samples per second (default: 5)")
    analyze.add_argument("--max-duration", type=float, default=SamplingConfig.max_duration,
                         help="Seconds of the clip to sample at most (default: 20)")
    analyze.add_argument("--width", type=int, default=SamplingConfig.target_width,
                         help="Width of the analysis raster in pixels (default: 640)")
    analyze.add_argument("--model-complexity", type=int, choices=[0, 1, 2], default=PoseConfig.model_complexity,
                         help="MediaPipe Pose model complexity (default: 1)")
    analyze.add_argument("--cache-dir", type=Path, default=default_cache_dir(),
                         help="Reuse/store sampled frames here (default: $DEPTHJUDGE_CACHE_DIR)")
    analyze.add_argument("--save-frames", type=Path, default=None,
                         help="Also write the collected frames to this JSONL file")

    frames = sub.add_parser("frames", help="Judge depth from a JSONL frame file")
    frames.add_argument("path", type=Path, help="JSONL file, one frame per line")

    for sp in (analyze, frames):
        sp.add_argument("--json", action="store_true", help="Print findings as JSON")
        sp.add_argument("--min-confidence", type=float, default=DepthConfig.min_confidence,
                        help="Per-joint score needed to judge a side (default: 0.4)")

    return p.parse_args(argv)


def print_findings(findings: List[Finding], *, as_json: bool, frame_count: int) -> None:
    if as_json:
        print(json.dumps([f.to_dict() for f in findings], ensure_ascii=False, indent=2))
        return
    if not findings:
        print(f"No verdict: only {frame_count} pose samples were collected.")
        return
    for f in findings:
        print(f"[{format_timestamp(f.t)}] {f.title}")
        print(f"    {f.detail}")


def _run_analyze(args: argparse.Namespace, depth: DepthConfig) -> int:
    from depthjudge.pipeline import analyze_video
    from depthjudge.vision.estimator import MediaPipePoseEstimator

    sampling = SamplingConfig(fps=args.fps, max_duration=args.max_duration, target_width=args.width)
    with MediaPipePoseEstimator(PoseConfig(model_complexity=args.model_complexity)) as estimator:
        report = analyze_video(
            args.video,
            estimator,
            sampling=sampling,
            depth=depth,
            cache_dir=args.cache_dir,
        )
    if args.save_frames is not None:
        cache.save_frames(args.save_frames, report.frames)
    print_findings(report.findings, as_json=args.json, frame_count=len(report.frames))
    if not args.json:
        print(f"Done. Pose samples: {len(report.frames)} ({sampling.fps:g}fps, <= {sampling.max_duration:g}s)")
    return 0


def _run_frames(args: argparse.Namespace, depth: DepthConfig) -> int:
    if not args.path.exists():
        raise FileNotFoundError(f"Frame file not found: {args.path}")
    frames = list(cache.load_frames(args.path))
    print_findings(analyze_squat_depth(frames, depth), as_json=args.json, frame_count=len(frames))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        depth = DepthConfig(min_confidence=args.min_confidence)
        if args.command == "analyze":
            return _run_analyze(args, depth)
        return _run_frames(args, depth)
    except (FFprobeError, FFmpegError, FileNotFoundError, ImportError, ValueError, KeyError) as ex:
        eprint(f"Error: {ex}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
