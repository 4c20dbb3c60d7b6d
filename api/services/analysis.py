"""
Service helpers bridging the HTTP layer and the depth pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from fastapi import HTTPException, UploadFile

from api.schemas import AnalyzeFramesRequest, AnalyzeResponse, FindingOut
from api.services.storage import cleanup_job_dir, persist_upload
from depthjudge.analysis.depth import analyze_squat_depth
from depthjudge.config import DepthConfig, SamplingConfig, default_cache_dir
from depthjudge.io.ingest import FFmpegError, FFprobeError
from depthjudge.pipeline import AnalysisReport, analyze_video
from depthjudge.vision.estimator import PoseEstimator

logger = logging.getLogger(__name__)

EstimatorFactory = Callable[[], PoseEstimator]


def _depth_config(min_confidence: float | None) -> DepthConfig:
    if min_confidence is None:
        return DepthConfig()
    return DepthConfig(min_confidence=min_confidence)


def analyze_frames(payload: AnalyzeFramesRequest) -> AnalyzeResponse:
    frames = [frame.to_frame() for frame in payload.frames]
    findings = analyze_squat_depth(frames, _depth_config(payload.min_confidence))
    return AnalyzeResponse(
        findings=[FindingOut.from_finding(f) for f in findings],
        frame_count=len(frames),
    )


def _run_pipeline(video: Path, make_estimator: EstimatorFactory, sampling: SamplingConfig) -> AnalysisReport:
    with make_estimator() as estimator:
        return analyze_video(video, estimator, sampling=sampling, cache_dir=default_cache_dir())


async def analyze_upload(
    upload: UploadFile, make_estimator: EstimatorFactory, sampling: SamplingConfig
) -> AnalyzeResponse:
    """
    Persist the upload, run the pipeline in a worker thread, and always clean up.
    """
    try:
        job_dir, video = await persist_upload(upload)
    except OSError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to persist upload: {exc}") from exc

    try:
        report = await asyncio.to_thread(_run_pipeline, video, make_estimator, sampling)
    except FFprobeError as exc:
        raise HTTPException(status_code=400, detail=f"Unreadable video: {exc}") from exc
    except (FFmpegError, ImportError) as exc:
        logger.exception("Depth pipeline failed for %s", upload.filename)
        raise HTTPException(status_code=500, detail=f"Analysis failed: {exc}") from exc
    finally:
        cleanup_job_dir(job_dir)

    return AnalyzeResponse(
        findings=[FindingOut.from_finding(f) for f in report.findings],
        frame_count=len(report.frames),
        sample_count=report.sample_count,
    )
