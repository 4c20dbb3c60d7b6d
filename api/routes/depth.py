from __future__ import annotations

from fastapi import APIRouter, Depends, File, Query, UploadFile

from api.schemas import AnalyzeFramesRequest, AnalyzeResponse
from api.services.analysis import EstimatorFactory, analyze_frames, analyze_upload
from depthjudge.config import SamplingConfig
from depthjudge.vision.estimator import MediaPipePoseEstimator

router = APIRouter(prefix="/depth", tags=["depth"])


def get_estimator_factory() -> EstimatorFactory:
    return MediaPipePoseEstimator


@router.post("/frames", response_model=AnalyzeResponse)
def judge_frames(payload: AnalyzeFramesRequest) -> AnalyzeResponse:
    """
    Judge depth from pose samples that were collected elsewhere (e.g. in the browser).
    """
    return analyze_frames(payload)


@router.post("/video", response_model=AnalyzeResponse)
async def judge_video(
    file: UploadFile = File(..., description="Side-on squat video."),
    fps: float = Query(SamplingConfig.fps, gt=0, le=30, description="Sampling rate (samples per second)."),
    max_duration: float = Query(SamplingConfig.max_duration, gt=0, le=60, description="Seconds sampled at most."),
    make_estimator: EstimatorFactory = Depends(get_estimator_factory),
) -> AnalyzeResponse:
    """
    Upload a video; it is sampled, pose-estimated and judged server-side.
    """
    sampling = SamplingConfig(fps=fps, max_duration=max_duration)
    return await analyze_upload(file, make_estimator, sampling)
