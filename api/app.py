from __future__ import annotations

from fastapi import FastAPI

import depthjudge
from api.routes import depth as depth_routes
from api.schemas import ServiceInfo
from depthjudge.config import DepthConfig, SamplingConfig

SERVICE_NAME = "depthjudge"


def service_info(
    sampling: SamplingConfig = SamplingConfig(), depth: DepthConfig = DepthConfig()
) -> ServiceInfo:
    return ServiceInfo(
        name=SERVICE_NAME,
        version=depthjudge.__version__,
        target_width=sampling.target_width,
        sampling_fps=sampling.fps,
        max_duration=sampling.max_duration,
        min_frames=depth.min_frames,
        min_confidence=depth.min_confidence,
    )


def create_app() -> FastAPI:
    """Build the depth API; frame and video routes live under ``/depth``."""
    app = FastAPI(
        title="Squat Depth API",
        description="Judge squat depth from pose samples or a side-on video upload.",
        version=depthjudge.__version__,
    )
    app.include_router(depth_routes.router)

    @app.get("/health", response_model=ServiceInfo, tags=["meta"])
    def health() -> ServiceInfo:
        return service_info()

    return app


app = create_app()
