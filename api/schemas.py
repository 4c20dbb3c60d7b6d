import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from depthjudge.analysis.findings import Finding
from depthjudge.vision.keypoints import Frame, Keypoint


class KeypointIn(BaseModel):
    x: float
    y: float
    score: Optional[float] = Field(None, description="Confidence in [0, 1]; omitted means fully trusted.")

    @field_validator("x", "y")
    @classmethod
    def finite_coordinates(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("coordinates must be finite numbers")
        return v

    @field_validator("score")
    @classmethod
    def score_in_range(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0.0 <= v <= 1.0:
            raise ValueError("score must be within [0, 1]")
        return v


class FrameIn(BaseModel):
    t: float = Field(..., ge=0, description="Seconds from clip start.")
    keypoints: Dict[str, KeypointIn] = Field(
        default_factory=dict,
        description="Joints keyed by name (e.g. left_hip); coordinates in the shared analysis raster.",
    )

    def to_frame(self) -> Frame:
        return Frame(
            t=self.t,
            keypoints={name: Keypoint(x=kp.x, y=kp.y, score=kp.score) for name, kp in self.keypoints.items()},
        )


class AnalyzeFramesRequest(BaseModel):
    """
    Pose samples for one clip, in time order.
    """
    frames: List[FrameIn] = Field(default_factory=list)
    min_confidence: Optional[float] = Field(None, ge=0, le=1, description="Override the per-joint score gate.")

    @field_validator("frames")
    @classmethod
    def frames_time_ordered(cls, v: List[FrameIn]) -> List[FrameIn]:
        if any(b.t < a.t for a, b in zip(v, v[1:])):
            raise ValueError("frame timestamps must be non-decreasing")
        return v


class FindingOut(BaseModel):
    t: float
    title: str
    detail: str
    code: str

    @classmethod
    def from_finding(cls, finding: Finding) -> "FindingOut":
        return cls(**finding.to_dict())


class AnalyzeResponse(BaseModel):
    findings: List[FindingOut]
    frame_count: int = Field(..., description="Frames that carried a detected subject.")
    sample_count: Optional[int] = Field(None, description="Timestamps visited when sampling a video.")


class ServiceInfo(BaseModel):
    """
    Liveness payload with the defaults a client needs to collect compatible frames.
    """
    name: str
    version: str
    target_width: int = Field(..., description="Width of the analysis raster keypoints are expected in.")
    sampling_fps: float
    max_duration: float
    min_frames: int
    min_confidence: float
