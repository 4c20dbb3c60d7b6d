"""Squat depth verdict for a single repetition.

The verdict is taken from one frame only, the bottom of the squat. At that
frame each body side is judged on its own and the shallower valid reading
wins, so a confident deep side can never hide a doubtful one.

``delta`` is ``hip.y - knee.y`` in analysis pixels. The raster's vertical
axis grows downward, so a positive delta means the hip is below the knee.
The hip has to clear the knee by ``margin``, a fixed fraction of the torso
length measured in the same frame, which keeps the criterion independent of
how far the lifter stands from the camera.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Sequence, Union

from depthjudge.analysis.findings import Finding, finding_for_status
from depthjudge.config import DepthConfig
from depthjudge.quality.failures import DepthFailure
from depthjudge.repdetect.baseline import locate_bottom_frame
from depthjudge.signals.kinematics import torso_length
from depthjudge.vision.keypoints import SIDE_ORDER, Frame, Keypoint, Side, side_keypoints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideEvaluation:
    """Depth reading for one body side. ``delta`` is ``nan`` when not valid."""

    side: Side
    valid: bool
    deep: bool = False
    delta: float = math.nan


@dataclass(frozen=True)
class DepthReading:
    """Merged verdict for the bottom frame."""

    deep: bool
    delta: float
    margin: float
    side: Side


DepthStatus = Union[DepthFailure, DepthReading]


def _confident(kp: Keypoint, config: DepthConfig) -> bool:
    return kp.confidence >= config.min_confidence


def evaluate_side(
    keypoints: Mapping[str, Keypoint], side: Side, margin: float, config: DepthConfig
) -> SideEvaluation:
    pair = side_keypoints(keypoints, side, ("hip", "knee"))
    if pair is None:
        return SideEvaluation(side=side, valid=False)
    hip, knee = pair
    if not (_confident(hip, config) and _confident(knee, config)):
        return SideEvaluation(side=side, valid=False)
    delta = hip.y - knee.y
    return SideEvaluation(side=side, valid=True, deep=delta > margin, delta=delta)


def reconcile_sides(evaluations: Sequence[SideEvaluation]) -> SideEvaluation | None:
    """Return the valid evaluation with the smallest delta; earlier entries win ties."""
    worst = None
    for evaluation in evaluations:
        if not evaluation.valid:
            continue
        if worst is None or evaluation.delta < worst.delta:
            worst = evaluation
    return worst


def depth_status_at_frame(frame: Frame, config: DepthConfig = DepthConfig()) -> DepthStatus:
    """Judge hip-below-knee depth on a single frame."""

    torso = torso_length(frame.keypoints)
    if not math.isfinite(torso) or torso < config.min_torso_px:
        return DepthFailure.TORSO_UNKNOWN

    margin = config.margin_ratio * torso
    evaluations = [evaluate_side(frame.keypoints, side, margin, config) for side in SIDE_ORDER]
    worst = reconcile_sides(evaluations)
    if worst is None:
        return DepthFailure.LOW_CONFIDENCE
    return DepthReading(deep=worst.deep, delta=worst.delta, margin=margin, side=worst.side)


def analyze_squat_depth(frames: Sequence[Frame], config: DepthConfig = DepthConfig()) -> list[Finding]:
    """Produce the depth findings for one clip.

    Returns an empty list when fewer than ``config.min_frames`` frames were
    collected; otherwise exactly one finding stamped with the bottom frame's
    time. Never raises for missing joints or scores.
    """

    if len(frames) < config.min_frames:
        logger.info(
            "No depth verdict (%s): %d frames, need %d",
            DepthFailure.INSUFFICIENT_SAMPLES.value,
            len(frames),
            config.min_frames,
        )
        return []

    bottom = locate_bottom_frame(frames)
    return [finding_for_status(bottom.t, depth_status_at_frame(bottom, config))]
