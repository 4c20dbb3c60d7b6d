"""Keypoint and frame types shared by the frame producer and the depth engine.

Pose estimators report joints by name. The depth engine only needs six of
them; everything else a backend returns (eyes, wrists, ankles) is carried
along untouched so cached frames stay useful for other analyses.

A joint that was not detected is simply absent from :attr:`Frame.keypoints`.
That is different from a joint that was detected with a score of ``0.0``;
:meth:`Frame.get` returns ``None`` only for the former.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple


class Joint(str, Enum):
    """Joints required by the depth engine (COCO/MoveNet naming)."""

    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# Left is always consulted first; the right side is the fallback.
SIDE_ORDER: Tuple[Side, ...] = (Side.LEFT, Side.RIGHT)

SIDE_JOINTS: Mapping[Side, Mapping[str, Joint]] = MappingProxyType(
    {
        Side.LEFT: MappingProxyType(
            {"shoulder": Joint.LEFT_SHOULDER, "hip": Joint.LEFT_HIP, "knee": Joint.LEFT_KNEE}
        ),
        Side.RIGHT: MappingProxyType(
            {"shoulder": Joint.RIGHT_SHOULDER, "hip": Joint.RIGHT_HIP, "knee": Joint.RIGHT_KNEE}
        ),
    }
)


@dataclass(frozen=True)
class Keypoint:
    """Single 2D keypoint in the shared analysis raster.

    ``score`` is the estimator's confidence in ``[0, 1]``; ``None`` means the
    backend did not report one and the point is trusted fully.
    """

    x: float
    y: float
    score: Optional[float] = None

    @property
    def confidence(self) -> float:
        return 1.0 if self.score is None else self.score


@dataclass(frozen=True)
class Frame:
    """Pose sample for a single timestamp (seconds from clip start)."""

    t: float
    keypoints: Mapping[str, Keypoint] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy then freeze so neither the caller nor the engine can mutate it.
        frozen = MappingProxyType({_joint_key(k): v for k, v in self.keypoints.items()})
        object.__setattr__(self, "keypoints", frozen)

    def get(self, joint: Joint | str) -> Optional[Keypoint]:
        return self.keypoints.get(_joint_key(joint))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self.t == other.t and dict(self.keypoints) == dict(other.keypoints)

    def __hash__(self) -> int:
        return hash((self.t, tuple(sorted(self.keypoints.items()))))


def _joint_key(joint: Joint | str) -> str:
    return joint.value if isinstance(joint, Joint) else str(joint)


def side_keypoints(
    keypoints: Mapping[str, Keypoint], side: Side, roles: Sequence[str]
) -> Optional[Tuple[Keypoint, ...]]:
    """Return the keypoints for ``roles`` on one side, or ``None`` if any is absent."""
    joints = SIDE_JOINTS[side]
    found = []
    for role in roles:
        kp = keypoints.get(joints[role].value)
        if kp is None:
            return None
        found.append(kp)
    return tuple(found)


def resolve_side(
    keypoints: Mapping[str, Keypoint], roles: Sequence[str]
) -> Optional[Tuple[Side, Tuple[Keypoint, ...]]]:
    """Pick the first side in :data:`SIDE_ORDER` on which every role is present.

    This is the single place that decides left-before-right precedence. It
    checks presence only; confidence gating is up to the caller.
    """
    for side in SIDE_ORDER:
        found = side_keypoints(keypoints, side, roles)
        if found is not None:
            return side, found
    return None
