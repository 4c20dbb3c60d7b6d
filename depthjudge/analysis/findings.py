"""Human-readable findings produced from a depth verdict."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Union

from depthjudge.quality.failures import DepthFailure

if TYPE_CHECKING:
    from depthjudge.analysis.depth import DepthReading

UNJUDGEABLE_TITLE = "Depth could not be reliably judged (confidence / occlusion / camera angle)"
UNJUDGEABLE_DETAIL = (
    "Film from the side with the whole body in frame, good lighting and a fixed camera. "
    "Keep the hip and knee clear of knee sleeves, the belt and the plates."
)
SHALLOW_TITLE = "Insufficient depth (high risk of a no-rep)"
DEEP_TITLE = "Depth OK (judged from this side view)"


@dataclass(frozen=True)
class Finding:
    """Timestamped verdict or diagnostic.

    Attributes:
        t: Seconds from clip start; players can seek here.
        title: One-line verdict.
        detail: Explanation and advice.
        code: Machine-readable tag for the branch that produced it.
    """

    t: float
    title: str
    detail: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_timestamp(seconds: float) -> str:
    """Render seconds as ``m:ss.s`` for display next to a finding."""
    if seconds < 0:
        raise ValueError("Time values must be non-negative.")
    # Round once on the whole value so 59.96 carries into the minute.
    tenths = int(seconds * 10 + 0.5)
    minutes, rest = divmod(tenths, 600)
    return f"{minutes}:{rest // 10:02d}.{rest % 10}"


def finding_for_status(t: float, status: Union[DepthFailure, "DepthReading"]) -> Finding:
    if isinstance(status, DepthFailure):
        return Finding(t=t, title=UNJUDGEABLE_TITLE, detail=UNJUDGEABLE_DETAIL, code=status.value)

    numbers = f"Δy={status.delta:.1f}, threshold≈{status.margin:.1f}"
    if not status.deep:
        return Finding(
            t=t,
            title=SHALLOW_TITLE,
            detail=(
                f"At the bottom the hip was not clearly below the knee ({numbers}). "
                "Don't ride the line in competition: sit a little deeper next set "
                "and leave yourself a margin for error."
            ),
            code="depth_insufficient",
        )
    return Finding(
        t=t,
        title=DEEP_TITLE,
        detail=(
            f"At the bottom the hip was below the knee ({numbers}). "
            "Keep every rep this deep and don't let the last few get shallow."
        ),
        code="depth_ok",
    )
