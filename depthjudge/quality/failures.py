"""Reasons a depth verdict could not be produced.

None of these are raised. ``INSUFFICIENT_SAMPLES`` is logged alongside an empty finding
list; the other two become explanatory findings.
"""

from enum import Enum


class DepthFailure(str, Enum):
    INSUFFICIENT_SAMPLES = "insufficient_samples"
    TORSO_UNKNOWN = "torso_unknown"
    LOW_CONFIDENCE = "low_confidence"
