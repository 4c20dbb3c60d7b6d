import unittest

from depthjudge.analysis.depth import DepthReading
from depthjudge.analysis.findings import (
    DEEP_TITLE,
    SHALLOW_TITLE,
    UNJUDGEABLE_DETAIL,
    UNJUDGEABLE_TITLE,
    finding_for_status,
    format_timestamp,
)
from depthjudge.quality.failures import DepthFailure
from depthjudge.vision.keypoints import Side


class FindingForStatusTests(unittest.TestCase):
    def test_failures_share_the_remediation_text(self) -> None:
        for failure in (DepthFailure.TORSO_UNKNOWN, DepthFailure.LOW_CONFIDENCE):
            finding = finding_for_status(3.2, failure)
            self.assertEqual(finding.t, 3.2)
            self.assertEqual(finding.title, UNJUDGEABLE_TITLE)
            self.assertEqual(finding.detail, UNJUDGEABLE_DETAIL)
            self.assertEqual(finding.code, failure.value)

    def test_shallow_reading_carries_numbers(self) -> None:
        finding = finding_for_status(1.0, DepthReading(deep=False, delta=-3.14, margin=4.56, side=Side.LEFT))
        self.assertEqual(finding.title, SHALLOW_TITLE)
        self.assertIn("Δy=-3.1", finding.detail)
        self.assertIn("threshold≈4.6", finding.detail)
        self.assertIn("deeper", finding.detail)

    def test_deep_reading_carries_numbers(self) -> None:
        finding = finding_for_status(1.0, DepthReading(deep=True, delta=12.0, margin=4.5, side=Side.RIGHT))
        self.assertEqual(finding.title, DEEP_TITLE)
        self.assertIn("Δy=12.0, threshold≈4.5", finding.detail)
        self.assertEqual(finding.to_dict()["code"], "depth_ok")


class FormatTimestampTests(unittest.TestCase):
    def test_minutes_and_tenths(self) -> None:
        self.assertEqual(format_timestamp(0.0), "0:00.0")
        self.assertEqual(format_timestamp(5.4), "0:05.4")
        self.assertEqual(format_timestamp(75.25), "1:15.3")

    def test_rounding_carries_into_minutes(self) -> None:
        self.assertEqual(format_timestamp(59.96), "1:00.0")
        self.assertEqual(format_timestamp(9.96), "0:10.0")

    def test_negative_time_rejected(self) -> None:
        with self.assertRaises(ValueError):
            format_timestamp(-1.0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
