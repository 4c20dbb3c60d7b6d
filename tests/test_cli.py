import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from depthjudge import cli
from depthjudge.analysis.findings import Finding
from depthjudge.pipeline import AnalysisReport
from depthjudge.vision import cache
from depthjudge.vision.keypoints import Frame, Keypoint


def squat_frames() -> list:
    frames = []
    for i, hip_y in enumerate([120, 160, 200, 170, 130]):
        frames.append(
            Frame(
                t=i * 0.2,
                keypoints={
                    "left_shoulder": Keypoint(100, 50, 0.9),
                    "left_hip": Keypoint(100, hip_y, 0.9),
                    "left_knee": Keypoint(100, 150, 0.9),
                },
            )
        )
    return frames


def run_cli(argv) -> tuple:
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = cli.main(argv)
    return code, out.getvalue(), err.getvalue()


class FramesCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = Path(tempfile.mkdtemp()) / "frames.jsonl"
        cache.save_frames(self.path, squat_frames())

    def test_prints_timestamped_verdict(self) -> None:
        code, out, _ = run_cli(["frames", str(self.path)])
        self.assertEqual(code, 0)
        self.assertIn("[0:00.4] Depth OK", out)

    def test_json_output(self) -> None:
        code, out, _ = run_cli(["frames", str(self.path), "--json"])
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(len(payload), 1)
        self.assertEqual(payload[0]["code"], "depth_ok")
        self.assertAlmostEqual(payload[0]["t"], 0.4)

    def test_min_confidence_override(self) -> None:
        code, out, _ = run_cli(["frames", str(self.path), "--json", "--min-confidence", "0.95"])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)[0]["code"], "low_confidence")

    def test_short_file_reports_no_verdict(self) -> None:
        cache.save_frames(self.path, squat_frames()[:2])
        code, out, _ = run_cli(["frames", str(self.path)])
        self.assertEqual(code, 0)
        self.assertIn("No verdict: only 2 pose samples", out)

    def test_missing_file_is_an_error(self) -> None:
        code, _, err = run_cli(["frames", str(self.path.with_name("nope.jsonl"))])
        self.assertEqual(code, 1)
        self.assertIn("Frame file not found", err)


    def test_string_scores_in_frame_file_are_accepted(self) -> None:
        lines = [json.dumps(cache.frame_to_obj(frame)) for frame in squat_frames()]
        self.path.write_text("\n".join(line.replace('"score": 0.9', '"score": "0.9"') for line in lines) + "\n")
        code, out, err = run_cli(["frames", str(self.path)])
        self.assertEqual(code, 0, err)
        self.assertIn("[0:00.4] Depth OK", out)

    def test_non_object_line_is_a_clean_error(self) -> None:
        self.path.write_text("[1, 2]\n")
        code, out, err = run_cli(["frames", str(self.path)])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error: frame line must be a JSON object", err)


class AnalyzeCommandTests(unittest.TestCase):
    def test_wires_sampling_options_into_pipeline(self) -> None:
        report = AnalysisReport(
            findings=[Finding(t=1.0, title="Depth OK", detail="fine", code="depth_ok")],
            frames=squat_frames(),
            sample_count=6,
        )
        estimator = mock.MagicMock()
        estimator.__enter__.return_value = estimator
        with mock.patch("depthjudge.vision.estimator.MediaPipePoseEstimator", return_value=estimator):
            with mock.patch("depthjudge.pipeline.analyze_video", return_value=report) as analyze:
                code, out, _ = run_cli(["analyze", "squat.mp4", "--fps", "10", "--max-duration", "5"])

        self.assertEqual(code, 0)
        sampling = analyze.call_args.kwargs["sampling"]
        self.assertEqual((sampling.fps, sampling.max_duration, sampling.target_width), (10.0, 5.0, 640))
        self.assertIn("[0:01.0] Depth OK", out)
        self.assertIn("Pose samples: 5 (10fps, <= 5s)", out)

    def test_invalid_sampling_rate_is_an_error(self) -> None:
        code, _, err = run_cli(["analyze", "squat.mp4", "--fps", "0"])
        self.assertEqual(code, 1)
        self.assertIn("fps must be positive", err)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
