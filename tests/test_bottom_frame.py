import math
import unittest

from depthjudge.repdetect.baseline import locate_bottom_frame
from depthjudge.signals.kinematics import hip_height, torso_length
from depthjudge.vision.keypoints import Frame, Keypoint


def hips(t: float, left=None, right=None) -> Frame:
    keypoints = {}
    if left is not None:
        keypoints["left_hip"] = Keypoint(100, left, 0.9)
    if right is not None:
        keypoints["right_hip"] = Keypoint(120, right, 0.9)
    return Frame(t=t, keypoints=keypoints)


class LocateBottomFrameTests(unittest.TestCase):
    def test_picks_lowest_hip_on_screen(self) -> None:
        frames = [hips(0.0, 100), hips(0.2, 180), hips(0.4, 240), hips(0.6, 200)]
        self.assertEqual(locate_bottom_frame(frames).t, 0.4)

    def test_ties_keep_first_frame(self) -> None:
        frames = [hips(0.0, 100), hips(0.2, 240), hips(0.4, 240)]
        self.assertEqual(locate_bottom_frame(frames).t, 0.2)

    def test_left_hip_preferred_over_right(self) -> None:
        frames = [hips(0.0, left=150, right=300), hips(0.2, left=200, right=100)]
        self.assertEqual(locate_bottom_frame(frames).t, 0.2)

    def test_right_hip_used_when_left_missing(self) -> None:
        frames = [hips(0.0, left=150), hips(0.2, right=260), hips(0.4, left=200)]
        self.assertEqual(locate_bottom_frame(frames).t, 0.2)

    def test_frames_without_hips_are_skipped(self) -> None:
        frames = [hips(0.0), hips(0.2, 150), hips(0.4), hips(0.6, 120)]
        self.assertEqual(locate_bottom_frame(frames).t, 0.2)

    def test_all_hipless_frames_fall_back_to_first(self) -> None:
        frames = [hips(0.0), hips(0.2), hips(0.4)]
        self.assertIs(locate_bottom_frame(frames), frames[0])

    def test_empty_sequence_raises(self) -> None:
        with self.assertRaises(ValueError):
            locate_bottom_frame([])


class KinematicsTests(unittest.TestCase):
    def test_torso_length_prefers_left_pair(self) -> None:
        keypoints = {
            "left_shoulder": Keypoint(0, 0),
            "left_hip": Keypoint(30, 40),
            "right_shoulder": Keypoint(0, 0),
            "right_hip": Keypoint(0, 10),
        }
        self.assertAlmostEqual(torso_length(keypoints), 50.0)

    def test_torso_length_without_pairs_is_nan(self) -> None:
        keypoints = {"left_shoulder": Keypoint(0, 0), "right_hip": Keypoint(0, 10)}
        self.assertTrue(math.isnan(torso_length(keypoints)))

    def test_hip_height_falls_back_to_right_and_marks_missing(self) -> None:
        self.assertEqual(hip_height(hips(0.0, 10, right=50)), 10)
        self.assertEqual(hip_height(hips(0.4, right=30)), 30)
        self.assertIsNone(hip_height(hips(1.0)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
