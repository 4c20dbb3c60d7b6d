import unittest
from pathlib import Path

from depthjudge.config import VideoSpec
from depthjudge.io.normalization import AnalysisSpace
from depthjudge.vision.keypoints import Keypoint


def spec(width: int, height: int, rotation: int = 0) -> VideoSpec:
    return VideoSpec(
        path=Path("video.mp4"),
        width=width,
        height=height,
        rotation=rotation,
        fps=30.0,
        duration=10.0,
    )


class AnalysisSpaceTests(unittest.TestCase):
    def test_landscape_source_scales_to_target_width(self) -> None:
        space = AnalysisSpace.from_video_spec(spec(1920, 1080), 640)
        self.assertEqual(space.size, (640, 360))
        self.assertAlmostEqual(space.scale, 1 / 3)

    def test_rotated_portrait_uses_effective_size(self) -> None:
        space = AnalysisSpace.from_video_spec(spec(1920, 1080, rotation=90), 640)
        self.assertEqual(space.size, (640, 1138))
        self.assertAlmostEqual(space.scale, 640 / 1080)

    def test_normalized_points_map_to_raster_pixels(self) -> None:
        space = AnalysisSpace(width=640, height=360, scale=0.5)
        self.assertEqual(space.from_normalized(0.5, 0.25, 0.9), Keypoint(320, 90, 0.9))

    def test_invalid_rotation_raises(self) -> None:
        with self.assertRaises(ValueError):
            AnalysisSpace.from_video_spec(spec(100, 200, rotation=45), 640)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
