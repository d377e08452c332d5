import unittest

from asciicube.renderer.calibration import calibrate, fov_for_target_fill, grid_size
from asciicube.renderer.config import SceneConstants
from asciicube.renderer.math3d import Vec3


class CalibrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scene = SceneConstants()
        self.calibration = calibrate(600, 400, 10, 20, self.scene)

    def test_grid_dimensions_floor_the_surface(self) -> None:
        self.assertEqual(self.calibration.cols, 60)
        self.assertEqual(self.calibration.rows, 20)
        self.assertEqual(len(self.calibration.rays), 60 * 20)

        uneven = calibrate(805, 610, 8, 16, self.scene)
        self.assertEqual(uneven.cols, 100)
        self.assertEqual(uneven.rows, 38)

    def test_minimum_grid_enforced(self) -> None:
        tiny = calibrate(15, 15, 10, 20, self.scene)
        self.assertEqual(tiny.cols, self.scene.min_cols)
        self.assertEqual(tiny.rows, self.scene.min_rows)

    def test_bad_cell_size_is_clamped(self) -> None:
        with self.assertLogs("asciicube.renderer.calibration", level="DEBUG"):
            rows, cols, cell_w, cell_h = grid_size(100, 50, 0, -3, self.scene)
        self.assertEqual((rows, cols), (50, 100))
        self.assertEqual((cell_w, cell_h), (1.0, 1.0))

    def test_fov_targets_fill_fraction(self) -> None:
        expected = (2 * 0.75) / 3.0 / 0.42
        self.assertAlmostEqual(fov_for_target_fill(self.scene), expected)
        self.assertAlmostEqual(self.calibration.fov, expected)

    def test_fov_is_clamped(self) -> None:
        large = SceneConstants(half_extent=Vec3(3.0, 3.0, 3.0))
        small = SceneConstants(half_extent=Vec3(0.1, 0.1, 0.1))
        self.assertEqual(fov_for_target_fill(large), large.fov_max)
        self.assertEqual(fov_for_target_fill(small), small.fov_min)

    def test_rays_are_centred(self) -> None:
        cal = self.calibration
        for row in (0, 7, cal.rows - 1):
            for col in (0, 13, cal.cols - 1):
                ray = cal.ray(row, col)
                mirrored_x = cal.ray(row, cal.cols - 1 - col)
                mirrored_y = cal.ray(cal.rows - 1 - row, col)
                self.assertAlmostEqual(ray.x, -mirrored_x.x)
                self.assertAlmostEqual(ray.y, -mirrored_y.y)

    def test_ray_ordering(self) -> None:
        cal = self.calibration
        left = cal.ray(5, 0)
        right = cal.ray(5, cal.cols - 1)
        top = cal.ray(0, 5)
        bottom = cal.ray(cal.rows - 1, 5)
        self.assertLess(left.x, right.x)
        self.assertGreater(top.y, bottom.y)

    def test_rays_are_unit_and_face_the_scene(self) -> None:
        for ray in self.calibration.rays:
            self.assertAlmostEqual(ray.length(), 1.0)
            self.assertLess(ray.z, 0.0)

    def test_cell_aspect_keeps_square_pixels(self) -> None:
        cal = calibrate(800, 600, 8, 16, self.scene)
        self.assertAlmostEqual(cal.aspect, (cal.cols * 8) / (cal.rows * 16))

        # Image-plane span per physical pixel must match on both axes.
        horizontal = (2.0 * cal.aspect * cal.fov / cal.cols) / 8
        vertical = (2.0 * cal.fov / cal.rows) / 16
        self.assertAlmostEqual(horizontal, vertical)

    def test_recalibration_is_idempotent(self) -> None:
        again = calibrate(600, 400, 10, 20, self.scene)
        self.assertEqual(again, self.calibration)

        reused = calibrate(600, 400, 10, 20, self.scene, previous=self.calibration)
        self.assertIs(reused, self.calibration)

    def test_changed_size_rebuilds(self) -> None:
        resized = calibrate(800, 400, 10, 20, self.scene, previous=self.calibration)
        self.assertIsNot(resized, self.calibration)
        self.assertEqual(resized.cols, 80)


if __name__ == "__main__":
    unittest.main()
