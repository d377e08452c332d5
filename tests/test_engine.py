import unittest

from asciicube.renderer.config import DEFAULT_RAMP, RendererOptions, SceneConstants
from asciicube.renderer.engine import RenderEngine, char_for_brightness
from asciicube.renderer.math3d import Rotation, Vec3
from asciicube.renderer.tracer import TraceState


class RampTests(unittest.TestCase):
    def test_non_positive_is_background(self) -> None:
        self.assertEqual(char_for_brightness(0.0, DEFAULT_RAMP), " ")
        self.assertEqual(char_for_brightness(-0.5, DEFAULT_RAMP), " ")

    def test_full_brightness_is_densest(self) -> None:
        self.assertEqual(char_for_brightness(1.0, DEFAULT_RAMP), "@")
        self.assertEqual(char_for_brightness(1.7, DEFAULT_RAMP), "@")

    def test_midpoint(self) -> None:
        self.assertEqual(char_for_brightness(0.5, DEFAULT_RAMP), "+")

    def test_monotonic(self) -> None:
        previous = 0
        for step in range(1001):
            index = DEFAULT_RAMP.index(char_for_brightness(step / 1000.0, DEFAULT_RAMP))
            self.assertGreaterEqual(index, previous)
            previous = index


class RenderEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = RenderEngine()
        self.engine.resize(600, 400, 10, 20)

    def test_render_requires_resize(self) -> None:
        with self.assertRaises(RuntimeError):
            RenderEngine().render(Rotation(), 0.0)

    def test_frame_shape(self) -> None:
        frame = self.engine.render(Rotation(0.3, 0.5), 0.0)
        self.assertIsNotNone(frame)
        lines = frame.split("\n")
        self.assertEqual(len(lines), self.engine.rows)
        for line in lines:
            self.assertEqual(len(line), self.engine.cols)
        self.assertEqual(len(self.engine.brightness), self.engine.rows * self.engine.cols)

    def test_cube_is_centred(self) -> None:
        frame = self.engine.render(Rotation(), 0.0)
        lines = frame.split("\n")
        rows, cols = self.engine.rows, self.engine.cols
        self.assertNotEqual(lines[rows // 2][cols // 2], " ")
        self.assertEqual(lines[0][0], " ")
        self.assertEqual(lines[0][cols - 1], " ")
        self.assertEqual(lines[rows - 1][0], " ")
        self.assertEqual(lines[rows - 1][cols - 1], " ")

    def test_brightness_is_bounded(self) -> None:
        self.engine.render(Rotation(1.2, 2.3), -0.6)
        for value in self.engine.brightness:
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 1.0)

    def test_unchanged_frame_is_skipped(self) -> None:
        first = self.engine.render(Rotation(0.2, 0.4), 0.1)
        self.assertIsNotNone(first)
        self.assertIsNone(self.engine.render(Rotation(0.2, 0.4), 0.1))
        self.assertEqual(self.engine.buffer, first)

        moved = self.engine.render(Rotation(0.9, 1.7), 0.1)
        self.assertIsNotNone(moved)
        self.assertEqual(self.engine.buffer, moved)

    def test_resize_is_idempotent(self) -> None:
        rays = self.engine.ray_cache
        rows, cols = self.engine.rows, self.engine.cols

        self.assertFalse(self.engine.resize(600, 400, 10, 20))
        self.assertIs(self.engine.ray_cache, rays)
        self.assertEqual((self.engine.rows, self.engine.cols), (rows, cols))

    def test_resize_rebuilds_caches(self) -> None:
        self.assertTrue(self.engine.resize(900, 400, 10, 20))
        self.assertEqual(self.engine.cols, 90)
        self.assertEqual(len(self.engine.ray_cache), 90 * 20)
        self.assertEqual(len(self.engine.brightness), 90 * 20)

    def test_bad_cell_size_does_not_fail(self) -> None:
        engine = RenderEngine()
        engine.resize(100, 50, 0, -3)
        self.assertEqual((engine.cols, engine.rows), (100, 50))

    def test_step_limit_option(self) -> None:
        engine = RenderEngine(options=RendererOptions(max_steps=1))
        engine.resize(600, 400, 10, 20)
        frame = engine.render(Rotation(), 0.0)
        self.assertEqual(set(frame), {" ", "\n"})

    def test_custom_ramp(self) -> None:
        engine = RenderEngine(SceneConstants(ramp=" #"))
        engine.resize(600, 400, 10, 20)
        frame = engine.render(Rotation(), 0.0)
        self.assertLessEqual(set(frame), {" ", "#", "\n"})

    def test_trace_cell(self) -> None:
        rows, cols = self.engine.rows, self.engine.cols
        centre = self.engine.trace_cell(rows // 2, cols // 2, Rotation(), 0.0)
        self.assertIs(centre.state, TraceState.HIT)
        corner = self.engine.trace_cell(0, 0, Rotation(), 0.0)
        self.assertIs(corner.state, TraceState.MISS)
        with self.assertRaises(IndexError):
            self.engine.trace_cell(rows, 0, Rotation(), 0.0)


class SceneConstantsTests(unittest.TestCase):
    def test_light_is_normalised(self) -> None:
        scene = SceneConstants(light_direction=Vec3(0.0, 2.0, 0.0))
        self.assertEqual(scene.light_direction, Vec3(0.0, 1.0, 0.0))

    def test_invalid_values_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SceneConstants(ramp="")
        with self.assertRaises(ValueError):
            SceneConstants(ramp="@# ")
        with self.assertRaises(ValueError):
            SceneConstants(half_extent=Vec3(0.0, 1.0, 1.0))
        with self.assertRaises(ValueError):
            RendererOptions(max_steps=0)

    def test_camera_must_sit_on_the_z_axis(self) -> None:
        with self.assertRaises(ValueError):
            SceneConstants(camera_position=Vec3(0.0, 0.0, 0.0))
        with self.assertRaises(ValueError):
            SceneConstants(camera_position=Vec3(1.0, 0.0, 3.0))
        self.assertEqual(SceneConstants(camera_position=Vec3(0.0, 0.0, 4.0)).camera_position.z, 4.0)


if __name__ == "__main__":
    unittest.main()
