"""Rendering engine that sphere-traces the cube into an ASCII frame."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .calibration import Calibration, calibrate
from .config import RendererOptions, SceneConstants
from .math3d import Rotation, Vec3
from .objects import box_sdf
from .tracer import TraceResult, fade_bounds, march_ray

logger = logging.getLogger(__name__)


def char_for_brightness(brightness: float, ramp: str) -> str:
    """Map brightness onto ``ramp``; anything <= 0 is background (``ramp[0]``)."""
    if brightness <= 0.0:
        return ramp[0]
    last = len(ramp) - 1
    return ramp[min(int(brightness * last), last)]


class RenderEngine:
    """Owns the ray cache, brightness grid and last output buffer.

    ``resize`` and ``render`` are the only calls that mutate state. Exactly one
    render is expected to be in flight at a time.
    """

    def __init__(
        self,
        scene: Optional[SceneConstants] = None,
        options: Optional[RendererOptions] = None,
    ) -> None:
        self._scene = scene if scene is not None else SceneConstants()
        self._options = options if options is not None else RendererOptions()
        self._distance_fn = box_sdf(self._scene.half_extent)
        self._calibration: Optional[Calibration] = None
        self._brightness: List[float] = []
        self._buffer = ""

    @property
    def scene(self) -> SceneConstants:
        return self._scene

    @property
    def options(self) -> RendererOptions:
        return self._options

    @property
    def rows(self) -> int:
        return self._calibration.rows if self._calibration is not None else 0

    @property
    def cols(self) -> int:
        return self._calibration.cols if self._calibration is not None else 0

    @property
    def fov(self) -> float:
        return self._calibration.fov if self._calibration is not None else 0.0

    @property
    def aspect(self) -> float:
        return self._calibration.aspect if self._calibration is not None else 0.0

    @property
    def ray_cache(self) -> Tuple[Vec3, ...]:
        return self._calibration.rays if self._calibration is not None else ()

    @property
    def brightness(self) -> Sequence[float]:
        return tuple(self._brightness)

    @property
    def buffer(self) -> str:
        return self._buffer

    def resize(
        self,
        width_px: float,
        height_px: float,
        cell_width: float,
        cell_height: float,
    ) -> bool:
        """Recalibrate for a surface size. Returns True when the caches were rebuilt."""
        calibration = calibrate(
            width_px, height_px, cell_width, cell_height, self._scene, previous=self._calibration
        )
        if calibration is self._calibration:
            return False

        self._calibration = calibration
        self._brightness = [0.0] * (calibration.rows * calibration.cols)
        logger.debug("Resized to %dx%d cells", calibration.cols, calibration.rows)
        return True

    def render(self, rotation: Rotation, z_offset: float) -> Optional[str]:
        """Trace every cell and return the new frame, or None if it matches the last one."""
        calibration = self._require_calibration()
        scene = self._scene
        origin = scene.camera_position
        translation = Vec3(0.0, 0.0, z_offset)
        fade_near, fade_far = fade_bounds(z_offset, scene)
        max_steps = self._options.max_steps
        distance_fn = self._distance_fn

        grid = self._brightness
        for index, direction in enumerate(calibration.rays):
            grid[index] = march_ray(
                origin,
                direction,
                rotation,
                translation,
                fade_near,
                fade_far,
                scene,
                max_steps=max_steps,
                distance_fn=distance_fn,
            ).brightness

        frame = self._compose_frame(grid, calibration.rows, calibration.cols)
        if frame == self._buffer:
            return None
        self._buffer = frame
        return frame

    def trace_cell(self, row: int, col: int, rotation: Rotation, z_offset: float) -> TraceResult:
        calibration = self._require_calibration()
        if not (0 <= row < calibration.rows and 0 <= col < calibration.cols):
            raise IndexError(f"Cell ({row}, {col}) outside {calibration.rows}x{calibration.cols} grid")
        fade_near, fade_far = fade_bounds(z_offset, self._scene)
        return march_ray(
            self._scene.camera_position,
            calibration.ray(row, col),
            rotation,
            Vec3(0.0, 0.0, z_offset),
            fade_near,
            fade_far,
            self._scene,
            max_steps=self._options.max_steps,
            distance_fn=self._distance_fn,
        )

    # Internal helpers -------------------------------------------------

    def _require_calibration(self) -> Calibration:
        if self._calibration is None:
            raise RuntimeError("RenderEngine.resize must be called before rendering")
        return self._calibration

    def _compose_frame(self, grid: Sequence[float], rows: int, cols: int) -> str:
        ramp = self._scene.ramp
        lines: List[str] = []
        for y in range(rows):
            start = y * cols
            lines.append("".join(char_for_brightness(value, ramp) for value in grid[start:start + cols]))
        return "\n".join(lines)
