"""Screen calibration: grid size, field of view and the per-cell ray cache."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import SceneConstants
from .math3d import Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Calibration:
    rows: int
    cols: int
    fov: float
    aspect: float
    rays: Tuple[Vec3, ...]

    @property
    def key(self) -> Tuple[int, int, float, float]:
        return (self.rows, self.cols, self.fov, self.aspect)

    def ray(self, row: int, col: int) -> Vec3:
        return self.rays[row * self.cols + col]


def fov_for_target_fill(scene: SceneConstants) -> float:
    """Vertical FOV scale that keeps the cube at ``target_fill`` of the screen height."""
    camera_distance = scene.camera_position.length()
    raw = (2.0 * scene.half_extent.y) / camera_distance / scene.target_fill
    return max(scene.fov_min, min(raw, scene.fov_max))


def grid_size(
    width_px: float, height_px: float, cell_width: float, cell_height: float, scene: SceneConstants
) -> Tuple[int, int, float, float]:
    """Return ``(rows, cols, cell_width, cell_height)`` with the cell size clamped to >= 1 pixel."""
    if cell_width < 1 or cell_height < 1:
        logger.debug("Clamping cell size %sx%s to at least 1 pixel", cell_width, cell_height)
    cell_width = max(1.0, float(cell_width))
    cell_height = max(1.0, float(cell_height))

    cols = max(scene.min_cols, int(math.floor(max(0.0, width_px) / cell_width)))
    rows = max(scene.min_rows, int(math.floor(max(0.0, height_px) / cell_height)))
    return rows, cols, cell_width, cell_height


def build_ray_cache(rows: int, cols: int, fov: float, aspect: float) -> Tuple[Vec3, ...]:
    rays = []
    inv_cols = 1.0 / cols
    inv_rows = 1.0 / rows
    horizontal = aspect * fov

    for y in range(rows):
        v = (y + 0.5) * inv_rows * 2.0 - 1.0
        py = -v * fov
        for x in range(cols):
            u = (x + 0.5) * inv_cols * 2.0 - 1.0
            rays.append(Vec3(u * horizontal, py, -1.0).normalized())
    return tuple(rays)


def calibrate(
    width_px: float,
    height_px: float,
    cell_width: float,
    cell_height: float,
    scene: SceneConstants,
    previous: Optional[Calibration] = None,
) -> Calibration:
    """Fit the character grid to the surface and precompute one view ray per cell.

    Aspect correction uses the physical shape of the grid that is actually
    drawn, ``cols * cell_width`` by ``rows * cell_height``, so non-square
    monospace cells do not stretch the cube.

    When ``previous`` already matches the new grid it is returned untouched.
    """
    rows, cols, cell_width, cell_height = grid_size(
        width_px, height_px, cell_width, cell_height, scene
    )
    fov = fov_for_target_fill(scene)
    aspect = (cols * cell_width) / (rows * cell_height)
    if previous is not None and previous.key == (rows, cols, fov, aspect):
        return previous

    logger.debug("Rebuilding ray cache for %dx%d cells (fov %.3f, aspect %.3f)", cols, rows, fov, aspect)
    return Calibration(rows, cols, fov, aspect, build_ray_cache(rows, cols, fov, aspect))
