"""Signed distance field for the cube and its surface normals."""

from __future__ import annotations

import math
from typing import Callable

from .math3d import Vec3

DistanceFn = Callable[[Vec3], float]


def box_distance(point: Vec3, half_extent: Vec3) -> float:
    """Exact signed distance from ``point`` to an axis-aligned box centred at the origin.

    Negative inside, zero on the surface, positive outside. The tracer relies on
    this being a true lower bound on the distance to the surface.
    """

    qx = abs(point.x) - half_extent.x
    qy = abs(point.y) - half_extent.y
    qz = abs(point.z) - half_extent.z

    outside = math.sqrt(max(qx, 0.0) ** 2 + max(qy, 0.0) ** 2 + max(qz, 0.0) ** 2)
    inside = min(max(qx, qy, qz), 0.0)
    return outside + inside


def box_sdf(half_extent: Vec3) -> DistanceFn:
    """Bind a half extent so the box can be passed around as a plain distance function."""

    def distance(point: Vec3) -> float:
        return box_distance(point, half_extent)

    return distance


def estimate_normal(point: Vec3, distance_fn: DistanceFn, step: float = 0.003) -> Vec3:
    """Central-difference gradient of ``distance_fn`` at ``point``, normalised.

    A flat gradient comes back as the zero vector instead of raising.
    """

    px, py, pz = point.x, point.y, point.z
    dx = distance_fn(Vec3(px + step, py, pz)) - distance_fn(Vec3(px - step, py, pz))
    dy = distance_fn(Vec3(px, py + step, pz)) - distance_fn(Vec3(px, py - step, pz))
    dz = distance_fn(Vec3(px, py, pz + step)) - distance_fn(Vec3(px, py, pz - step))
    return Vec3(dx, dy, dz).normalized()
