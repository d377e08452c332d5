"""Sphere tracing against the cube SDF plus Lambert shading with depth fade."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import SceneConstants
from .math3d import Rotation, Vec3
from .objects import DistanceFn, box_sdf, estimate_normal


class TraceState(enum.Enum):
    MARCHING = "marching"
    HIT = "hit"
    MISS = "miss"


@dataclass(frozen=True, slots=True)
class TraceResult:
    state: TraceState
    brightness: float
    distance: float
    steps: int
    world_point: Optional[Vec3] = None
    object_point: Optional[Vec3] = None
    normal: Optional[Vec3] = None

    @property
    def hit(self) -> bool:
        return self.state is TraceState.HIT


def clamp01(value: float) -> float:
    return 0.0 if value < 0.0 else 1.0 if value > 1.0 else value


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    """Cubic Hermite ramp between two edges; equal edges act as a hard step."""
    if edge1 == edge0:
        return 0.0 if x < edge0 else 1.0
    t = clamp01((x - edge0) / (edge1 - edge0))
    return t * t * (3.0 - 2.0 * t)


def fade_bounds(z_offset: float, scene: SceneConstants) -> Tuple[float, float]:
    """Near/far camera distances of the cube's bounding sphere at this bounce offset."""
    radius = scene.bounding_radius
    center_to_camera = abs(scene.camera_position.z - z_offset)
    return max(0.0, center_to_camera - radius), center_to_camera + radius


def world_normal(
    object_point: Vec3,
    rotation: Rotation,
    scene: SceneConstants,
    distance_fn: Optional[DistanceFn] = None,
) -> Vec3:
    if distance_fn is None:
        distance_fn = box_sdf(scene.half_extent)
    local = estimate_normal(object_point, distance_fn, scene.normal_step)
    return rotation.forward(local).normalized()


def lit_brightness(
    normal: Vec3,
    world_point: Vec3,
    fade_near: float,
    fade_far: float,
    scene: SceneConstants,
) -> float:
    diffuse = max(0.0, normal.dot(scene.light_direction))
    brightness = clamp01(scene.ambient + diffuse * scene.diffuse_strength)

    camera_distance = (world_point - scene.camera_position).length()
    span = fade_far - fade_near
    depth = clamp01((camera_distance - fade_near) / span) if span != 0 else 0.0
    fade = smoothstep(scene.fade_start, 1.0, depth)
    return brightness * (1.0 - fade)


def shade(
    world_point: Vec3,
    object_point: Vec3,
    rotation: Rotation,
    fade_near: float,
    fade_far: float,
    scene: SceneConstants,
    *,
    distance_fn: Optional[DistanceFn] = None,
) -> float:
    """Brightness in [0, 1] for a surface hit.

    Ambient plus clamped Lambert diffuse, dimmed by a smoothstep over the
    hit's camera distance normalised into ``[fade_near, fade_far]``.
    """
    normal = world_normal(object_point, rotation, scene, distance_fn)
    return lit_brightness(normal, world_point, fade_near, fade_far, scene)


def march_ray(
    origin: Vec3,
    direction: Vec3,
    rotation: Rotation,
    translation: Vec3,
    fade_near: float,
    fade_far: float,
    scene: SceneConstants,
    *,
    max_steps: int = 48,
    distance_fn: Optional[DistanceFn] = None,
) -> TraceResult:
    """March one ray through world space against the rotated, translated cube.

    Each step samples the SDF in object space and advances by exactly that
    distance. Leaving ``scene.max_distance`` or running out of steps is a miss
    with brightness 0.
    """
    if distance_fn is None:
        distance_fn = box_sdf(scene.half_extent)

    t = 0.0
    for step in range(max_steps):
        world_point = origin + direction * t
        object_point = rotation.inverse(world_point - translation)

        distance = distance_fn(object_point)
        if distance < scene.epsilon:
            normal = world_normal(object_point, rotation, scene, distance_fn)
            return TraceResult(
                TraceState.HIT,
                lit_brightness(normal, world_point, fade_near, fade_far, scene),
                t,
                step + 1,
                world_point,
                object_point,
                normal,
            )

        t += distance
        if t > scene.max_distance:
            return TraceResult(TraceState.MISS, 0.0, t, step + 1)

    return TraceResult(TraceState.MISS, 0.0, t, max_steps)
