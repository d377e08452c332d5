"""Scene, renderer and animation settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .math3d import Vec3

DEFAULT_RAMP = " .-=+*#%@"


@dataclass(frozen=True, slots=True)
class SceneConstants:
    """Fixed camera, cube and shading parameters for the lifetime of a renderer."""

    camera_position: Vec3 = Vec3(0.0, 0.0, 3.0)
    half_extent: Vec3 = Vec3(0.75, 0.75, 0.75)
    max_distance: float = 10.0
    epsilon: float = 0.002
    light_direction: Vec3 = field(default_factory=lambda: Vec3(0.6, 0.7, 0.3).normalized())
    ambient: float = 0.18
    diffuse_strength: float = 0.9
    fade_start: float = 0.1
    ramp: str = DEFAULT_RAMP
    normal_step: float = 0.003
    target_fill: float = 0.42
    fov_min: float = 0.55
    fov_max: float = 1.6
    min_cols: int = 20
    min_rows: int = 10

    def __post_init__(self) -> None:
        if len(self.ramp) < 2:
            raise ValueError("ramp needs a blank character and at least one glyph")
        if self.ramp[0] != " ":
            raise ValueError("ramp must start with the blank character")
        extent = self.half_extent
        if extent.x <= 0 or extent.y <= 0 or extent.z <= 0:
            raise ValueError("half_extent components must be positive")
        if self.epsilon <= 0 or self.max_distance <= 0:
            raise ValueError("epsilon and max_distance must be positive")
        if self.target_fill <= 0:
            raise ValueError("target_fill must be positive")
        if self.fov_min > self.fov_max:
            raise ValueError("fov_min must not exceed fov_max")
        if self.min_cols < 1 or self.min_rows < 1:
            raise ValueError("min_cols and min_rows must be at least 1")
        camera = self.camera_position
        if camera.x != 0 or camera.y != 0 or camera.z == 0:
            raise ValueError("camera_position must lie on the z axis, away from the origin")
        # Keep the light a unit vector even when callers pass a raw direction.
        object.__setattr__(self, "light_direction", self.light_direction.normalized())

    @property
    def bounding_radius(self) -> float:
        return self.half_extent.length()


@dataclass(frozen=True, slots=True)
class RendererOptions:
    """Knobs that used to differ between renderer variants."""

    max_steps: int = 48
    target_frame_interval: float = 0.0
    respect_reduced_motion: bool = False

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        if self.target_frame_interval < 0:
            raise ValueError("target_frame_interval cannot be negative")

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "RendererOptions":
        """
        Build options from ASCIICUBE_* environment variables.
        Unset or empty variables keep the defaults; malformed numbers raise ValueError.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        max_steps = env.get("ASCIICUBE_MAX_STEPS", "").strip()
        interval = env.get("ASCIICUBE_FRAME_INTERVAL", "").strip()
        reduced = env.get("ASCIICUBE_REDUCED_MOTION", "").strip().lower()

        return cls(
            max_steps=int(max_steps) if max_steps else defaults.max_steps,
            target_frame_interval=float(interval) if interval else defaults.target_frame_interval,
            respect_reduced_motion=reduced in ("1", "true", "yes", "on"),
        )


@dataclass(frozen=True, slots=True)
class AnimationSettings:
    bounce_amplitude: float = 0.85
    bounce_hz: float = 0.4
    rotation_speed: float = 0.9
    tilt_factor: float = 0.9
    spin_factor: float = 1.1
    max_delta: float = 0.033
