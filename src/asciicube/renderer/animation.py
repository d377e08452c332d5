"""Animation clock feeding rotation and Z-bounce into the renderer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .config import AnimationSettings, RendererOptions
from .math3d import Rotation


@dataclass(frozen=True, slots=True)
class Frame:
    rotation: Rotation
    z_offset: float
    delta: float
    elapsed: float


class AnimationClock:
    """Turns wall-clock timestamps into per-frame animation state.

    Deltas are capped at ``settings.max_delta`` so a stalled terminal does not
    make the cube jump. With ``target_frame_interval`` set, ticks that arrive
    early still advance time but yield no frame.
    """

    def __init__(
        self,
        settings: Optional[AnimationSettings] = None,
        options: Optional[RendererOptions] = None,
    ) -> None:
        self._settings = settings if settings is not None else AnimationSettings()
        self._options = options if options is not None else RendererOptions()
        self._last: Optional[float] = None
        self._last_emit: Optional[float] = None
        self._elapsed = 0.0
        self._angle = 0.0

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def angle(self) -> float:
        return self._angle

    def tick(self, now: float) -> Optional[Frame]:
        settings = self._settings
        delta = 0.0
        if self._last is not None:
            delta = min(max(0.0, now - self._last), settings.max_delta)
        self._last = now

        self._elapsed += delta
        if not self._options.respect_reduced_motion:
            self._angle += delta * settings.rotation_speed

        interval = self._options.target_frame_interval
        if interval > 0 and self._last_emit is not None and now - self._last_emit < interval:
            return None
        self._last_emit = now

        return self._frame(self._angle, self._elapsed, delta)

    def pose_at(self, elapsed: float) -> Frame:
        """Stateless pose after ``elapsed`` seconds of uninterrupted animation."""
        angle = 0.0 if self._options.respect_reduced_motion else elapsed * self._settings.rotation_speed
        return self._frame(angle, elapsed, 0.0)

    def _frame(self, angle: float, elapsed: float, delta: float) -> Frame:
        settings = self._settings
        return Frame(
            rotation=Rotation(angle * settings.tilt_factor, angle * settings.spin_factor),
            z_offset=self.bounce(elapsed),
            delta=delta,
            elapsed=elapsed,
        )

    def bounce(self, elapsed: float) -> float:
        settings = self._settings
        return math.sin(2.0 * math.pi * settings.bounce_hz * elapsed) * settings.bounce_amplitude
