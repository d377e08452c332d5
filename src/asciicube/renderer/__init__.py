"""Sphere-tracing toolkit for ASCII terminal graphics."""

from .animation import AnimationClock, Frame
from .calibration import Calibration, calibrate
from .config import AnimationSettings, RendererOptions, SceneConstants
from .engine import RenderEngine, char_for_brightness
from .math3d import Rotation, Vec3
from .objects import box_distance, estimate_normal
from .terminal import SurfaceUnavailableError, TerminalController
from .tracer import TraceResult, TraceState, march_ray, shade

__all__ = [
    "AnimationClock",
    "AnimationSettings",
    "Calibration",
    "Frame",
    "RenderEngine",
    "RendererOptions",
    "Rotation",
    "SceneConstants",
    "SurfaceUnavailableError",
    "TerminalController",
    "TraceResult",
    "TraceState",
    "Vec3",
    "box_distance",
    "calibrate",
    "char_for_brightness",
    "estimate_normal",
    "march_ray",
    "shade",
]
