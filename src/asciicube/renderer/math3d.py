"""Vector and rotation helpers shared by the tracer and the calibration code."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec3:
    """Lightweight immutable 3D vector."""

    x: float
    y: float
    z: float

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vec3":
        if not isinstance(scalar, (int, float)):
            raise TypeError("Vec3 can only be multiplied by a scalar")
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vec3":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vec3":
        if scalar == 0:
            raise ZeroDivisionError("Division by zero in Vec3")
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        """Return the unit vector; a zero vector is divided by 1 and comes back unchanged."""
        length = self.length()
        if length <= 1e-12:
            length = 1.0
        return self / length


def rotate_x(vertex: Vec3, angle: float) -> Vec3:
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return Vec3(
        vertex.x,
        vertex.y * cos_a - vertex.z * sin_a,
        vertex.y * sin_a + vertex.z * cos_a,
    )


def rotate_y(vertex: Vec3, angle: float) -> Vec3:
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return Vec3(
        vertex.x * cos_a + vertex.z * sin_a,
        vertex.y,
        -vertex.x * sin_a + vertex.z * cos_a,
    )


@dataclass(frozen=True, slots=True)
class Rotation:
    """Object orientation as a Y spin followed by an X tilt, in radians.

    Angles accumulate without wrapping; ``forward`` maps object space to world
    space and ``inverse`` undoes it exactly.
    """

    x: float = 0.0
    y: float = 0.0

    def forward(self, vertex: Vec3) -> Vec3:
        return rotate_x(rotate_y(vertex, self.y), self.x)

    def inverse(self, vertex: Vec3) -> Vec3:
        # (Rx . Ry)^-1 == Ry^-1 . Rx^-1, so the tilt is undone first.
        return rotate_y(rotate_x(vertex, -self.x), -self.y)
