"""Two- and three-component mathematical vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator

__all__ = ["PI", "Vector2", "Vector3"]

PI = 3.14159265358979323846


def _angle(dot: float, mag_a: float, mag_b: float) -> float:
    denom = mag_a * mag_b
    if denom == 0:
        raise ValueError("angle is undefined for a zero-length vector")
    return math.acos(max(-1.0, min(1.0, dot / denom)))


@dataclass(frozen=True)
class Vector2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> Vector2:
        """Unit vector in the same direction; the zero vector stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / mag, self.y / mag)

    def reversed(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def angle_between(self, other: Vector2) -> float:
        """Angle in radians between this vector and another."""
        return _angle(self.dot(other), self.magnitude(), other.magnitude())

    def __mul__(self, scalar: float) -> Vector2:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __add__(self, other: Vector2) -> Vector2:
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return self.reversed()


@dataclass(frozen=True)
class Vector3:
    """An immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction; the zero vector stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vector3(0.0, 0.0, 0.0)
        return Vector3(self.x / mag, self.y / mag, self.z / mag)

    def reversed(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def angle_between(self, other: Vector3) -> float:
        """Angle in radians between this vector and another."""
        return _angle(self.dot(other), self.magnitude(), other.magnitude())

    @classmethod
    def right(cls) -> Vector3:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def up(cls) -> Vector3:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def forward(cls) -> Vector3:
        return cls(0.0, 0.0, 1.0)

    def __mul__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return self.reversed()