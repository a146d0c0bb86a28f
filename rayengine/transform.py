"""Rotation angles and position/rotation/scale transforms."""

from __future__ import annotations

from dataclasses import dataclass

from rayengine.vector import Vector3

__all__ = ["Rotation", "Transform"]


@dataclass(frozen=True)
class Rotation:
    """Yaw, pitch and roll angles."""

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0


@dataclass(frozen=True)
class Transform:
    """Position, rotation and scale of an object."""

    position: Vector3
    rotation: Rotation
    scale: Vector3