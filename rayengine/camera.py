"""Camera orientation and the player that owns it."""

from __future__ import annotations

import math
from dataclasses import dataclass

from rayengine.transform import Rotation
from rayengine.vector import PI, Vector3

__all__ = ["FRUVector", "Camera", "Player"]

_MOVEMENT_SPEED = 0.1


@dataclass(frozen=True)
class FRUVector:
    """Forward, right and up direction vectors of a camera."""

    forward: Vector3
    right: Vector3
    up: Vector3


@dataclass
class Camera:
    """A camera with position, rotation and field of view in degrees.

    Yaw and pitch are in radians; roll is in degrees.
    """

    position: Vector3
    rotation: Rotation
    fov: float

    def forward_vector(self) -> Vector3:
        """Direction the camera looks in."""
        pitch, yaw = self.rotation.pitch, self.rotation.yaw
        return Vector3(
            math.cos(pitch) * math.sin(yaw),
            math.sin(pitch),
            math.cos(pitch) * math.cos(yaw),
        )

    def fru_vector(self) -> FRUVector:
        """Forward, right and up vectors, with roll applied to right and up."""
        forward = self.forward_vector()
        roll = self.rotation.roll * PI / 180

        reference = Vector3.up()
        if abs(forward.dot(reference)):
            reference = Vector3.forward()

        right_orth = forward.cross(reference).reversed()
        up_orth = right_orth.cross(forward)

        right = right_orth * math.cos(roll) + up_orth * math.sin(roll)
        up = up_orth * math.cos(roll) - right_orth * math.sin(roll)
        return FRUVector(forward=forward, right=right, up=up)


@dataclass
class Player:
    """A player viewing the world through a camera."""

    camera: Camera

    @property
    def movement_speed(self) -> float:
        return _MOVEMENT_SPEED