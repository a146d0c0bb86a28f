"""Rays, ray/object collisions and secondary ray construction."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from rayengine import log
from rayengine.vector import Vector3
from rayengine.world import ShapeType, World, WorldObject

__all__ = [
    "Ray",
    "CollisionInfo",
    "UnsupportedShapeError",
    "first_collision",
    "internal_collision",
    "diffuse_rays",
    "reflection_ray",
    "refraction_ray",
]

_SPHERE_RADIUS = 1.0
_MIN_HIT_DISTANCE = 1e-9
_LIGHT_POSITION = Vector3(0.0, 5.0, 3.0)
_OUTER_INDEX = 1.0
_INNER_INDEX = 1.1
_MAX_TIR_DEPTH = 5


@dataclass(frozen=True)
class Ray:
    """A ray with an origin and a direction."""

    origin: Vector3 = field(default_factory=Vector3)
    direction: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True)
class CollisionInfo:
    """Where a ray enters and leaves the object it hits."""

    object: WorldObject
    position: Vector3
    normal: Vector3
    distance: float
    exit_position: Vector3
    exit_normal: Vector3
    exit_distance: float


class UnsupportedShapeError(ValueError):
    """Raised when collision is requested for a shape that has no collision logic."""


def _sphere_roots(obj: WorldObject, ray: Ray) -> Optional[tuple[float, float]]:
    if obj.shape is not ShapeType.SPHERE:
        raise UnsupportedShapeError(f"no collision logic for shape {obj.shape.name}")

    offset = ray.origin - obj.position
    a = ray.direction.dot(ray.direction)
    if a == 0:
        return None
    b = 2 * offset.dot(ray.direction)
    c = offset.dot(offset) - _SPHERE_RADIUS * _SPHERE_RADIUS
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None
    root = math.sqrt(discriminant)
    return (-b - root) / (2 * a), (-b + root) / (2 * a)


def _nearest_positive(roots: tuple[float, float]) -> Optional[float]:
    near, far = roots
    if near > 0:
        return near
    if far > 0:
        return far
    return None


def _collision(obj: WorldObject, ray: Ray, distance: float, exit_distance: float) -> CollisionInfo:
    center = obj.position
    position = ray.origin + ray.direction * distance
    exit_position = ray.origin + ray.direction * exit_distance
    return CollisionInfo(
        object=obj,
        position=position,
        normal=(position - center).normalized(),
        distance=distance,
        exit_position=exit_position,
        exit_normal=(exit_position - center).normalized(),
        exit_distance=exit_distance,
    )


def first_collision(world: World, ray: Ray) -> Optional[CollisionInfo]:
    """Return the nearest collision in front of the ray's origin, or None."""
    nearest: Optional[CollisionInfo] = None
    min_distance = math.inf
    for obj in world:
        roots = _sphere_roots(obj, ray)
        if roots is None:
            continue
        distance = _nearest_positive(roots)
        if distance is None:
            continue
        if _MIN_HIT_DISTANCE <= distance < min_distance:
            min_distance = distance
            nearest = _collision(obj, ray, distance, roots[1])
    return nearest


def internal_collision(obj: WorldObject, ray: Ray) -> Optional[CollisionInfo]:
    """Return the collision of a ray with one object, or None when it misses."""
    roots = _sphere_roots(obj, ray)
    if roots is None:
        return None
    distance = _nearest_positive(roots)
    if distance is None:
        return None
    return _collision(obj, ray, distance, roots[1])


def _require(collision: Optional[CollisionInfo], what: str) -> CollisionInfo:
    if collision is None:
        raise ValueError(f"cannot create {what} from a missing collision")
    return collision


def diffuse_rays(collision: CollisionInfo) -> list[Ray]:
    """Rays from the hit point towards each light source."""
    collision = _require(collision, "diffuse rays")
    origin = collision.position
    return [Ray(origin, (_LIGHT_POSITION - origin).normalized())]


def reflection_ray(ray: Ray, collision: CollisionInfo) -> Ray:
    """Mirror reflection of a ray about the surface normal at the hit point."""
    collision = _require(collision, "a reflection ray")
    normal = collision.normal
    direction = ray.direction - 2 * ray.direction.dot(normal) * normal
    return Ray(collision.position, direction)


def _refract(eta: float, cos_i: float, sin_t2: float, direction: Vector3, normal: Vector3) -> Vector3:
    cos_t = math.sqrt(1 - sin_t2)
    return (eta * direction + (eta * cos_i - cos_t) * normal).normalized()


def refraction_ray(ray: Ray, collision: CollisionInfo) -> Ray:
    """Ray leaving the object after refraction on entry and exit (Snell's law).

    Returns an empty ``Ray()`` when the light stays trapped by total internal
    reflection or no internal exit can be found.
    """
    collision = _require(collision, "a refraction ray")

    eta = _OUTER_INDEX / _INNER_INDEX
    cos_i = ray.direction.reversed().dot(collision.normal)
    sin_t2 = eta * eta * (1.0 - cos_i * cos_i)
    entry_dir = _refract(eta, cos_i, sin_t2, ray.direction, collision.normal)

    eta = _INNER_INDEX / _OUTER_INDEX
    cos_i = entry_dir.dot(collision.exit_normal)
    sin_t2 = eta * eta * (1.0 - cos_i * cos_i)

    if sin_t2 > 1:
        internal_ray = Ray(collision.position, entry_dir)
        internal = internal_collision(collision.object, internal_ray)
        if internal is None:
            log.error("refraction_ray: internal collision not found")
            return Ray()

        cos_i = entry_dir.dot(internal.exit_normal)
        sin_t2 = eta * eta * (1.0 - cos_i * cos_i)
        if sin_t2 <= 1:
            exit_dir = _refract(eta, cos_i, sin_t2, internal_ray.direction, internal.exit_normal)
            return Ray(internal.exit_position, exit_dir)

        # The internal ray does not change between bounces, so every remaining
        # bounce up to the depth limit is trapped in the same way.
        log.warn(f"refraction_ray: reached max TIR depth ({_MAX_TIR_DEPTH})")
        return Ray()

    exit_dir = _refract(eta, cos_i, sin_t2, entry_dir, collision.exit_normal)
    return Ray(collision.exit_position, exit_dir)