import math

import pytest

from rayengine.raymgr import (
    CollisionInfo,
    Ray,
    UnsupportedShapeError,
    diffuse_rays,
    first_collision,
    internal_collision,
    reflection_ray,
    refraction_ray,
)
from rayengine.transform import Rotation, Transform
from rayengine.vector import Vector3
from rayengine.world import Material, ShapeType, World, WorldObject


def make_object(position, shape=ShapeType.SPHERE):
    return WorldObject(
        material=Material(color=Vector3(255.0, 0.0, 0.0)),
        transform=Transform(position, Rotation(), Vector3(1.0, 1.0, 1.0)),
        shape=shape,
    )


def make_world(*positions):
    world = World()
    for position in positions:
        world.add_object(make_object(position))
    return world


def close(a, b, tol=1e-9):
    return all(math.isclose(p, q, abs_tol=tol) for p, q in zip(a, b))


FORWARD_RAY = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, 1.0))


def test_empty_world_has_no_collision():
    assert first_collision(World(), FORWARD_RAY) is None


def test_miss_returns_none():
    world = make_world(Vector3(5.0, 0.0, 5.0))
    assert first_collision(world, FORWARD_RAY) is None


def test_sphere_behind_origin_is_ignored():
    world = make_world(Vector3(0.0, 0.0, -5.0))
    assert first_collision(world, FORWARD_RAY) is None


def test_zero_direction_ray_hits_nothing():
    world = make_world(Vector3(0.0, 0.0, 5.0))
    assert first_collision(world, Ray()) is None


def test_hit_lies_on_sphere_surface():
    center = Vector3(0.3, -0.2, 5.0)
    world = make_world(center)
    hit = first_collision(world, FORWARD_RAY)
    assert hit.object is world.get_object(0)
    assert close(hit.position, FORWARD_RAY.origin + FORWARD_RAY.direction * hit.distance)
    assert math.isclose((hit.position - center).magnitude(), 1.0)
    assert math.isclose((hit.exit_position - center).magnitude(), 1.0)
    assert close(hit.normal, (hit.position - center).normalized())
    assert close(hit.exit_normal, (hit.exit_position - center).normalized())
    assert hit.exit_distance > hit.distance > 0


def test_nearest_object_wins_regardless_of_order():
    far = Vector3(0.0, 0.0, 9.0)
    near = Vector3(0.0, 0.0, 4.0)
    world = make_world(far, near)
    hit = first_collision(world, FORWARD_RAY)
    assert hit.object is world.get_object(1)
    assert hit.object.position == near


def test_origin_inside_sphere_uses_exit_point():
    world = make_world(Vector3(0.0, 0.0, 0.5))
    hit = first_collision(world, FORWARD_RAY)
    assert hit.distance == hit.exit_distance
    assert hit.position == hit.exit_position


def test_unsupported_shape_raises():
    world = World()
    world.add_object(make_object(Vector3(0.0, 0.0, 5.0), ShapeType.CUBE))
    with pytest.raises(UnsupportedShapeError):
        first_collision(world, FORWARD_RAY)
    with pytest.raises(UnsupportedShapeError):
        internal_collision(world.get_object(0), FORWARD_RAY)


def test_internal_collision_from_inside():
    obj = make_object(Vector3(0.0, 0.0, 0.0))
    hit = internal_collision(obj, FORWARD_RAY)
    assert hit.object is obj
    assert math.isclose(hit.position.magnitude(), 1.0)
    assert hit.position == hit.exit_position


def test_internal_collision_miss():
    obj = make_object(Vector3(0.0, 5.0, 0.0))
    assert internal_collision(obj, FORWARD_RAY) is None


def _hit(center=Vector3(0.0, 0.0, 5.0), ray=FORWARD_RAY) -> CollisionInfo:
    return first_collision(make_world(center), ray)


def test_diffuse_ray_points_at_light():
    hit = _hit()
    rays = diffuse_rays(hit)
    assert len(rays) == 1
    ray = rays[0]
    assert ray.origin == hit.position
    light = Vector3(0.0, 5.0, 3.0)
    assert math.isclose(ray.direction.magnitude(), 1.0)
    assert close(ray.origin + ray.direction * (light - ray.origin).magnitude(), light)


def test_head_on_reflection_reverses_ray():
    hit = _hit()
    reflected = reflection_ray(FORWARD_RAY, hit)
    assert reflected.origin == hit.position
    assert tuple(reflected.direction) == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)


def test_head_on_refraction_passes_straight_through():
    hit = _hit()
    refracted = refraction_ray(FORWARD_RAY, hit)
    assert refracted.origin == hit.exit_position
    assert close(refracted.direction, FORWARD_RAY.direction)


def test_off_centre_refraction_is_unit_and_leaves_from_exit():
    ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.05, 0.03, 1.0).normalized())
    hit = _hit(ray=ray)
    refracted = refraction_ray(ray, hit)
    assert refracted.origin == hit.exit_position
    assert math.isclose(refracted.direction.magnitude(), 1.0)


@pytest.mark.parametrize(
    "build",
    [
        lambda: diffuse_rays(None),
        lambda: reflection_ray(FORWARD_RAY, None),
        lambda: refraction_ray(FORWARD_RAY, None),
    ],
)
def test_missing_collision_raises(build):
    with pytest.raises(ValueError):
        build()