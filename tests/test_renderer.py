import math

import pytest

from rayengine.camera import Camera, Player
from rayengine.raymgr import Ray
from rayengine.renderer import Renderer, generate_rays, pack_color
from rayengine.transform import Rotation, Transform
from rayengine.vector import Vector3
from rayengine.world import Material, ShapeType, World, WorldObject


def _camera(position=None):
    return Camera(position or Vector3(), Rotation(0.0, 0.0, 0.0), 60.0)


def _sphere(center, color=Vector3(255.0, 0.0, 0.0), reflectivity=0.0, transparency=0.0):
    return WorldObject(
        Material(color, reflectivity, transparency),
        Transform(center, Rotation(), Vector3(1.0, 1.0, 1.0)),
        ShapeType.SPHERE,
    )


def _world(*objects):
    world = World()
    for obj in objects:
        world.add_object(obj)
    return world


FORWARD = Ray(Vector3(), Vector3(0.0, 0.0, 1.0))


def test_pack_color_red_full_alpha():
    assert pack_color(Vector3(255.0, 0.0, 0.0)) == 0xFF0000FF


def test_pack_color_black_is_alpha_only():
    assert pack_color(Vector3(0.0, 0.0, 0.0)) == 0xFF


def test_pack_color_truncates_components():
    assert pack_color(Vector3(1.9, 2.2, 3.7)) == pack_color(Vector3(1.0, 2.0, 3.0))


def test_generate_rays_count_and_origin():
    origin = Vector3(1.0, 2.0, 3.0)
    rays = generate_rays(_camera(origin), 4, 2)
    assert len(rays) == 8
    assert all(ray.origin == origin for ray in rays)
    assert all(ray.direction.magnitude() == pytest.approx(1.0) for ray in rays)


def test_generate_rays_single_pixel_looks_forward():
    (ray,) = generate_rays(_camera(), 1, 1)
    assert ray.direction.x == pytest.approx(0.0)
    assert ray.direction.y == pytest.approx(0.0)
    assert ray.direction.z == pytest.approx(1.0)


@pytest.mark.parametrize("width, height", [(0, 1), (1, 0), (-2, 2)])
def test_generate_rays_rejects_empty_frame(width, height):
    with pytest.raises(ValueError):
        generate_rays(_camera(), width, height)


def test_generate_rays_rejects_tall_frame():
    with pytest.raises(ValueError):
        generate_rays(_camera(), 2, 3)


def test_renderer_dimensions_follow_frame():
    renderer = Renderer(World(), 8, 4)
    assert (renderer.width, renderer.height) == (8, 4)
    assert renderer.frame.name == "WindowFrame"


def test_light_in_empty_world_is_black():
    assert Renderer(World(), 2, 2).calc_total_light(FORWARD) == Vector3(0.0, 0.0, 0.0)


def test_diffuse_light_uses_material_color():
    renderer = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0))), 1, 1)
    light = renderer.calc_total_light(FORWARD)
    assert 0 < light.x < 255
    assert light.y == 0
    assert light.z == 0


def test_diffuse_light_scales_with_color():
    single = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0), Vector3(100.0, 0.0, 0.0))), 1, 1)
    double = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0), Vector3(200.0, 0.0, 0.0))), 1, 1)
    assert double.calc_total_light(FORWARD).x == pytest.approx(
        2 * single.calc_total_light(FORWARD).x
    )


def test_perfect_mirror_reflecting_into_nothing_is_black():
    renderer = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0), reflectivity=1.0)), 1, 1)
    light = renderer.calc_total_light(FORWARD)
    assert light.x == pytest.approx(0.0)
    assert light.y == pytest.approx(0.0)
    assert light.z == pytest.approx(0.0)


def test_negative_depth_limit_gives_black():
    renderer = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0))), 1, 1, max_ray_depth=-1)
    assert renderer.calc_total_light(FORWARD) == Vector3(0.0, 0.0, 0.0)


def test_invalid_material_raises():
    renderer = Renderer(
        _world(_sphere(Vector3(0.0, 0.0, 5.0), reflectivity=0.7, transparency=0.5)), 1, 1
    )
    with pytest.raises(ValueError):
        renderer.calc_total_light(FORWARD)


def test_produce_world_frame_empty_world_is_black():
    renderer = Renderer(World(), 2, 2)
    renderer.produce_world_frame(Player(_camera()))
    assert list(renderer.frame.buffer) == [pack_color(Vector3())] * 4


def test_produce_world_frame_matches_traced_light():
    renderer = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0))), 1, 1)
    player = Player(_camera())
    renderer.produce_world_frame(player)
    (ray,) = generate_rays(player.camera, 1, 1)
    assert renderer.frame.get_pixel(0, 0) == pack_color(renderer.calc_total_light(ray))
    assert renderer.frame.get_pixel(0, 0) != pack_color(Vector3())


def test_render_rays_only_touches_given_range():
    renderer = Renderer(World(), 2, 2)
    rays = generate_rays(_camera(), 2, 2)
    renderer.render_rays(rays, 1, 3)
    black = pack_color(Vector3())
    assert list(renderer.frame.buffer) == [0, black, black, 0]


def test_render_rays_places_pixels_by_index():
    renderer = Renderer(_world(_sphere(Vector3(0.0, 0.0, 5.0))), 2, 1)
    hit = Ray(Vector3(), Vector3(0.0, 0.0, 1.0))
    miss = Ray(Vector3(), Vector3(0.0, 0.0, -1.0))
    renderer.render_rays([miss, hit], 0, 2)
    assert renderer.frame.get_pixel(0, 0) == pack_color(Vector3())
    assert renderer.frame.get_pixel(1, 0) == pack_color(renderer.calc_total_light(hit))
    assert math.isfinite(renderer.calc_total_light(hit).x)