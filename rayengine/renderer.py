"""Primary ray generation and recursive light calculation into a frame."""

from __future__ import annotations

import math
from itertools import islice
from typing import Sequence

from rayengine.camera import Camera, Player
from rayengine.frame import Frame
from rayengine.raymgr import (
    Ray,
    diffuse_rays,
    first_collision,
    reflection_ray,
    refraction_ray,
)
from rayengine.vector import PI, Vector3
from rayengine.world import World

__all__ = ["pack_color", "generate_rays", "Renderer"]

_UINT32_MASK = 0xFFFFFFFF
_BLACK = Vector3(0.0, 0.0, 0.0)


def pack_color(color: Vector3) -> int:
    """Pack a colour into a 32-bit RGBA value with full alpha.

    Components are truncated towards zero before packing.
    """
    packed = int(color.x) << 24 | int(color.y) << 16 | int(color.z) << 8 | 0xFF
    return packed & _UINT32_MASK


def generate_rays(camera: Camera, frame_width: int, frame_height: int) -> list[Ray]:
    """Return one primary ray per pixel, in row-major order.

    The aspect ratio is the whole-number quotient of width and height, so the
    frame must be at least as wide as it is tall.
    """
    if frame_width <= 0 or frame_height <= 0:
        raise ValueError(f"invalid frame size {frame_width}x{frame_height}")
    aspect_ratio = frame_width // frame_height
    if aspect_ratio == 0:
        raise ValueError("frame must be at least as wide as it is tall")

    fru = camera.fru_vector()
    half_width = math.tan((camera.fov * PI / 180) / 2)
    half_height = half_width / aspect_ratio
    origin = camera.position

    rays = []
    for py in range(frame_height):
        v = ((py + 0.5) / frame_height) * 2 - 1
        y = v * half_height
        for px in range(frame_width):
            u = ((px + 0.5) / frame_width) * 2 - 1
            x = u * half_width
            direction = (x * fru.right + y * fru.up + fru.forward).normalized()
            rays.append(Ray(origin, direction))
    return rays


class Renderer:
    """Traces rays through a world and stores the results in a window frame."""

    def __init__(
        self,
        world: World,
        width: int,
        height: int,
        name: str = "WindowFrame",
        max_ray_depth: int = 1,
    ) -> None:
        self.world = world
        self.frame = Frame(name, width, height)
        self.max_ray_depth = max_ray_depth

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_ray_depth={self.max_ray_depth})"
        )

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def height(self) -> int:
        return self.frame.height

    def calc_total_light(self, ray: Ray) -> Vector3:
        """Total light carried back along a ray."""
        return self._trace(ray, 0)

    def _trace(self, ray: Ray, depth: int) -> Vector3:
        if depth > self.max_ray_depth:
            return _BLACK

        hit = first_collision(self.world, ray)
        if hit is None:
            return _BLACK

        material = hit.object.material
        pct_refl = material.reflectivity
        pct_refr = material.transparency
        pct_diff = 1 - pct_refl - pct_refr
        if pct_diff < 0:
            raise ValueError(
                "invalid material: reflectivity and transparency must sum to at most 1.0"
            )

        refl_ray = reflection_ray(ray, hit)
        refr_ray = refraction_ray(ray, hit)

        diffuse = _BLACK
        for light_ray in diffuse_rays(hit):
            if first_collision(self.world, light_ray) is None:
                intensity = max(0.0, hit.normal.dot(light_ray.direction))
                diffuse = diffuse + material.color * intensity

        reflected = self._trace(refl_ray, depth + 1)
        refracted = self._trace(refr_ray, depth + 1)
        return diffuse * pct_diff + reflected * pct_refl + refracted * pct_refr

    def render_rays(self, rays: Sequence[Ray], start: int, end: int) -> None:
        """Trace ``rays[start:end]`` and store each colour at its pixel index."""
        width = self.width
        for index, ray in enumerate(islice(rays, start, end), start):
            color = self.calc_total_light(ray)
            self.frame.set_pixel(index % width, index // width, pack_color(color))

    def produce_world_frame(self, player: Player) -> None:
        """Render the whole frame as seen through the player's camera."""
        rays = generate_rays(player.camera, self.width, self.height)
        self.render_rays(rays, 0, len(rays))