# rayengine

A small ray tracer written in pure Python. It traces one ray per pixel from a
camera into a world of spheres. Each hit mixes diffuse light from a single
point light at (0, 5, 3) with reflected and refracted light. The result is
packed into a 32-bit RGBA frame buffer. A frame can be rendered on the calling
thread or spread over a pool of worker threads.

The package has no runtime dependencies.

## Modules

- `rayengine.vector`: immutable `Vector2` and `Vector3` with `magnitude`,
  `normalized`, `reversed`, `dot`, `angle_between` and `+`, `-`, unary `-` and
  scalar `*`. `Vector3` also has `cross` and the axis constructors
  `Vector3.right()`, `Vector3.up()` and `Vector3.forward()`. `angle_between`
  raises `ValueError` for a zero-length vector. The module also holds the
  constant `PI`.
- `rayengine.transform`: `Rotation(yaw, pitch, roll)` and
  `Transform(position, rotation, scale)`.
- `rayengine.camera`: `Camera(position, rotation, fov)` with
  `forward_vector()` and `fru_vector()`, which returns an `FRUVector` of
  forward, right and up vectors. Yaw and pitch are in radians. Roll and the
  field of view are in degrees. `Player(camera)` holds a camera and has a
  `movement_speed` of 0.1.
- `rayengine.world`: `ShapeType`, `Material(color, reflectivity,
  transparency)`, `WorldObject(material, transform, shape)` and `World`.
  `World` has `add_object`, `get_object`, `object_count`, `len()` and iteration.
  `get_object` raises `IndexError` for an index out of range.
- `rayengine.frame`: `Frame(name, width, height)`, a zero-filled buffer of
  32-bit pixels in row-major order. It has `set_pixel`, `set_pixel_rgba`,
  `get_pixel` and a read-only `buffer` memoryview. Coordinates outside the
  frame raise `IndexError`.
- `rayengine.raymgr`: `Ray`, `CollisionInfo` and `UnsupportedShapeError`, and
  the functions `first_collision`, `internal_collision`, `diffuse_rays`,
  `reflection_ray` and `refraction_ray`.
- `rayengine.renderer`: `generate_rays(camera, width, height)`,
  `pack_color(color)` and `Renderer(world, width, height, name="WindowFrame",
  max_ray_depth=1)`. The renderer has `calc_total_light`, `render_rays`,
  `produce_world_frame`, and a `frame` attribute that holds the result.
- `rayengine.workers`: `WorkTask`, which gets a unique, increasing `uid`;
  `WorkerThread`, an abstract long-lived worker with a `handle_task` method;
  and `ThreadPool(name, n_threads, worker_factory)`. The pool hands each task
  to an idle worker and queues the rest. It can be used as a context manager.
- `rayengine.rendering`: `RenderTask`, `RenderThread`, `split_tasks` (1000
  rays per task by default) and `render_frame`.
- `rayengine.log`: console logging through `info`, `debug`, `warn` and
  `error`. Only warnings and errors are printed.

## Example

```python
from rayengine.camera import Camera, Player
from rayengine.rendering import RenderThread, render_frame
from rayengine.renderer import Renderer, generate_rays
from rayengine.transform import Rotation, Transform
from rayengine.vector import Vector3
from rayengine.workers import ThreadPool
from rayengine.world import Material, ShapeType, World, WorldObject

camera = Camera(Vector3(0, 0, 0), Rotation(0, 0, 0), 60)
rays = generate_rays(camera, 4, 3)
print(len(rays))  # 12, one ray per pixel, row by row

world = World()
red = Material(color=Vector3(255, 0, 0), reflectivity=0.2)
world.add_object(
    WorldObject(red, Transform(Vector3(0, 0, 5), Rotation(), Vector3(1, 1, 1)), ShapeType.SPHERE)
)

renderer = Renderer(world, 64, 48)

# On the calling thread:
renderer.produce_world_frame(Player(camera))

# Or on a pool of worker threads:
with ThreadPool("RenderPool", 4, RenderThread) as pool:
    render_frame(pool, renderer, camera)

print(hex(renderer.frame.get_pixel(32, 24)))
```

## Notes

- Only spheres have collision logic, and every sphere has radius 1. If the
  world holds an object of any other shape, collision tests raise
  `raymgr.UnsupportedShapeError`.
- A material's reflectivity and transparency must add up to at most 1.0. The
  rest of the light is diffuse. A hit on a material that breaks this rule
  raises `ValueError`.
- Colours are packed as `0xRRGGBBAA` with alpha `0xFF`. Components are
  truncated to integers.
- `generate_rays` uses the whole-number quotient of width and height as the
  aspect ratio. The frame must therefore be at least as wide as it is tall.
- `ThreadPool.add_task`, `add_tasks` and `wait_idle` raise `RuntimeError`
  unless the pool has been started.

## What it does not do

The package only computes frames in memory. It has no command to run. It
opens no window and reads no keyboard or mouse input, so there is no
interactive main loop. It does not write frames to image files. To see or
save a frame, read `renderer.frame.buffer` and pass it on yourself.