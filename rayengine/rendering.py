"""Rendering tasks, the worker threads that trace them and frame dispatch."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from rayengine import log
from rayengine.camera import Camera
from rayengine.raymgr import Ray
from rayengine.renderer import Renderer, generate_rays
from rayengine.workers import ThreadPool, WorkerThread, WorkTask

__all__ = ["RenderTask", "RenderThread", "split_tasks", "render_frame"]

_RAYS_PER_TASK = 1000


@dataclass(eq=False)
class RenderTask(WorkTask):
    """Trace ``rays[start:end]`` with a renderer into its frame."""

    rays: Sequence[Ray]
    start: int
    end: int
    renderer: Renderer

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"invalid ray range [{self.start}, {self.end})")


class RenderThread(WorkerThread):
    """A worker thread that traces the rays of render tasks."""

    def handle_task(self, task: RenderTask) -> bool:
        task.renderer.render_rays(task.rays, task.start, task.end)
        return True


def split_tasks(
    rays: Sequence[Ray], renderer: Renderer, rays_per_task: int = _RAYS_PER_TASK
) -> list[RenderTask]:
    """Split rays into consecutive tasks of at most ``rays_per_task`` rays."""
    if rays_per_task < 1:
        raise ValueError(f"rays_per_task must be positive, got {rays_per_task}")
    total = len(rays)
    return [
        RenderTask(rays, start, min(start + rays_per_task, total), renderer)
        for start in range(0, rays_per_task * math.ceil(total / rays_per_task), rays_per_task)
    ]


def render_frame(pool: ThreadPool, renderer: Renderer, camera: Camera) -> list[RenderTask]:
    """Render a whole frame through the pool and wait for it; return the tasks used."""
    rays = generate_rays(camera, renderer.width, renderer.height)
    tasks = split_tasks(rays, renderer)
    log.debug(f"render_frame: dispatching {len(tasks)} tasks for {len(rays)} rays")
    pool.add_tasks(tasks)
    pool.wait_idle()
    return tasks