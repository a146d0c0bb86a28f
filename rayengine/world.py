"""Renderable world objects and the world that holds them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator

from rayengine.transform import Rotation, Transform
from rayengine.vector import Vector3

__all__ = ["ShapeType", "Material", "WorldObject", "World"]


class ShapeType(enum.Enum):
    """Shape of an object to render."""

    CUBE = enum.auto()
    RECTANGLE = enum.auto()
    SPHERE = enum.auto()


@dataclass(frozen=True)
class Material:
    """Surface colour and the fractions of light reflected and transmitted."""

    color: Vector3
    reflectivity: float = 0.0
    transparency: float = 0.0


@dataclass(frozen=True)
class WorldObject:
    """An instantiated, renderable object."""

    material: Material
    transform: Transform
    shape: ShapeType

    @property
    def position(self) -> Vector3:
        return self.transform.position

    @property
    def rotation(self) -> Rotation:
        return self.transform.rotation

    @property
    def scale(self) -> Vector3:
        return self.transform.scale


@dataclass
class World:
    """An ordered collection of world objects."""

    objects: list[WorldObject] = field(default_factory=list)

    def add_object(self, obj: WorldObject) -> None:
        self.objects.append(obj)

    def get_object(self, index: int) -> WorldObject:
        """Return the object at ``index``; raise IndexError when out of range."""
        if not 0 <= index < len(self.objects):
            raise IndexError(f"no world object at index {index}")
        return self.objects[index]

    @property
    def object_count(self) -> int:
        return len(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[WorldObject]:
        return iter(self.objects)