"""Host-side scene description.

A Scene is an ordered collection of primitives, each owning its material.
Insertion order matters: it is the scan order for nearest-hit queries, so
ties go to the primitive added first, and a primitive's position in the list
is the ``material_id`` reported in hit records.

Scenes are plain Python objects. Upload one to the device with
:class:`src.pathtracer.scene.intersection.SceneData` before rendering.

Example:
    >>> from src.pathtracer.core.vector import WorldPoint
    >>> from src.pathtracer.materials.material import Lambertian
    >>> scene = Scene()
    >>> scene.add_sphere(WorldPoint(0, 0, -1), 0.5, Lambertian((0.5, 0.5, 0.5)))
    0
    >>> len(scene)
    1
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

from src.pathtracer.core.vector import Vector3, WorldPoint
from src.pathtracer.geometry.aabb import AABB
from src.pathtracer.materials.material import Material, material_from_dict, material_to_dict

# Maximum number of primitives a scene may hold
MAX_PRIMITIVES = 1024


class PrimitiveType(IntEnum):
    """Enumeration of supported primitive kinds.

    Stored per primitive in the scene fields and used for intersection
    dispatch.
    """

    SPHERE = 0
    MOVING_SPHERE = 1


def _radius_box(center: WorldPoint, radius: float) -> AABB:
    r = Vector3(radius, radius, radius)
    return AABB(center - r, center + r)


@dataclass(frozen=True)
class SphereInfo:
    """A static sphere.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: The material of the sphere's surface.
    """

    center: WorldPoint
    radius: float
    material: Material

    primitive_type = PrimitiveType.SPHERE

    def __post_init__(self) -> None:
        if not isinstance(self.center, WorldPoint):
            raise TypeError(f"Sphere center must be a WorldPoint, got {type(self.center).__name__}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def center_at(self, time: float) -> WorldPoint:
        """Center at the given instant; static spheres ignore the time."""
        return self.center

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> AABB:
        """Box enclosing the sphere."""
        return _radius_box(self.center, self.radius)


@dataclass(frozen=True)
class MovingSphereInfo:
    """A sphere moving linearly from center0 at time0 to center1 at time1.

    Attributes:
        center0: Center at time0.
        center1: Center at time1.
        time0: Start of the motion interval.
        time1: End of the motion interval.
        radius: The radius of the sphere (positive).
        material: The material of the sphere's surface.
    """

    center0: WorldPoint
    center1: WorldPoint
    time0: float
    time1: float
    radius: float
    material: Material

    primitive_type = PrimitiveType.MOVING_SPHERE

    def __post_init__(self) -> None:
        for name in ("center0", "center1"):
            value = getattr(self, name)
            if not isinstance(value, WorldPoint):
                raise TypeError(f"{name} must be a WorldPoint, got {type(value).__name__}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        if self.time1 <= self.time0:
            raise ValueError(
                f"Moving sphere needs time0 < time1, got time0={self.time0} time1={self.time1}"
            )

    def center_at(self, time: float) -> WorldPoint:
        """Linearly interpolated center at the given instant."""
        f = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * f

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> AABB:
        """Box enclosing the sphere over the interval [time0, time1]."""
        box0 = _radius_box(self.center_at(time0), self.radius)
        box1 = _radius_box(self.center_at(time1), self.radius)
        return box0.surrounding(box1)


Primitive = Union[SphereInfo, MovingSphereInfo]


@dataclass
class Scene:
    """Ordered collection of primitives.

    Attributes:
        primitives: The primitives in insertion order.
    """

    primitives: list[Primitive] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def __getitem__(self, index: int) -> Primitive:
        return self.primitives[index]

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add(self, primitive: Primitive) -> int:
        """Append a primitive.

        Returns:
            The index of the primitive, which is also the material_id hits on
            it report.

        Raises:
            RuntimeError: If the scene already holds MAX_PRIMITIVES primitives.
            TypeError: If the object is not a supported primitive.
        """
        if not isinstance(primitive, (SphereInfo, MovingSphereInfo)):
            raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")
        if len(self.primitives) >= MAX_PRIMITIVES:
            raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
        self.primitives.append(primitive)
        return len(self.primitives) - 1

    def add_sphere(self, center: WorldPoint, radius: float, material: Material) -> int:
        """Add a static sphere and return its index."""
        return self.add(SphereInfo(center=center, radius=radius, material=material))

    def add_moving_sphere(
        self,
        center0: WorldPoint,
        center1: WorldPoint,
        time0: float,
        time1: float,
        radius: float,
        material: Material,
    ) -> int:
        """Add a moving sphere and return its index."""
        return self.add(
            MovingSphereInfo(
                center0=center0,
                center1=center1,
                time0=time0,
                time1=time1,
                radius=radius,
                material=material,
            )
        )

    def clear(self) -> None:
        """Remove all primitives."""
        self.primitives.clear()

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> AABB | None:
        """Box enclosing every primitive over [time0, time1].

        Returns:
            The union of the primitives' boxes, or None for an empty scene.
        """
        box = None
        for primitive in self.primitives:
            current = primitive.bounding_box(time0, time1)
            box = current if box is None else box.surrounding(current)
        return box

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize the scene to a JSON-ready dictionary."""
        items = []
        for primitive in self.primitives:
            if isinstance(primitive, SphereInfo):
                items.append(
                    {
                        "type": "sphere",
                        "center": list(primitive.center),
                        "radius": primitive.radius,
                        "material": material_to_dict(primitive.material),
                    }
                )
            else:
                items.append(
                    {
                        "type": "moving_sphere",
                        "center0": list(primitive.center0),
                        "center1": list(primitive.center1),
                        "time0": primitive.time0,
                        "time1": primitive.time1,
                        "radius": primitive.radius,
                        "material": material_to_dict(primitive.material),
                    }
                )
        return {"primitives": items}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from a dictionary produced by :meth:`to_dict`.

        Raises:
            ValueError: If a primitive or material type is unknown or a
                parameter is invalid.
        """
        scene = cls()
        for item in data.get("primitives", []):
            kind = item.get("type")
            material = material_from_dict(item["material"])
            if kind == "sphere":
                scene.add_sphere(WorldPoint.of(item["center"]), float(item["radius"]), material)
            elif kind == "moving_sphere":
                scene.add_moving_sphere(
                    WorldPoint.of(item["center0"]),
                    WorldPoint.of(item["center1"]),
                    float(item["time0"]),
                    float(item["time1"]),
                    float(item["radius"]),
                    material,
                )
            else:
                raise ValueError(f"Unknown primitive type: {kind!r}")
        return scene
