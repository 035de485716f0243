"""Axis-aligned bounding boxes.

Bounding boxes are the hook a bounding-volume hierarchy would build on. No
hierarchy is assembled here; primitives and scenes report their boxes and the
slab test is available to any kernel that wants a cheap reject.

The slab test relies on IEEE division semantics: a zero direction component
yields an infinite inverse, so the slab bounds on that axis become
``+/-inf`` and the interval narrowing still gives the right answer.

Example:
    >>> from src.pathtracer.core.vector import WorldPoint
    >>> box = AABB(WorldPoint(-1, -1, -1), WorldPoint(1, 1, 1))
    >>> box.surrounding(AABB(WorldPoint(0, 0, 0), WorldPoint(2, 3, 4))).maximum
    WorldPoint(x=2, y=3, z=4)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import WorldPoint

vec3 = tm.vec3


@dataclass(frozen=True)
class AABB:
    """Host-side axis-aligned bounding box in world space.

    Attributes:
        minimum: Corner with the smallest coordinates.
        maximum: Corner with the largest coordinates.
    """

    minimum: WorldPoint
    maximum: WorldPoint

    def __post_init__(self) -> None:
        for axis, lo, hi in zip("xyz", self.minimum, self.maximum):
            if lo > hi:
                raise ValueError(f"AABB minimum.{axis}={lo} exceeds maximum.{axis}={hi}")

    def surrounding(self, other: "AABB") -> "AABB":
        """Return the smallest box enclosing both boxes."""
        return AABB(
            WorldPoint(*(min(a, b) for a, b in zip(self.minimum, other.minimum))),
            WorldPoint(*(max(a, b) for a, b in zip(self.maximum, other.maximum))),
        )

    def contains(self, point: WorldPoint) -> bool:
        """True if the point lies inside or on the box."""
        return all(lo <= p <= hi for lo, p, hi in zip(self.minimum, point, self.maximum))


@ti.dataclass
class Aabb:
    """Device-side bounding box.

    Attributes:
        minimum: Corner with the smallest coordinates.
        maximum: Corner with the largest coordinates.
    """

    minimum: vec3
    maximum: vec3


@ti.func
def hit_aabb(box: Aabb, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
    """Slab test of a ray against a bounding box.

    For each axis the entry and exit parameters are computed from the inverse
    direction component, swapped when the component is negative, and used to
    narrow ``[t_min, t_max]``. Once the interval is empty the remaining axes
    are skipped.

    Args:
        box: The box to test.
        ray: The ray to test.
        t_min: Lower bound of the accepted parameter interval.
        t_max: Upper bound of the accepted parameter interval.

    Returns:
        1 if the ray overlaps the box inside the interval, 0 otherwise.
    """
    lo = t_min
    hi = t_max
    hit = 1
    for axis in ti.static(range(3)):
        if hit == 1:
            inv_d = 1.0 / ray.direction[axis]
            t0 = (box.minimum[axis] - ray.origin[axis]) * inv_d
            t1 = (box.maximum[axis] - ray.origin[axis]) * inv_d
            if inv_d < 0.0:
                tmp = t0
                t0 = t1
                t1 = tmp
            if t0 > lo:
                lo = t0
            if t1 < hi:
                hi = t1
            if hi <= lo:
                hit = 0
    return hit
