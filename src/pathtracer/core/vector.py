"""Host-side vector and frame-tagged point types.

Scene construction and camera setup happen in Python before any kernel runs.
This module gives that code nominal types that keep coordinate frames apart:

- ``Vector3``: a displacement or direction. Frame-free.
- ``WorldPoint``: a position in world space.
- ``CameraPoint``: a position relative to the camera (origin at the eye,
  axes along the camera basis u, v, w).

Point arithmetic follows affine rules: subtracting two points of the same
frame yields a ``Vector3``, adding a ``Vector3`` to a point yields a point of
the same frame. Any operation mixing frames raises ``TypeError``; the only way
across is :class:`CameraFrame` with its explicit ``to_world`` and
``to_camera`` transforms.

Inside Taichi kernels everything is a world-space ``ti.math.vec3``; use
:meth:`Vector3.to_tuple` / :meth:`WorldPoint.to_tuple` when uploading.

Example:
    >>> a = WorldPoint(1.0, 2.0, 3.0)
    >>> b = WorldPoint(0.0, 0.0, 0.0)
    >>> a - b
    Vector3(x=1.0, y=2.0, z=3.0)
    >>> a + Vector3(0.0, 1.0, 0.0)
    WorldPoint(x=1.0, y=3.0, z=3.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np

# Threshold used by near_zero()
NEAR_ZERO_EPSILON = 1e-8


@dataclass(frozen=True)
class Vector3:
    """A frame-free 3D displacement or direction."""

    x: float
    y: float
    z: float

    @classmethod
    def of(cls, values: Sequence[float]) -> Vector3:
        """Build a vector from any 3-element sequence."""
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __add__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: object) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, (int, float)):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Vector3:
        if isinstance(other, (int, float)):
            return Vector3(self.x / other, self.y / other, self.z / other)
        return NotImplemented

    def dot(self, other: Vector3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Cross product (right-handed)."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector3:
        """Return the unit vector in the same direction.

        Raises:
            ValueError: If the vector has zero length.
        """
        n = self.length()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return self / n

    def near_zero(self) -> bool:
        """True if every component is below NEAR_ZERO_EPSILON in magnitude."""
        return all(abs(c) < NEAR_ZERO_EPSILON for c in self)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class _Point:
    """Affine point; subclasses fix the frame."""

    x: float
    y: float
    z: float

    @classmethod
    def of(cls, values: Sequence[float]):
        """Build a point of this frame from any 3-element sequence."""
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __add__(self, other: object):
        if not isinstance(other, Vector3):
            return NotImplemented
        return type(self)(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object):
        if type(other) is type(self):
            return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector3):
            return type(self)(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def distance_to(self, other: _Point) -> float:
        """Distance to another point of the same frame."""
        return (self - other).length()

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class WorldPoint(_Point):
    """A position in world space."""


@dataclass(frozen=True)
class CameraPoint(_Point):
    """A position in camera space (eye at origin, axes u, v, w)."""


@dataclass(frozen=True)
class CameraFrame:
    """Explicit transform between camera space and world space.

    Attributes:
        origin: The eye position in world space.
        u: Camera right axis in world space (unit length).
        v: Camera up axis in world space (unit length).
        w: Camera backward axis in world space (unit length).
    """

    origin: WorldPoint
    u: Vector3
    v: Vector3
    w: Vector3

    def to_world(self, point: CameraPoint) -> WorldPoint:
        """Map a camera-space point into world space."""
        if not isinstance(point, CameraPoint):
            raise TypeError(f"Expected CameraPoint, got {type(point).__name__}")
        return self.origin + (point.x * self.u + point.y * self.v + point.z * self.w)

    def to_camera(self, point: WorldPoint) -> CameraPoint:
        """Map a world-space point into camera space."""
        if not isinstance(point, WorldPoint):
            raise TypeError(f"Expected WorldPoint, got {type(point).__name__}")
        d = point - self.origin
        return CameraPoint(d.dot(self.u), d.dot(self.v), d.dot(self.w))


# =============================================================================
# Host-side random helpers (scene generation)
# =============================================================================


def random_vector(rng: np.random.Generator, lo: float = 0.0, hi: float = 1.0) -> Vector3:
    """Draw a vector with components uniform in [lo, hi).

    Args:
        rng: The generator to draw from. Scene builders own their generator.
        lo: Lower bound (inclusive).
        hi: Upper bound (exclusive).
    """
    x, y, z = rng.uniform(lo, hi, size=3)
    return Vector3(float(x), float(y), float(z))
