"""Thin-lens camera model with depth of field and shutter time.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits at the focus distance in front of the eye. Rays start at a
random point on a lens disk of radius aperture / 2 and pass through the
viewport point for (s, t), so geometry at the focus distance is sharp and
everything else blurs. Each ray is stamped with a random instant in
[shutter_open, shutter_close] for motion blur.

Geometry is computed host-side once; :class:`Camera` then holds the result
in Taichi fields and generates rays inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> config = CameraConfig(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=16.0 / 9.0,
    ...     aperture=0.1,
    ...     focus_distance=10.0,
    ... )
    >>> camera = Camera(config)
    >>> # Inside a kernel taking camera as ti.template():
    >>> # ray, rng = camera.get_ray(s, t, rng)
"""

import math
from dataclasses import dataclass, replace

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import make_ray, random_in_unit_disk
from src.pathtracer.core.rng import next_float
from src.pathtracer.core.vector import CameraFrame, Vector3, WorldPoint

vec3 = tm.vec3

# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for a thin-lens camera.

    Attributes:
        lookfrom: Eye position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_distance: Distance from the eye to the plane in focus.
        shutter_open: Start of the shutter interval.
        shutter_close: End of the shutter interval. Equal to shutter_open
            when motion blur is unused.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aspect_ratio: float = 16.0 / 9.0
    aperture: float = 0.0
    focus_distance: float = 1.0
    shutter_open: float = 0.0
    shutter_close: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180), got {self.vfov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.aperture < 0.0:
            raise ValueError(f"Aperture must be non-negative, got {self.aperture}")
        if self.focus_distance <= 0.0:
            raise ValueError(f"Focus distance must be positive, got {self.focus_distance}")
        if self.shutter_close < self.shutter_open:
            raise ValueError(
                f"Shutter closes ({self.shutter_close}) before it opens ({self.shutter_open})"
            )
        view = np.subtract(self.lookfrom, self.lookat)
        if np.linalg.norm(view) == 0.0:
            raise ValueError("lookfrom and lookat must differ")
        if np.linalg.norm(np.cross(self.vup, view)) == 0.0:
            raise ValueError("vup must not be parallel to the view direction")

    def with_aspect_ratio(self, aspect_ratio: float) -> "CameraConfig":
        """Return a copy with a different aspect ratio."""
        return replace(self, aspect_ratio=aspect_ratio)


# =============================================================================
# Camera
# =============================================================================


@ti.data_oriented
class Camera:
    """Immutable thin-lens camera.

    Host-side attributes describe the derived geometry; the same values are
    mirrored into Taichi fields for :meth:`get_ray`.

    Attributes:
        frame: Eye position and orthonormal basis (u right, v up, w back).
        horizontal: Full viewport width vector, scaled by focus distance.
        vertical: Full viewport height vector, scaled by focus distance.
        lower_left_corner: Viewport corner at s = 0, t = 0.
        lens_radius: aperture / 2.
        shutter_open: Start of the shutter interval.
        shutter_close: End of the shutter interval.
    """

    def __init__(self, config: CameraConfig) -> None:
        self.config = config

        theta = math.radians(config.vfov)
        viewport_height = 2.0 * math.tan(theta / 2.0)
        viewport_width = config.aspect_ratio * viewport_height

        # Build orthonormal basis using NumPy
        lookfrom = np.asarray(config.lookfrom, dtype=np.float64)
        lookat = np.asarray(config.lookat, dtype=np.float64)
        vup = np.asarray(config.vup, dtype=np.float64)

        w = lookfrom - lookat
        w = w / np.linalg.norm(w)
        u = np.cross(vup, w)
        u = u / np.linalg.norm(u)
        v = np.cross(w, u)

        self.frame = CameraFrame(
            origin=WorldPoint.of(lookfrom),
            u=Vector3.of(u),
            v=Vector3.of(v),
            w=Vector3.of(w),
        )
        self.horizontal = config.focus_distance * viewport_width * self.frame.u
        self.vertical = config.focus_distance * viewport_height * self.frame.v
        self.lower_left_corner = (
            self.frame.origin
            - self.horizontal / 2.0
            - self.vertical / 2.0
            - config.focus_distance * self.frame.w
        )
        self.lens_radius = config.aperture / 2.0
        self.shutter_open = config.shutter_open
        self.shutter_close = config.shutter_close

        self._origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._v = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._lens_radius = ti.field(dtype=ti.f32, shape=())
        self._shutter = ti.Vector.field(2, dtype=ti.f32, shape=())

        self._origin[None] = self.frame.origin.to_tuple()
        self._u[None] = self.frame.u.to_tuple()
        self._v[None] = self.frame.v.to_tuple()
        self._horizontal[None] = self.horizontal.to_tuple()
        self._vertical[None] = self.vertical.to_tuple()
        self._lower_left_corner[None] = self.lower_left_corner.to_tuple()
        self._lens_radius[None] = self.lens_radius
        self._shutter[None] = (self.shutter_open, self.shutter_close)

    @property
    def origin(self) -> WorldPoint:
        return self.frame.origin

    def viewport_point(self, s: float, t: float) -> WorldPoint:
        """World-space point on the focus plane for image coordinates (s, t)."""
        return self.lower_left_corner + s * self.horizontal + t * self.vertical

    @ti.func
    def get_ray(self, s: ti.f32, t: ti.f32, rng: ti.u32):
        """Generate a ray through normalized image coordinates (s, t).

        s runs left to right and t bottom to top, both over [0, 1]. The lens
        sample is drawn first, then the shutter instant; both draws happen
        even for a pinhole camera or a closed shutter interval.

        Args:
            s: Horizontal coordinate.
            t: Vertical coordinate.
            rng: Generator state.

        Returns:
            A tuple (ray, new_state).
        """
        disk, state = random_in_unit_disk(rng)
        rd = self._lens_radius[None] * disk
        offset = self._u[None] * rd.x + self._v[None] * rd.y

        draw, state = next_float(state)
        shutter = self._shutter[None]
        time = shutter[0] + (shutter[1] - shutter[0]) * draw

        origin = self._origin[None] + offset
        target = (
            self._lower_left_corner[None] + s * self._horizontal[None] + t * self._vertical[None]
        )
        return make_ray(origin, target - origin, time), state
