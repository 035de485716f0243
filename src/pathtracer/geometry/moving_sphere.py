"""Moving sphere primitive for motion blur.

A moving sphere's center travels linearly from center0 at time0 to center1 at
time1. A ray sees the sphere where it is at ``ray.time``; averaging rays
stamped with different shutter instants produces motion blur.

Times outside [time0, time1] extrapolate along the same line.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.sphere import HitRecord, hit_sphere_at

vec3 = tm.vec3


@ti.dataclass
class MovingSphere:
    """A sphere whose center moves linearly over a time interval.

    Attributes:
        center0: Center at time0.
        center1: Center at time1.
        time0: Start of the motion interval.
        time1: End of the motion interval (time1 > time0).
        radius: The radius of the sphere.
    """

    center0: vec3
    center1: vec3
    time0: ti.f32
    time1: ti.f32
    radius: ti.f32


@ti.func
def moving_sphere_center(sphere: MovingSphere, time: ti.f32) -> vec3:
    """Center of the sphere at the given instant."""
    f = (time - sphere.time0) / (sphere.time1 - sphere.time0)
    return sphere.center0 + f * (sphere.center1 - sphere.center0)


@ti.func
def hit_moving_sphere(ray: Ray, sphere: MovingSphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test a ray against the sphere positioned at the ray's time."""
    center = moving_sphere_center(sphere, ray.time)
    return hit_sphere_at(ray, center, sphere.radius, t_min, t_max)
