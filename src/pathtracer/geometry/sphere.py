"""Sphere primitive with robust ray-sphere intersection.

This module provides the HitRecord shared by all primitives, the Sphere
dataclass and its intersection function. Roots are found with the robust
quadratic formula from Ray Tracing Gems, which avoids catastrophic
cancellation when h^2 is nearly equal to a*c.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (world space).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss. All other
            fields are only meaningful when hit == 1.
        t: The ray parameter of the intersection.
        point: The intersection point (world space).
        normal: Unit surface normal, oriented against the incoming ray.
        front_face: 1 if the ray arrived from outside the surface, 0 if it
            hit the inside.
        material_id: Index of the primitive in the scene's ordered list.
            Primitive-level tests leave it at -1; the scene fills it in.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray: Ray, outward_normal: vec3):
    """Orient a normal against the incoming ray.

    Args:
        ray: The incoming ray.
        outward_normal: The geometric normal pointing out of the surface
            (unit length).

    Returns:
        A tuple (front_face, normal) where front_face is 1 when the ray
        arrives from outside and normal always opposes the ray direction.
    """
    front_face = 0
    normal = -outward_normal
    if tm.dot(ray.direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 with the numerically stable formula.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Degenerate q, fall back to the textbook formula
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere_at(
    ray: Ray,
    center: vec3,
    radius: ti.f32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere given by center and radius.

    Shared by static and moving spheres; the latter pass the center
    evaluated at the ray's time.

    The intersection solves |O + t*D - C|^2 = r^2, i.e.

        a*t^2 + 2*h*t + c = 0

    with a = dot(D, D), h = dot(D, O - C), c = |O - C|^2 - r^2. A negative
    discriminant is a miss. Otherwise the smaller root is taken if it lies
    inside [t_min, t_max] (bounds inclusive), else the larger one, else the
    ray misses.

    Args:
        ray: The ray to test.
        center: Sphere center (world space).
        radius: Sphere radius.
        t_min: Smallest accepted ray parameter.
        t_max: Largest accepted ray parameter.

    Returns:
        A HitRecord; check its hit field. material_id is left at -1.
    """
    oc = ray.origin - center
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = h * h - a * c

    rec = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = t >= t_min and t <= t_max
        if not valid:
            t = t1
            valid = t >= t_min and t <= t_max

        if valid:
            point = ray_at(ray, t)
            outward_normal = (point - center) / radius
            front_face, normal = set_face_normal(ray, outward_normal)
            rec = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=-1,
            )

    return rec


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    See :func:`hit_sphere_at` for the root selection rules.
    """
    return hit_sphere_at(ray, sphere.center, sphere.radius, t_min, t_max)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
