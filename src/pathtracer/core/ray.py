"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass and the vector kernel used inside
Taichi kernels: arithmetic helpers, reflection and refraction, Schlick's
reflectance approximation and the random direction generators used for Monte
Carlo sampling.

All vectors handled here are world-space ``vec3`` values. The frame-tagged
host types live in :mod:`src.pathtracer.core.vector`.

Random generators never touch a global generator: each one takes an explicit
``rng`` state and returns ``(value, new_state)`` (see
:mod:`src.pathtracer.core.rng`).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction, time=0.0)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.rng import next_range

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Upper bound on rejection-sampling attempts
MAX_REJECTION_ATTEMPTS = 100


@ti.dataclass
class Ray:
    """A ray with an origin, a direction and a sample instant.

    Attributes:
        origin: The starting point of the ray (world space).
        direction: The direction vector of the ray. Not required to be unit
            length.
        time: The instant the ray samples, inside the camera shutter interval.
            Zero when motion blur is unused.
    """

    origin: vec3
    direction: vec3
    time: ti.f32


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3, time: ti.f32) -> Ray:
    """Create a ray from origin, direction and time."""
    return Ray(origin=origin, direction=direction, time=time)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The caller must ensure the vector has non-zero length.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes v - 2 * dot(v, n) * n. The normal should be unit length, in
    which case the result has the same length as the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(uv: vec3, normal: vec3, eta_ratio: ti.f32) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The refracted ray is split into a component perpendicular to the normal,
    ``eta_ratio * (uv + cos_theta * n)``, and a parallel component of length
    ``sqrt(|1 - |perp|^2|)`` along ``-n``. The absolute value keeps the square
    root defined when rounding pushes ``|perp|^2`` slightly above one; callers
    handle total internal reflection before calling.

    Args:
        uv: The incoming direction (unit length).
        normal: The surface normal, facing the incoming ray (unit length).
        eta_ratio: Ratio of refractive indices (incident over transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(tm.dot(-uv, normal), 1.0)
    r_out_perp = eta_ratio * (uv + cos_theta * normal)
    r_out_parallel = -tm.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Compute reflectance at a dielectric boundary with Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Used to catch degenerate scatter directions.

    Returns:
        1 if all components are below 1e-8 in magnitude, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_vec3(rng: ti.u32, lo: ti.f32, hi: ti.f32):
    """Draw a vector with each component uniform in [lo, hi).

    Returns:
        A tuple (vector, new_state).
    """
    state = rng
    x, state = next_range(state, lo, hi)
    y, state = next_range(state, lo, hi)
    z, state = next_range(state, lo, hi)
    return vec3(x, y, z), state


@ti.func
def random_in_unit_sphere(rng: ti.u32):
    """Generate a random point inside the unit sphere.

    Uses rejection sampling on the [-1, 1]^3 cube. Points too close to the
    origin are rejected as well so the result can always be normalized.

    Returns:
        A tuple (point, new_state) with 0 < |point| < 1.
    """
    state = rng
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p, state = random_vec3(state, -1.0, 1.0)
            len_sq = length_squared(p)
            if len_sq < 1.0 and len_sq > 1e-12:
                found = True
    return p, state


@ti.func
def random_unit_vector(rng: ti.u32):
    """Generate a random unit vector uniformly distributed on the sphere.

    Returns:
        A tuple (unit_vector, new_state).
    """
    p, state = random_in_unit_sphere(rng)
    return normalize(p), state


@ti.func
def random_in_hemisphere(normal: vec3, rng: ti.u32):
    """Generate a random unit vector in the hemisphere around a normal.

    Draws a unit vector on the sphere and flips it to the normal's side.

    Returns:
        A tuple (unit_vector, new_state) with dot(unit_vector, normal) >= 0.
    """
    on_sphere, state = random_unit_vector(rng)
    result = on_sphere
    if tm.dot(on_sphere, normal) < 0.0:
        result = -on_sphere
    return result, state


@ti.func
def random_in_unit_disk(rng: ti.u32):
    """Generate a random point inside the unit disk in the xy-plane.

    Used for lens sampling in the thin-lens camera.

    Returns:
        A tuple (point, new_state) with point = (x, y, 0), x^2 + y^2 < 1.
    """
    state = rng
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            x, state = next_range(state, -1.0, 1.0)
            y, state = next_range(state, -1.0, 1.0)
            p = vec3(x, y, 0.0)
            if x * x + y * y < 1.0:
                found = True
    return p, state
