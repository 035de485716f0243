"""Lambertian (ideal diffuse) material implementation.

The scatter direction is the surface normal plus a random unit vector, which
concentrates directions around the normal. This is not an exact
cosine-weighted sampler, but it converges to a plausible diffuse look.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered, rng = scatter_lambertian(
    >>> #     ray, rec, albedo, rng
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray, near_zero, random_unit_vector
from src.pathtracer.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(ray_in: Ray, rec: HitRecord, albedo: vec3, rng: ti.u32):
    """Scatter a ray off a diffuse surface.

    The direction is ``normal + random_unit_vector()``. When the two nearly
    cancel, the normal itself is used so the scattered ray never has a zero
    direction.

    Args:
        ray_in: The incoming ray. Only its time is used.
        rec: The hit being shaded.
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        rng: Generator state.

    Returns:
        A tuple (did_scatter, attenuation, scattered, new_state). Lambertian
        surfaces always scatter and the attenuation equals the albedo.
    """
    on_sphere, state = random_unit_vector(rng)
    scatter_direction = rec.normal + on_sphere

    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    did_scatter = 1
    scattered = make_ray(rec.point, scatter_direction, ray_in.time)
    return did_scatter, albedo, scattered, state
