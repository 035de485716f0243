"""Dielectric (glass/water) material implementation.

This module implements clear refractive materials.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when the refraction ratio times sin(theta)
      exceeds one

The material randomly chooses between reflection and refraction based on
the Schlick reflectance, which increases at grazing angles. Dielectrics never
absorb: the attenuation is always white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered, rng = scatter_dielectric(
    >>> #     ray, rec, ior, rng
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import (
    Ray,
    make_ray,
    normalize,
    reflect,
    refract,
    schlick_reflectance,
)
from src.pathtracer.core.rng import next_float
from src.pathtracer.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of refractive indices across the boundary.

    Entering the material (front face) goes from air to the material, so the
    ratio is 1/ior; leaving it the ratio is ior.
    """
    ratio = ior
    if front_face == 1:
        ratio = 1.0 / ior
    return ratio


@ti.func
def scatter_dielectric(ray_in: Ray, rec: HitRecord, ior: ti.f32, rng: ti.u32):
    """Scatter a ray through a dielectric boundary.

    Reflects on total internal reflection or when a uniform draw falls below
    the Schlick reflectance; refracts otherwise. The draw is taken on every
    call so the generator advances the same way on both branches.

    Args:
        ray_in: The incoming ray.
        rec: The hit being shaded.
        ior: Index of refraction of the material.
        rng: Generator state.

    Returns:
        A tuple (did_scatter, attenuation, scattered, new_state). Dielectrics
        always scatter with attenuation (1, 1, 1).
    """
    did_scatter = 1
    attenuation = vec3(1.0, 1.0, 1.0)
    ratio = refraction_ratio(ior, rec.front_face)

    unit_direction = normalize(ray_in.direction)
    cos_theta = tm.min(tm.dot(-unit_direction, rec.normal), 1.0)
    sin_theta = tm.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))

    cannot_refract = ratio * sin_theta > 1.0
    reflectance = schlick_reflectance(cos_theta, ratio)
    draw, state = next_float(rng)

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or draw < reflectance:
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ratio)

    scattered = make_ray(rec.point, direction, ray_in.time)
    return did_scatter, attenuation, scattered, state
