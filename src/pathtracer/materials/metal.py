"""Metal (specular reflective) material implementation.

Metals reflect the incoming direction about the normal. A non-zero fuzz
perturbs the mirror direction by a random point in a sphere of radius fuzz,
which blurs reflections. Perturbations that push the ray below the surface
are treated as absorbed.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray, normalize, random_in_unit_sphere, reflect
from src.pathtracer.geometry.sphere import HitRecord

vec3 = tm.vec3


@ti.func
def scatter_metal(ray_in: Ray, rec: HitRecord, albedo: vec3, fuzz: ti.f32, rng: ti.u32):
    """Scatter a ray off a metal surface.

    Args:
        ray_in: The incoming ray.
        rec: The hit being shaded.
        albedo: Reflectance (RGB).
        fuzz: Perturbation radius in [0, 1].
        rng: Generator state.

    Returns:
        A tuple (did_scatter, attenuation, scattered, new_state). did_scatter
        is 0 when the perturbed direction points into the surface.
    """
    reflected = reflect(normalize(ray_in.direction), rec.normal)
    perturbation, state = random_in_unit_sphere(rng)
    direction = reflected + fuzz * perturbation

    scattered = make_ray(rec.point, direction, ray_in.time)
    did_scatter = 0
    if tm.dot(direction, rec.normal) > 0.0:
        did_scatter = 1
    return did_scatter, albedo, scattered, state
