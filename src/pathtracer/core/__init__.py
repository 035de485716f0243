"""Core rendering module.

Components:
    rng: xorshift32 generator with explicit state and per-sample seeding
    ray: Ray data structure, vector helpers and random directions
    vector: Host-side vectors and frame-tagged points
    settings: Validated render settings
    integrator: Path evaluation and the per-pixel render kernel
    renderer: Batch renderer producing NumPy images

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_hemisphere,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)
from .rng import next_float, next_range, next_u32, resolve_seed, seed_sample, wang_hash
from .settings import RenderSettings
from .vector import CameraFrame, CameraPoint, Vector3, WorldPoint

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.pathtracer.core.renderer when needed.

__all__ = [
    # Rays and vectors
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_hemisphere",
    "random_in_unit_disk",
    # Random numbers
    "wang_hash",
    "seed_sample",
    "next_u32",
    "next_float",
    "next_range",
    "resolve_seed",
    # Host types
    "Vector3",
    "WorldPoint",
    "CameraPoint",
    "CameraFrame",
    "RenderSettings",
]
